"""
Monitor de guildas - scrape de perfis e snapshots
"""
from .router import router as guilds_router
from .service import normalize_snapshot_row, snapshot_from_scrape, take_snapshot

__all__ = ["guilds_router", "normalize_snapshot_row", "snapshot_from_scrape", "take_snapshot"]
