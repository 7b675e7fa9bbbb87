"""
Snapshots do monitor de guildas
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from database.supabase_client import IkusaDB
from stats.guild_stats import build_snapshot_summary
from stats.player_filters import coerce_number
from scraper.client import BDOClient
from scraper.models import GuildScrapeResult, ScrapeMode


def normalize_snapshot_row(body: Dict[str, Any]) -> Dict[str, Any]:
    """Corpo do POST → linha de chernobyl_snapshots (com valores padrão)"""
    return {
        "guilds": list(body.get("guilds") or []),
        "players": list(body.get("players") or []),
        "total_players": coerce_number(body.get("total_players")),
        "visible_count": coerce_number(body.get("visible_count")),
        "private_count": coerce_number(body.get("private_count")),
        "average_papd": coerce_number(body.get("average_papd")),
        "scraping_timestamp": body.get("scraping_timestamp") or datetime.now(timezone.utc).isoformat(),
    }


async def take_snapshot(
    db: IkusaDB,
    guilds: Optional[List[str]] = None,
    region: Optional[str] = None
) -> Dict[str, Any]:
    """Scrape completo das guildas + gravação do snapshot"""
    async with BDOClient() as client:
        result = await client.scrape_guilds(guilds, region, ScrapeMode.FULL)
    row = snapshot_from_scrape(result)
    return await db.insert_snapshot(row)


def snapshot_from_scrape(result: GuildScrapeResult) -> Dict[str, Any]:
    """Resultado do scrape completo → linha de snapshot"""
    players: List[Dict[str, Any]] = [p.model_dump(by_alias=True) for p in result.players]
    summary = build_snapshot_summary(players)
    return normalize_snapshot_row({
        "guilds": result.guilds,
        "players": players,
        "scraping_timestamp": result.scraping_timestamp,
        **summary.to_dict(),
    })
