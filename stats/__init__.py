"""
Ikusa - filtros de jogadores e estatísticas da guilda
"""
from .player_filters import (
    PlayerRecord,
    DEFENSE_FAMILIES,
    normalize_name,
    is_defense_class,
    is_shai_class,
    is_defense_player,
    is_valid_for_stats,
    coerce_number,
    compute_gearscore,
)
from .guild_stats import (
    GuildStats,
    SnapshotSummary,
    GEARSCORE_RANGES,
    SORTABLE_FIELDS,
    sort_players,
    apply_limit,
    build_guild_stats,
    build_snapshot_summary,
)

__all__ = [
    "PlayerRecord",
    "DEFENSE_FAMILIES",
    "normalize_name",
    "is_defense_class",
    "is_shai_class",
    "is_defense_player",
    "is_valid_for_stats",
    "coerce_number",
    "compute_gearscore",
    "GuildStats",
    "SnapshotSummary",
    "GEARSCORE_RANGES",
    "SORTABLE_FIELDS",
    "sort_players",
    "apply_limit",
    "build_guild_stats",
    "build_snapshot_summary",
]
