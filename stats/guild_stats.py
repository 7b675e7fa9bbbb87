"""
Estatísticas da guilda

- Ordenação/limite da lista de jogadores (gearscore)
- Média, distribuição por classe e faixas de gearscore
- Resumo de snapshot do monitor (papd)
"""
import math
from collections import defaultdict
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

from .player_filters import PlayerRecord, is_valid_for_stats, coerce_number


# =====================================================
# Constantes
# =====================================================

SORTABLE_FIELDS = ["gearscore", "family_name", "main_class", "ap", "aap", "dp"]
DEFAULT_SORT_FIELD = "gearscore"

# Limite máximo quando limit > 0 (0 = sem limite)
MAX_LIMIT = 100

TOP_PLAYERS_COUNT = 10

# Faixas de gearscore (inclusivas)
GEARSCORE_RANGES: List[Tuple[int, int]] = [
    (700, 750),
    (751, 800),
    (801, 850),
    (851, 900),
]


@dataclass
class GuildStats:
    """Estatísticas agregadas da guilda"""
    total_players: int = 0
    average_gearscore: int = 0
    top_players: List[Dict[str, Any]] = field(default_factory=list)
    class_distribution: Dict[str, int] = field(default_factory=dict)
    gearscore_ranges: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SnapshotSummary:
    """Resumo de um scrape de guilda (monitor)"""
    total_players: int = 0
    visible_count: int = 0
    private_count: int = 0
    average_papd: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def round_half_up(value: float) -> int:
    """Arredondamento .5 para cima (round() do Python arredonda para o par)"""
    return int(math.floor(value + 0.5))


def to_record(player: Dict[str, Any]) -> PlayerRecord:
    """Linha (dict) → PlayerRecord"""
    return PlayerRecord(
        family_name=player.get("family_name"),
        character_name=player.get("character_name"),
        main_class=player.get("main_class"),
        ap=player.get("ap"),
        aap=player.get("aap"),
        dp=player.get("dp"),
    )


def sort_players(
    players: List[Dict[str, Any]],
    sort_by: Optional[str] = None,
    order: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Ordena jogadores sem alterar a lista original

    Args:
        players: linhas com family_name, main_class, ap, aap, dp, gearscore
        sort_by: campo de ordenação (inválido → gearscore)
        order: "asc" ou "desc" (padrão desc)
    """
    key = (sort_by or DEFAULT_SORT_FIELD).lower()
    if key not in SORTABLE_FIELDS:
        key = DEFAULT_SORT_FIELD
    reverse = (order or "desc").lower() != "asc"

    if key in ("family_name", "main_class"):
        return sorted(players, key=lambda p: str(p.get(key) or "").lower(), reverse=reverse)
    return sorted(players, key=lambda p: coerce_number(p.get(key)), reverse=reverse)


def apply_limit(players: List[Dict[str, Any]], limit: int = 0) -> List[Dict[str, Any]]:
    """0 = sem limite, senão no máximo MAX_LIMIT"""
    if not limit or limit <= 0:
        return list(players)
    return players[:min(limit, MAX_LIMIT)]


def range_label(low: int, high: int) -> str:
    return f"{low}-{high}"


def build_guild_stats(players: List[Dict[str, Any]]) -> GuildStats:
    """
    Estatísticas da guilda (apenas jogadores válidos: sem Shai e Defesa)

    A ordem de entrada é mantida, então top_players segue a ordenação
    já aplicada pelo chamador.
    """
    eligible = [p for p in players if is_valid_for_stats(to_record(p))]

    total = len(eligible)
    total_gearscore = sum(coerce_number(p.get("gearscore")) for p in eligible)
    average = round_half_up(total_gearscore / total) if total > 0 else 0

    class_distribution: Dict[str, int] = defaultdict(int)
    for player in eligible:
        class_distribution[player.get("main_class")] += 1

    ranges = {range_label(low, high): 0 for low, high in GEARSCORE_RANGES}
    for player in eligible:
        gearscore = coerce_number(player.get("gearscore"))
        for low, high in GEARSCORE_RANGES:
            if low <= gearscore <= high:
                ranges[range_label(low, high)] += 1
                break

    return GuildStats(
        total_players=total,
        average_gearscore=average,
        top_players=eligible[:TOP_PLAYERS_COUNT],
        class_distribution=dict(class_distribution),
        gearscore_ranges=ranges,
    )


def build_snapshot_summary(players: List[Dict[str, Any]]) -> SnapshotSummary:
    """
    Resumo para snapshot do monitor

    Perfis sem papd contam como privados, mesmo sem o indicador de privado.
    """
    visible = [p for p in players if p.get("papd_maximo") is not None]
    private = [
        p for p in players
        if p.get("papd_maximo") is None or p.get("perfil_privado")
    ]

    average = 0
    if visible:
        values = [coerce_number(p.get("papd_maximo")) for p in visible]
        average = round_half_up(sum(values) / len(values))

    return SnapshotSummary(
        total_players=len(players),
        visible_count=len(visible),
        private_count=len(private),
        average_papd=average,
    )
