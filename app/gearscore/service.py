"""
Gearscore dos jogadores - montagem da lista, estatísticas e upload
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from database.supabase_client import IkusaDB
from stats.guild_stats import sort_players, apply_limit, build_guild_stats
from stats.player_filters import coerce_number, compute_gearscore


REQUIRED_FIELDS = ["user_id", "family_name", "character_name", "main_class", "ap", "aap", "dp"]

# Nomes alternativos aceitos no upload (primeiro encontrado vence)
FIELD_ALIASES: Dict[str, List[str]] = {
    "user_id": ["user_id", "userid", "id_usuario", "id_user"],
    "family_name": ["family_name", "familia", "family", "familyName"],
    "character_name": ["character_name", "nick", "personagem", "character"],
    "main_class": ["main_class", "classe", "class", "mainClass"],
    "ap": ["ap", "atk", "attack", "ap_main"],
    "aap": ["aap", "awak_ap", "ap_awak", "ap_awakened"],
    "dp": ["dp", "def", "defense"],
    "link_gear": ["link_gear", "gear_link", "garmoth_link"],
}

NUMERIC_FIELDS = ("ap", "aap", "dp")


def _parse_timestamp(value: Any) -> datetime:
    """ISO 8601 → datetime UTC sem fuso (inválido → datetime.min)"""
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except (TypeError, ValueError):
            return datetime.min
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def latest_history_entry(history: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Registro com o recorded_at mais recente"""
    if not history:
        return None
    return max(history, key=lambda h: _parse_timestamp(h.get("recorded_at")))


def flatten_player(player: Dict[str, Any]) -> Dict[str, Any]:
    """Linha de players + histórico embutido → jogador com o gearscore atual"""
    latest = latest_history_entry(player.get("gearscore_history") or [])
    flat = {
        "id": player.get("id"),
        "user_id": str(player.get("user_id", "")),
        "family_name": player.get("family_name"),
        "character_name": player.get("character_name"),
        "main_class": player.get("main_class"),
        "ap": 0,
        "aap": 0,
        "dp": 0,
        "gearscore": 0,
        "link_gear": player.get("link_gear"),
        "created_at": player.get("created_at"),
        "last_updated": player.get("updated_at"),
    }
    if latest:
        flat.update({
            "ap": latest.get("ap"),
            "aap": latest.get("aap"),
            "dp": latest.get("dp"),
            "gearscore": latest.get("gearscore"),
            "last_updated": latest.get("recorded_at"),
        })
    return flat


def build_players_response(
    rows: List[Dict[str, Any]],
    limit: int = 0,
    sort_by: str = "gearscore",
    order: str = "desc"
) -> Dict[str, Any]:
    """
    Lista ordenada/limitada + estatísticas da guilda

    Jogadores sem gearscore ficam de fora. As estatísticas usam a lista
    completa (antes do limite).
    """
    players = [flatten_player(row) for row in rows]
    players = [p for p in players if coerce_number(p["gearscore"]) > 0]
    players = sort_players(players, sort_by, order)

    return {
        "players": apply_limit(players, limit),
        "stats": build_guild_stats(players).to_dict(),
    }


def normalize_upload_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Aplica FIELD_ALIASES e converte ap/aap/dp para número"""
    normalized: Dict[str, Any] = {}
    for field_name, keys in FIELD_ALIASES.items():
        value = None
        for key in keys:
            if row.get(key) is not None:
                value = row[key]
                break
        normalized[field_name] = value

    for field_name in ("family_name", "character_name", "main_class"):
        if isinstance(normalized[field_name], str):
            normalized[field_name] = normalized[field_name].strip()

    for field_name in NUMERIC_FIELDS:
        if normalized[field_name] is not None:
            normalized[field_name] = coerce_number(normalized[field_name])
    return normalized


def missing_fields(player: Dict[str, Any]) -> List[str]:
    """Campos obrigatórios ausentes ou vazios (zero também conta como ausente)"""
    return [f for f in REQUIRED_FIELDS if not player.get(f)]


async def save_player_gearscore(db: IkusaDB, player: Dict[str, Any]) -> Dict[str, Any]:
    """Upsert do jogador + novo registro no histórico"""
    gearscore = compute_gearscore(player["ap"], player["aap"], player["dp"])
    saved = await db.upsert_player(player)
    await db.insert_gearscore_history(
        player_id=saved["id"],
        user_id=player["user_id"],
        ap=player["ap"],
        aap=player["aap"],
        dp=player["dp"],
        gearscore=gearscore,
    )
    return {"player_id": saved["id"], "gearscore": gearscore}


async def process_upload(db: IkusaDB, rows: List[Any]) -> Tuple[int, List[str]]:
    """
    Processa o upload linha a linha

    Returns:
        (quantidade salva, mensagens de erro)
    """
    success_count = 0
    errors: List[str] = []

    for row in rows:
        if not isinstance(row, dict):
            errors.append("Player Desconhecido: Linha inválida")
            continue

        player = normalize_upload_row(row)
        label = player.get("family_name") or "Desconhecido"

        if missing_fields(player):
            errors.append(f"Player {label}: Dados obrigatórios faltando")
            continue

        try:
            await save_player_gearscore(db, player)
            success_count += 1
        except Exception as e:
            logger.warning(f"Upload: falha ao salvar {label}: {e}")
            errors.append(f"Player {label}: {e}")

    logger.info(f"Upload concluído: {success_count} salvos, {len(errors)} erros")
    return success_count, errors
