"""
Cliente do banco Supabase (jogadores, histórico de gearscore, snapshots)
"""
from typing import List, Optional, Dict, Any
from supabase import create_client, Client
from loguru import logger

from scraper.config import supabase_config


PLAYERS_TABLE = "players"
HISTORY_TABLE = "gearscore_history"
SNAPSHOTS_TABLE = "chernobyl_snapshots"

# Limite de snapshots por consulta
MAX_SNAPSHOT_LIMIT = 50


# Cliente singleton
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Instância do cliente Supabase (singleton)"""
    global _supabase_client
    if _supabase_client is None:
        if not supabase_config.supabase_url or not supabase_config.supabase_key:
            raise ValueError("Defina as variáveis de ambiente SUPABASE_URL e SUPABASE_KEY")
        _supabase_client = create_client(
            supabase_config.supabase_url,
            supabase_config.supabase_key
        )
    return _supabase_client


class IkusaDB:
    """
    Acesso às tabelas do Ikusa

    Erros do Supabase são propagados; a camada HTTP transforma em resposta
    {success: false, error}.
    """

    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or get_supabase_client()

    # ==================== Jogadores ====================

    async def get_players_with_history(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Jogadores com o histórico de gearscore embutido"""
        query = self.client.table(PLAYERS_TABLE).select(
            "*, gearscore_history(ap, aap, dp, gearscore, recorded_at)"
        )
        if user_id:
            query = query.eq("user_id", user_id)
        result = query.execute()
        return result.data or []

    async def upsert_player(self, player: Dict[str, Any]) -> Dict[str, Any]:
        """Insere/atualiza jogador (conflito por user_id)"""
        data = {
            "user_id": int(player["user_id"]),
            "family_name": player["family_name"],
            "character_name": player["character_name"],
            "main_class": player["main_class"],
            "link_gear": player.get("link_gear") or None,
        }
        result = self.client.table(PLAYERS_TABLE).upsert(
            data,
            on_conflict="user_id"
        ).execute()

        if not result.data:
            raise RuntimeError(f"Upsert sem retorno para user_id={data['user_id']}")
        return result.data[0]

    # ==================== Histórico ====================

    async def insert_gearscore_history(
        self,
        player_id: int,
        user_id: Any,
        ap: Any,
        aap: Any,
        dp: Any,
        gearscore: Any
    ) -> Dict[str, Any]:
        data = {
            "player_id": player_id,
            "user_id": int(user_id),
            "ap": ap,
            "aap": aap,
            "dp": dp,
            "gearscore": gearscore,
        }
        result = self.client.table(HISTORY_TABLE).insert(data).execute()
        return result.data[0] if result.data else data

    async def get_gearscore_history(self, user_id: str, limit: int = 30) -> List[Dict[str, Any]]:
        """Histórico mais recente primeiro"""
        result = self.client.table(HISTORY_TABLE).select("*").eq(
            "user_id", user_id
        ).order("recorded_at", desc=True).limit(limit).execute()
        return result.data or []

    # ==================== Snapshots ====================

    async def get_snapshots(self, limit: int = 1) -> List[Dict[str, Any]]:
        """Snapshots mais recentes primeiro"""
        limit = max(1, min(limit, MAX_SNAPSHOT_LIMIT))
        result = self.client.table(SNAPSHOTS_TABLE).select("*").order(
            "created_at", desc=True
        ).limit(limit).execute()
        return result.data or []

    async def insert_snapshot(self, row: Dict[str, Any]) -> Dict[str, Any]:
        result = self.client.table(SNAPSHOTS_TABLE).insert(row).execute()
        if not result.data:
            raise RuntimeError("Snapshot não retornado pelo Supabase")
        logger.info(f"Snapshot salvo: {row.get('total_players', 0)} jogadores")
        return result.data[0]

    # ==================== Estatísticas ====================

    async def get_stats(self) -> Dict[str, int]:
        """Quantidade de registros por tabela"""
        stats = {}
        for table in [PLAYERS_TABLE, HISTORY_TABLE, SNAPSHOTS_TABLE]:
            try:
                result = self.client.table(table).select("id", count="exact").execute()
                stats[table] = result.count or 0
            except Exception as e:
                logger.error(f"Erro ao contar {table}: {e}")
                stats[table] = 0
        return stats
