"""
Dependências compartilhadas das rotas (banco e cliente de scraping)
"""
from typing import AsyncIterator, Optional

from database.supabase_client import IkusaDB
from scraper.client import BDOClient

_db: Optional[IkusaDB] = None


def get_db() -> IkusaDB:
    """IkusaDB criado sob demanda (ValueError se o Supabase não estiver configurado)"""
    global _db
    if _db is None:
        _db = IkusaDB()
    return _db


async def get_bdo_client() -> AsyncIterator[BDOClient]:
    async with BDOClient() as client:
        yield client
