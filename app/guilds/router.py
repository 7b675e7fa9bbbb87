"""
Rotas de scrape de guildas/perfis e snapshots do monitor
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger

from app.auth import require_session
from app.dependencies import get_db, get_bdo_client
from database.supabase_client import IkusaDB
from scraper.client import BDOClient
from scraper.exceptions import ScrapeError
from scraper.models import ScrapeMode

from .service import normalize_snapshot_row

router = APIRouter(prefix="/api", tags=["guilds"])


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


@router.get("/chernobyl-scrape/player")
async def scrape_player(
    url: Optional[str] = Query(None),
    nome: str = Query(""),
    client: BDOClient = Depends(get_bdo_client)
):
    """Scrape de um perfil: papd máximo e perfil privado"""
    if not url:
        return error_response(400, "url obrigatório")

    try:
        profile = await client.scrape_profile(url, nome)
    except ScrapeError as e:
        logger.error(f"Falha ao scrapear perfil {url}: {e}")
        return error_response(500, str(e) or "Falha ao scrapear perfil")

    return {"success": True, "data": profile.model_dump(by_alias=True)}


@router.get("/chernobyl-scrape")
async def scrape_guilds(
    guilds: Optional[str] = Query(None, description="Guildas separadas por vírgula"),
    region: Optional[str] = Query(None),
    mode: str = Query("full", description="links ou full (qualquer outro valor = full)"),
    client: BDOClient = Depends(get_bdo_client)
):
    """Scrape das guildas (links ou perfis completos)"""
    target_guilds = [g.strip() for g in guilds.split(",") if g.strip()] if guilds else None
    scrape_mode = ScrapeMode.LINKS if mode == ScrapeMode.LINKS.value else ScrapeMode.FULL

    try:
        result = await client.scrape_guilds(target_guilds, region, scrape_mode)
    except ScrapeError as e:
        logger.error(f"Falha no scrape de guildas: {e}")
        return error_response(500, str(e) or "Falha no scraping")

    return {"success": True, "data": result.to_response()}


@router.get("/chernobyl-snapshots")
async def list_snapshots(
    limit: str = Query("1"),
    db: IkusaDB = Depends(get_db)
):
    """Snapshots mais recentes (limite entre 1 e 50)"""
    try:
        parsed_limit = int(limit)
    except ValueError:
        parsed_limit = 1
    parsed_limit = max(1, min(parsed_limit or 1, 50))

    try:
        data = await db.get_snapshots(parsed_limit)
    except Exception as e:
        logger.error(f"Erro ao buscar snapshots: {e}")
        return error_response(500, str(e) or "Erro ao buscar snapshots")

    return {"success": True, "data": data}


@router.post("/chernobyl-snapshots", dependencies=[Depends(require_session)])
async def create_snapshot(request: Request, db: IkusaDB = Depends(get_db)):
    """Salva um snapshot enviado pelo monitor"""
    try:
        body = await request.json()
    except ValueError:
        return error_response(400, "JSON inválido")
    if not isinstance(body, dict):
        return error_response(400, "Corpo deve ser um objeto JSON")

    try:
        data = await db.insert_snapshot(normalize_snapshot_row(body))
    except Exception as e:
        logger.error(f"Erro ao salvar snapshot: {e}")
        return error_response(500, str(e) or "Erro ao salvar snapshot")

    return {"success": True, "data": data}
