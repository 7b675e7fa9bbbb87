"""
Rotas de gearscore dos jogadores
"""
import json
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger

from app.auth import require_session
from app.dependencies import get_db
from database.supabase_client import IkusaDB

from .service import (
    build_players_response,
    missing_fields,
    normalize_upload_row,
    process_upload,
    save_player_gearscore,
)

router = APIRouter(prefix="/api", tags=["gearscore"])

HISTORY_LIMIT = 30


def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if message:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def parse_limit(value: Optional[str]) -> int:
    """Inválido ou negativo → 0 (sem limite)"""
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


@router.get("/players-gearscore")
async def get_players_gearscore(
    limit: str = Query("0"),
    sortBy: str = Query("gearscore"),
    order: str = Query("desc"),
    history: Optional[str] = Query(None),
    userId: Optional[str] = Query(None),
    guild: str = Query("lollipop"),
    db: IkusaDB = Depends(get_db)
):
    """Jogadores com o gearscore mais recente + estatísticas da guilda"""
    include_history = history == "true"
    limit = parse_limit(limit)

    try:
        rows = await db.get_players_with_history(userId)
        data = build_players_response(rows, limit=limit, sort_by=sortBy, order=order)

        if include_history:
            data["history"] = []
            if userId:
                entries = await db.get_gearscore_history(userId, limit=HISTORY_LIMIT)
                data["history"] = [
                    {**entry, "user_id": str(entry.get("user_id", ""))}
                    for entry in entries
                ]
    except Exception as e:
        logger.error(f"Erro ao buscar dados dos players: {e}")
        return error_response(500, "Erro ao buscar dados dos players", str(e))

    data["query"] = {
        "guild": guild,
        "limit": limit,
        "sortBy": sortBy,
        "order": order,
        "includeHistory": include_history,
        "userId": userId,
    }
    return {"success": True, "data": data}


@router.post("/players-gearscore", dependencies=[Depends(require_session)])
async def post_players_gearscore(request: Request, db: IkusaDB = Depends(get_db)):
    """
    Atualiza gearscore

    - multipart/form-data com `file`: array JSON de jogadores
    - application/json: um jogador
    """
    content_type = request.headers.get("content-type", "")

    if "multipart/form-data" in content_type:
        return await _handle_file_upload(request, db)

    try:
        body = await request.json()
    except ValueError:
        return error_response(400, "JSON inválido")
    if not isinstance(body, dict):
        return error_response(400, "Dados obrigatórios não fornecidos")

    player = normalize_upload_row(body)
    if missing_fields(player):
        return error_response(400, "Dados obrigatórios não fornecidos")

    try:
        saved = await save_player_gearscore(db, player)
    except Exception as e:
        logger.error(f"Erro ao inserir/atualizar player: {e}")
        return error_response(500, "Erro ao inserir/atualizar player", str(e))

    return {
        "success": True,
        "message": "Gearscore atualizado com sucesso",
        "data": {
            **saved,
            "recorded_at": datetime.now(timezone.utc).isoformat(),
        },
    }


async def _handle_file_upload(request: Request, db: IkusaDB):
    form = await request.form()
    upload = form.get("file")
    if upload is None or isinstance(upload, str):
        return error_response(400, "Arquivo não fornecido")

    content = await upload.read()
    try:
        rows = json.loads(content)
    except ValueError:
        return error_response(400, "Arquivo JSON inválido")

    if not isinstance(rows, list):
        return error_response(400, "O arquivo deve conter um array de players")

    success_count, errors = await process_upload(db, rows)
    return {
        "success": True,
        "message": (
            f"Upload concluído: {success_count} players processados com sucesso, "
            f"{len(errors)} erros"
        ),
        "data": {
            "successCount": success_count,
            "errorCount": len(errors),
            "errors": errors or None,
        },
    }
