"""
Ikusa - FastAPI web server
Gearscore da guilda, monitor de papd e snapshots

Fonte de dados: Supabase
"""
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from loguru import logger
from dotenv import load_dotenv

from app.auth import auth_router
from app.guilds import guilds_router, take_snapshot
from app.gearscore import gearscore_router
from app.dependencies import get_db
from scheduler.scheduler import SnapshotScheduler
from scraper.config import scheduler_config, supabase_config

load_dotenv()

app = FastAPI(
    title="Ikusa",
    description="Gearscore, papd e snapshots das guildas",
    version="1.0.0"
)

app.include_router(auth_router)
app.include_router(guilds_router)
app.include_router(gearscore_router)

_scheduler: Optional[SnapshotScheduler] = None
_started_at: Optional[datetime] = None


async def _scheduled_snapshot():
    await take_snapshot(get_db())


@app.on_event("startup")
async def startup_event():
    """Inicia o agendador de snapshots quando habilitado"""
    global _scheduler, _started_at
    _started_at = datetime.now()

    if scheduler_config.snapshot_enabled:
        if not supabase_config.supabase_url or not supabase_config.supabase_key:
            logger.warning("SNAPSHOT_ENABLED sem Supabase configurado, agendador não iniciado")
        else:
            _scheduler = SnapshotScheduler(_scheduled_snapshot)
            _scheduler.start()

    logger.info("Servidor iniciado")


@app.on_event("shutdown")
async def shutdown_event():
    global _scheduler
    if _scheduler:
        _scheduler.stop()
        _scheduler = None
    logger.info("Servidor encerrado")


@app.get("/api/status")
async def api_status():
    """Estado do serviço"""
    return {
        "success": True,
        "data": {
            "started_at": _started_at.isoformat() if _started_at else None,
            "supabase_configured": bool(supabase_config.supabase_url and supabase_config.supabase_key),
            "scheduler": _scheduler.get_status() if _scheduler else None,
        }
    }


# ==================== Execução ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.server:app",
        host="0.0.0.0",
        port=3000,
        reload=True,
        log_level="info"
    )
