"""
Snapshot automático das guildas monitoradas
"""
from typing import Awaitable, Callable, Optional
from datetime import datetime
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from scraper.config import scheduler_config


class SnapshotScheduler:
    """Agendador do snapshot de guildas"""

    def __init__(self, snapshot_func: Callable[[], Awaitable[object]], interval_minutes: Optional[int] = None):
        """
        Args:
            snapshot_func: função de snapshot (async)
            interval_minutes: intervalo entre execuções (padrão: configuração)
        """
        self.scheduler = AsyncIOScheduler()
        self.snapshot_func = snapshot_func
        self.interval_minutes = interval_minutes or scheduler_config.snapshot_interval_minutes
        self._is_running = False
        self._last_snapshot: Optional[datetime] = None
        self._last_error: Optional[str] = None

    def setup(self):
        self.scheduler.add_job(
            self._run_snapshot,
            IntervalTrigger(minutes=self.interval_minutes),
            id="guild_snapshot",
            name="Guild Snapshot",
            replace_existing=True
        )
        logger.info(f"Snapshot de guildas agendado a cada {self.interval_minutes} min")

    async def _run_snapshot(self):
        if self._is_running:
            logger.warning("Snapshot anterior ainda em andamento, execução ignorada")
            return

        self._is_running = True
        logger.info("=== Snapshot de guildas iniciado ===")

        try:
            await self.snapshot_func()
            self._last_snapshot = datetime.now()
            self._last_error = None
            logger.info(f"Snapshot concluído: {self._last_snapshot}")
        except Exception as e:
            self._last_error = str(e)
            logger.error(f"Erro no snapshot: {e}")
        finally:
            self._is_running = False

    def start(self):
        self.setup()
        self.scheduler.start()
        logger.info("Agendador iniciado")

    def stop(self):
        self.scheduler.shutdown()
        logger.info("Agendador parado")

    def get_status(self) -> dict:
        jobs = []
        for job in self.scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": next_run.isoformat() if next_run else None
            })

        return {
            "is_running": self._is_running,
            "interval_minutes": self.interval_minutes,
            "last_snapshot": self._last_snapshot.isoformat() if self._last_snapshot else None,
            "last_error": self._last_error,
            "jobs": jobs
        }

    async def run_now(self):
        """Executa o snapshot imediatamente"""
        await self._run_snapshot()
