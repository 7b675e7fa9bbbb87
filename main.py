"""
Ikusa - scraper de guildas e servidor
"""
import asyncio
import json
import sys
from loguru import logger

from scraper.client import BDOClient
from scraper.config import scraper_config
from scraper.exceptions import ScrapeError
from scraper.models import ScrapeMode


# Configuração de logs
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level="INFO"
)
logger.add(
    "logs/ikusa_{time:YYYY-MM-DD}.log",
    rotation="1 day",
    retention="30 days",
    level="DEBUG"
)


async def scrape_guilds(guilds, region, save: bool) -> bool:
    """Scrape das guildas; com save=True grava o snapshot no Supabase"""
    try:
        if save:
            from app.guilds.service import take_snapshot
            from database.supabase_client import IkusaDB

            row = await take_snapshot(IkusaDB(), guilds, region)
            logger.info(
                f"Snapshot salvo: {row.get('total_players')} jogadores, "
                f"média papd {row.get('average_papd')}"
            )
            return True

        async with BDOClient() as client:
            result = await client.scrape_guilds(guilds, region, ScrapeMode.FULL)
        print(json.dumps(result.to_response(), ensure_ascii=False, indent=2))
        return True
    except ScrapeError as e:
        logger.error(f"Falha no scrape: {e}")
    except ValueError as e:
        logger.error(f"Configuração inválida: {e}")
    except Exception as e:
        logger.error(f"Erro ao salvar snapshot: {e}")
    return False


async def scrape_profile(url: str, name: str) -> bool:
    try:
        async with BDOClient() as client:
            profile = await client.scrape_profile(url, name)
    except ScrapeError as e:
        logger.error(f"Falha ao scrapear perfil: {e}")
        return False

    print(json.dumps(profile.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    return True


async def run_scheduler(guilds, region):
    from app.guilds.service import take_snapshot
    from database.supabase_client import IkusaDB
    from scheduler.scheduler import SnapshotScheduler

    db = IkusaDB()

    async def snapshot():
        await take_snapshot(db, guilds, region)

    scheduler = SnapshotScheduler(snapshot)
    scheduler.start()
    logger.info("Modo agendador em execução... (Ctrl+C para sair)")

    try:
        await scheduler.run_now()
        while True:
            await asyncio.sleep(60)
            logger.debug(f"Estado do agendador: {scheduler.get_status()}")
    except (KeyboardInterrupt, asyncio.CancelledError):
        scheduler.stop()
        logger.info("Agendador encerrado")


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(description="Ikusa - gearscore e monitor de guildas")
    parser.add_argument(
        "--mode",
        choices=["serve", "scrape", "profile", "scheduler"],
        default="scrape",
        help="Modo de execução"
    )
    parser.add_argument("--guilds", default=None, help="Guildas separadas por vírgula")
    parser.add_argument("--region", default=None, help="Região (padrão: SA)")
    parser.add_argument("--url", default=None, help="URL do perfil (modo profile)")
    parser.add_argument("--nome", default="", help="Nome do jogador (modo profile)")
    parser.add_argument("--save", action="store_true", help="Grava o snapshot no Supabase")
    parser.add_argument("--port", type=int, default=3000, help="Porta do servidor (modo serve)")
    return parser


async def main(args):
    """Função principal"""
    guilds = [g.strip() for g in args.guilds.split(",") if g.strip()] if args.guilds else scraper_config.guild_list

    if args.mode == "scrape":
        if not await scrape_guilds(guilds, args.region, args.save):
            sys.exit(1)

    elif args.mode == "profile":
        if not await scrape_profile(args.url, args.nome):
            sys.exit(1)

    elif args.mode == "scheduler":
        await run_scheduler(guilds, args.region)


if __name__ == "__main__":
    parser = build_parser()
    args = parser.parse_args()

    if args.mode == "serve":
        import uvicorn

        uvicorn.run("app.server:app", host="0.0.0.0", port=args.port, log_level="info")
    else:
        if args.mode == "profile" and not args.url:
            parser.error("--url é obrigatório no modo profile")
        asyncio.run(main(args))
