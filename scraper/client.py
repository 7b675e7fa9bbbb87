"""
Cliente HTTP do site oficial (perfis de guilda e de aventureiro)
"""
import aiohttp
import asyncio
from datetime import datetime, timezone
from typing import Optional, Dict, List
from loguru import logger

from .config import scraper_config, Endpoints
from .exceptions import ScrapeError
from .models import PlayerLink, ScrapedProfile, GuildScrapeResult, ScrapeMode
from .parsers import GuildParser, dedupe_links, parse_profile


class BDOClient:
    """Cliente de scraping de guildas e perfis"""

    def __init__(self, base_url: Optional[str] = None, region: Optional[str] = None):
        self.base_url = base_url or scraper_config.base_url
        self.region = region or scraper_config.region
        self.delay = scraper_config.request_delay
        self.profile_delay = scraper_config.profile_delay
        self.max_retries = scraper_config.max_retries
        self.timeout = aiohttp.ClientTimeout(total=scraper_config.request_timeout)
        self.headers = {
            "User-Agent": scraper_config.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
        }
        self._session: Optional[aiohttp.ClientSession] = None
        self._semaphore = asyncio.Semaphore(scraper_config.max_concurrent_requests)

    async def __aenter__(self):
        self._session = aiohttp.ClientSession(
            timeout=self.timeout,
            headers=self.headers
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._session:
            await self._session.close()
            self._session = None

    async def fetch(self, url: str, params: Optional[Dict] = None) -> str:
        """GET com novas tentativas (backoff exponencial)"""
        if self._session is None:
            raise ScrapeError("Sessão HTTP não iniciada (use 'async with BDOClient()')", url)

        async with self._semaphore:
            retry_count = 0
            while True:
                try:
                    if self.delay:
                        await asyncio.sleep(self.delay)
                    async with self._session.get(url, params=params) as response:
                        response.raise_for_status()
                        return await response.text()

                except UnicodeDecodeError as e:
                    # conteúdo inválido para o charset declarado; nova tentativa não resolve
                    logger.warning(f"Falha ao decodificar {url}: {e}")
                    raise ScrapeError(str(e), url) from e

                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    message = str(e) or e.__class__.__name__
                    if retry_count < self.max_retries:
                        wait_time = (2 ** retry_count) * max(self.delay, 0.5)
                        logger.warning(
                            f"Falha na requisição, nova tentativa em {wait_time}s "
                            f"({retry_count + 1}/{self.max_retries}): {message}"
                        )
                        await asyncio.sleep(wait_time)
                        retry_count += 1
                        continue
                    raise ScrapeError(message, url) from e

    # ==================== Perfil ====================

    async def scrape_profile(self, url: str, name: str = "") -> ScrapedProfile:
        """
        Scrape de um perfil de aventureiro

        Raises:
            ScrapeError: falha de rede ou HTML não interpretável
        """
        html = await self.fetch(url)
        stats = parse_profile(html)
        return ScrapedProfile(
            name=name,
            source_url=url,
            max_power=stats.max_power,
            is_private=stats.is_private,
        )

    # ==================== Guilda ====================

    def guild_url(self) -> str:
        return f"{self.base_url}{Endpoints.GUILD_PROFILE}"

    async def get_guild_page(self, guild: str, region: Optional[str] = None) -> str:
        params = {"guildName": guild, "region": region or self.region}
        return await self.fetch(self.guild_url(), params=params)

    async def get_guild_links(self, guilds: List[str], region: Optional[str] = None) -> List[PlayerLink]:
        """Links de perfil de todas as guildas, sem duplicados"""
        links: List[PlayerLink] = []
        for guild in guilds:
            html = await self.get_guild_page(guild, region)
            guild_links = GuildParser.extract_player_links(html, self.base_url)
            logger.info(f"Guilda {guild}: {len(guild_links)} links de perfil")
            links.extend(guild_links)
        return dedupe_links(links)

    async def scrape_guilds(
        self,
        guilds: Optional[List[str]] = None,
        region: Optional[str] = None,
        mode: ScrapeMode = ScrapeMode.FULL
    ) -> GuildScrapeResult:
        """
        Scrape das guildas

        mode=links devolve só os links. mode=full visita cada perfil em
        sequência; um perfil que falha vira papd None + privado.
        """
        guilds = guilds or scraper_config.guild_list
        links = await self.get_guild_links(guilds, region)

        result = GuildScrapeResult(
            guilds=guilds,
            mode=mode,
            scraping_timestamp=datetime.now(timezone.utc).isoformat(),
        )

        if ScrapeMode(mode) == ScrapeMode.LINKS:
            result.links = links
            return result

        players: List[ScrapedProfile] = []
        for index, link in enumerate(links):
            if index and self.profile_delay:
                await asyncio.sleep(self.profile_delay)
            try:
                profile = await self.scrape_profile(link.url, link.name)
            except ScrapeError as e:
                logger.warning(f"Perfil {link.name} indisponível: {e}")
                profile = ScrapedProfile(
                    name=link.name,
                    source_url=link.url,
                    max_power=None,
                    is_private=True,
                )
            players.append(profile)

        result.players = players
        logger.info(
            f"Scrape concluído: {len(players)} jogadores, "
            f"{result.players_with_papd} com papd, {result.private_profiles} privados"
        )
        return result
