"""
Página da guilda - links de perfil dos membros
"""
from typing import List, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from loguru import logger

from ..config import Endpoints
from ..exceptions import ScrapeError
from ..models import PlayerLink


class GuildParser:
    """Parser da página de perfil da guilda"""

    @staticmethod
    def extract_player_links(html: Union[str, bytes], base_url: str) -> List[PlayerLink]:
        """
        Extrai os links de perfil dos membros

        Args:
            html: HTML da página GuildProfile
            base_url: base para resolver hrefs relativos

        Returns:
            Links com nome não vazio, na ordem da página
        """
        try:
            soup = BeautifulSoup(html, "lxml")
        except Exception as e:
            logger.error(f"Erro ao interpretar HTML da guilda: {e}")
            raise ScrapeError(str(e)) from e

        links = []
        for anchor in soup.select(f'a[href*="{Endpoints.PROFILE_LINK_MARKER}"]'):
            name = anchor.get_text().strip()
            href = anchor.get("href") or ""
            if name and href:
                links.append(PlayerLink(name=name, url=urljoin(base_url, href)))
        return links


def dedupe_links(links: List[PlayerLink]) -> List[PlayerLink]:
    """Remove duplicados por nome (minúsculo) + url, mantendo o primeiro"""
    seen = {}
    for link in links:
        key = f"{link.name.lower()}|{link.url}"
        if key not in seen:
            seen[key] = link
    return list(seen.values())
