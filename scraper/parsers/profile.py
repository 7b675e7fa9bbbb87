"""
Perfil de aventureiro - extração de papd e perfil privado
"""
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from bs4 import BeautifulSoup, Tag
from loguru import logger

from ..exceptions import ScrapeError


# Texto inteiro com 2 a 4 dígitos
POWER_PATTERN = re.compile(r"^\d{2,4}$")
MIN_POWER = 100
MAX_POWER = 9999

# Classe dos campos de descrição onde o papd aparece
DESC_SELECTOR = ".desc"

# Três grafias exatas (não é busca case-insensitive)
PRIVATE_MARKERS = ("privado", "Privado", "PRIVADO")


@dataclass(frozen=True)
class ProfileStats:
    """Resultado da heurística: papd máximo (None = desconhecido) e privado"""
    max_power: Optional[int] = None
    is_private: bool = False


class ProfileParser:
    """Parser da página de perfil"""

    @staticmethod
    def parse(html: Union[str, bytes]) -> ProfileStats:
        soup = ProfileParser._load(html)
        return ProfileStats(
            max_power=ProfileParser.extract_max_power(soup),
            is_private=ProfileParser.detect_private(soup),
        )

    @staticmethod
    def _load(html: Union[str, bytes]) -> BeautifulSoup:
        if not isinstance(html, (str, bytes)):
            raise ScrapeError(f"HTML inválido: {type(html).__name__}")
        try:
            return BeautifulSoup(html, "lxml")
        except Exception as e:
            logger.error(f"Erro ao interpretar HTML do perfil: {e}")
            raise ScrapeError(str(e)) from e

    @staticmethod
    def extract_max_power(soup: BeautifulSoup) -> Optional[int]:
        """
        Maior valor numérico em [100, 9999]

        Procura primeiro nos elementos `.desc`; sem resultado, amplia
        para todos os elementos da página.
        """
        power = ProfileParser._max_power_in(soup.select(DESC_SELECTOR))
        if power is None:
            power = ProfileParser._max_power_in(soup.find_all(True))
        return power

    @staticmethod
    def _max_power_in(elements: Iterable[Tag]) -> Optional[int]:
        best: Optional[int] = None
        for el in elements:
            text = el.get_text().strip()
            if not POWER_PATTERN.match(text):
                continue
            value = int(text)
            if MIN_POWER <= value <= MAX_POWER:
                best = value if best is None else max(best, value)
        return best

    @staticmethod
    def detect_private(soup: BeautifulSoup) -> bool:
        for el in soup.find_all(True):
            text = el.get_text()
            if any(marker in text for marker in PRIVATE_MARKERS):
                return True
        return False


def parse_profile(html: Union[str, bytes]) -> ProfileStats:
    """HTML do perfil → ProfileStats (ScrapeError se não for interpretável)"""
    return ProfileParser.parse(html)
