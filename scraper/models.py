"""
Modelos de dados (Pydantic)

Os nomes no JSON seguem o contrato da API (nome, url, papd_maximo, perfil_privado).
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from enum import Enum


class ScrapeMode(str, Enum):
    """Modo do scrape de guilda"""
    FULL = "full"
    LINKS = "links"


class PlayerLink(BaseModel):
    """Link para o perfil de um membro da guilda"""
    name: str = Field(..., alias="nome", description="Nome exibido no link")
    url: str = Field(..., description="URL absoluta do perfil")

    class Config:
        populate_by_name = True


class ScrapedProfile(BaseModel):
    """Resultado do scrape de um perfil"""
    name: str = Field(default="", alias="nome", description="Nome do jogador")
    source_url: str = Field(..., alias="url", description="URL do perfil")
    max_power: Optional[int] = Field(None, alias="papd_maximo", description="Maior papd encontrado")
    is_private: bool = Field(default=False, alias="perfil_privado", description="Perfil privado")

    class Config:
        populate_by_name = True


class GuildScrapeResult(BaseModel):
    """Resultado do scrape de guildas"""
    guilds: List[str] = Field(default_factory=list)
    mode: ScrapeMode = Field(default=ScrapeMode.FULL)
    links: List[PlayerLink] = Field(default_factory=list)
    players: List[ScrapedProfile] = Field(default_factory=list)
    scraping_timestamp: str = Field(..., description="Horário do scrape (ISO 8601)")

    class Config:
        use_enum_values = True

    @property
    def players_with_papd(self) -> int:
        return sum(1 for p in self.players if p.max_power is not None)

    @property
    def private_profiles(self) -> int:
        return sum(1 for p in self.players if p.is_private)

    def to_response(self) -> Dict[str, Any]:
        """Payload `data` da API"""
        data: Dict[str, Any] = {
            "guild_info": {"nome": " + ".join(self.guilds)},
            "scraping_timestamp": self.scraping_timestamp,
        }
        if self.mode == ScrapeMode.LINKS.value:
            data["links"] = [link.model_dump(by_alias=True) for link in self.links]
            data["total_links"] = len(self.links)
            return data

        data["players"] = [p.model_dump(by_alias=True) for p in self.players]
        data["total_players"] = len(self.players)
        data["players_with_papd"] = self.players_with_papd
        data["private_profiles"] = self.private_profiles
        return data
