"""
Configurações do scraper, Supabase e agendador
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List
from dotenv import load_dotenv

load_dotenv()


class ScraperConfig(BaseSettings):
    """Configuração do scraper (site oficial, região SA)"""

    base_url: str = "https://www.sa.playblackdesert.com"
    region: str = Field(default="SA", description="Região padrão das guildas")

    # Guildas monitoradas por padrão (separadas por vírgula)
    default_guilds: str = Field(default="Oxion,Guilty", description="Guildas padrão")

    # Requisições
    request_delay: float = Field(default=0.0, description="Espera antes de cada requisição (s)")
    profile_delay: float = Field(default=0.5, description="Espera entre perfis no scrape de guilda (s)")
    max_concurrent_requests: int = Field(default=3, description="Máximo de requisições simultâneas")
    max_retries: int = Field(default=2, description="Máximo de novas tentativas")
    request_timeout: int = Field(default=30, description="Timeout da requisição (s)")

    user_agent: str = "Mozilla/5.0"

    class Config:
        env_prefix = "SCRAPER_"
        case_sensitive = False

    @property
    def guild_list(self) -> List[str]:
        return [g.strip() for g in self.default_guilds.split(",") if g.strip()]


class SupabaseConfig(BaseSettings):
    """Configuração do Supabase"""

    supabase_url: str = Field(default="", description="Supabase Project URL")
    supabase_key: str = Field(default="", description="Supabase service role key")

    class Config:
        env_prefix = ""
        case_sensitive = False


class SchedulerConfig(BaseSettings):
    """Configuração do snapshot automático das guildas"""

    snapshot_enabled: bool = Field(default=False, description="Snapshot periódico junto com o servidor")
    snapshot_interval_minutes: int = Field(default=60, description="Intervalo entre snapshots (min)")

    class Config:
        env_prefix = ""
        case_sensitive = False


# Instâncias globais
scraper_config = ScraperConfig()
supabase_config = SupabaseConfig()
scheduler_config = SchedulerConfig()


class Endpoints:
    """Caminhos do site oficial"""

    GUILD_PROFILE = "/pt-BR/Adventure/Guild/GuildProfile"

    # Trecho presente nos links de perfil de aventureiro
    PROFILE_LINK_MARKER = "Adventure/Profile"
