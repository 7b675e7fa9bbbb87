"""
Auth Config - credenciais e cookie de sessão
"""
import os
from pydantic_settings import BaseSettings
from functools import lru_cache


class AuthSettings(BaseSettings):
    """Configurações de autenticação"""

    # Credenciais (IKUSA_PASSWORD e IKUSA_SESSION_TOKEN obrigatórios para login)
    IKUSA_USERNAME: str = os.getenv("IKUSA_USERNAME", "admin")
    IKUSA_PASSWORD: str = os.getenv("IKUSA_PASSWORD", "")
    IKUSA_SESSION_TOKEN: str = os.getenv("IKUSA_SESSION_TOKEN", "")

    # Cookie
    SESSION_COOKIE_NAME: str = "ikusa_session"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7  # 7 dias

    # Rotas de escrita exigem sessão quando ativo
    AUTH_ENABLED: bool = True

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_configured(self) -> bool:
        return bool(self.IKUSA_PASSWORD and self.IKUSA_SESSION_TOKEN)

    @property
    def cookie_secure(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_auth_settings() -> AuthSettings:
    return AuthSettings()
