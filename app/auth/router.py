"""
Auth Router - login por usuário/senha com cookie de sessão
"""
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from loguru import logger

from .config import AuthSettings, get_auth_settings

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


def _matches(value: Optional[str], expected: str) -> bool:
    """Comparação em tempo constante"""
    if not value or not expected:
        return False
    return secrets.compare_digest(value.encode(), expected.encode())


def has_valid_session(request: Request, settings: AuthSettings) -> bool:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return _matches(token, settings.IKUSA_SESSION_TOKEN)


def require_session(
    request: Request,
    settings: AuthSettings = Depends(get_auth_settings)
) -> None:
    """Dependência: sessão válida obrigatória (ignorada com AUTH_ENABLED=false)"""
    if not settings.AUTH_ENABLED:
        return
    if not has_valid_session(request, settings):
        raise HTTPException(status_code=401, detail="Sessão inválida ou expirada")


@router.post("/login")
async def login(request: Request, settings: AuthSettings = Depends(get_auth_settings)):
    """Valida credenciais e grava o cookie de sessão"""
    try:
        credentials = LoginRequest(**(await request.json()))
    except (ValueError, TypeError, ValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Erro ao autenticar"}
        )

    if not settings.is_configured:
        logger.error("Login sem IKUSA_PASSWORD/IKUSA_SESSION_TOKEN configurados")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Auth não configurado. Defina IKUSA_PASSWORD e IKUSA_SESSION_TOKEN no .env",
            }
        )

    username_ok = _matches(credentials.username, settings.IKUSA_USERNAME)
    password_ok = _matches(credentials.password, settings.IKUSA_PASSWORD)
    if not (username_ok and password_ok):
        logger.warning(f"Login recusado para usuário '{credentials.username}'")
        return JSONResponse(
            status_code=401,
            content={"success": False, "message": "Credenciais inválidas"}
        )

    response = JSONResponse(content={"success": True})
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        settings.IKUSA_SESSION_TOKEN,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    logger.info(f"Login: {credentials.username}")
    return response


@router.post("/logout")
async def logout(settings: AuthSettings = Depends(get_auth_settings)):
    """Remove o cookie de sessão"""
    response = JSONResponse(content={"success": True})
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        "",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return response


@router.get("/check")
async def check(request: Request, settings: AuthSettings = Depends(get_auth_settings)):
    return {
        "authenticated": has_valid_session(request, settings),
        "auth_enabled": settings.AUTH_ENABLED,
    }
