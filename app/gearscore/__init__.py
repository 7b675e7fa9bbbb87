"""
Gearscore dos jogadores - listagem, estatísticas e upload
"""
from .router import router as gearscore_router

__all__ = ["gearscore_router"]
