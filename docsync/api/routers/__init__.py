"""API router factory functions."""
from .chunks import create_chunks_router
from .sites import create_sites_router
from .systems import create_systems_router

__all__ = [
    "create_chunks_router",
    "create_sites_router",
    "create_systems_router",
]
