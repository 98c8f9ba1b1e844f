"""
Core infrastructure components for the shop API.

This package contains database configuration, the generic repository,
logging setup, exception handling and route discovery. FastAPI dependencies
live in ``shop.core.dependencies`` and are imported from there directly,
since they depend on the repository layer.
"""

from .base_repository import BaseRepository
from .database import AsyncDBPool
from .logging_config import setup_logging
from .route_discovery import RouterDiscoveryError, discover_routers, register_routers

__all__ = [
    "AsyncDBPool",
    "BaseRepository",
    "RouterDiscoveryError",
    "discover_routers",
    "register_routers",
    "setup_logging",
]
