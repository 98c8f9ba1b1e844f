"""FastAPI route auto-discovery.

Conventions:
- Route modules live under `shop/routes/` and each exports `router: APIRouter`.
- Files starting with `_` are ignored.
- A router without its own `prefix` gets `/api/<module path>`; a router without
  `tags` gets the module name as its tag.
"""

import importlib
from pathlib import Path
from typing import Any

import structlog
from fastapi import APIRouter, FastAPI

logger = structlog.get_logger(__name__)


class RouterDiscoveryError(Exception):
    """Raised when a route module cannot be imported or exports no router."""


def _iter_route_files(routes_dir: Path) -> list[Path]:
    return sorted(
        (path for path in routes_dir.rglob("*.py") if not path.name.startswith("_")),
        key=lambda path: path.as_posix(),
    )


def _module_path(routes_dir: Path, py_file: Path) -> str:
    """`<pkg>/routes/v1/products.py` -> `<pkg>.routes.v1.products`."""
    relative = py_file.relative_to(routes_dir.parent.parent).with_suffix("")
    return ".".join(relative.parts)


def discover_routers(routes_dir: Path) -> list[tuple[APIRouter, dict[str, Any]]]:
    """Import every route module and return `(router, include_kwargs)` pairs."""
    routers: list[tuple[APIRouter, dict[str, Any]]] = []

    for py_file in _iter_route_files(routes_dir):
        module_path = _module_path(routes_dir, py_file)

        try:
            module = importlib.import_module(module_path)
        except Exception as e:
            msg = f"Failed to import route module '{module_path}' ({py_file})"
            raise RouterDiscoveryError(msg) from e

        router = getattr(module, "router", None)
        if not isinstance(router, APIRouter):
            msg = f"Route module '{module_path}' must export 'router' as an APIRouter instance"
            raise RouterDiscoveryError(msg)

        include_kwargs: dict[str, Any] = {}
        if not router.prefix:
            route_path = py_file.relative_to(routes_dir).with_suffix("")
            include_kwargs["prefix"] = f"/api/{route_path.as_posix()}"
        if not router.tags:
            include_kwargs["tags"] = [py_file.stem]

        routers.append((router, include_kwargs))

    return routers


def register_routers(app: FastAPI, routes_dir: Path | None = None) -> None:
    """Discover and register routers; fails fast on a broken route module."""
    if routes_dir is None:
        routes_dir = Path(__file__).parent.parent / "routes"

    if not routes_dir.is_dir():
        msg = f"Routes directory not found: {routes_dir}"
        raise FileNotFoundError(msg)

    routers = discover_routers(routes_dir)
    if not routers:
        logger.warning("no_routers_discovered", routes_dir=str(routes_dir))
        return

    for router, include_kwargs in routers:
        app.include_router(router, **include_kwargs)
        logger.info(
            "router_registered",
            prefix=include_kwargs.get("prefix") or router.prefix,
            tags=include_kwargs.get("tags") or list(router.tags),
        )
