import os
import pkgutil
from importlib import import_module

from fastapi import APIRouter

from sse_relay.logging import logger

# Track registered modules to prevent duplicate logging
_registered_http_modules: set[str] = set()


def collect_subrouters() -> APIRouter:
    """
    Collects the routers of every module in `api/http`.

    Each module under `sse_relay/api/http` is imported and its `router`
    attribute is included into a single main router, which is returned as
    the entry point for the application's API.
    """
    main_router: APIRouter = APIRouter()

    app_dir = os.path.dirname(__file__)
    app_name = os.path.basename(app_dir)

    for _, module, _ in pkgutil.iter_modules([f"{app_dir}/api/http"]):
        api = import_module(f".{module}", package=f"{app_name}.api.http")

        main_router.include_router(api.router)

        if module not in _registered_http_modules:
            logger.info(f'Register "{module}" api')
            _registered_http_modules.add(module)

    return main_router
