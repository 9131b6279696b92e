"""FastAPI application bootstrap with router wiring."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
import logging

from app.api.routers import health, products
from app.core.config import get_settings

logger = logging.getLogger(__name__)


class CORSDebugMiddleware(BaseHTTPMiddleware):
    """Middleware to log the Origin header of cross-origin requests."""

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("Origin")
        if origin:
            logger.debug(f"[CORS] {request.method} {request.url.path} from {origin}")
        return await call_next(request)


def create_app() -> FastAPI:
    """Instantiate the FastAPI app and include top-level routers.

    Building the app never touches the database; schema migration is run by
    the server entrypoint before the listener starts.
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url="/swagger",
        redoc_url=None,
    )

    app.add_middleware(CORSDebugMiddleware)

    # Any origin, header and method may call the API from a browser
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(products.router, prefix="/api/products", tags=["products"])

    return app


app = create_app()
