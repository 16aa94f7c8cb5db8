"""
FastAPI application - card embedding surface
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from src.cards.renderer import CardRenderer
from src.catalog.client import CatalogClient
from src.error_handler import ErrorHandler
from src.utils.config_loader import CardsConfig, load_cards_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

def load_config_or_default() -> CardsConfig:
    try:
        return load_cards_config()
    except FileNotFoundError as e:
        logger.warning(f"{e}. Using defaults.")
        return CardsConfig()


def build_cache(config: CardsConfig):
    """Use real Redis when REDIS_URL is set, else the in-memory stub"""
    if os.getenv("REDIS_URL"):
        from src.database.redis_real import RedisCache

        return RedisCache(url=os.environ["REDIS_URL"], default_ttl=config.cache.ttl_seconds)

    from src.database.redis import RedisCache

    return RedisCache()


def build_renderer(config: Optional[CardsConfig] = None, cache=None) -> CardRenderer:
    config = config or load_config_or_default()
    cache = cache if cache is not None else build_cache(config)
    client = CatalogClient(cache, config)
    return CardRenderer.from_config(client, config)


def create_app(renderer: Optional[CardRenderer] = None) -> FastAPI:
    app = FastAPI(
        title="Plugin Info Cards API",
        description="Renders WordPress.org plugin info cards as HTML",
        version="1.0.0",
    )
    app.state.renderer = renderer or build_renderer()
    app.state.error_handler = ErrorHandler()

    # ========================================================================
    # ENDPOINTS
    # ========================================================================
    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check (cache)."""
        cache = request.app.state.renderer.client.cache
        return {"status": "healthy", "cache": cache.ping(), "timestamp": datetime.now().isoformat()}

    @app.get("/cards", response_class=HTMLResponse, tags=["Cards"])
    def render_cards(
        request: Request,
        slugs: str = Query(default="", description="Comma separated plugin slugs"),
        author: Optional[str] = Query(default=None, description="Author whose plugins are listed first"),
    ):
        if not slugs.strip() and not (author or "").strip():
            return JSONResponse(status_code=400, content={"detail": "Provide at least one slug or an author."})
        try:
            html = request.app.state.renderer.render_embed(slugs, author=author)
        except Exception as exc:
            payload = request.app.state.error_handler.handle_exception(exc, context={"slugs": slugs, "author": author})
            return JSONResponse(status_code=500, content=payload)
        return HTMLResponse(content=html)

    @app.on_event("startup")
    async def startup_event():
        """Initialize on startup"""
        logger.info("Starting Plugin Info Cards API...")
        if app.state.renderer.client.cache.ping():
            logger.info("Cache connection successful")
        else:
            logger.warning("Cache connection failed")

    return app


app = create_app()
