from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from link_converter.core.config import get_settings
from link_converter.core.exceptions import register_exception_handlers
from link_converter.core.logging import setup_logging
from link_converter.core.middleware import RequestContextMiddleware
from link_converter.core.responses import SafeJSONResponse
from link_converter.routers import health
from link_converter.routers.convert_text import create_convert_text_router
from link_converter.services.link_conversion_service import LinkConversionService
from link_converter.services.shopee_client import ShopeeClient
from link_converter.services.short_link_service import ShortLinkGenerator
from link_converter.services.url_resolver import UrlResolver


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    conversion_service = LinkConversionService(
        resolver=UrlResolver(settings),
        generator=ShortLinkGenerator(ShopeeClient(settings)),
    )

    app = FastAPI(
        title="Shopee Link Converter",
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=SafeJSONResponse,
    )

    if settings.cors_enabled and settings.cors_allow_origins_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api")
    app.include_router(create_convert_text_router(conversion_service))

    logging.getLogger(__name__).info("Link converter app created")
    return app


app = create_app()
