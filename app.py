"""FastAPI application factory."""

from collections.abc import Mapping
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.router import TargetResolver
from services.forwarder import ROUTED_METHODS, Forwarder
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    environ: Mapping[str, str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    resolver = TargetResolver(config.proxy.mount_prefix)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client_kwargs = {}
        if config.upstream.timeout is not None:
            client_kwargs["timeout"] = config.upstream.timeout
        client = httpx.AsyncClient(transport=transport, **client_kwargs)
        app.state.forwarder = Forwarder(
            config=config,
            upstream=UpstreamClient(client),
            logger=logger,
            header_builder=HeaderBuilder(),
            resolver=resolver,
            environ=environ,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Internal API Proxy", version="0.1.0", lifespan=lifespan)

    @app.api_route(f"{resolver.mount_prefix}/{{path:path}}", methods=list(ROUTED_METHODS))
    async def proxy(request: Request):
        return await handle_proxy(request)

    return app
