"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response

from msgintel.observability.correlation import CORRELATION_ID_HEADER, correlation_scope

from .routers import public
from .routes import messages


def create_app() -> FastAPI:
    """Create the message intel app with correlation middleware and routes."""
    app = FastAPI(
        title="Message Intel",
        docs_url=None,
        redoc_url=None,
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_ID_HEADER)) as cid:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response

    app.include_router(public.router)
    app.include_router(messages.router)

    return app
