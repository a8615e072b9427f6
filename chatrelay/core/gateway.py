"""FastAPI app entry."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response

from chatrelay.adapters.chat.router import router as chat_router
from chatrelay.adapters.workers_ai.upstream import WorkersAIClient
from chatrelay.config.settings import CORS_HEADERS, settings
from chatrelay.core.inference import InferenceBackend
from chatrelay.util.logger import logger


async def cors_boundary_middleware(request: Request, call_next):
    logger.debug("boundary enter method=%s path=%s", request.method, request.url.path)
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=dict(CORS_HEADERS))

    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    logger.debug(
        "boundary pass method=%s path=%s status=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("startup model=%s env=%s", settings.model_id, settings.env)
    yield
    logger.info("shutdown: closing inference backend")
    await app.state.inference.aclose()


def create_app(inference: InferenceBackend | None = None) -> FastAPI:
    """Build the relay app around ``inference`` (Workers AI over REST by default)."""

    # docs routes would shadow the catch-all chat route
    app = FastAPI(
        title=settings.app_name,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.inference = inference if inference is not None else WorkersAIClient()
    app.include_router(chat_router)
    app.middleware("http")(cors_boundary_middleware)
    return app


app = create_app()


def main() -> None:  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":  # pragma: no cover
    main()
