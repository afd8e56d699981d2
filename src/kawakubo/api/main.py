"""Kawakubo AI Designer: FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the REST API routes, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
The application is stateless between requests:

- **Configuration** is loaded once from the environment by
  :mod:`kawakubo.core.config` and never changes afterwards.
- **Image generation** is delegated to an external provider through
  :class:`~kawakubo.core.provider.OpenAIImageProvider`, created in the
  lifespan and stored on ``app.state``.
- **Request orchestration** (validation, prompt building, error mapping)
  lives in :class:`~kawakubo.api.handler.GenerationHandler`.
- **The HTML page** is served as a raw ``HTMLResponse``; its script and
  stylesheet are served by ``StaticFiles``.
- Nothing is persisted.  Generated images stay on the provider's hosting.

Endpoints
---------
========  ==========================  ======================================
Method    Path                        Purpose
========  ==========================  ======================================
GET       ``/``                       Serve the main HTML page
GET       ``/api/health``             Liveness and provider configuration
POST      ``/api/generate-design``    Generate a clothing design image
POST      ``/api/prompt/compile``     Preview the prompt for a submission
========  ==========================  ======================================

Errors
------
Every failure is returned as ``{"error": "<message>"}`` with the status of
the :class:`~kawakubo.core.errors.GenerationError` that caused it.  Any
other exception becomes a 500 with a generic message.

Usage
-----
CLI (installed entry point)::

    kawakubo

Direct invocation::

    python -m kawakubo.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from kawakubo import __version__
from kawakubo.api.handler import GenerationHandler
from kawakubo.api.models import DesignResponse, ErrorResponse, PromptPreviewResponse
from kawakubo.core.config import config
from kawakubo.core.errors import UNEXPECTED_ERROR, GenerationError
from kawakubo.core.provider import OpenAIImageProvider

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application lifecycle: provider client setup and teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Creates the provider client (when an API key is configured) and the
        :class:`GenerationHandler`, storing both on ``app.state``.  Without
        an API key the server still starts; generation requests are then
        rejected with a configuration error.

    On shutdown:
        Closes the provider's HTTP client.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    provider = OpenAIImageProvider(config) if config.provider_configured else None
    if provider is None:
        logger.warning("No provider API key configured; generation is disabled.")
    else:
        logger.info(f"Image provider ready (model={provider.model}).")

    app.state.provider = provider
    app.state.handler = GenerationHandler(config, provider)

    yield

    if provider is not None:
        await provider.close()
        logger.info("Image provider closed on shutdown.")


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Kawakubo AI Designer",
    description="Clothing design generation backed by an external image provider.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so the page can be served from a different
# port during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=str(config.static_dir)), name="static")


def _error_response(error: GenerationError) -> JSONResponse:
    """Convert a :class:`GenerationError` into the API error shape."""
    return JSONResponse(
        status_code=error.status_code,
        content=ErrorResponse(error=error.message).model_dump(),
    )


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    """Serve the main application HTML page.

    Raises:
        HTTPException: 404 if ``index.html`` is not found.
    """
    index_path = config.templates_dir / "index.html"
    if index_path.exists():
        return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
    raise HTTPException(status_code=404, detail="index.html not found")


@app.get("/api/health")
async def health(request: Request) -> dict:
    """Report liveness and whether the provider credential is configured."""
    handler: GenerationHandler = request.app.state.handler
    return {
        "status": "ok",
        "version": __version__,
        "provider_configured": handler.provider_configured,
    }


@app.post(
    "/api/generate-design",
    response_model=DesignResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_design(request: Request):
    """Generate a clothing design from a description.

    The body is read raw and handed to :class:`GenerationHandler`, which
    performs its own parsing so that malformed JSON and a missing
    description each get their own error message.

    Returns:
        ``{"designs": [...]}`` on success, otherwise ``{"error": ...}``.
    """
    handler: GenerationHandler = request.app.state.handler
    try:
        body = await request.body()
        return await handler.handle(body)
    except GenerationError as e:
        if e.detail:
            logger.info(f"Generation request failed: {e.message} ({e.detail})")
        return _error_response(e)
    except Exception:
        logger.exception("Unexpected error while generating design")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=UNEXPECTED_ERROR).model_dump(),
        )


@app.post(
    "/api/prompt/compile",
    response_model=PromptPreviewResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def compile_prompt(request: Request):
    """Preview the prompt that would be sent for a submission.

    Validates the body exactly like ``/api/generate-design`` but never calls
    the provider and does not need the API key.
    """
    handler: GenerationHandler = request.app.state.handler
    try:
        return PromptPreviewResponse(prompt=handler.compile(await request.body()))
    except GenerationError as e:
        return _error_response(e)
    except Exception:
        logger.exception("Unexpected error while compiling prompt")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=UNEXPECTED_ERROR).model_dump(),
        )


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~kawakubo.core.config.config`
    (``KAWAKUBO_SERVER_HOST``, ``KAWAKUBO_SERVER_PORT``,
    ``KAWAKUBO_LOG_LEVEL``).  Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``kawakubo`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "kawakubo.api.main:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
