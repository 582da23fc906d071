# Run: uvicorn signal_relay.main:app --host 0.0.0.0 --port 8080

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .adapters.entry.http.simulations_router import router as simulations_router
from .adapters.entry.http.telegram_router import router as telegram_router
from .core.exceptions import NotFoundError, RelayError, RemoteCallError, TransportError
from .workers.relay_supervisor import RelaySupervisor


def _setup_logging():
    """
    Configure basic logging.
    """
    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # httpx logs every Bot API call at INFO (token included in the URL)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _error(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": msg})


def _install_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(TransportError)
    async def _transport(request: Request, exc: TransportError):
        return _error(502, str(exc))

    @app.exception_handler(RemoteCallError)
    async def _remote(request: Request, exc: RemoteCallError):
        return _error(502, str(exc))

    @app.exception_handler(RelayError)
    async def _relay(request: Request, exc: RelayError):
        logging.getLogger(__name__).error("Unhandled relay error: %s", exc, exc_info=exc)
        return _error(500, str(exc) or "Internal Server Error")

    @app.exception_handler(StarletteHTTPException)
    async def _http(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logging.getLogger(__name__).exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return _error(500, str(exc) or "Internal Server Error")

    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        errors = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()
        )
        return _error(400, errors or "Invalid request")


def create_app(supervisor: RelaySupervisor | None = None) -> FastAPI:
    supervisor = supervisor or RelaySupervisor()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context for startup/shutdown lifecycle.
        """
        _setup_logging()
        logging.getLogger(__name__).info("Starting signal-relay (lifespan startup)...")
        await supervisor.start()

        app.state.dispatcher = supervisor.dispatcher
        app.state.simulation_repo = supervisor.simulation_repo

        try:
            yield
        finally:
            logging.getLogger(__name__).info("Shutting down signal-relay (lifespan shutdown)...")
            await supervisor.stop()

    app = FastAPI(title="signal-relay", version="0.1.0", lifespan=lifespan)
    app.include_router(telegram_router)
    app.include_router(simulations_router)
    _install_error_handlers(app)

    @app.get("/health")
    async def health():
        """
        Liveness probe endpoint.
        """
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }

    return app


app = create_app()
