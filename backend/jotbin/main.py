import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jotbin import __version__, config
from jotbin.api import backup, notes, pastebin, sessions, state
from jotbin.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # must finish before the first request is served
    state.store.initialize()
    logger.info("data dir ready at %s", state.DATA_DIR)
    yield


app = FastAPI(title="jotbin API", version=__version__, lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        status_code=400,
    )


@app.exception_handler(Exception)
async def server_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        {
            "success": False,
            "error": "Internal server error",
            "message": str(exc) if config.is_development() else "Something went wrong",
        },
        status_code=500,
    )


@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "message": "jotbin API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


app.include_router(notes.router)
app.include_router(sessions.router)
app.include_router(backup.router)
app.include_router(pastebin.router)


@app.get("/{full_path:path}", include_in_schema=False)
def spa_fallback(full_path: str):
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not found")
    index = config.static_dir() / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(index)
