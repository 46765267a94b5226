import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from common.config import get_settings

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from controllers.analytics_controller import router as analytics_router, poller

APP_NAME = "Car Analytics Backend"
APP_DESC = "Polls the viewing-session sheet and serves aggregates, insights and exports to the dashboard."
APP_VER = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    poller.start()
    try:
        yield
    finally:
        poller.stop()
        logger.info("poller stopped")


app = FastAPI(title=APP_NAME, description=APP_DESC, version=APP_VER, lifespan=lifespan)


ALLOWED_ORIGINS = [
    "http://localhost:8501",
    "http://127.0.0.1:8501",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1):8501",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


OUTPUT_DIR = settings.output_dir
os.makedirs(OUTPUT_DIR, exist_ok=True)
app.mount("/static", StaticFiles(directory=OUTPUT_DIR), name="static")


@app.get("/health")
def health():
    return {"ok": True, "service": APP_NAME, "version": APP_VER, "poller_running": poller.running}


@app.exception_handler(Exception)
async def unhandled_exc_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "code": "UNHANDLED_ERROR", "error": str(exc)},
    )


app.include_router(analytics_router, prefix="", tags=["analytics"])


@app.get("/")
def index():
    endpoints = ["/sessions", "/sessions/{session_id}", "/summary", "/insights", "/timeseries",
                 "/schema", "/refresh (POST)", "/report (POST)", "/export (POST)", "/health", "/static/<file>"]
    return {
        "ok": True,
        "message": "Car Analytics Backend is running.",
        "endpoints": endpoints
    }
