import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes.companies import router as companies_router
from app.api.routes.contacts import router as contacts_router
from app.api.routes.health import router as health_router
from app.api.routes.leads import router as leads_router
from app.api.routes.lists import router as lists_router
from app.api.routes.outreach import router as outreach_router
from app.api.routes.settings import router as settings_router

from app.core.config import settings
from app.db.base import create_all
from app.db.session import engine
from app.scheduler import start_scheduler, stop_scheduler

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("app")


def _parse_origins(env_value: str) -> list[str]:
    if not env_value:
        return []
    raw = [p.strip() for p in env_value.replace("\n", ",").split(",")]
    cleaned = []
    for v in raw:
        if not v:
            continue
        v = v.rstrip("/")
        if v not in cleaned:
            cleaned.append(v)
    return cleaned


allowed_origins = _parse_origins(settings.CORS_ORIGINS) or ["http://localhost:5173"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_all(engine)
    if settings.DATABASE_URL.startswith("sqlite:///"):
        logger.info("[DB] Using: %s", Path(settings.DATABASE_URL.replace("sqlite:///", "")).resolve())
    logger.info("[CORS] allow_origins = %s", allowed_origins)
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(title=settings.PROJECT_NAME, version="1.0", debug=settings.DEBUG, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["health"])
app.include_router(companies_router, prefix="/api")
app.include_router(contacts_router, prefix="/api")
app.include_router(lists_router, prefix="/api")
app.include_router(leads_router, prefix="/api")
app.include_router(outreach_router, prefix="/api")
app.include_router(settings_router, prefix="/api")
