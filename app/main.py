import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import install_error_handlers
from app.core.http_hardening import install_http_hardening
from app.db.session import dispose_engine, get_db
from app.models.common import utcnow
from app.api.apps.router import router as apps_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("%s starting env=%s", settings.APP_NAME, settings.APP_ENV)
    yield
    dispose_engine()


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_http_hardening(app)
install_error_handlers(app)

app.include_router(apps_router, prefix="/api/apps")

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health(db: Session = Depends(get_db)):
    timestamp = utcnow().isoformat()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.exception("health check failed")
        return JSONResponse(
            {
                "status": "unhealthy",
                "database": "disconnected",
                "error": "Database connection failed" if settings.is_production else str(exc),
                "timestamp": timestamp,
            },
            status_code=500,
        )
    return {"status": "healthy", "database": "connected", "timestamp": timestamp}
