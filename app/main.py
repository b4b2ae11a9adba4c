import logging

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.core.config import settings
from app.core.logging import setup_logging
from app.routers import analytics as analytics_router
from app.routers import checklist as checklist_router
from app.routers import goals as goals_router
from app.routers import metrics as metrics_router
from app.routers import people as people_router
from app.routers import standup as standup_router
from app.core.errors import (
    StandupException,
    standup_exception_handler,
    validation_exception_handler,
    store_unavailable_handler,
    unhandled_exception_handler,
)

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Standup API",
    description=(
        "**Daily standup and goal-alignment service**\n\n"
        "Turns standup answers into a goal-linked checklist, tracks item "
        "lifecycles (check-ins, strikes, clarity) and rolls daily metrics, "
        "task records and focus sessions into weekly and monthly views.\n\n"
        "Callers identify themselves with the `X-User-Id` header.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(StandupException, standup_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(OperationalError, store_unavailable_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(goals_router.router)
app.include_router(standup_router.router)
app.include_router(checklist_router.router)
app.include_router(analytics_router.router)
app.include_router(metrics_router.router)
app.include_router(people_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable, HTTP 503 otherwise. Used as the container liveness check.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Health check: database unreachable (%s)", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": "unreachable"},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
