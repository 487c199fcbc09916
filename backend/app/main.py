import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.api.v1.api import api_router
from backend.app.core.config import settings
from backend.app.core.database import init_db
from backend.app.middleware.request_id import RequestIDMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database schema ready")
    yield


app = FastAPI(title="Receivables & Payments Tracker", lifespan=lifespan)

# ─── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)

# ─── Custom middleware (outermost executes first) ─────────────────────────────
app.add_middleware(RequestIDMiddleware)


# ─── Error envelope ───────────────────────────────────────────────────────────


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": validation_message(errors),
            "details": [
                {"field": _field_name(e.get("loc", ())), "message": e.get("msg", "")}
                for e in errors
            ],
        },
    )


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def validation_message(errors: list[dict]) -> str:
    """One readable sentence: every missing field, else the first problem."""
    missing = [
        _field_name(e.get("loc", ())) for e in errors if e.get("type") == "missing"
    ]
    if missing:
        if missing == ["body"]:
            return "Request body is required"
        return f"Missing required fields: {', '.join(missing)}"
    if not errors:
        return "Invalid request"
    return errors[0].get("msg", "Invalid request")


app.include_router(api_router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
