from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dotenv import load_dotenv
load_dotenv()

from anamnese_api.config import settings
from anamnese_api.infra.db import engine, SessionLocal
from anamnese_api.infra.models import Base
from anamnese_api.init_db import ensure_professional
from anamnese_api.services.errors import AnamneseError

from anamnese_api.api.routers.anamnese import router as anamnese_router
from anamnese_api.api.routers.clients import router as clients_router
from anamnese_api.api.routers.professionals import router as professionals_router
from anamnese_api.api.routers.health import router as health_router


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("anamnese_api")


# allowed origins can be provided as a comma-separated env var
_env_origins = settings.FRONTEND_URLS or settings.ALLOWED_ORIGINS
if _env_origins:
    ALLOW_ORIGINS_LIST = [o.strip() for o in _env_origins.split(",") if o.strip()]
else:
    ALLOW_ORIGINS_LIST = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


app = FastAPI(title="Anamnese API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS_LIST,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

logger.info("[CORS] allow_origins = %s", ALLOW_ORIGINS_LIST)


@app.exception_handler(AnamneseError)
async def _domain_error(request: Request, exc: AnamneseError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_body(expose_detail=not settings.is_production),
    )


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Dados inválidos: {field}" if field else "Dados inválidos"
    return JSONResponse(status_code=400, content={"success": False, "message": message})


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.on_event("startup")
def _startup() -> None:
    logger.info("[startup] creating tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("[startup] tables created/checked")

    db = SessionLocal()
    try:
        ensure_professional(db)
    finally:
        db.close()


app.include_router(health_router, tags=["health"])
app.include_router(anamnese_router, prefix="/anamnese-submissions", tags=["anamnese"])
app.include_router(clients_router, prefix="/clients", tags=["clients"])
app.include_router(professionals_router, prefix="/professionals", tags=["professionals"])
