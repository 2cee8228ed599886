# academy/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

import academy.models  # noqa: F401
from academy.api.v1.router import api_router
from academy.core.config import settings
from academy.core.errors import register_exception_handlers
from academy.core.logging import setup_logging
from academy.db.bootstrap import run_migrations_and_seed

setup_logging()

api = FastAPI(
    title="Academy API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    swagger_ui_parameters={"displayRequestDuration": True, "persistAuthorization": True},
)

api.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.APP_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# /metrics (Prometheus)
Instrumentator().instrument(api).expose(api, include_in_schema=False, should_gzip=True)

register_exception_handlers(api)

api.include_router(api_router, prefix="/api")


@api.get("/healthz", tags=["health"])
def healthz():
    return {"status": "ok"}


@api.on_event("startup")
def startup():
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        run_migrations_and_seed()


app = api
