"""
Application Security Scoring Engine: FastAPI Application Entry Point

POST /v1/score/evaluate  → score an application record
POST /v1/score/review    → mark reviewed + rescore
GET  /v1/score/health    → health check
GET  /v1/config/integration-levels → integration level options
POST /v1/config/reload  → reload scoring tables
GET  /docs               → OpenAPI / Swagger UI
"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from scoring_service.api.config_endpoint import router as config_router
from scoring_service.api.score_endpoint import router as score_router
from scoring_service.core.config import get_settings
from scoring_service.core.dependencies import get_table_store
from scoring_service.scoring.tables import ConfigurationError

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer() if get_settings().app_env == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(get_settings().log_level),
)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("scoring_engine_starting", model_version=get_settings().scoring_model_version)
    try:
        get_table_store().load()
    except ConfigurationError:
        # keep serving: scoring endpoints report 503 until a valid reload
        logger.error("scoring_engine_degraded")
    yield
    logger.info("scoring_engine_shutting_down")


app = FastAPI(
    title="Application Security Scoring Engine",
    description="Security posture score for applications: knowledge sharing + security tool usage",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (portfolio UI) ──
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)

# ── Prometheus metrics ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── Routes ──
app.include_router(score_router)
app.include_router(config_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "service": get_settings().app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "evaluate": "POST /v1/score/evaluate",
            "review": "POST /v1/score/review",
            "health": "GET /v1/score/health",
            "integration_levels": "GET /v1/config/integration-levels",
            "reload": "POST /v1/config/reload",
            "metrics": "GET /metrics",
        },
    }
