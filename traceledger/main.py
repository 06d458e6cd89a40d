"""FastAPI application."""
import json
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .deployment import build_deployment_info
from .domain_errors import DomainError
from .problem_details import domain_error_handler
from .routers import auth, dashboard, products, roles
from .schemas import DeploymentInfo

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create app
app = FastAPI(
    title="TraceLedger",
    version="1.0.0",
    description="Role-gated supply-chain traceability ledger",
)

if settings.ENV.lower() == "production" and settings.JWT_SECRET_KEY == "change-me-in-production":
    raise RuntimeError("JWT_SECRET_KEY must be set in production.")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.add_exception_handler(DomainError, domain_error_handler)

# Include routers
app.include_router(auth.router, prefix="/api/v1")
app.include_router(roles.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")


@app.get("/api/v1/system/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": "1.0.0"}


@app.get("/api/v1/system/deployment", response_model=DeploymentInfo)
def get_deployment_info():
    """Deployment descriptor written by deploy_ledger.py, or the one implied by settings."""
    path = Path(settings.DEPLOYMENT_INFO_PATH)
    if path.is_file():
        return DeploymentInfo.model_validate(json.loads(path.read_text(encoding="utf-8")))
    return build_deployment_info(settings)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "TraceLedger API",
        "version": "1.0.0",
        "docs": "/docs",
    }
