"""
FastAPI application for the ODS admin API.

Mounts the claim set, application and ODS instance routers and translates
admin API errors into JSON responses.

Usage:
    uvicorn app.main:app --reload --port 8081
"""

from fastapi import FastAPI

from adminapi_core.config import settings
from adminapi_core.logging import setup_logging
from app.applications.routes import router as applications_router
from app.claimsets.routes import router as claimsets_router
from app.errors import register_error_handlers
from app.odsinstances.routes import router as odsinstances_router

# Initialize logging
setup_logging()

app = FastAPI(
    title="ODS Admin API",
    description="Administration of vendors' applications, API clients, ODS instances and claim sets",
    version="1.0.0",
)

register_error_handlers(app)

app.include_router(claimsets_router, tags=["ClaimSets"])
app.include_router(applications_router, tags=["Applications"])
app.include_router(odsinstances_router, tags=["OdsInstances"])


@app.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
        dict: Status and service information.
    """
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": "1.0.0"}
