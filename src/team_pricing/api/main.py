import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config.settings import configure_logging
from ..errors import (
    DuplicateItemError,
    InactiveItemError,
    InvalidRequestError,
    ItemNotFoundError,
    PricingConfigError,
    TeamPricingError,
)
from .admin_api import router as admin_router
from .team_items_api import router as team_items_router, pricing_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Team Pricing API",
    description="Group-buy item pricing, participation and admin",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(team_items_router)
app.include_router(pricing_router)
app.include_router(admin_router)


ERROR_STATUS = {
    ItemNotFoundError: 404,
    InactiveItemError: 400,
    InvalidRequestError: 400,
    DuplicateItemError: 409,
    PricingConfigError: 400,
}


@app.exception_handler(TeamPricingError)
async def team_pricing_error_handler(request: Request, exc: TeamPricingError):
    status = ERROR_STATUS.get(type(exc), 500)
    body = {"ok": False, "error": exc.explanation, "code": exc.error_code}
    if isinstance(exc, PricingConfigError):
        body["errors"] = exc.errors
        body["warnings"] = exc.warnings
    logger.info("%s %s -> %s %s", request.method, request.url.path, status, exc.error_code)
    return JSONResponse(status_code=status, content=body)


@app.get("/")
async def root():
    return {"status": "online", "message": "Team Pricing API Active"}
