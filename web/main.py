"""FastAPI application for the dress shop storefront"""

import os
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dressshop.app import ShopApp
from dressshop.utils.exceptions import (
    ConflictError,
    DressShopError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from dressshop.utils.logger import get_logger

from .auth_routes import router as auth_router
from .cart_routes import router as cart_router
from .order_routes import router as order_router
from .product_routes import router as product_router

logger = get_logger(__name__)

ERROR_STATUS = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def _status_for(exc: DressShopError) -> int:
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)

    @app.exception_handler(DressShopError)
    async def domain_error_handler(request: Request, exc: DressShopError):
        code = _status_for(exc)
        if code >= 500:
            logger.error("Request failed", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
            return JSONResponse(status_code=code, content={"message": "Internal server error"})
        return JSONResponse(status_code=code, content={"message": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )


def create_app(shop: Optional[ShopApp] = None) -> FastAPI:
    """Build the API around an initialized ShopApp (created from settings if omitted)"""
    if shop is None:
        shop = ShopApp().initialize()

    app = FastAPI(
        title=f"{shop.settings.app.name} API",
        description="Dress shop storefront: catalog, cart, checkout and admin login",
        version=shop.settings.app.version,
    )
    app.state.shop = shop

    cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins if shop.settings.is_production and cors_origins else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint for deployment platforms"""
        return {
            "status": "healthy",
            "service": "dressshop",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    return app
