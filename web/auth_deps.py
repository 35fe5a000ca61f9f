"""
FastAPI dependencies for authentication and authorization.

The session token travels in a signed cookie (itsdangerous) or, for API
clients, as ``Authorization: Bearer <token>``. The resolved identity is
handed to route functions as an explicit parameter.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from dressshop.app import ShopApp
from dressshop.models.user import Identity
from dressshop.utils.exceptions import ForbiddenError, UnauthorizedError

COOKIE_SALT = "dressshop-session"


def get_shop(request: Request) -> ShopApp:
    """Dependency to get the storefront services"""
    shop = getattr(request.app.state, "shop", None)
    if shop is None:
        raise HTTPException(status_code=500, detail="Application not initialized")
    return shop


def _serializer(shop: ShopApp) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=shop.settings.auth.session_secret, salt=COOKIE_SALT)


def _max_age_seconds(shop: ShopApp) -> int:
    return shop.settings.auth.session_days * 24 * 60 * 60


def get_session_token(request: Request, shop: ShopApp = Depends(get_shop)) -> Optional[str]:
    """Extract the raw session token (Authorization header first, then cookie)"""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None

    cookie = request.cookies.get(shop.settings.auth.session_cookie_name)
    if not cookie:
        return None
    try:
        token = _serializer(shop).loads(cookie, max_age=_max_age_seconds(shop))
    except (SignatureExpired, BadSignature):
        return None
    return token if isinstance(token, str) else None


def set_session_cookie(response: Response, shop: ShopApp, token: str) -> None:
    """Attach the signed session token as an HttpOnly cookie"""
    response.set_cookie(
        key=shop.settings.auth.session_cookie_name,
        value=_serializer(shop).dumps(token),
        max_age=_max_age_seconds(shop),
        httponly=True,
        secure=shop.settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(response: Response, shop: ShopApp) -> None:
    response.delete_cookie(shop.settings.auth.session_cookie_name)


async def get_current_identity(
    shop: ShopApp = Depends(get_shop),
    token: Optional[str] = Depends(get_session_token),
) -> Identity:
    """Dependency for routes that need a logged-in identity (401 otherwise)"""
    try:
        return await run_in_threadpool(shop.auth.require_authenticated, token)
    except UnauthorizedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


async def require_admin(
    shop: ShopApp = Depends(get_shop),
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """Dependency for admin-only routes (403 for non-admins)"""
    try:
        return shop.auth.require_admin(identity)
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
