"""Login, logout, current user and two-factor setup routes"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from dressshop.app import ShopApp
from dressshop.auth.service import TwoFactorOutcome
from dressshop.models.user import Identity, PublicIdentity
from dressshop.utils.exceptions import (
    InvalidCredentialsError,
    TwoFactorNotEnabledError,
    TwoFactorNotSetUpError,
)
from dressshop.utils.logger import get_logger

from .auth_deps import (
    clear_session_cookie,
    get_current_identity,
    get_session_token,
    get_shop,
    set_session_cookie,
)
from .models import (
    LoginRequest,
    SuccessResponse,
    TwoFactorSetupResponse,
    TwoFactorVerifyRequest,
    UserStatusResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=PublicIdentity)
async def login(payload: LoginRequest, shop: ShopApp = Depends(get_shop)):
    """Log in with username and password; sets the session cookie"""
    try:
        session, user = await run_in_threadpool(shop.auth.login, payload.username, payload.password)
    except InvalidCredentialsError as e:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"message": str(e)})
    response = JSONResponse(content=user.model_dump(mode="json", by_alias=True))
    set_session_cookie(response, shop, session.token)
    return response


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    shop: ShopApp = Depends(get_shop),
    token: Optional[str] = Depends(get_session_token),
):
    await run_in_threadpool(shop.auth.logout, token)
    response = JSONResponse(content={"success": True})
    clear_session_cookie(response, shop)
    return response


@router.get("/user", response_model=UserStatusResponse)
async def current_user(
    shop: ShopApp = Depends(get_shop),
    token: Optional[str] = Depends(get_session_token),
):
    user = await run_in_threadpool(shop.auth.current_identity, token)
    if user is None:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"authenticated": False})
    return UserStatusResponse(authenticated=True, user=user)


@router.post("/2fa/setup", response_model=TwoFactorSetupResponse)
async def two_factor_setup(
    shop: ShopApp = Depends(get_shop),
    identity: Identity = Depends(get_current_identity),
):
    """Provision a TOTP secret and return it with its QR code"""
    try:
        setup = await run_in_threadpool(shop.auth.begin_two_factor_setup, identity)
    except Exception as e:
        logger.error("Error setting up 2FA", user_id=identity.id, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Failed to set up 2FA"},
        )
    return TwoFactorSetupResponse(success=True, qr_code=setup.qr_code, secret=setup.secret)


@router.post("/2fa/verify", response_model=SuccessResponse)
async def two_factor_verify(
    payload: TwoFactorVerifyRequest,
    shop: ShopApp = Depends(get_shop),
    identity: Identity = Depends(get_current_identity),
):
    """Confirm the pending secret with a code from the authenticator app"""
    try:
        outcome = await run_in_threadpool(shop.auth.verify_two_factor_setup, identity, payload.token)
    except TwoFactorNotSetUpError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": str(e)},
        )
    if outcome is TwoFactorOutcome.REJECTED:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Invalid token"},
        )
    return SuccessResponse(success=True, message="2FA successfully enabled")


@router.post("/2fa/disable", response_model=SuccessResponse)
async def two_factor_disable(
    shop: ShopApp = Depends(get_shop),
    identity: Identity = Depends(get_current_identity),
):
    try:
        await run_in_threadpool(shop.auth.disable_two_factor, identity)
    except TwoFactorNotEnabledError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": str(e)},
        )
    return SuccessResponse(success=True, message="2FA successfully disabled")
