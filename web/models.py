"""API request/response models for the storefront"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from dressshop.models.base import CamelModel
from dressshop.models.cart import CartLine
from dressshop.models.order import PaymentMethod
from dressshop.models.user import PublicIdentity


class StrictRequest(CamelModel):
    """Request bodies reject unknown fields"""
    model_config = ConfigDict(extra="forbid")


class LoginRequest(StrictRequest):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TwoFactorVerifyRequest(StrictRequest):
    token: str


class AddToCartRequest(StrictRequest):
    product_id: StrictInt = Field(..., ge=1)
    quantity: StrictInt = Field(1, ge=1)
    color: Optional[str] = None
    size: Optional[str] = None


class UpdateCartItemRequest(StrictRequest):
    quantity: StrictInt


class CreateOrderRequest(StrictRequest):
    customer_name: str = Field(..., min_length=3, description="Name must be at least 3 characters")
    phone_number: str = Field(..., min_length=10, description="Phone number must be at least 10 digits")
    address: str = Field(..., min_length=10, description="Address must be at least 10 characters")
    payment_method: PaymentMethod


class UserStatusResponse(BaseModel):
    authenticated: bool
    user: Optional[PublicIdentity] = None


class TwoFactorSetupResponse(CamelModel):
    success: bool = True
    qr_code: str
    secret: str


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class CartItemUpdateResponse(BaseModel):
    success: bool = True
    item: Optional[CartLine] = None

