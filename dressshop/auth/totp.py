"""TOTP secret provisioning and one-time code verification"""

import base64
import binascii
import io

import pyotp
import qrcode

from ..utils.exceptions import TwoFactorSecretError

CODE_DIGITS = 6
# Steps accepted either side of the current one (clock drift)
VALID_WINDOW = 1


def generate_secret() -> str:
    """Random base32 shared secret (160 bits)"""
    return pyotp.random_base32()


def build_provisioning_uri(account: str, issuer: str, secret: str) -> str:
    """otpauth:// URI understood by authenticator apps"""
    return pyotp.TOTP(secret).provisioning_uri(name=account, issuer_name=issuer)


def render_qr_data_url(uri: str) -> str:
    """Encode the URI as a PNG QR code data URL"""
    image = qrcode.make(uri)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def verify_code(code, secret: str, valid_window: int = VALID_WINDOW) -> bool:
    """Check a submitted code against the current and adjacent time steps.

    Malformed codes return False. A secret that is not valid base32 raises
    TwoFactorSecretError.
    """
    if not isinstance(code, str):
        return False
    code = code.strip()
    if len(code) != CODE_DIGITS or not code.isdigit():
        return False
    try:
        totp = pyotp.TOTP(secret)
        totp.byte_secret()
    except (binascii.Error, ValueError, TypeError) as e:
        raise TwoFactorSecretError(f"Stored 2FA secret is corrupt: {e}")
    return totp.verify(code, valid_window=valid_window)
