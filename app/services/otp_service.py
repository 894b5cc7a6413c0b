import secrets
import time
from typing import Dict

from app.config import settings
from app.errors import InvalidOTP, OTPExpired, OTPNotFound, TooManyAttempts
from app.logging_config import get_logger
from app.phone import mask_phone

logger = get_logger(__name__)

# ===============================
# IN-MEMORY OTP STORE
# ===============================
# { phone: { "otp": "123456", "expires": 1234567890.0, "attempts": 0 } }
OTP_STORE: Dict[str, dict] = {}


# ===============================
# OTP GENERATION
# ===============================
def generate_otp(length: int = None) -> str:
    """Generate a numeric OTP, zero-padded to `length` digits."""
    length = length or settings.OTP_LENGTH
    return str(secrets.randbelow(10 ** length)).zfill(length)


# ===============================
# SAVE OTP
# ===============================
def save_otp(phone: str, otp: str, ttl_seconds: int = None) -> float:
    """Save OTP for a phone number, replacing any pending one. Returns the expiry timestamp."""
    ttl_seconds = ttl_seconds or settings.OTP_TTL_SECONDS
    expires = time.time() + ttl_seconds
    OTP_STORE[phone] = {
        "otp": otp,
        "expires": expires,
        "attempts": 0,
    }
    return expires


# ===============================
# DELIVER OTP
# ===============================
def deliver_otp(phone: str, otp: str) -> dict:
    """Development delivery: the code goes to the log instead of an SMS gateway."""
    logger.info("otp_development_delivery", phone=mask_phone(phone), otp=otp)
    return {
        "success": True,
        "provider": "development_fallback",
        "mobile_number": phone,
    }


# ===============================
# VALIDATE OTP
# ===============================
def validate_otp(phone: str, otp: str) -> bool:
    """
    Validates OTP entered by user. A matching code is consumed.
    """
    record = OTP_STORE.get(phone)
    if record is None:
        raise OTPNotFound()

    if time.time() > record["expires"]:
        del OTP_STORE[phone]
        raise OTPExpired()

    if record["attempts"] >= settings.OTP_MAX_ATTEMPTS:
        del OTP_STORE[phone]
        raise TooManyAttempts()

    if not secrets.compare_digest(otp, record["otp"]):
        record["attempts"] += 1
        logger.warning("otp_mismatch", phone=mask_phone(phone), attempts=record["attempts"])
        raise InvalidOTP()

    # OTP is valid → cleanup
    del OTP_STORE[phone]
    return True
