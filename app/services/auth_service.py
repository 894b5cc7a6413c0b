"""
Phone + password registration and the two-step OTP login.

Users live in an in-memory store keyed by the normalized phone number;
callers are expected to pass numbers that already went through
validate_body.
"""
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from app.config import settings
from app.errors import InvalidCredentials, PhoneAlreadyRegistered
from app.logging_config import get_logger
from app.phone import mask_phone
from app.security import create_jwt, hash_password, verify_password
from app.services.otp_service import deliver_otp, generate_otp, save_otp, validate_otp

logger = get_logger(__name__)

# { phone: { "sarathi_id": ..., "phone": ..., "hashed_password": ..., "preferred_lang": ..., "created_at": ... } }
USER_STORE: Dict[str, dict] = {}


def _new_sarathi_id() -> str:
    return f"SAR-{uuid.uuid4().hex[:12].upper()}"


def get_user(phone: str) -> Optional[dict]:
    return USER_STORE.get(phone)


def register_user(phone: str, password: str, preferred_lang: Optional[str] = None) -> dict:
    if phone in USER_STORE:
        logger.info("register_rejected_existing", phone=mask_phone(phone))
        raise PhoneAlreadyRegistered()

    user = {
        "sarathi_id": _new_sarathi_id(),
        "phone": phone,
        "hashed_password": hash_password(password),
        "preferred_lang": preferred_lang or settings.DEFAULT_LANGUAGE,
        "created_at": datetime.now(timezone.utc),
    }
    USER_STORE[phone] = user

    logger.info("user_registered", sarathi_id=user["sarathi_id"], phone=mask_phone(phone))
    return user


def initiate_login(phone: str, password: str) -> dict:
    """
    Step one: check the credentials and issue an OTP.

    Unknown numbers and wrong passwords get the same error.
    """
    user = get_user(phone)
    if not user or not verify_password(password, user["hashed_password"]):
        logger.info("login_rejected", phone=mask_phone(phone))
        raise InvalidCredentials()

    otp = generate_otp()
    save_otp(phone, otp)
    deliver_otp(phone, otp)

    logger.info("login_otp_issued", sarathi_id=user["sarathi_id"])
    return {
        "message": "OTP sent successfully",
        "phoneE164": phone,
        "expiresIn": settings.OTP_TTL_SECONDS,
    }


def verify_login(phone: str, otp: str) -> dict:
    """
    Step two: check the OTP and mint the session token.
    """
    validate_otp(phone, otp)

    user = get_user(phone)
    if not user:
        # OTP outlived the account
        raise InvalidCredentials()

    token = create_jwt({
        "sub": user["sarathi_id"],
        "phone": phone,
    })

    logger.info("login_verified", sarathi_id=user["sarathi_id"])
    return {
        "jwt": token,
        "sarathiId": user["sarathi_id"],
        "profile": {
            "phoneE164": phone,
            "preferredLang": user["preferred_lang"],
        },
    }
