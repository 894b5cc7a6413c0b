import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from app.config import settings
from app.phone import PHONE_PATTERN

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

_OTP_DIGITS_RE = re.compile(r"[0-9]+")


def otp_error_message() -> str:
    return f"OTP must be exactly {settings.OTP_LENGTH} digits"


class RegisterRequest(BaseModel):
    phoneE164: str = Field(pattern=PHONE_PATTERN)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    preferredLang: Optional[str] = None

    @field_validator("preferredLang")
    @classmethod
    def check_supported_language(cls, v):
        # read at call time so SUPPORTED_LANGUAGES overrides apply
        if v is not None and v not in settings.SUPPORTED_LANGUAGES:
            raise PydanticCustomError(
                "unsupported_language",
                "Unsupported language '{lang}'. Expected one of: {supported}",
                {"lang": v, "supported": ", ".join(settings.SUPPORTED_LANGUAGES)},
            )
        return v


class LoginInitiateRequest(BaseModel):
    phoneE164: str = Field(pattern=PHONE_PATTERN)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class LoginVerifyRequest(BaseModel):
    phoneE164: str = Field(pattern=PHONE_PATTERN)
    otp: str

    @field_validator("otp")
    @classmethod
    def check_otp_shape(cls, v):
        if len(v) != settings.OTP_LENGTH or not _OTP_DIGITS_RE.fullmatch(v):
            raise PydanticCustomError("otp_format", otp_error_message())
        return v


class PhoneCheckQuery(BaseModel):
    phone: str = Field(min_length=1, max_length=32)


class RegisterResponse(BaseModel):
    sarathiId: str
    phoneE164: str
    message: str


class LoginInitiateResponse(BaseModel):
    message: str
    phoneE164: str
    expiresIn: int


class ProfileResponse(BaseModel):
    phoneE164: str
    preferredLang: str


class LoginVerifyResponse(BaseModel):
    jwt: str
    sarathiId: str
    profile: ProfileResponse


class PhoneCheckResponse(BaseModel):
    valid: bool
    normalized: str
    error: Optional[str] = None
    reason: Optional[str] = None
