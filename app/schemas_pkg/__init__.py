# app/schemas_pkg/__init__.py

# Auth schemas
from .auth import (
    RegisterRequest,
    LoginInitiateRequest,
    LoginVerifyRequest,
    PhoneCheckQuery,
    RegisterResponse,
    LoginInitiateResponse,
    LoginVerifyResponse,
    ProfileResponse,
    PhoneCheckResponse,
)

__all__ = [
    # Requests
    "RegisterRequest",
    "LoginInitiateRequest",
    "LoginVerifyRequest",
    "PhoneCheckQuery",

    # Responses
    "RegisterResponse",
    "LoginInitiateResponse",
    "LoginVerifyResponse",
    "ProfileResponse",
    "PhoneCheckResponse",
]
