# app/routers/auth.py

from fastapi import APIRouter, Depends, status

from app.phone import validate_phone_number
from app.schemas_pkg.auth import (
    RegisterRequest,
    LoginInitiateRequest,
    LoginVerifyRequest,
    PhoneCheckQuery,
    RegisterResponse,
    LoginInitiateResponse,
    LoginVerifyResponse,
    PhoneCheckResponse,
)
from app.services.auth_service import register_user, initiate_login, verify_login
from app.validation import validate_body, validate_query

# ⚠ main.py already mounts this with prefix="/v1/auth"
router = APIRouter(tags=["Auth"])


# -------------------------------------------
# Register
# -------------------------------------------
@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
# plain def: bcrypt hashing runs in the threadpool, off the event loop
def register_route(payload: RegisterRequest = Depends(validate_body(RegisterRequest))):
    user = register_user(payload.phoneE164, payload.password, payload.preferredLang)
    return RegisterResponse(
        sarathiId=user["sarathi_id"],
        phoneE164=user["phone"],
        message="Registration successful. Please login.",
    )


# -------------------------------------------
# Login step 1: credentials → OTP
# -------------------------------------------
@router.post("/login/initiate", response_model=LoginInitiateResponse)
def login_initiate_route(payload: LoginInitiateRequest = Depends(validate_body(LoginInitiateRequest))):
    return initiate_login(payload.phoneE164, payload.password)


# -------------------------------------------
# Login step 2: OTP → JWT
# -------------------------------------------
@router.post("/login/verify", response_model=LoginVerifyResponse)
async def login_verify_route(payload: LoginVerifyRequest = Depends(validate_body(LoginVerifyRequest))):
    return verify_login(payload.phoneE164, payload.otp)


# -------------------------------------------
# Phone format check (live form feedback)
# -------------------------------------------
@router.get("/phone/check", response_model=PhoneCheckResponse)
async def phone_check_route(query: PhoneCheckQuery = Depends(validate_query(PhoneCheckQuery))):
    result = validate_phone_number(query.phone)
    return PhoneCheckResponse(
        valid=result.valid,
        normalized=result.normalized,
        error=result.error,
        reason=result.reason,
    )
