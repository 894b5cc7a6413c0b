"""
Request validation dependencies.

validate_body() cleans the incoming JSON (phone normalization, password
trimming), validates it against a pydantic schema and turns the first
failure into a readable 400 before the route handler ever runs.

Usage:
    @router.post("/register")
    async def register(payload: RegisterRequest = Depends(validate_body(RegisterRequest))):
        ...
"""
from typing import Any, Callable, Dict, Type, TypeVar

from fastapi import Request, status
from pydantic import BaseModel, ValidationError

from app.errors import AppError, ErrorCodes
from app.logging_config import get_logger
from app.phone import (
    COUNTRY_PREFIX,
    EXAMPLE_PHONE,
    NATIONAL_NUMBER_LENGTH,
    REASON_DIGIT_COUNT,
    REASON_LEADING_DIGIT,
    invalid_reason,
    mask_phone,
    national_digits,
    normalize_phone_number,
)
from app.schemas_pkg.auth import otp_error_message

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

PHONE_FIELD = "phoneE164"
PASSWORD_FIELD = "password"
OTP_FIELD = "otp"

# pydantic error types that mean "this is not a usable phone string"
_PHONE_FORMAT_ERRORS = {"string_pattern_mismatch", "string_type", "missing"}


def prepare_body(body: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the body with the phone normalized and the password trimmed."""
    prepared = dict(body)

    phone = prepared.get(PHONE_FIELD)
    if phone and isinstance(phone, str):
        prepared[PHONE_FIELD] = normalize_phone_number(phone)
        logger.info(
            "phone_number_normalized",
            before=mask_phone(phone),
            after=mask_phone(prepared[PHONE_FIELD]),
            digits_count=len(national_digits(prepared[PHONE_FIELD])),
        )

    password = prepared.get(PASSWORD_FIELD)
    if password and isinstance(password, str):
        prepared[PASSWORD_FIELD] = password.strip()

    return prepared


def _phone_message(error: Dict[str, Any], body: Dict[str, Any]) -> str:
    if error["type"] not in _PHONE_FORMAT_ERRORS:
        return f"Phone number error: {error['msg']}"

    phone = body.get(PHONE_FIELD)
    if not isinstance(phone, str):
        phone = ""

    reason = invalid_reason(phone)
    if reason == REASON_DIGIT_COUNT:
        return (
            f"Phone number must have exactly {NATIONAL_NUMBER_LENGTH} digits after {COUNTRY_PREFIX}. "
            f"Found {len(national_digits(phone))} digits. Format: {EXAMPLE_PHONE}"
        )
    if reason == REASON_LEADING_DIGIT:
        return f"Phone number must start with 6, 7, 8, or 9 after {COUNTRY_PREFIX}. Format: {EXAMPLE_PHONE}"
    return f'Invalid phone number format. Received: "{phone}". Expected format: {EXAMPLE_PHONE}'


def _password_message(error: Dict[str, Any]) -> str:
    ctx = error.get("ctx") or {}
    if error["type"] == "string_too_short":
        return f"Password must be at least {ctx.get('min_length')} characters long"
    if error["type"] == "string_too_long":
        return f"Password must be at most {ctx.get('max_length')} characters long"
    if error["type"] in ("string_type", "missing"):
        return "Password must be a string"
    return f"Password error: {error['msg']}"


def describe_validation_error(exc: ValidationError, body: Dict[str, Any]) -> str:
    """Human-readable message for the first error in a pydantic ValidationError."""
    errors = exc.errors()
    if not errors:
        return "validation failed"

    first = errors[0]
    loc = first.get("loc") or ()

    if PHONE_FIELD in loc:
        return _phone_message(first, body)
    if PASSWORD_FIELD in loc:
        return _password_message(first)
    if OTP_FIELD in loc:
        return otp_error_message()
    return first.get("msg") or "validation failed"


def _masked_body(body: Dict[str, Any]) -> Dict[str, Any]:
    masked = dict(body)
    password = masked.get(PASSWORD_FIELD)
    if isinstance(password, str):
        masked[PASSWORD_FIELD] = f"[{len(password)} chars]"
    if isinstance(masked.get(PHONE_FIELD), str):
        masked[PHONE_FIELD] = mask_phone(masked[PHONE_FIELD])
    if OTP_FIELD in masked:
        masked[OTP_FIELD] = "[redacted]"
    return masked


def validate_payload(schema: Type[T], body: Dict[str, Any]) -> T:
    """
    Clean and validate a decoded JSON body.

    Raises AppError(INVALID_INPUT, 400) with a message describing the first
    failing field.
    """
    prepared = prepare_body(body)
    try:
        return schema.model_validate(prepared)
    except ValidationError as exc:
        logger.error(
            "validation_error",
            schema=schema.__name__,
            errors=exc.errors(include_url=False, include_input=False),
            body=_masked_body(prepared),
        )
        raise AppError(ErrorCodes.INVALID_INPUT, describe_validation_error(exc, prepared))


def validate_body(schema: Type[T]) -> Callable:
    """
    Dependency factory that validates the JSON request body against `schema`.
    """
    async def body_validator(request: Request) -> T:
        try:
            body = await request.json()
        except ValueError:
            raise AppError(ErrorCodes.INVALID_INPUT, "Request body must be valid JSON")

        if not isinstance(body, dict):
            raise AppError(ErrorCodes.INVALID_INPUT, "Request body must be a JSON object")

        try:
            return validate_payload(schema, body)
        except AppError:
            raise
        except Exception as exc:
            logger.error("validation_unexpected_error", schema=schema.__name__, exc_info=exc)
            raise AppError(
                ErrorCodes.INTERNAL_ERROR,
                "Validation error occurred",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

    return body_validator


def validate_query(schema: Type[T]) -> Callable:
    """
    Dependency factory that validates the query string against `schema`.
    """
    def query_validator(request: Request) -> T:
        try:
            return schema.model_validate(dict(request.query_params))
        except ValidationError as exc:
            logger.warning(
                "query_validation_error",
                schema=schema.__name__,
                errors=exc.errors(include_url=False, include_input=False),
            )
            raise AppError(ErrorCodes.INVALID_INPUT, "Invalid query parameters")

    return query_validator
