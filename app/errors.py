"""
Application error type and the error codes returned to API clients.
"""
from fastapi import HTTPException, status


class ErrorCodes:
    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    PHONE_ALREADY_REGISTERED = "PHONE_ALREADY_REGISTERED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    OTP_NOT_FOUND = "OTP_NOT_FOUND"
    OTP_EXPIRED = "OTP_EXPIRED"
    INVALID_OTP = "INVALID_OTP"
    TOO_MANY_ATTEMPTS = "TOO_MANY_ATTEMPTS"


class AppError(HTTPException):
    """HTTPException carrying a machine-readable error code."""

    def __init__(self, code: str, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": {"code": self.code, "message": self.message},
            "detail": self.message,
        }


class PhoneAlreadyRegistered(AppError):
    def __init__(self):
        super().__init__(
            ErrorCodes.PHONE_ALREADY_REGISTERED,
            "Account already exists. Please login.",
            status.HTTP_409_CONFLICT,
        )


class InvalidCredentials(AppError):
    def __init__(self):
        super().__init__(
            ErrorCodes.INVALID_CREDENTIALS,
            "Invalid phone number or password",
            status.HTTP_401_UNAUTHORIZED,
        )


class OTPNotFound(AppError):
    def __init__(self):
        super().__init__(ErrorCodes.OTP_NOT_FOUND, "OTP not found. Please request a new one.")


class OTPExpired(AppError):
    def __init__(self):
        super().__init__(ErrorCodes.OTP_EXPIRED, "OTP expired")


class InvalidOTP(AppError):
    def __init__(self):
        super().__init__(ErrorCodes.INVALID_OTP, "Invalid OTP")


class TooManyAttempts(AppError):
    def __init__(self):
        super().__init__(
            ErrorCodes.TOO_MANY_ATTEMPTS,
            "Too many incorrect attempts. Please request a new OTP.",
            status.HTTP_429_TOO_MANY_REQUESTS,
        )
