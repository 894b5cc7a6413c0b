# app/main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# ---------------------------------------------
# LOAD ENVIRONMENT VARIABLES
# ---------------------------------------------
load_dotenv()

from app.config import settings
from app.errors import AppError
from app.logging_config import get_logger
from app.middleware import request_id_middleware

# ---------------------------------------------
# IMPORT ROUTERS
# ---------------------------------------------
from app.routers import auth

logger = get_logger(__name__)

# ---------------------------------------------
# APP INIT
# ---------------------------------------------
app = FastAPI(
    title="Sarathi Backend API",
    version=settings.APP_VERSION,
)

# ---------------------------------------------
# CORS
# ---------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request tracing
app.middleware("http")(request_id_middleware)


# ---------------------------------------------
# ERRORS
# ---------------------------------------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("app_error", code=exc.code, message=exc.message)
    else:
        logger.info("app_error", code=exc.code, message=exc.message, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ---------------------------------------------
# ROUTERS
# ---------------------------------------------

# Auth
app.include_router(auth.router, prefix="/v1/auth", tags=["Auth"])


# ---------------------------------------------
# ROOT ENDPOINTS
# ---------------------------------------------
@app.get("/")
def root():
    return {"message": "Sarathi Backend is running"}


@app.get("/health")
def health():
    return {"ok": True, "version": settings.APP_VERSION}
