import os

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.auth_service import USER_STORE
from app.services.otp_service import OTP_STORE


@pytest.fixture(autouse=True)
def clean_stores():
    USER_STORE.clear()
    OTP_STORE.clear()
    yield
    USER_STORE.clear()
    OTP_STORE.clear()


@pytest.fixture
def client():
    return TestClient(app)
