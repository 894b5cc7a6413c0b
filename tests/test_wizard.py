import httpx
import pytest

from app.client.api import ApiClient, ApiError
from app.client.session import AuthSession
from app.client.wizard import AuthWizard
from app.config import settings
from app.services.auth_service import USER_STORE
from app.services.otp_service import OTP_STORE

PHONE = "+919876543210"
PASSWORD = "correct-horse"


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, value):
        self.calls.append(value)


@pytest.fixture
def wizard(client):
    session = AuthSession()
    return AuthWizard(
        ApiClient(client=client),
        session,
        navigate=Recorder(),
        on_language_change=Recorder(),
    )


def fill_register_form(wizard, phone="9876543210", password=PASSWORD, confirm=PASSWORD):
    wizard.set_mode("register")
    wizard.on_phone_change(phone)
    wizard.password = password
    wizard.confirm_password = confirm


def test_starts_on_login_credentials(wizard):
    assert wizard.state == "login:credentials"
    assert wizard.language == "en"
    assert not wizard.session.is_authenticated


def test_mode_switching(wizard):
    wizard.set_mode("register")
    assert wizard.state == "register"
    wizard.set_mode("login")
    assert wizard.state == "login:credentials"
    with pytest.raises(ValueError):
        wizard.set_mode("signup")


def test_phone_field_formatting(wizard):
    wizard.on_phone_change("+")
    assert wizard.phone_e164 == "+"
    wizard.on_phone_change("98765")
    assert wizard.phone_e164 == "+9198765"
    wizard.on_phone_change("0 98765 43210 99")
    assert wizard.phone_e164 == PHONE


def test_phone_blur_normalizes_partial_prefix(wizard):
    wizard.on_phone_change("+9")
    wizard.on_phone_blur()
    assert wizard.phone_e164 == "+91+9"

    wizard.phone_e164 = ""
    wizard.on_phone_blur()
    assert wizard.phone_e164 == ""


def test_phone_feedback(wizard):
    assert wizard.phone_feedback() is None
    wizard.on_phone_change("98765")
    assert wizard.phone_feedback() == "Phone number must have exactly 10 digits after +91. You have 5 digits."
    wizard.on_phone_change("5876543210")
    assert wizard.phone_feedback() == "Phone number must start with 6, 7, 8, or 9 after +91"
    wizard.on_phone_change("9876543210")
    assert wizard.phone_feedback() == "✓ Valid phone number"


def test_otp_field_is_capped(wizard):
    wizard.on_otp_change("12345678")
    assert wizard.otp == "123456"


def test_register_then_back_to_login(wizard):
    wizard.set_language("hi")
    fill_register_form(wizard)

    assert wizard.submit_register() is True
    assert wizard.state == "login:credentials"
    assert wizard.errors["register"] is None
    assert USER_STORE[PHONE]["preferred_lang"] == "hi"


def test_register_password_mismatch_makes_no_request(wizard):
    fill_register_form(wizard, confirm="something-else")

    assert wizard.submit_register() is False
    assert wizard.errors["register"] == "Passwords do not match"
    assert wizard.state == "register"
    assert USER_STORE == {}


def test_register_invalid_phone_makes_no_request(wizard):
    fill_register_form(wizard, phone="5876543210")

    assert wizard.submit_register() is False
    assert wizard.errors["register"] == "Phone number must start with 6, 7, 8, or 9 after +91"
    assert USER_STORE == {}


def test_register_surfaces_server_error(wizard):
    fill_register_form(wizard)
    assert wizard.submit_register()

    fill_register_form(wizard)
    assert wizard.submit_register() is False
    assert wizard.errors["register"] == "Account already exists. Please login."
    assert wizard.state == "register"


def test_full_login_flow(wizard):
    fill_register_form(wizard)
    wizard.set_language("hi")
    wizard.submit_register()
    wizard.set_language("en")

    assert wizard.submit_login_initiate() is True
    assert wizard.state == "login:otp"

    wizard.on_otp_change(OTP_STORE[PHONE]["otp"])
    assert wizard.submit_login_verify() is True

    assert wizard.session.is_authenticated
    assert wizard.session.sarathi_id == USER_STORE[PHONE]["sarathi_id"]
    assert wizard.language == "hi"
    assert wizard.on_language_change.calls[-1] == "hi"
    assert wizard.navigate.calls == ["/home"]


def test_login_bad_password_stays_on_credentials(wizard):
    fill_register_form(wizard)
    wizard.submit_register()
    wizard.password = "not-the-password"

    assert wizard.submit_login_initiate() is False
    assert wizard.state == "login:credentials"
    assert wizard.errors["login_initiate"] == "Invalid phone number or password"


def test_wrong_otp_keeps_otp_step_and_back_works(wizard):
    fill_register_form(wizard)
    wizard.submit_register()
    wizard.submit_login_initiate()

    real = OTP_STORE[PHONE]["otp"]
    wizard.on_otp_change("000000" if real != "000000" else "111111")
    assert wizard.submit_login_verify() is False
    assert wizard.state == "login:otp"
    assert wizard.errors["login_verify"] == "Invalid OTP"
    assert not wizard.session.is_authenticated
    assert wizard.navigate.calls == []

    wizard.back_to_credentials()
    assert wizard.state == "login:credentials"


def test_new_attempt_clears_previous_error(wizard):
    fill_register_form(wizard)
    wizard.submit_register()
    wizard.password = "not-the-password"
    wizard.submit_login_initiate()
    assert wizard.errors["login_initiate"]

    wizard.password = PASSWORD
    assert wizard.submit_login_initiate()
    assert wizard.errors["login_initiate"] is None


def test_network_failure_is_reported():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    api = ApiClient(client=httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(handler)))
    wizard = AuthWizard(api, AuthSession())
    wizard.on_phone_change("9876543210")
    wizard.password = PASSWORD

    assert wizard.submit_login_initiate() is False
    assert wizard.errors["login_initiate"].startswith("Network error")
    assert wizard.pending is None


def test_api_error_without_json_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
    api = ApiClient(client=httpx.Client(base_url="http://api.test", transport=transport))

    with pytest.raises(ApiError) as exc_info:
        api.login_verify(PHONE, "123456")
    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Request failed with status 502"
    assert exc_info.value.code is None


def test_session_logout():
    session = AuthSession()
    session.login("token", "SAR-1")
    assert session.is_authenticated
    session.logout()
    assert not session.is_authenticated
    assert session.sarathi_id is None


def test_ui_locale_outside_supported_languages_is_not_sent(client):
    wizard = AuthWizard(ApiClient(client=client), AuthSession(), language="en-US")
    fill_register_form(wizard)

    assert wizard.submit_register() is True
    assert wizard.errors["register"] is None
    assert USER_STORE[PHONE]["preferred_lang"] == "en"


def test_otp_field_follows_configured_length(wizard, monkeypatch):
    monkeypatch.setattr(settings, "OTP_LENGTH", 4)
    wizard.on_otp_change("123456")
    assert wizard.otp == "1234"


def test_non_json_success_response_is_an_api_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>proxy page</html>"))
    api = ApiClient(client=httpx.Client(base_url="http://api.test", transport=transport))

    with pytest.raises(ApiError) as exc_info:
        api.login_initiate(PHONE, PASSWORD)
    assert exc_info.value.message == "Invalid response from server"
    assert exc_info.value.status_code == 200

    wizard = AuthWizard(api, AuthSession())
    wizard.on_phone_change("9876543210")
    wizard.password = PASSWORD
    assert wizard.submit_login_initiate() is False
    assert wizard.errors["login_initiate"] == "Invalid response from server"
    assert wizard.state == "login:credentials"
