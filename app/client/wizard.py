"""
Headless state for the login / registration screen.

The screen has two modes (login, register) and the login mode has two
steps (credentials, otp). Transitions only happen after a successful
API call:

    login:credentials --initiate ok--> login:otp --verify ok--> navigate("/home")
    register          --register ok--> login:credentials

Rendering is left to whatever front end drives this object; it reads the
field values, `state`, `errors` and `phone_feedback()` and calls the
`on_*` / `submit_*` methods in response to user input.
"""
from typing import Callable, Dict, Optional

from app.client.api import ApiClient, ApiError
from app.client.session import AuthSession
from app.config import settings
from app.logging_config import get_logger
from app.phone import (
    COUNTRY_PREFIX,
    format_phone_input,
    mask_phone,
    normalize_phone_number,
    validate_phone_number,
)

logger = get_logger(__name__)

MODE_LOGIN = "login"
MODE_REGISTER = "register"

STEP_CREDENTIALS = "credentials"
STEP_OTP = "otp"

ACTION_REGISTER = "register"
ACTION_LOGIN_INITIATE = "login_initiate"
ACTION_LOGIN_VERIFY = "login_verify"

HOME_PATH = "/home"
VALID_PHONE_FEEDBACK = "✓ Valid phone number"


class FormError(Exception):
    """Input rejected on the client before any request is made."""


class AuthWizard:
    def __init__(
        self,
        api: ApiClient,
        session: AuthSession,
        navigate: Optional[Callable[[str], None]] = None,
        on_language_change: Optional[Callable[[str], None]] = None,
        language: str = None,
    ):
        self.api = api
        self.session = session
        self.navigate = navigate
        self.on_language_change = on_language_change

        self.mode = MODE_LOGIN
        self.login_step = STEP_CREDENTIALS

        # Form state
        self.phone_e164 = ""
        self.password = ""
        self.confirm_password = ""
        self.otp = ""
        self.language = language or settings.DEFAULT_LANGUAGE

        self.errors: Dict[str, Optional[str]] = {
            ACTION_REGISTER: None,
            ACTION_LOGIN_INITIATE: None,
            ACTION_LOGIN_VERIFY: None,
        }
        self.pending: Optional[str] = None

    @property
    def state(self) -> str:
        if self.mode == MODE_REGISTER:
            return MODE_REGISTER
        return f"{MODE_LOGIN}:{self.login_step}"

    # -------------------------------------------
    # Navigation between modes / steps
    # -------------------------------------------
    def set_mode(self, mode: str):
        if mode not in (MODE_LOGIN, MODE_REGISTER):
            raise ValueError(f"Unknown mode: {mode}")
        self.mode = mode

    def back_to_credentials(self):
        self.login_step = STEP_CREDENTIALS

    def set_language(self, lang: str):
        self.language = lang
        if self.on_language_change:
            self.on_language_change(lang)

    # -------------------------------------------
    # Field handlers
    # -------------------------------------------
    def on_phone_change(self, value: str):
        self.phone_e164 = format_phone_input(value)

    def on_phone_blur(self):
        if self.phone_e164 and not self.phone_e164.startswith(COUNTRY_PREFIX):
            self.phone_e164 = normalize_phone_number(self.phone_e164)

    def on_otp_change(self, value: str):
        self.otp = (value or "")[:settings.OTP_LENGTH]

    def phone_feedback(self) -> Optional[str]:
        """Inline message under the phone field; None while the field is empty."""
        if not self.phone_e164:
            return None
        result = validate_phone_number(self.phone_e164)
        if result.valid:
            return VALID_PHONE_FEEDBACK
        return result.error or "Invalid format"

    # -------------------------------------------
    # Submissions
    # -------------------------------------------
    def _validated_phone(self) -> str:
        result = validate_phone_number(self.phone_e164)
        if not result.valid:
            raise FormError(result.error or "Invalid phone number")
        return result.normalized

    def _preferred_lang(self) -> Optional[str]:
        # UI locales such as "en-US" fall back to the server default
        if self.language in settings.SUPPORTED_LANGUAGES:
            return self.language
        return None

    def _run(self, action: str, call: Callable[[], dict]) -> Optional[dict]:
        self.errors[action] = None
        self.pending = action
        try:
            return call()
        except (FormError, ApiError) as exc:
            self.errors[action] = str(exc)
            logger.info("auth_wizard_action_failed", action=action, error=str(exc))
            return None
        finally:
            self.pending = None

    def submit_register(self) -> bool:
        if self.password != self.confirm_password:
            self.errors[ACTION_REGISTER] = "Passwords do not match"
            return False

        def call():
            phone = self._validated_phone()
            logger.info("auth_wizard_register", phone=mask_phone(phone))
            return self.api.register(phone, self.password, self._preferred_lang())

        if self._run(ACTION_REGISTER, call) is None:
            return False

        self.mode = MODE_LOGIN
        self.login_step = STEP_CREDENTIALS
        return True

    def submit_login_initiate(self) -> bool:
        def call():
            phone = self._validated_phone()
            logger.info("auth_wizard_login_initiate", phone=mask_phone(phone))
            return self.api.login_initiate(phone, self.password)

        if self._run(ACTION_LOGIN_INITIATE, call) is None:
            return False

        self.login_step = STEP_OTP
        return True

    def submit_login_verify(self) -> bool:
        def call():
            return self.api.login_verify(self._validated_phone(), self.otp)

        data = self._run(ACTION_LOGIN_VERIFY, call)
        if data is None:
            return False

        self.session.login(data["jwt"], data["sarathiId"])
        self.set_language(data["profile"]["preferredLang"])
        if self.navigate:
            self.navigate(HOME_PATH)
        return True
