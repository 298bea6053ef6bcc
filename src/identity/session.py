"""Buyer / vendor / admin session kept in key-value storage.

The session is four loose keys (``token``, ``userId``, ``userRole``,
``userName``) plus the ``lang`` preference. The cart is stored separately and
is not tied to the signed-in user: signing out or switching accounts leaves
it in place.
"""

from enum import Enum

import structlog
from protean.exceptions import ValidationError

from shared.api import ApiError, MarketplaceClient
from shared.storage import KeyValueStorage
from shared.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

TOKEN_KEY = "token"
USER_ID_KEY = "userId"
USER_ROLE_KEY = "userRole"
USER_NAME_KEY = "userName"
LANGUAGE_KEY = "lang"

SESSION_KEYS = (TOKEN_KEY, USER_ID_KEY, USER_ROLE_KEY, USER_NAME_KEY)
SUPPORTED_LANGUAGES = ("en", "fr")
DEFAULT_LANGUAGE = "en"


class Role(Enum):
    BUYER = "Buyer"
    VENDOR = "Vendor"
    ADMIN = "Admin"


class Session:
    def __init__(self, storage: KeyValueStorage, client: MarketplaceClient | None = None) -> None:
        self.storage = storage
        self.client = client

    # -------------------------------------------------------------------
    # Stored fields
    # -------------------------------------------------------------------
    @property
    def token(self) -> str | None:
        return self.storage.get_item(TOKEN_KEY)

    @property
    def user_id(self) -> str | None:
        return self.storage.get_item(USER_ID_KEY)

    @property
    def user_name(self) -> str | None:
        return self.storage.get_item(USER_NAME_KEY)

    @property
    def role(self) -> Role | None:
        value = self.storage.get_item(USER_ROLE_KEY)
        try:
            return Role(value) if value else None
        except ValueError:
            return None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def language(self) -> str:
        return self.storage.get_item(LANGUAGE_KEY) or DEFAULT_LANGUAGE

    @language.setter
    def language(self, code: str) -> None:
        if code not in SUPPORTED_LANGUAGES:
            raise ValidationError({"lang": [f"Unsupported language {code!r}"]})
        self.storage.set_item(LANGUAGE_KEY, code)

    # -------------------------------------------------------------------
    # Backend calls
    # -------------------------------------------------------------------
    def _require_client(self) -> MarketplaceClient:
        if self.client is None:
            raise RuntimeError("Session has no API client")
        return self.client

    def login(self, phone: str, password: str, role: Role = Role.BUYER) -> None:
        """Sign in and store the session fields returned by the backend."""
        client = self._require_client()
        body = client.post(
            "/api/users/login",
            json={"phone": phone, "password": password, "role": role.value},
            full_body=True,
        )
        user = body.get("data") or {}
        token = body.get("token") or user.get("token")
        if not token:
            raise ApiError("Login response did not include a token", payload=body)

        self.storage.set_item(TOKEN_KEY, token)
        self.storage.set_item(USER_ID_KEY, str(user.get("id", "")))
        self.storage.set_item(USER_ROLE_KEY, str(user.get("role") or role.value))
        self.storage.set_item(USER_NAME_KEY, str(user.get("full_name") or user.get("name") or ""))
        add_context(user_id=user.get("id"))
        logger.info("Signed in", user_id=user.get("id"), role=user.get("role") or role.value)

    def register(
        self,
        full_name: str,
        phone: str,
        password: str,
        confirm_password: str,
        email: str | None = None,
        role: Role = Role.BUYER,
    ) -> dict:
        """Create an account. Mismatched passwords are refused before sending."""
        errors = {}
        if not full_name.strip():
            errors["full_name"] = ["Full name is required"]
        if not phone.strip():
            errors["phone"] = ["Phone number is required"]
        if not password:
            errors["password"] = ["Password is required"]
        elif password != confirm_password:
            errors["confirm_password"] = ["Passwords do not match"]
        if errors:
            raise ValidationError(errors)

        payload = {"full_name": full_name.strip(), "phone": phone.strip(), "password": password, "role": role.value}
        if email:
            payload["email"] = email
        return self._require_client().post("/api/users", json=payload)

    def logout(self) -> None:
        for key in SESSION_KEYS:
            self.storage.remove_item(key)
        logger.info("Signed out")
        clear_context()
