"""Identity sources: who receives the analysis result.

Two interchangeable strategies decide the recipient address:

* ``ManualEmailIdentity`` trusts whatever the user typed, as long as it looks
  like an email address.
* ``AuthenticatedIdentity`` ignores the typed text and uses the email of the
  principal currently signed in through an ``IdentityProvider``.
"""

import logging
from collections.abc import Callable
from typing import Protocol

import jwt

from docsubmit.auth import decode_identity_token
from docsubmit.config import Settings, get_settings
from docsubmit.exceptions import IdentityError
from docsubmit.models.enums import IdentityMode
from docsubmit.schemas.principal import Principal
from docsubmit.validation import is_valid_email

logger = logging.getLogger(__name__)

PrincipalListener = Callable[[Principal | None], None]


class IdentityProvider(Protocol):
    def current_principal(self) -> Principal | None: ...

    def subscribe(self, listener: PrincipalListener) -> Callable[[], None]: ...


class StaticIdentityProvider:
    """In-memory provider; sign_in/sign_out notify subscribers."""

    def __init__(self, principal: Principal | None = None):
        self._principal = principal
        self._listeners: list[PrincipalListener] = []

    def current_principal(self) -> Principal | None:
        return self._principal

    def subscribe(self, listener: PrincipalListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def sign_in(self, principal: Principal) -> None:
        self._principal = principal
        logger.info("Principal signed in: %s", principal.email)
        self._notify()

    def sign_out(self) -> None:
        if self._principal is not None:
            logger.info("Principal signed out: %s", self._principal.email)
        self._principal = None
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._principal)


class TokenIdentityProvider(StaticIdentityProvider):
    """Provider that signs principals in from JWT identity tokens."""

    def __init__(self, settings: Settings | None = None):
        super().__init__()
        self._settings = settings or get_settings()

    def sign_in_with_token(self, token: str) -> Principal:
        try:
            payload = decode_identity_token(token, self._settings)
        except jwt.ExpiredSignatureError as exc:
            raise IdentityError("Token expired") from exc
        except jwt.PyJWTError as exc:
            raise IdentityError("Invalid token") from exc

        email = payload.get("email") or ""
        if payload.get("type") != "identity" or not email:
            raise IdentityError("Token carries no identity email")

        principal = Principal(id=str(payload.get("sub") or email), email=email)
        self.sign_in(principal)
        return principal


class IdentityStrategy(Protocol):
    def resolve(self, contact_text: str) -> str | Principal | None:
        """Return what ``can_submit`` should check as the identity."""
        ...


class ManualEmailIdentity:
    def resolve(self, contact_text: str) -> str | Principal | None:
        return contact_text


class AuthenticatedIdentity:
    def __init__(self, provider: IdentityProvider):
        self.provider = provider

    def resolve(self, contact_text: str) -> str | Principal | None:
        return self.provider.current_principal()


def recipient_email(identity: str | Principal | None) -> str | None:
    """The address results go to, or None when the identity is unusable."""
    if isinstance(identity, Principal):
        return identity.email or None
    if identity is not None and is_valid_email(identity):
        return identity.strip()
    return None


def build_identity_strategy(
    settings: Settings | None = None,
    provider: IdentityProvider | None = None,
) -> IdentityStrategy:
    settings = settings or get_settings()
    mode = IdentityMode(settings.identity_mode)
    if mode == IdentityMode.authenticated:
        if provider is None:
            raise IdentityError("identity_mode=authenticated requires an identity provider")
        return AuthenticatedIdentity(provider)
    return ManualEmailIdentity()
