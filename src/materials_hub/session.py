# session.py: single-account login and the session context
#
# SessionGateway talks to the identity service. SessionContext is the
# per-shell holder of the token pair: established on login, verified on
# every protected load, torn down on logout.

import logging
from dataclasses import dataclass

from .backend import BackendClient
from .errors import BackendError, FetchError, InvalidCredentials, InvalidUsername, SessionExpired

logger = logging.getLogger(__name__)

# Statuses meaning the identity service rejected the token itself.
# Anything else (network, 5xx) is an outage and leaves the session alone.
REJECTED = (400, 401, 403)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    user_id: str | None = None

    @classmethod
    def from_response(cls, data):
        user = data.get("user") or {}
        return cls(data["access_token"], data.get("refresh_token") or "", user.get("id"))

    def to_dict(self):
        return {"access_token": self.access_token, "refresh_token": self.refresh_token}


class SessionGateway:
    def __init__(self, settings, http=None):
        self.settings = settings
        self.backend = BackendClient(settings, http)

    def login(self, username, password) -> TokenPair:
        """Exchange username/password for a token pair.

        Raises ConfigurationError when settings are incomplete,
        InvalidUsername when the name does not match the configured
        account (checked before any network call) and InvalidCredentials
        for every identity-service failure.
        """
        self.settings.require()
        if str(username or "").lower() != self.settings.login_username:
            logger.warning("Login rejected: unknown username")
            raise InvalidUsername("Invalid username.")
        try:
            resp = self.backend.auth(
                "POST", "/token", params={"grant_type": "password"},
                json={"email": self.settings.login_email, "password": password or ""},
                error_cls=InvalidCredentials,
            )
            tokens = TokenPair.from_response(resp.json())
        except InvalidCredentials as e:
            logger.warning("Login rejected by identity service (%s)", e.details.get("status"))
            raise
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Login response had no session")
            raise InvalidCredentials("Invalid credentials.") from e
        logger.info("Login succeeded for user %s", tokens.user_id)
        return tokens

    def _session_call(self, method, endpoint, **kwargs):
        """Auth call whose rejections mean SessionExpired.

        Network errors and 5xx answers stay FetchError so a passing
        outage does not log anyone out.
        """
        try:
            return self.backend.auth(method, endpoint, error_cls=FetchError, **kwargs)
        except FetchError as e:
            if e.status in REJECTED:
                raise SessionExpired(e.message, status=e.status) from e
            raise

    def refresh(self, refresh_token) -> TokenPair:
        if not refresh_token:
            raise SessionExpired("No refresh token.")
        resp = self._session_call(
            "POST", "/token", params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        try:
            return TokenPair.from_response(resp.json())
        except (ValueError, KeyError, TypeError) as e:
            raise SessionExpired("Refresh response had no session.") from e

    def current_user(self, access_token) -> dict:
        if not access_token:
            raise SessionExpired("No access token.")
        resp = self._session_call("GET", "/user", token=access_token)
        try:
            user = resp.json()
        except ValueError as e:
            raise SessionExpired("Unreadable user response.") from e
        if not isinstance(user, dict) or not user.get("id"):
            raise SessionExpired("Session has no user.")
        return user

    def logout(self, access_token) -> None:
        if not access_token:
            return
        try:
            self.backend.auth("POST", "/logout", token=access_token, error_cls=BackendError)
        except BackendError as e:
            # local teardown happens regardless
            logger.info("Remote logout failed: %s", e)


class SessionContext:
    """Token pair + account id kept in a dict-like ``storage``.

    In the web shell ``storage`` is the Flask session; the CLI passes a
    plain dict.
    """

    KEYS = ("access_token", "refresh_token", "user_id")

    def __init__(self, gateway: SessionGateway, storage):
        self.gateway = gateway
        self.storage = storage

    @property
    def access_token(self):
        return self.storage.get("access_token")

    @property
    def refresh_token(self):
        return self.storage.get("refresh_token")

    @property
    def user_id(self):
        return self.storage.get("user_id")

    @property
    def present(self) -> bool:
        return bool(self.access_token)

    def establish(self, tokens: TokenPair) -> None:
        self.storage["access_token"] = tokens.access_token
        self.storage["refresh_token"] = tokens.refresh_token
        if tokens.user_id:
            self.storage["user_id"] = tokens.user_id

    def login(self, username, password) -> TokenPair:
        tokens = self.gateway.login(username, password)
        self.establish(tokens)
        return tokens

    def verify(self) -> str:
        """Confirm the session is still live and return the account id.

        An expired access token gets one refresh attempt. If that fails
        too the context is cleared and SessionExpired propagates. A
        FetchError (identity service unreachable) propagates with the
        stored tokens untouched.
        """
        if not self.present:
            raise SessionExpired("Not logged in.")
        try:
            user = self.gateway.current_user(self.access_token)
        except SessionExpired:
            try:
                tokens = self.gateway.refresh(self.refresh_token)
                self.establish(tokens)
                user = self.gateway.current_user(tokens.access_token)
            except SessionExpired:
                logger.info("Session expired; clearing")
                self.clear()
                raise
        self.storage["user_id"] = user["id"]
        return user["id"]

    def clear(self) -> None:
        for key in self.KEYS:
            self.storage.pop(key, None)

    def teardown(self) -> None:
        self.gateway.logout(self.access_token)
        self.clear()
