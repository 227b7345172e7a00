# backend.py: HTTP plumbing for the managed backend (auth + REST tables)

import logging

import requests

from .errors import FetchError

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth/v1"
REST_PATH = "/rest/v1"


def error_message(resp) -> str:
    """Best human-readable message from an error response."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("message", "msg", "error_description", "error"):
            if data.get(key):
                return str(data[key])
    text = (resp.text or "").strip()
    return text[:500] or f"Backend error {resp.status_code}"


class BackendClient:
    """Thin wrapper over a ``requests.Session`` bound to one backend.

    Every call sends the public API key; calls made on behalf of a user
    also carry their bearer token.
    """

    def __init__(self, settings, http=None):
        self.settings = settings
        self.http = http or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.settings.backend_url}{path}"

    def headers(self, token=None, extra=None):
        h = {
            "apikey": self.settings.backend_key,
            "Authorization": f"Bearer {token or self.settings.backend_key}",
            "Content-Type": "application/json",
        }
        if extra:
            h.update(extra)
        return h

    def request(self, method, path, token=None, error_cls=FetchError, headers=None, **kwargs):
        url = self.url(path)
        try:
            resp = self.http.request(
                method, url, headers=self.headers(token, headers),
                timeout=self.settings.http_timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning("Backend %s %s failed: %s", method, path, e)
            raise error_cls(f"Network error: {e}") from e
        if not resp.ok:
            msg = error_message(resp)
            logger.warning("Backend %s %s -> %s: %s", method, path, resp.status_code, msg)
            raise error_cls(msg, status=resp.status_code)
        return resp

    def auth(self, method, endpoint, **kwargs):
        return self.request(method, AUTH_PATH + endpoint, **kwargs)

    def table(self, method, name, **kwargs):
        return self.request(method, f"{REST_PATH}/{name}", **kwargs)
