"""Pooled ``requests`` sessions for outbound API calls."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from media_sync.core.constants import APP_VERSION

USER_AGENT = f"church-media-sync/{APP_VERSION}"

_sessions: dict[str, requests.Session] = {}


def get_session(name: str, max_retries: int = 0, backoff_factor: float = 0.5) -> requests.Session:
    """
    Get the named session, creating it on first use.

    Args:
        name: Session name (one pool per upstream API)
        max_retries: Transport-level retries for idempotent requests; 0 means
            a failed call fails immediately
        backoff_factor: Delay factor between retries

    Returns:
        Shared requests.Session
    """
    session = _sessions.get(name)
    if session is not None:
        return session

    session = requests.Session()
    adapter = HTTPAdapter(
        max_retries=Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    _sessions[name] = session
    return session


def close_all_sessions() -> None:
    """Close every pooled session (called on shutdown)."""
    for session in _sessions.values():
        session.close()
    _sessions.clear()
