from __future__ import annotations

import json
import math
from typing import Any, Optional, Tuple

import requests

from scout_desk.core.config import get_settings


class StoreNotConfigured(RuntimeError):
    """Raised when a write is attempted without a remote store configured."""


class StoreReadError(RuntimeError):
    """A read that must not be mistaken for "no data" failed."""


def is_configured() -> bool:
    return bool(get_settings().store_url)


def _make_url(path: str) -> str:
    settings = get_settings()
    if not settings.store_url:
        raise StoreNotConfigured("Remote store is not configured (set SCOUT_STORE_URL)")
    cleaned = path.strip("/")
    base = f"{settings.store_url.rstrip('/')}/{cleaned}.json"
    if settings.store_auth_token:
        return f"{base}?auth={settings.store_auth_token}"
    return base


def _sanitize_for_json(value: Any) -> Any:
    """Recursively replace NaN/inf with None so json.dumps rejects nothing."""
    if value is None:
        return None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: _sanitize_for_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_for_json(v) for v in value]
    return value


def fetch(path: str, timeout: Optional[int] = None) -> Tuple[bool, Optional[Any]]:
    """Read a node; returns (ok, data).

    ok is False when unconfigured, unreachable or rejected. A missing node is
    (True, None), so callers can tell "empty" from "failed".
    """
    if not is_configured():
        return False, None
    try:
        res = requests.get(_make_url(path), timeout=timeout or get_settings().store_timeout)
        if res.status_code != 200:
            return False, None
        return True, res.json()
    except (requests.RequestException, ValueError):
        return False, None


def get(path: str, timeout: Optional[int] = None) -> Optional[Any]:
    """Read a node; None when unconfigured, unreachable or missing."""
    ok, data = fetch(path, timeout)
    return data if ok else None


def put(path: str, data: Any, timeout: Optional[int] = None) -> Tuple[bool, int, str]:
    """Replace the node at path; returns (ok, status, detail)."""
    url = _make_url(path)
    try:
        payload = json.dumps(_sanitize_for_json(data), allow_nan=False)
        res = requests.put(
            url,
            data=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout or get_settings().store_timeout,
        )
        return (200 <= res.status_code < 300, res.status_code, res.text)
    except ValueError as exc:  # JSON encoding issues
        return False, 0, f"JSON encoding error: {exc}"
    except requests.RequestException as exc:
        return False, 0, str(exc)


def delete(path: str, timeout: Optional[int] = None) -> Tuple[bool, int, str]:
    """Delete data at path; returns (ok, status, detail)."""
    url = _make_url(path)
    try:
        res = requests.delete(url, timeout=timeout or get_settings().store_timeout)
        return (200 <= res.status_code < 300, res.status_code, res.text)
    except requests.RequestException as exc:
        return False, 0, str(exc)
