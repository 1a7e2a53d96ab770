#!/usr/bin/env python3
"""Deployment checks for the partner portal API.

Checks liveness, readiness and that protected routes reject anonymous calls.
"""

from __future__ import annotations

import json
import os
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

USER_AGENT = "partner-portal-healthcheck/1.0"


def fail(message: str) -> None:
    print(f"ERROR: {message}")
    raise SystemExit(1)


def normalize_base_url(base_url: str) -> str:
    url = (base_url or "").strip().rstrip("/")
    for suffix in ("/api/v1", "/api"):
        if url.endswith(suffix):
            return url[: -len(suffix)]
    return url


def fetch(url: str, timeout: int) -> tuple[int, dict[str, Any]]:
    request = Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urlopen(request, timeout=timeout) as response:
            status_code, body = response.getcode(), response.read()
    except HTTPError as exc:
        status_code, body = exc.code, exc.read()
    try:
        data = json.loads(body.decode("utf-8", "replace") or "{}")
    except json.JSONDecodeError:
        data = {}
    return status_code, data if isinstance(data, dict) else {}


def expect(url: str, status_code: int, field: str | None, value: str | None, *, timeout: int, retries: int, delay: float) -> None:
    last_error = None
    for attempt in range(retries + 1):
        try:
            actual_code, data = fetch(url, timeout)
            if actual_code != status_code:
                raise RuntimeError(f"{url} returned HTTP {actual_code}, expected {status_code}")
            if field and data.get(field) != value:
                raise RuntimeError(f"{url} {field}={data.get(field)!r}, expected {value!r}")
            print(f"OK: {url} -> HTTP {actual_code}")
            return
        except (URLError, TimeoutError, RuntimeError) as exc:
            last_error = str(exc)
        if attempt < retries:
            wait = delay * (attempt + 1)
            print(f"WARN: {last_error} (retry {attempt + 1}/{retries} in {wait:.1f}s)")
            time.sleep(wait)
    fail(last_error or f"{url} failed")


def main() -> None:
    base_url = normalize_base_url(os.getenv("PORTAL_BASE_URL", ""))
    if not base_url:
        fail("Missing PORTAL_BASE_URL environment variable.")

    timeout = int(os.getenv("HEALTHCHECK_TIMEOUT_SECONDS", "25"))
    retries = int(os.getenv("HEALTHCHECK_RETRIES", "4"))
    delay = float(os.getenv("HEALTHCHECK_RETRY_DELAY_SECONDS", "4"))
    print(f"Healthcheck config: base_url={base_url} timeout={timeout}s retries={retries}")

    options = {"timeout": timeout, "retries": retries, "delay": delay}
    expect(f"{base_url}/healthz", 200, "status", "ok", **options)
    expect(f"{base_url}/readyz", 200, "status", "ready", **options)
    expect(f"{base_url}/api/v1/auth/me", 401, "detail", "Not authenticated", **options)
    print("SUCCESS: all health checks passed.")


if __name__ == "__main__":
    main()
