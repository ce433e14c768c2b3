# freight_core/common/spectacular_hooks.py
from __future__ import annotations

VERSIONED_PREFIX = "/api/v1/"


def preprocess_exclude_legacy_api(endpoints):
    """
    Every route is reachable as /api/v1/... and through the /api/... alias
    kept for older freight desk clients. The schema documents the versioned
    paths only; /api/schema/ and /api/docs/ are not API routes either.
    """
    return [
        (path, path_regex, method, callback)
        for path, path_regex, method, callback in endpoints
        if path.startswith(VERSIONED_PREFIX) or not path.startswith("/api/")
    ]
