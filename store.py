# store.py
from __future__ import annotations

from typing import Any

from kubernetes.client.exceptions import ApiException


def is_conflict(e: BaseException) -> bool:
    return isinstance(e, ApiException) and e.status == 409


def is_not_found(e: BaseException) -> bool:
    return isinstance(e, ApiException) and e.status == 404


def _resource_version(stored: Any) -> str:
    if isinstance(stored, dict):
        return str((stored.get("metadata", {}) or {}).get("resourceVersion", ""))
    meta = getattr(stored, "metadata", None)
    return str(getattr(meta, "resource_version", "") or "")


class NamespaceClient:
    """Update-by-name for cluster-scoped Namespace objects."""

    def __init__(self, corev1):
        self.api = corev1

    def update(self, name: str, obj: Any) -> str:
        stored = self.api.replace_namespace(name, obj)
        return _resource_version(stored)

