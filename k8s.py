# k8s.py
from __future__ import annotations

from typing import Any, Dict, List, Optional


class MetadataError(ValueError):
    """Raised when an object carries no usable Kubernetes metadata."""


def contains_string(items: Optional[List[str]], s: str) -> bool:
    return s in (items or [])


def remove_string(items: Optional[List[str]], s: str) -> List[str]:
    return [i for i in items or [] if i != s]


class ObjectMeta:
    """Uniform view over the generic metadata of a Kubernetes object.

    Works on both representations the controller sees:
      - plain dicts (CustomObjectsApi results, ``.to_dict()`` output), where
        the deletion marker is ``deletionTimestamp`` or ``deletion_timestamp``
      - kubernetes.client models with a ``.metadata`` attribute (V1ObjectMeta)
    """

    def __init__(self, meta: Any, is_dict: bool):
        self._meta = meta
        self._is_dict = is_dict

    def _get(self, key: str, snake: Optional[str] = None):
        if self._is_dict:
            if key in self._meta:
                return self._meta.get(key)
            return self._meta.get(snake) if snake else None
        return getattr(self._meta, snake or key, None)

    def _set(self, key: str, value) -> None:
        if self._is_dict:
            self._meta[key] = value
        else:
            setattr(self._meta, key, value)

    def get_name(self) -> str:
        return self._get("name") or ""

    def get_deletion_timestamp(self):
        return self._get("deletionTimestamp", "deletion_timestamp")

    def get_finalizers(self) -> List[str]:
        fins = self._get("finalizers")
        if fins is None:
            return []
        if not isinstance(fins, (list, tuple)):
            raise MetadataError(f"finalizers must be a list, got {type(fins).__name__}")
        return list(fins)

    def set_finalizers(self, finalizers: List[str]) -> None:
        self._set("finalizers", list(finalizers))

    def get_labels(self) -> Optional[Dict[str, str]]:
        labels = self._get("labels")
        if labels is not None and not isinstance(labels, dict):
            raise MetadataError(f"labels must be a mapping, got {type(labels).__name__}")
        return labels

    def set_labels(self, labels: Dict[str, str]) -> None:
        self._set("labels", labels)


def accessor(obj: Any) -> ObjectMeta:
    if isinstance(obj, dict):
        meta = obj.get("metadata")
        if not isinstance(meta, dict):
            raise MetadataError("object has no metadata")
        return ObjectMeta(meta, is_dict=True)

    meta = getattr(obj, "metadata", None)
    if meta is None or isinstance(meta, (str, bytes, int, float, list)):
        raise MetadataError(f"object of type {type(obj).__name__} has no metadata")
    if isinstance(meta, dict):
        return ObjectMeta(meta, is_dict=True)
    return ObjectMeta(meta, is_dict=False)


def is_deleted(meta: ObjectMeta) -> bool:
    return meta.get_deletion_timestamp() is not None


def ensure_finalizer(meta: ObjectMeta, finalizer: str) -> bool:
    """Append finalizer if missing. Returns True when the metadata changed."""
    fins = meta.get_finalizers()
    if finalizer in fins:
        return False
    fins.append(finalizer)
    meta.set_finalizers(fins)
    return True


def remove_finalizer(meta: ObjectMeta, finalizer: str) -> bool:
    """Drop every occurrence of finalizer. Returns True when the metadata changed."""
    fins = meta.get_finalizers()
    if finalizer not in fins:
        return False
    meta.set_finalizers(remove_string(fins, finalizer))
    return True
