# lifecycle.py
"""Finalizer + initialization-marker protocol around an object lifecycle handler.

Every call to the adapter runs three phases against the object's metadata and
invokes at most one handler method:

  finalize   deletionTimestamp set and our finalizer still present
  initialize live object without our initialized label
  updated    live, already initialized object

Finalize and initialize persist their metadata edit through the object client
and end the call; updated leaves persistence to the handler.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Optional, Protocol

import config
from k8s import ObjectMeta, accessor, contains_string, ensure_finalizer, is_deleted, remove_finalizer

INITIALIZED = "io.cattle.lifecycle.initialized"


class ObjectLifecycle(Protocol):
    def initialize(self, obj: Any) -> None: ...

    def finalize(self, obj: Any) -> None: ...

    def updated(self, obj: Any) -> None: ...


class ObjectClient(Protocol):
    def update(self, name: str, obj: Any) -> str: ...


def initialize_key(name: str) -> str:
    return f"{INITIALIZED}.{name}"


class ObjectLifecycleAdapter:
    def __init__(self, name: str, lifecycle: ObjectLifecycle, object_client: ObjectClient):
        self.name = name
        self.lifecycle = lifecycle
        self.object_client = object_client

    def initialize_key(self) -> str:
        return initialize_key(self.name)

    def sync(self, key: str, obj: Any) -> None:
        if obj is None:
            return

        metadata = accessor(obj)

        if not self._finalize(key, metadata, obj):
            return

        if not self._initialize(key, metadata, obj):
            return

        if config.debug():
            print(f"[lifecycle] {self.name}: updated {key}")
        self.lifecycle.updated(copy.deepcopy(obj))

    def _finalize(self, key: str, metadata: ObjectMeta, obj: Any) -> bool:
        """Returns True when the caller should continue with the next phase."""
        if not is_deleted(metadata):
            return True

        if not contains_string(metadata.get_finalizers(), self.name):
            return False

        obj = copy.deepcopy(obj)
        metadata = accessor(obj)
        remove_finalizer(metadata, self.name)

        if config.debug():
            print(f"[lifecycle] {self.name}: finalize {key}")
        try:
            self.lifecycle.finalize(obj)
        except Exception as e:
            print(f"[lifecycle] {self.name}: finalize {key} failed: {e}")
            raise

        self._update(key, metadata, obj)
        return False

    def _initialize(self, key: str, metadata: ObjectMeta, obj: Any) -> bool:
        """Returns True when the caller should continue with the next phase."""
        initialized = self.initialize_key()

        if (metadata.get_labels() or {}).get(initialized) == "true":
            return True

        obj = copy.deepcopy(obj)
        metadata = accessor(obj)

        if metadata.get_labels() is None:
            metadata.set_labels({})

        ensure_finalizer(metadata, self.name)
        metadata.get_labels()[initialized] = "true"

        if config.debug():
            print(f"[lifecycle] {self.name}: initialize {key}")
        try:
            self.lifecycle.initialize(obj)
        except Exception as e:
            print(f"[lifecycle] {self.name}: initialize {key} failed: {e}")
            raise

        self._update(key, metadata, obj)
        return False

    def _update(self, key: str, metadata: ObjectMeta, obj: Any) -> None:
        try:
            version = self.object_client.update(metadata.get_name(), obj)
        except Exception as e:
            print(f"[lifecycle] {self.name}: update {key} failed: {e}")
            raise
        if config.debug():
            print(f"[lifecycle] {self.name}: stored {key} resourceVersion={version}")


def new_object_lifecycle_adapter(
    name: str,
    lifecycle: ObjectLifecycle,
    object_client: ObjectClient,
) -> Callable[[str, Any], None]:
    return ObjectLifecycleAdapter(name, lifecycle, object_client).sync


def plan_phase(name: str, obj: Optional[Any]) -> str:
    """Report which branch sync() would take for obj, without touching anything.

    noop       object is gone
    skip       deleting, but our finalizer is already off
    finalize / initialize / updated
    """
    if obj is None:
        return "noop"
    metadata = accessor(obj)
    if is_deleted(metadata):
        if contains_string(metadata.get_finalizers(), name):
            return "finalize"
        return "skip"
    if (metadata.get_labels() or {}).get(initialize_key(name)) == "true":
        return "updated"
    return "initialize"
