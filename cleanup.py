# cleanup.py
from __future__ import annotations

from typing import Any, List

import config
from store import is_not_found
from k8s import accessor


def owned_by_controller(pol: dict) -> bool:
    labels = (pol.get("metadata", {}) or {}).get("labels", {}) or {}
    return (
        labels.get("trirematics.io/managed") == "true"
        and labels.get("trirematics.io/managed-by") == "controller"
    )


# ─────────────────────────────────────────────
# Cilium API wrapper
# ─────────────────────────────────────────────
class CiliumClient:
    def __init__(self, api):
        self.api = api

    def list_cnp(self, namespace: str) -> list[dict]:
        res = self.api.list_namespaced_custom_object(
            group="cilium.io",
            version="v2",
            namespace=namespace,
            plural="ciliumnetworkpolicies",
        )
        return res.get("items", [])

    def delete_cnp(self, namespace: str, name: str) -> None:
        try:
            self.api.delete_namespaced_custom_object(
                group="cilium.io",
                version="v2",
                namespace=namespace,
                plural="ciliumnetworkpolicies",
                name=name,
            )
        except Exception as e:
            # already gone: a previous finalize attempt got this far
            if not is_not_found(e):
                raise


class NetworkCleanupLifecycle:
    """
    Lifecycle handler for the guarded namespace.

    Deleting the namespace would leave our CiliumNetworkPolicies to the
    namespace controller; finalize removes the controller-owned ones first so
    nothing else in the cluster keeps matching on their selectors meanwhile.
    """

    def __init__(self, cilium: CiliumClient):
        self.cilium = cilium

    def owned_policies(self, namespace: str) -> List[str]:
        names = [
            (p.get("metadata", {}) or {}).get("name", "")
            for p in self.cilium.list_cnp(namespace)
            if owned_by_controller(p)
        ]
        return sorted(n for n in names if n)

    def initialize(self, obj: Any) -> None:
        print(f"[cleanup] guarding namespace {accessor(obj).get_name()}")

    def finalize(self, obj: Any) -> None:
        ns = accessor(obj).get_name()
        names = self.owned_policies(ns)
        print(f"[cleanup] namespace {ns} deleting: removing {len(names)} policies")
        for name in names:
            self.cilium.delete_cnp(ns, name)

    def updated(self, obj: Any) -> None:
        if config.debug():
            print(f"[cleanup] namespace {accessor(obj).get_name()} unchanged")
