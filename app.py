# app.py
from __future__ import annotations

import time
from typing import Any, Callable, Optional

from kubernetes import client, config as kube_config

import config
from cleanup import CiliumClient, NetworkCleanupLifecycle
from store import NamespaceClient, is_conflict, is_not_found
from lifecycle import new_object_lifecycle_adapter


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────
def load_kube() -> None:
    try:
        kube_config.load_incluster_config()
        print("[controller] using in-cluster config")
    except Exception:
        kube_config.load_kube_config()
        print("[controller] using kubeconfig (local)")


def read_namespace(corev1, namespace: str) -> Optional[Any]:
    try:
        return corev1.read_namespace(namespace)
    except client.ApiException as e:
        if e.status == 404:
            return None
        raise


def run_once(sync: Callable[[str, Any], None], corev1, namespace: str) -> bool:
    """
    One reconcile pass for the namespace. Returns False once the namespace is
    gone; errors are logged and left for the next pass to retry.
    """
    try:
        ns_obj = read_namespace(corev1, namespace)
        sync(namespace, ns_obj)
    except client.ApiException as e:
        if is_not_found(e):
            # the 404 may come from the handler; only a fresh read proves the namespace is gone
            try:
                gone = read_namespace(corev1, namespace) is None
            except Exception as re_err:
                print(f"[controller] re-read after 404 failed: {re_err}")
                return True
            if gone:
                print(f"[controller] namespace {namespace} already gone")
                return False
            print(f"[controller] not found while reconciling {namespace}: {e.reason}; retrying")
            return True
        if is_conflict(e):
            print(f"[controller] namespace {namespace} changed underneath us; retrying")
            return True
        print(f"[controller] api error: {e.status} {e.reason}")
        return True
    except Exception as e:
        print(f"[controller] reconcile error: {e}")
        return True
    return ns_obj is not None


# ─────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────
def main() -> None:
    load_kube()

    namespace = config.namespace()
    name = config.lifecycle_name()
    loop_seconds = config.loop_seconds()

    corev1 = client.CoreV1Api()
    cilium = CiliumClient(client.CustomObjectsApi())

    sync = new_object_lifecycle_adapter(
        name,
        NetworkCleanupLifecycle(cilium),
        NamespaceClient(corev1),
    )
    print(f"[controller] lifecycle={name} namespace={namespace}")

    present = True
    try:
        while True:
            alive = run_once(sync, corev1, namespace)
            if alive != present:
                print(f"[controller] namespace {namespace} {'present' if alive else 'absent'}")
                present = alive
            time.sleep(loop_seconds)

    except KeyboardInterrupt:
        print("[controller] shutting down")


if __name__ == "__main__":
    main()
