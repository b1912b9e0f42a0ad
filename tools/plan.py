#!/usr/bin/env python3
"""Plan-only runner: prints which lifecycle phase the controller would run next.

Usage:
  NAMESPACE=trirematics python3 tools/plan.py
  PLAN_OUTPUT=yaml NAMESPACE=trirematics python3 tools/plan.py

Notes:
- Uses your local kubeconfig (same behavior as app.py).
- Does not call any handler and does not update any object.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import yaml
from kubernetes import client

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import config  # noqa: E402
from app import load_kube, read_namespace  # noqa: E402
from cleanup import CiliumClient, NetworkCleanupLifecycle  # noqa: E402
from k8s import accessor  # noqa: E402
from lifecycle import initialize_key, plan_phase  # noqa: E402


def build_plan(name: str, namespace: str, ns_obj: Optional[Any], cleanup: NetworkCleanupLifecycle) -> dict:
    phase = plan_phase(name, ns_obj)
    plan = {
        "lifecycle": name,
        "namespace": namespace,
        "phase": phase,
    }
    if ns_obj is not None:
        meta = accessor(ns_obj)
        plan["finalizers"] = meta.get_finalizers()
        plan["initialized"] = (meta.get_labels() or {}).get(initialize_key(name)) == "true"
    if phase == "finalize":
        plan["delete"] = cleanup.owned_policies(namespace)
    return plan


def print_plan(plan: dict, output: str = "text") -> None:
    if output == "yaml":
        print(yaml.safe_dump(plan, sort_keys=False).rstrip())
        return
    print(f"[plan] lifecycle={plan['lifecycle']} namespace={plan['namespace']} phase={plan['phase']}")
    if "finalizers" in plan:
        print(f"[plan] finalizers: {', '.join(plan['finalizers']) or '-'}")
    for name in plan.get("delete", []):
        print(f"  - {name}")


def main() -> None:
    load_kube()

    corev1 = client.CoreV1Api()
    cleanup = NetworkCleanupLifecycle(CiliumClient(client.CustomObjectsApi()))

    namespace = config.namespace()
    ns_obj = read_namespace(corev1, namespace)
    plan = build_plan(config.lifecycle_name(), namespace, ns_obj, cleanup)
    print_plan(plan, config.plan_output())


if __name__ == "__main__":
    main()
