# config.py
from __future__ import annotations

import os
from typing import Literal

PlanOutput = Literal["text", "yaml"]


def namespace() -> str:
    return os.environ.get("NAMESPACE", "trirematics")


def loop_seconds() -> int:
    return int(os.environ.get("LOOP_SECONDS", "5"))


def lifecycle_name() -> str:
    """
    Adapter identity. Used verbatim as the finalizer token and as the suffix of
    the io.cattle.lifecycle.initialized.<name> label, so keep it a valid label
    name segment (no '/').
    """
    return os.environ.get("LIFECYCLE_NAME", "network-cleanup")


def debug() -> bool:
    return os.environ.get("LIFECYCLE_DEBUG", "0") == "1"


def plan_output() -> PlanOutput:
    out = os.environ.get("PLAN_OUTPUT", "text").lower()
    return "yaml" if out == "yaml" else "text"
