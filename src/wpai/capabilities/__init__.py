"""Capabilities: the operation handlers as named, registrable functions."""

from wpai.capabilities.adapter import (
    CapabilityAdapter,
    Strategy,
    StrategyPlan,
    probe_strategies,
)
from wpai.capabilities.definitions import (
    CAPABILITY_NAMES,
    CapabilityDefinition,
    build_capabilities,
)
from wpai.capabilities.normalize import normalize_arguments

__all__ = [
    "CAPABILITY_NAMES",
    "CapabilityAdapter",
    "CapabilityDefinition",
    "Strategy",
    "StrategyPlan",
    "build_capabilities",
    "normalize_arguments",
    "probe_strategies",
]
