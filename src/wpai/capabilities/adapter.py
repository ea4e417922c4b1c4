"""Capability registration adapter.

Exposes every capability to an optional external registry whose interface is
not known in advance. Integration is opportunistic: nothing here raises, and
the rest of the bridge works the same whether or not a registry shows up.

Flow:
1. ``detect_registry_support()`` checks, in order: a flag remembered from an
   earlier registration event, the ``WORDPRESS_MCP_VERSION`` marker,
   well-known registry classes, and listeners on well-known hook names.
2. ``bootstrap()`` subscribes the adapter to those hooks when detection succeeds.
3. ``register_functions(registry)`` probes the registry once, producing an
   ordered list of strategy plans, then tries the plans for each capability
   until one succeeds.
4. ``append_functions(functions)`` serves filter-style registries that pass
   around a collection of definitions instead of exposing a method.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import os
from collections.abc import Callable, Iterable, Mapping, MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from wpai.capabilities.definitions import CapabilityDefinition
from wpai.hooks import HookBus, get_hook_bus

logger = logging.getLogger(__name__)

VERSION_MARKER = "WORDPRESS_MCP_VERSION"

REGISTRY_CLASSES = (
    "wordpress_mcp.Plugin",
    "wordpress_mcp.Server",
    "automattic.wordpress.mcp.Plugin",
    "automattic.wordpress.mcp.Server",
)

DEFINITION_FACTORIES = (
    "wordpress_mcp.types.FunctionDefinition",
    "automattic.wordpress.mcp.types.FunctionDefinition",
    "automattic.mcp.types.FunctionDefinition",
)
_FACTORY_METHODS = ("from_dict", "from_array", "model_validate")

REGISTER_ACTION = "mcp_register_functions"
FUNCTION_FILTERS = ("mcp_register_functions", "wordpress_mcp_functions")

# Arity reported for ``register(*args)``
UNBOUNDED_ARITY = 5


class Strategy(str, Enum):
    """Ways of handing a capability to a registry, in priority order."""

    REGISTER_FUNCTION = "register_function"
    REGISTER = "register"
    ADD = "add"
    INDEX_ASSIGN = "index_assign"
    CALL = "call"


@dataclass(frozen=True)
class StrategyPlan:
    strategy: Strategy
    arity: int = 0  # positional parameters of ``register``; REGISTER only


def resolve_dotted(path: str) -> Any | None:
    """Import ``package.module.Attr`` and return ``Attr``, or None if unavailable."""
    module_path, _, attr = path.rpartition(".")
    if not module_path:
        return None
    try:
        module = importlib.import_module(module_path)
    except Exception:
        return None
    return getattr(module, attr, None)


def positional_arity(method: Callable[..., Any]) -> int | None:
    """Number of positional parameters *method* declares (bound ``self`` excluded)."""
    try:
        sig = inspect.signature(method)
    except (TypeError, ValueError):
        return None
    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return UNBOUNDED_ARITY
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


def probe_strategies(registry: Any) -> list[StrategyPlan]:
    """Reflect on *registry* once and list the strategies it could support."""
    plans: list[StrategyPlan] = []
    if registry is None:
        return plans

    if callable(getattr(registry, "register_function", None)):
        plans.append(StrategyPlan(Strategy.REGISTER_FUNCTION))

    register = getattr(registry, "register", None)
    if callable(register):
        arity = positional_arity(register)
        if arity:
            plans.append(StrategyPlan(Strategy.REGISTER, arity))

    if callable(getattr(registry, "add", None)):
        plans.append(StrategyPlan(Strategy.ADD))

    supports_index = callable(getattr(type(registry), "__setitem__", None))
    if isinstance(registry, MutableMapping) or supports_index:
        plans.append(StrategyPlan(Strategy.INDEX_ASSIGN))

    if callable(registry):
        plans.append(StrategyPlan(Strategy.CALL))

    return plans


def build_definition_object(capability: CapabilityDefinition) -> Any | None:
    """Build a registry-native definition object from the first usable factory class."""
    for path in DEFINITION_FACTORIES:
        cls = resolve_dotted(path)
        if cls is None:
            continue
        for method_name in _FACTORY_METHODS:
            factory = getattr(cls, method_name, None)
            if not callable(factory):
                continue
            try:
                return factory(capability.to_schema())
            except Exception:
                logger.debug("%s.%s rejected %s", path, method_name, capability.name, exc_info=True)
    return None


def _apply(registry: Any, plan: StrategyPlan, capability: CapabilityDefinition) -> bool:
    """Run one strategy. Returns False when the strategy declines; may raise."""
    if plan.strategy is Strategy.REGISTER_FUNCTION:
        registry.register_function(
            capability.name,
            capability.callback,
            capability.parameters,
            capability.description,
            capability.returns,
        )
        return True

    if plan.strategy is Strategy.REGISTER:
        if plan.arity == 1:
            definition_object = build_definition_object(capability)
            if definition_object is None:
                return False
            registry.register(definition_object)
        elif plan.arity == 2:
            registry.register(capability.name, capability.to_dict())
        elif plan.arity == 3:
            registry.register(capability.name, capability.callback, capability.parameters)
        else:
            arguments = [
                capability.name,
                capability.callback,
                capability.parameters,
                capability.description,
            ]
            if plan.arity >= 5:
                arguments.append(capability.returns)
            registry.register(*arguments)
        return True

    if plan.strategy is Strategy.ADD:
        registry.add(capability.name, capability.to_dict())
        return True

    if plan.strategy is Strategy.INDEX_ASSIGN:
        registry[capability.name] = capability.to_dict()
        return True

    if plan.strategy is Strategy.CALL:
        registry(capability.to_dict())
        return True

    return False


def _existing_names(functions: Iterable[Any]) -> set[str]:
    names = set()
    for item in functions:
        if isinstance(item, Mapping):
            name = item.get("name")
        else:
            name = getattr(item, "name", None)
        if isinstance(name, str):
            names.add(name)
    return names


class CapabilityAdapter:
    """Registers capabilities with whatever registry the runtime offers.

    Usage::

        adapter = CapabilityAdapter(build_capabilities(ops, runner))
        adapter.bootstrap()               # at process start
        adapter.register_functions(reg)   # or driven by the hook bus
    """

    def __init__(
        self,
        capabilities: Iterable[CapabilityDefinition],
        hooks: HookBus | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.capabilities = tuple(capabilities)
        self.hooks = hooks or get_hook_bus()
        self._environ = environ if environ is not None else os.environ
        self.detected = False
        self._subscribed = False

    # =========================================================================
    # Detection
    # =========================================================================

    def detect_registry_support(self) -> bool:
        """Return True if an external registry appears to be present."""
        if self.detected:
            return True
        if self._environ.get(VERSION_MARKER):
            return True
        if any(resolve_dotted(path) is not None for path in REGISTRY_CLASSES):
            return True
        names = (REGISTER_ACTION, *FUNCTION_FILTERS)
        return any(self.hooks.has_action(n) or self.hooks.has_filter(n) for n in names)

    def bootstrap(self) -> bool:
        """Subscribe to the registry hooks if a registry was detected."""
        if not self.detect_registry_support():
            logger.debug("No capability registry detected; skipping integration")
            return False
        self.detected = True
        if not self._subscribed:
            self.hooks.add_action(REGISTER_ACTION, self.register_functions)
            for name in FUNCTION_FILTERS:
                self.hooks.add_filter(name, self.append_functions)
            self._subscribed = True
            logger.info(
                "Capability registry detected; %d capabilities offered", len(self.capabilities)
            )
        return True

    def unsubscribe(self) -> None:
        """Remove the listeners ``bootstrap()`` added. Safe to call more than once."""
        if not self._subscribed:
            return
        self.hooks.remove_action(REGISTER_ACTION, self.register_functions)
        for name in FUNCTION_FILTERS:
            self.hooks.remove_filter(name, self.append_functions)
        self._subscribed = False

    # =========================================================================
    # Imperative registration
    # =========================================================================

    def register_functions(self, registry: Any) -> list[str]:
        """Register every capability with *registry*. Returns the names registered."""
        self.detected = True
        plans = probe_strategies(registry)
        registered = []
        for capability in self.capabilities:
            strategy = self.register_capability(registry, capability, plans)
            if strategy is not None:
                registered.append(capability.name)
        logger.info(
            "Registered %d/%d capabilities with %s",
            len(registered),
            len(self.capabilities),
            type(registry).__name__,
        )
        return registered

    def register_capability(
        self,
        registry: Any,
        capability: CapabilityDefinition,
        plans: list[StrategyPlan] | None = None,
    ) -> Strategy | None:
        """Try each plan in order; return the strategy that worked, or None."""
        if plans is None:
            plans = probe_strategies(registry)
        for plan in plans:
            try:
                if _apply(registry, plan, capability):
                    return plan.strategy
            except Exception as e:
                logger.debug(
                    "Strategy %s failed for %s: %s", plan.strategy.value, capability.name, e
                )
        logger.debug("No registration strategy accepted %s", capability.name)
        return None

    # =========================================================================
    # Filter-style registration
    # =========================================================================

    def append_functions(self, functions: Any) -> Any:
        """Add capabilities missing from *functions*, keeping its shape.

        Lists get definition mappings appended; mappings get entries keyed by
        capability name. Any other value is returned untouched.
        """
        self.detected = True

        if isinstance(functions, list):
            existing = _existing_names(functions)
            augmented = list(functions)
            for capability in self.capabilities:
                if capability.name not in existing:
                    augmented.append(capability.to_dict())
            return augmented

        if isinstance(functions, dict):
            augmented_map = dict(functions)
            for capability in self.capabilities:
                if capability.name not in augmented_map:
                    augmented_map[capability.name] = capability.to_dict()
            return augmented_map

        return functions
