"""In-process hook bus (actions and filters).

An optional runtime component (for example an MCP server plugin loaded into
the same process) announces itself by firing actions or applying filters
under well-known event names. Listeners run in priority order, then in
registration order.

Action listener failures are logged and do not stop later listeners. A
failing filter listener is skipped and the value passes through unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Listener:
    callback: Callable[..., Any]
    priority: int
    seq: int


class HookBus:
    """Registry of action and filter listeners keyed by event name."""

    def __init__(self) -> None:
        self._actions: dict[str, list[_Listener]] = {}
        self._filters: dict[str, list[_Listener]] = {}
        self._seq = 0

    def _add(self, table: dict[str, list[_Listener]], name: str, callback, priority: int) -> None:
        self._seq += 1
        listeners = table.setdefault(name, [])
        listeners.append(_Listener(callback, priority, self._seq))
        listeners.sort(key=lambda l: (l.priority, l.seq))

    def add_action(self, name: str, callback: Callable[..., Any], priority: int = 10) -> None:
        self._add(self._actions, name, callback, priority)

    def add_filter(self, name: str, callback: Callable[[Any], Any], priority: int = 10) -> None:
        self._add(self._filters, name, callback, priority)

    def remove_action(self, name: str, callback: Callable[..., Any]) -> bool:
        return self._remove(self._actions, name, callback)

    def remove_filter(self, name: str, callback: Callable[..., Any]) -> bool:
        return self._remove(self._filters, name, callback)

    @staticmethod
    def _remove(table: dict[str, list[_Listener]], name: str, callback) -> bool:
        listeners = table.get(name, [])
        kept = [l for l in listeners if l.callback != callback]
        if len(kept) == len(listeners):
            return False
        table[name] = kept
        return True

    def has_action(self, name: str) -> bool:
        return bool(self._actions.get(name))

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def do_action(self, name: str, *args: Any) -> None:
        for listener in list(self._actions.get(name, [])):
            try:
                listener.callback(*args)
            except Exception:
                logger.warning("Action listener for '%s' failed", name, exc_info=True)

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        for listener in list(self._filters.get(name, [])):
            try:
                value = listener.callback(value, *args)
            except Exception:
                logger.warning("Filter listener for '%s' failed", name, exc_info=True)
        return value

    def clear(self) -> None:
        self._actions.clear()
        self._filters.clear()


# Singleton
_bus: HookBus | None = None


def get_hook_bus() -> HookBus:
    global _bus
    if _bus is None:
        _bus = HookBus()
    return _bus


def reset_hook_bus() -> None:
    """Reset singleton (for testing)."""
    global _bus
    _bus = None
