"""Argument normalisation for capability callbacks.

External runtimes hand callbacks their arguments in whatever shape they use
internally (dicts, pydantic models, dataclasses, plain objects). Everything
is reduced to a plain ``dict`` here, before any field is read.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def _to_jsonable(obj: Any) -> Any:
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, Mapping):
        return dict(obj)
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    if hasattr(obj, "__dict__"):
        return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def normalize_arguments(args: Any) -> dict[str, Any]:
    """Return *args* as a plain key/value mapping (``{}`` if it has no such shape)."""
    if args is None:
        return {}
    if isinstance(args, dict):
        return dict(args)
    try:
        decoded = json.loads(json.dumps(args, default=_to_jsonable))
    except (TypeError, ValueError) as e:
        logger.debug("Could not normalise %s arguments: %s", type(args).__name__, e)
        return {}
    return decoded if isinstance(decoded, dict) else {}
