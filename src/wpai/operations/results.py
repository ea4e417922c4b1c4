"""Operation outcomes.

Every handler returns exactly one of :class:`OperationResult` or
:class:`OperationError`; neither is ever raised.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class OperationResult:
    """Successful (or soft-failed) outcome. ``data`` is flattened into the payload."""

    success: bool = True
    message: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        if self.message is not None:
            out["message"] = self.message
        out.update(self.data)
        return out


@dataclass
class OperationError:
    """Structured failure with the HTTP status it maps to."""

    code: str
    message: str
    status: int = 400

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": {"status": self.status}}


Outcome = OperationResult | OperationError


def missing_field(field_name: str, message: str | None = None) -> OperationError:
    return OperationError("missing_field", message or f"{field_name} is required", 400)
