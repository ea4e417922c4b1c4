"""Blueprint runner: one request that sets up a whole site.

Sections run in a fixed order (basic, categories, pages, menus, homepage,
extension configs). Each present section calls the matching handler
in-process and appends one report line, whatever the handler returned.
Nothing is rolled back; a failing section never stops the ones after it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from wpai.operations.handlers import SiteOperations
from wpai.operations.results import OperationError

logger = logging.getLogger(__name__)


class BlueprintRunner:
    """Sequences SiteOperations handlers for a blueprint payload."""

    def __init__(self, operations: SiteOperations):
        self.ops = operations
        # identifier -> (handler, report line)
        self._extension_configs: dict[str, tuple[Callable[..., Any], str]] = {
            "rank-math": (operations.seo_setup, "Rank Math configured."),
        }

    def run(self, spec: Any) -> dict[str, Any]:
        """Execute *spec* and return ``{"success": True, "report": [...]}``.

        A section whose value has the wrong shape is skipped without a report
        line; the other sections still run.
        """
        params = dict(spec) if isinstance(spec, Mapping) else {}
        report: list[str] = []

        basic = _section(params, "basic", Mapping)
        if basic:
            self._call("basic", self.ops.basic_setup, basic)
            report.append("Basic setup run.")

        categories = _section(params, "categories", (list, Mapping))
        if categories:
            self._call(
                "categories", self.ops.create_categories, {"categories": _as_list(categories)}
            )
            report.append("Categories created.")

        pages = _section(params, "pages", (list, Mapping))
        if pages:
            for page in _as_list(pages):
                self._call("pages", self.ops.create_or_update_page, page)
            report.append("Pages created/updated.")

        menus = _section(params, "menus", (list, Mapping))
        if menus:
            for menu in _as_list(menus):
                self._call("menus", self.ops.create_or_update_menu, menu)
            report.append("Menus created/updated.")

        homepage = _section(params, "homepage", Mapping)
        if homepage:
            self._call("homepage", self.ops.set_homepage, homepage)
            report.append("Homepage set.")

        configs = _section(params, "plugins_to_configure", list)
        if configs:
            for identifier in configs:
                if not isinstance(identifier, str):
                    continue
                entry = self._extension_configs.get(identifier)
                if entry is None:
                    continue
                handler, line = entry
                self._call(identifier, handler)
                report.append(line)

        return {"success": True, "report": report}

    def _call(self, section: str, handler: Callable[..., Any], *args: Any) -> None:
        """Run one sub-operation; log failures and keep going."""
        try:
            outcome = handler(*args)
        except Exception:
            logger.exception("Blueprint section '%s' raised", section)
            return
        if isinstance(outcome, OperationError):
            logger.info("Blueprint section '%s': %s (%s)", section, outcome.message, outcome.code)


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else [value]


def _section(params: Mapping[str, Any], name: str, shape: type | tuple[type, ...]) -> Any:
    """Return the section value, or None when it is absent or has the wrong shape."""
    value = params.get(name)
    if value is None:
        return None
    if not isinstance(value, shape):
        logger.info("Blueprint section '%s' skipped: unexpected %s", name, type(value).__name__)
        return None
    return value
