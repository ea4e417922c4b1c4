"""Capability definitions exposed to an external automation registry.

The table below is static: one capability per operation handler, each with a
JSON-schema parameter and return declaration. Definitions are built once per
app and live for the life of the process.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wpai.capabilities.normalize import normalize_arguments
from wpai.operations.results import OperationError

if TYPE_CHECKING:
    from wpai.blueprint import BlueprintRunner
    from wpai.operations.handlers import SiteOperations


@dataclass(frozen=True)
class CapabilityDefinition:
    """A named, independently invocable operation."""

    name: str
    description: str
    parameters: dict[str, Any]  # JSON Schema
    returns: dict[str, Any]
    callback: Callable[..., Any]

    def to_dict(self) -> dict[str, Any]:
        """Full definition mapping, including the callback.

        Schemas are copied so a registry cannot alter the shared table.
        """
        return {
            "name": self.name,
            "description": self.description,
            "parameters": copy.deepcopy(self.parameters),
            "returns": copy.deepcopy(self.returns),
            "callback": self.callback,
        }

    def to_schema(self) -> dict[str, Any]:
        """Definition without the callback, for definition-object factories."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": copy.deepcopy(self.parameters),
            "returns": copy.deepcopy(self.returns),
        }


_NO_PARAMS = {"type": "object", "properties": {}, "additionalProperties": False}


def _returns(description: str, type_: str = "object", **extra: Any) -> dict[str, Any]:
    return {"type": type_, "description": description, **extra}


# (name, description, parameters, returns, target)
# target is a SiteOperations method name, or "blueprint" for the runner.
_CAPABILITY_TABLE: tuple[tuple[str, str, dict[str, Any], dict[str, Any], str], ...] = (
    (
        "wpai.site_info",
        "Retrieve site information: settings, theme and installed plugins.",
        _NO_PARAMS,
        _returns("Details about the site configuration."),
        "site_info",
    ),
    (
        "wpai.basic_setup",
        "Configure core settings such as permalinks, timezone, and site title.",
        {
            "type": "object",
            "properties": {
                "permalink": {"type": "string"},
                "timezone": {"type": "string"},
                "title": {"type": "string"},
                "description": {"type": "string"},
                "blogname": {"type": "string"},
                "blogdescription": {"type": "string"},
            },
        },
        _returns("Result of the setup operation."),
        "basic_setup",
    ),
    (
        "wpai.create_categories",
        "Bulk create categories.",
        {
            "type": "object",
            "properties": {
                "categories": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"name": {"type": "string"}, "slug": {"type": "string"}},
                        "required": ["name"],
                    },
                },
            },
        },
        _returns("Status of category creation."),
        "create_categories",
    ),
    (
        "wpai.create_page",
        "Create or update a page.",
        {
            "type": "object",
            "properties": {
                "title": {"type": "string"},
                "slug": {"type": "string"},
                "content": {"type": "string"},
                "status": {"type": "string"},
            },
            "required": ["title"],
        },
        _returns("Result of the page operation."),
        "create_or_update_page",
    ),
    (
        "wpai.create_menu",
        "Create or update a navigation menu.",
        {
            "type": "object",
            "properties": {
                "location": {"type": "string"},
                "name": {"type": "string"},
                "items": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"title": {"type": "string"}, "url": {"type": "string"}},
                        "required": ["title", "url"],
                    },
                },
            },
            "required": ["name"],
        },
        _returns("Result of the menu operation."),
        "create_or_update_menu",
    ),
    (
        "wpai.set_homepage",
        "Set the static homepage to a specific page.",
        {
            "type": "object",
            "properties": {"page_id": {"type": "integer"}, "slug": {"type": "string"}},
        },
        _returns("Result of the homepage assignment."),
        "set_homepage",
    ),
    (
        "wpai.rankmath_setup",
        "Configure Rank Math SEO defaults when the plugin is active.",
        _NO_PARAMS,
        _returns("Result of the Rank Math configuration."),
        "seo_setup",
    ),
    (
        "wpai.set_option",
        "Update a site option with a provided value.",
        {
            "type": "object",
            "properties": {"option_name": {"type": "string"}, "option_value": {}},
            "required": ["option_name"],
        },
        _returns("Result of the option update."),
        "set_option",
    ),
    (
        "wpai.get_plugins",
        "List installed plugins with their activation state.",
        _NO_PARAMS,
        _returns("Array of plugins with metadata.", "array", items={"type": "object"}),
        "list_extensions",
    ),
    (
        "wpai.install_plugin",
        "Install and activate a plugin from the plugin directory.",
        {
            "type": "object",
            "properties": {"slug": {"type": "string"}},
            "required": ["slug"],
        },
        _returns("Result of the plugin installation."),
        "install_extension",
    ),
    (
        "wpai.run_blueprint",
        "Execute a full site blueprint covering basics, categories, pages, menus, "
        "and plugin setup.",
        {
            "type": "object",
            "properties": {
                "basic": {"type": "object"},
                "categories": {"type": "array"},
                "pages": {"type": "array"},
                "menus": {"type": "array"},
                "homepage": {"type": "object"},
                "plugins_to_configure": {"type": "array"},
            },
        },
        _returns("Report of actions performed while running the blueprint."),
        "blueprint",
    ),
)


def _handler_callback(handler: Callable[..., Any], name: str) -> Callable[..., Any]:
    def callback(args: Any = None) -> Any:
        outcome = handler(normalize_arguments(args))
        if isinstance(outcome, OperationError):
            return outcome.to_dict()
        if name == "wpai.get_plugins" and outcome.success:
            return outcome.data["plugins"]
        return outcome.to_dict()

    callback.__name__ = name.replace(".", "_")
    return callback


def _blueprint_callback(runner: BlueprintRunner) -> Callable[..., Any]:
    def callback(args: Any = None) -> Any:
        return runner.run(normalize_arguments(args))

    callback.__name__ = "wpai_run_blueprint"
    return callback


def build_capabilities(
    operations: SiteOperations, runner: BlueprintRunner
) -> tuple[CapabilityDefinition, ...]:
    """Bind the static table to handler instances."""
    capabilities = []
    for name, description, parameters, returns, target in _CAPABILITY_TABLE:
        if target == "blueprint":
            callback = _blueprint_callback(runner)
        else:
            callback = _handler_callback(getattr(operations, target), name)
        capabilities.append(
            CapabilityDefinition(
                name=name,
                description=description,
                parameters=parameters,
                returns=returns,
                callback=callback,
            )
        )
    return tuple(capabilities)


CAPABILITY_NAMES: tuple[str, ...] = tuple(row[0] for row in _CAPABILITY_TABLE)
