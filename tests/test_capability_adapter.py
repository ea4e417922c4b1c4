# Tests for capability definitions and the registry adapter.
# Created: 2026-10-13
# Registries are small hand-written classes: MagicMock answers every attribute
# lookup, which would make every strategy look supported.

import dataclasses
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pydantic import BaseModel

from wpai.blueprint import BlueprintRunner
from wpai.capabilities import (
    CAPABILITY_NAMES,
    CapabilityAdapter,
    Strategy,
    StrategyPlan,
    build_capabilities,
    normalize_arguments,
    probe_strategies,
)
from wpai.capabilities.adapter import (
    FUNCTION_FILTERS,
    REGISTER_ACTION,
    VERSION_MARKER,
    positional_arity,
)
from wpai.hooks import HookBus
from wpai.operations import SiteOperations
from wpai.store import FileContentStore, FileSettingsStore

# ============================================================================
# Fake registries
# ============================================================================


class TwoArgRegistry:
    def __init__(self):
        self.calls = []

    def register(self, name, definition):
        self.calls.append((name, definition))


class FunctionRegistry:
    def __init__(self):
        self.calls = []

    def register_function(self, name, callback, parameters, description, returns):
        self.calls.append(name)


class BrokenFunctionRegistry:
    """register_function always fails; add works."""

    def __init__(self):
        self.added = {}

    def register_function(self, *args):
        raise TypeError("unsupported")

    def add(self, name, definition):
        self.added[name] = definition


class VariadicRegistry:
    def __init__(self):
        self.calls = []

    def register(self, *args):
        self.calls.append(args)


class ObjectRegistry:
    def __init__(self):
        self.objects = []

    def register(self, definition):
        self.objects.append(definition)


class FakeFunctionDefinition:
    def __init__(self, data):
        self.data = data

    @classmethod
    def from_dict(cls, data):
        return cls(data)


class NothingRegistry:
    pass


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def operations(tmp_path):
    settings = FileSettingsStore(tmp_path)
    content = FileContentStore(tmp_path, settings, directory=MagicMock())
    return SiteOperations(settings, content)


@pytest.fixture
def capabilities(operations):
    return build_capabilities(operations, BlueprintRunner(operations))


@pytest.fixture
def hooks():
    return HookBus()


@pytest.fixture
def adapter(capabilities, hooks):
    return CapabilityAdapter(capabilities, hooks=hooks, environ={})


# ============================================================================
# Definitions
# ============================================================================


class TestDefinitions:
    def test_all_names_present(self, capabilities):
        assert [c.name for c in capabilities] == list(CAPABILITY_NAMES)
        assert len(CAPABILITY_NAMES) == 11
        assert "wpai.run_blueprint" in CAPABILITY_NAMES

    def test_to_dict_copies_schemas(self, capabilities):
        cap = capabilities[1]
        d = cap.to_dict()
        d["parameters"]["properties"]["injected"] = {}
        assert "injected" not in cap.parameters["properties"]
        assert d["callback"] is cap.callback
        assert "callback" not in cap.to_schema()

    def test_callback_runs_handler(self, capabilities, operations):
        by_name = {c.name: c for c in capabilities}
        result = by_name["wpai.create_page"].callback({"title": "Home"})
        assert result["success"] is True
        assert operations.content.get_page_by_slug("home").id == result["page_id"]

    def test_callback_returns_error_mapping(self, capabilities):
        by_name = {c.name: c for c in capabilities}
        result = by_name["wpai.create_page"].callback({})
        assert result == {
            "code": "missing_field",
            "message": "title is required",
            "data": {"status": 400},
        }

    def test_get_plugins_returns_list(self, capabilities):
        by_name = {c.name: c for c in capabilities}
        assert by_name["wpai.get_plugins"].callback() == []

    def test_blueprint_callback(self, capabilities):
        by_name = {c.name: c for c in capabilities}
        result = by_name["wpai.run_blueprint"].callback({"pages": [{"title": "Home"}]})
        assert result == {"success": True, "report": ["Pages created/updated."]}

    def test_callback_accepts_model_arguments(self, capabilities, operations):
        class PageArgs(BaseModel):
            title: str

        by_name = {c.name: c for c in capabilities}
        by_name["wpai.create_page"].callback(PageArgs(title="From Model"))
        assert operations.content.get_page_by_slug("from-model") is not None


class TestNormalizeArguments:
    def test_none_and_dict(self):
        assert normalize_arguments(None) == {}
        original = {"a": 1}
        normalized = normalize_arguments(original)
        assert normalized == {"a": 1}
        assert normalized is not original

    def test_dataclass(self):
        @dataclasses.dataclass
        class Args:
            slug: str

        assert normalize_arguments(Args("hello")) == {"slug": "hello"}

    def test_plain_object(self):
        class Args:
            def __init__(self):
                self.name = "Main"
                self._private = "hidden"

        assert normalize_arguments(Args()) == {"name": "Main"}

    def test_model_with_datetime_and_path_fields(self):
        class Args(BaseModel):
            title: str
            scheduled: datetime
            source: Path

        args = Args(title="Home", scheduled=datetime(2026, 10, 1, 9, 30), source=Path("/tmp/x"))
        assert normalize_arguments(args) == {
            "title": "Home",
            "scheduled": "2026-10-01T09:30:00",
            "source": "/tmp/x",
        }

    def test_non_mapping_shapes(self):
        assert normalize_arguments(["a", "b"]) == {}
        assert normalize_arguments("text") == {}
        assert normalize_arguments(object()) == {}


# ============================================================================
# Strategy probing
# ============================================================================


class TestProbe:
    def test_arity(self):
        assert positional_arity(TwoArgRegistry().register) == 2
        assert positional_arity(VariadicRegistry().register) == 5
        assert positional_arity(ObjectRegistry().register) == 1

    def test_two_arg_registry(self):
        assert probe_strategies(TwoArgRegistry()) == [StrategyPlan(Strategy.REGISTER, 2)]

    def test_dict_registry(self):
        assert probe_strategies({}) == [StrategyPlan(Strategy.INDEX_ASSIGN)]

    def test_callable_registry(self):
        assert probe_strategies(lambda definition: None) == [StrategyPlan(Strategy.CALL)]

    def test_nothing_supported(self):
        assert probe_strategies(NothingRegistry()) == []
        assert probe_strategies(None) == []

    def test_priority_order(self):
        plans = probe_strategies(BrokenFunctionRegistry())
        assert [p.strategy for p in plans] == [Strategy.REGISTER_FUNCTION, Strategy.ADD]


# ============================================================================
# Imperative registration
# ============================================================================


class TestRegisterFunctions:
    def test_two_arg_registry_gets_every_capability_once(self, adapter):
        registry = TwoArgRegistry()
        names = adapter.register_functions(registry)
        assert names == list(CAPABILITY_NAMES)
        assert [name for name, _ in registry.calls] == list(CAPABILITY_NAMES)
        name, definition = registry.calls[0]
        assert definition["name"] == name
        assert callable(definition["callback"])

    def test_register_function_strategy(self, adapter):
        registry = FunctionRegistry()
        adapter.register_functions(registry)
        assert registry.calls == list(CAPABILITY_NAMES)

    def test_falls_through_to_next_strategy(self, adapter, capabilities):
        registry = BrokenFunctionRegistry()
        assert adapter.register_capability(registry, capabilities[0]) is Strategy.ADD
        assert capabilities[0].name in registry.added

    def test_variadic_register_gets_returns_schema(self, adapter, capabilities):
        registry = VariadicRegistry()
        adapter.register_capability(registry, capabilities[0])
        name, callback, parameters, description, returns = registry.calls[0]
        assert name == capabilities[0].name
        assert returns == capabilities[0].returns

    def test_dict_registry(self, adapter):
        registry = {}
        adapter.register_functions(registry)
        assert sorted(registry) == sorted(CAPABILITY_NAMES)

    def test_callable_registry(self, adapter):
        received = []
        adapter.register_functions(received.append)
        assert [d["name"] for d in received] == list(CAPABILITY_NAMES)

    def test_single_arg_register_without_factory_declines(self, adapter, capabilities):
        registry = ObjectRegistry()
        assert adapter.register_capability(registry, capabilities[0]) is None
        assert registry.objects == []

    def test_single_arg_register_with_factory(self, adapter, capabilities):
        registry = ObjectRegistry()
        with patch(
            "wpai.capabilities.adapter.resolve_dotted", return_value=FakeFunctionDefinition
        ):
            strategy = adapter.register_capability(registry, capabilities[0])
        assert strategy is Strategy.REGISTER
        assert registry.objects[0].data["name"] == capabilities[0].name
        assert "callback" not in registry.objects[0].data

    def test_unsupported_registry_never_raises(self, adapter):
        assert adapter.register_functions(NothingRegistry()) == []


# ============================================================================
# Filter-style registration
# ============================================================================


class TestAppendFunctions:
    def test_list_without_duplicates(self, adapter):
        existing = [{"name": "wpai.site_info", "description": "already there"}]
        result = adapter.append_functions(existing)
        names = [f["name"] for f in result]
        assert names.count("wpai.site_info") == 1
        assert len(result) == len(CAPABILITY_NAMES)
        assert result[0] is existing[0]
        assert existing == [{"name": "wpai.site_info", "description": "already there"}]

    def test_list_of_objects(self, adapter):
        class Fn:
            name = "wpai.get_plugins"

        result = adapter.append_functions([Fn()])
        names = [f.name if isinstance(f, Fn) else f["name"] for f in result]
        assert names.count("wpai.get_plugins") == 1
        assert len(names) == len(CAPABILITY_NAMES)

    def test_mapping_with_existing_capability(self, adapter):
        existing = {"wpai.site_info": {"name": "wpai.site_info", "description": "theirs"}}
        result = adapter.append_functions(existing)
        assert result["wpai.site_info"] == {"name": "wpai.site_info", "description": "theirs"}
        assert sorted(result) == sorted(CAPABILITY_NAMES)
        assert len(existing) == 1

    def test_mapping(self, adapter):
        result = adapter.append_functions({"other.tool": {"name": "other.tool"}})
        assert "other.tool" in result
        assert set(CAPABILITY_NAMES) <= set(result)

    def test_other_shapes_untouched(self, adapter):
        assert adapter.append_functions(None) is None
        assert adapter.append_functions("x") == "x"


# ============================================================================
# Detection and hook wiring
# ============================================================================


class TestDetection:
    def test_nothing_detected(self, adapter, hooks):
        assert adapter.detect_registry_support() is False
        assert adapter.bootstrap() is False
        assert not hooks.has_action(REGISTER_ACTION)

    def test_version_marker(self, capabilities, hooks):
        adapter = CapabilityAdapter(capabilities, hooks=hooks, environ={VERSION_MARKER: "0.2.0"})
        assert adapter.detect_registry_support() is True

    def test_known_registry_class(self, adapter):
        with patch("wpai.capabilities.adapter.resolve_dotted", return_value=object):
            assert adapter.detect_registry_support() is True

    def test_existing_listener(self, adapter, hooks):
        hooks.add_filter(FUNCTION_FILTERS[1], lambda functions: functions)
        assert adapter.detect_registry_support() is True

    def test_remembered_after_registration_event(self, adapter):
        adapter.register_functions(NothingRegistry())
        assert adapter.detect_registry_support() is True

    def test_bootstrap_subscribes_once(self, capabilities, hooks):
        adapter = CapabilityAdapter(capabilities, hooks=hooks, environ={VERSION_MARKER: "1"})
        assert adapter.bootstrap() is True
        assert adapter.bootstrap() is True
        assert len(hooks._actions[REGISTER_ACTION]) == 1

        registry = TwoArgRegistry()
        hooks.do_action(REGISTER_ACTION, registry)
        assert len(registry.calls) == len(CAPABILITY_NAMES)

        for name in FUNCTION_FILTERS:
            functions = hooks.apply_filters(name, [])
            assert [f["name"] for f in functions] == list(CAPABILITY_NAMES)

    def test_unsubscribe_removes_listeners(self, capabilities, hooks):
        adapter = CapabilityAdapter(capabilities, hooks=hooks, environ={VERSION_MARKER: "1"})
        adapter.bootstrap()
        adapter.unsubscribe()
        assert not hooks.has_action(REGISTER_ACTION)
        assert not any(hooks.has_filter(name) for name in FUNCTION_FILTERS)
        assert hooks.apply_filters(FUNCTION_FILTERS[0], []) == []
        # Second call is a no-op; bootstrap can subscribe again
        adapter.unsubscribe()
        assert adapter.bootstrap() is True
        assert len(hooks._actions[REGISTER_ACTION]) == 1

    def test_unsubscribe_keeps_other_listeners(self, capabilities, hooks):
        other = []
        hooks.add_action(REGISTER_ACTION, other.append)
        adapter = CapabilityAdapter(capabilities, hooks=hooks, environ={VERSION_MARKER: "1"})
        adapter.bootstrap()
        adapter.unsubscribe()
        hooks.do_action(REGISTER_ACTION, "registry")
        assert other == ["registry"]
        assert len(hooks._actions[REGISTER_ACTION]) == 1
