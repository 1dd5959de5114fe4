import types

import pytest

from scaffold.deploy.registry import DeployDescriptor, DescriptorRegistry, descriptor_modules_from_env, load_registry
from scaffold.errors import ConfigurationError


def test_register_and_get():
    registry = DescriptorRegistry()
    registry.register("main", init_data=lambda: b"", init_message=lambda: None)
    assert "main" in registry
    assert len(registry) == 1
    assert list(registry) == ["main"]
    assert registry.get("main").post_deploy_test is None


def test_duplicate_name():
    registry = DescriptorRegistry()
    registry.register("main", init_data=lambda: b"", init_message=lambda: None)
    with pytest.raises(ConfigurationError, match="already registered"):
        registry.register("main", init_data=lambda: b"", init_message=lambda: None)


def test_missing_init_message():
    with pytest.raises(ConfigurationError, match="init_message"):
        DeployDescriptor(init_data=lambda: b"", init_message=None)


def test_register_module_requires_functions():
    module = types.ModuleType("broken")
    module.init_data = lambda: b""
    registry = DescriptorRegistry()
    with pytest.raises(ConfigurationError, match="'broken' does not have 'init_message\\(\\)' function"):
        registry.register_module("broken", module)


def test_register_module_picks_up_optional_hook():
    module = types.ModuleType("ok")
    module.init_data = lambda: b""
    module.init_message = lambda: None
    module.post_deploy_test = lambda *args: None
    registry = DescriptorRegistry()
    assert registry.register_module("ok", module).post_deploy_test is module.post_deploy_test


def test_get_unknown():
    with pytest.raises(ConfigurationError):
        DescriptorRegistry().get("nope")


def test_load_default_registry():
    registry = load_registry()
    assert list(registry) == ["main"]


def test_load_registry_empty_list():
    assert len(load_registry([])) == 0


def test_modules_from_env(monkeypatch):
    monkeypatch.setenv("DEPLOY_DESCRIPTORS", "a.b, c ,")
    assert descriptor_modules_from_env() == ["a.b", "c"]


def test_load_registry_unknown_module():
    with pytest.raises(ConfigurationError, match="could not be imported"):
        load_registry(["scaffold.no_such_module"])


def test_load_registry_module_without_hook():
    with pytest.raises(ConfigurationError, match="register"):
        load_registry(["scaffold.errors"])
