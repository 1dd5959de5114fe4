"""
Deploy descriptor registry.

A descriptor tells the deploy script how to initialise one contract:

- ``init_data()`` -> bytes: ABI-encoded constructor arguments
- ``init_message()`` -> bytes | None: first message for the new contract
- ``post_deploy_test(wallet, client, address, secret_key)`` (optional, may be async)

Descriptor modules are listed explicitly (``DEPLOY_DESCRIPTORS``) and add
themselves through a ``register(registry)`` hook.
"""
from __future__ import annotations

import importlib
import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from types import ModuleType
from typing import Any

from scaffold.errors import ConfigurationError

DEFAULT_DESCRIPTOR_MODULES = ("scaffold.descriptors",)


@dataclass(frozen=True)
class DeployDescriptor:
    init_data: Callable[[], bytes]
    init_message: Callable[[], bytes | None]
    post_deploy_test: Callable[..., Any] | None = None

    def __post_init__(self) -> None:
        for attr in ("init_data", "init_message"):
            if not callable(getattr(self, attr)):
                raise ConfigurationError(f"descriptor does not have '{attr}()' function")
        if self.post_deploy_test is not None and not callable(self.post_deploy_test):
            raise ConfigurationError("'post_deploy_test' must be callable")


class DescriptorRegistry:
    """Ordered mapping of contract name -> DeployDescriptor."""

    def __init__(self) -> None:
        self._descriptors: dict[str, DeployDescriptor] = {}

    def add(self, name: str, descriptor: DeployDescriptor) -> DeployDescriptor:
        if name in self._descriptors:
            raise ConfigurationError(f"A deploy descriptor for '{name}' is already registered")
        self._descriptors[name] = descriptor
        return descriptor

    def register(
        self,
        name: str,
        *,
        init_data: Callable[[], bytes],
        init_message: Callable[[], bytes | None],
        post_deploy_test: Callable[..., Any] | None = None,
    ) -> DeployDescriptor:
        try:
            descriptor = DeployDescriptor(init_data, init_message, post_deploy_test)
        except ConfigurationError as e:
            raise ConfigurationError(f"'{name}': {e}") from e
        return self.add(name, descriptor)

    def register_module(self, name: str, module: ModuleType) -> DeployDescriptor:
        """Register a module exposing init_data / init_message / post_deploy_test."""
        for attr in ("init_data", "init_message"):
            if not callable(getattr(module, attr, None)):
                raise ConfigurationError(f"'{module.__name__}' does not have '{attr}()' function")
        return self.register(
            name,
            init_data=module.init_data,
            init_message=module.init_message,
            post_deploy_test=getattr(module, "post_deploy_test", None),
        )

    def get(self, name: str) -> DeployDescriptor:
        try:
            return self._descriptors[name]
        except KeyError:
            raise ConfigurationError(f"No deploy descriptor registered for '{name}'") from None

    def items(self) -> list[tuple[str, DeployDescriptor]]:
        return list(self._descriptors.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors


def descriptor_modules_from_env() -> list[str]:
    raw = os.getenv("DEPLOY_DESCRIPTORS")
    if not raw:
        return list(DEFAULT_DESCRIPTOR_MODULES)
    return [m.strip() for m in raw.split(",") if m.strip()]


def load_registry(module_names: Iterable[str] | None = None) -> DescriptorRegistry:
    registry = DescriptorRegistry()
    if module_names is None:
        module_names = descriptor_modules_from_env()
    for module_name in module_names:
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            raise ConfigurationError(f"Descriptor module '{module_name}' could not be imported: {e}") from e
        hook = getattr(module, "register", None)
        if not callable(hook):
            raise ConfigurationError(f"Descriptor module '{module_name}' has no 'register(registry)' hook")
        hook(registry)
    return registry
