"""Third-party converter plugins.

A plugin module (or entry point target) registers converter plugin
factories through :class:`PluginAPI`.  Sources, in load order:

1) ``DOCREFLECT_PLUGIN_MODULES`` (comma-separated module names)
2) the ``plugins`` list in ``.docreflect/config.json``
3) entry points in the ``docreflect.plugins`` group

A target is either a callable taking the API or an object with a
``register(api)`` attribute.  Failures never abort discovery; they are
kept as messages for ``docreflect plugins`` to report.
"""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass, field
from importlib import metadata
from typing import Any, Callable

ENTRY_POINT_GROUP = "docreflect.plugins"
ENV_VAR = "DOCREFLECT_PLUGIN_MODULES"

ConverterPluginFactory = Callable[[Any], Any]


@dataclass
class _PluginState:
    loaded: bool = False
    factories: dict[str, ConverterPluginFactory] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


_state = _PluginState()


class PluginAPI:
    """What a plugin's ``register(api)`` gets to call."""

    def register_converter_plugin(self, name: str, factory: ConverterPluginFactory) -> None:
        """Register *factory* (called with the Converter) under *name*."""
        key = (name or "").strip()
        if not key:
            raise ValueError("plugin name must be non-empty")
        if not callable(factory):
            raise TypeError("factory must be callable")
        if key in _state.factories:
            raise ValueError(f"duplicate converter plugin: {key}")
        _state.factories[key] = factory


def _run_target(target: Any, label: str, api: PluginAPI) -> None:
    register = target if callable(target) else getattr(target, "register", None)
    try:
        if not callable(register):
            raise TypeError("plugin target must be callable or expose register(api)")
        register(api)
    except Exception as exc:
        _state.errors.append(f"{label}: {exc}")


def _configured_modules() -> list[str]:
    names = [m.strip() for m in os.environ.get(ENV_VAR, "").split(",") if m.strip()]

    from docreflect.config import find_project_root, load_project_config

    for name in load_project_config(find_project_root()).get("plugins", []):
        if isinstance(name, str) and name.strip() and name.strip() not in names:
            names.append(name.strip())
    return names


def _discover_modules(api: PluginAPI, module_names: list[str]) -> None:
    for module_name in module_names:
        label = f"module:{module_name}"
        try:
            module = importlib.import_module(module_name)
        except Exception as exc:
            _state.errors.append(f"{label}: import failed: {exc}")
            continue
        _run_target(module, label, api)


def _discover_entry_points(api: PluginAPI) -> None:
    try:
        entries = list(metadata.entry_points(group=ENTRY_POINT_GROUP))
    except Exception as exc:
        _state.errors.append(f"entry_points: discovery failed: {exc}")
        return

    for ep in entries:
        label = f"entry_point:{ep.name}"
        try:
            target = ep.load()
        except Exception as exc:
            _state.errors.append(f"{label}: load failed: {exc}")
            continue
        _run_target(target, label, api)


def discover_plugins() -> None:
    """Load every plugin source; later calls in the same process do nothing."""
    if _state.loaded:
        return
    _state.loaded = True

    api = PluginAPI()
    _discover_modules(api, _configured_modules())
    _discover_entry_points(api)


def get_plugin_converter_plugins() -> dict[str, ConverterPluginFactory]:
    discover_plugins()
    return dict(_state.factories)


def get_plugin_errors() -> list[str]:
    discover_plugins()
    return list(_state.errors)


def _reset_plugin_state_for_tests() -> None:
    global _state
    _state = _PluginState()
