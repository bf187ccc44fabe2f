"""Python driver script runtime."""

from __future__ import annotations

import copy
import hashlib
import itertools
import sys
from collections.abc import Callable, Mapping
from importlib import util as importlib_util
from pathlib import Path
from types import MappingProxyType, ModuleType
from typing import Any

from loguru import logger

from birocrat.errors import ScriptLoadError
from birocrat.form.types import Answer

MAIN_FUNCTION_NAME = "main"

_load_counter = itertools.count()

DriverMain = Callable[[Any, Answer | None, Mapping[str, Any]], Any]


def _module_name_for_script(script_file: Path) -> str:
    digest = hashlib.sha256(str(script_file).encode("utf-8")).hexdigest()[:12]
    stem = "".join(ch if ch.isalnum() else "_" for ch in script_file.stem.lower())
    return f"birocrat_driver_{stem}_{digest}_{next(_load_counter)}"


def load_driver_script(script_file: Path) -> ModuleType:
    """Execute a driver script as a fresh module.

    Every load gets its own module, so sessions never share script globals.
    """
    if not script_file.is_file():
        raise ScriptLoadError(f"driver script not found: {script_file}")

    module_name = _module_name_for_script(script_file.resolve())
    spec = importlib_util.spec_from_file_location(module_name, script_file)
    if spec is None or spec.loader is None:
        raise ScriptLoadError(f"failed to build module spec for {script_file}")

    module = importlib_util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise ScriptLoadError(f"failed to load driver script {script_file}: {exc}") from exc
    logger.debug("Loaded driver script {} as {}", script_file, module_name)
    return module


def driver_main(module: ModuleType) -> DriverMain:
    main = getattr(module, MAIN_FUNCTION_NAME, None)
    if not callable(main):
        raise ScriptLoadError(f"could not find {MAIN_FUNCTION_NAME}() function in driver script {module.__name__}")
    return main


class ScriptDriver:
    """Adapts a script's ``main(state, answer, params)`` to the driver call.

    Form parameters are fixed when the driver is built; each call receives a
    read-only view of a fresh copy, so a script cannot carry anything over
    between calls through them.
    """

    def __init__(self, main: DriverMain, params: Mapping[str, Any] | None = None) -> None:
        self._main = main
        self._params = copy.deepcopy(dict(params or {}))

    @classmethod
    def from_file(cls, script_file: Path, params: Mapping[str, Any] | None = None) -> ScriptDriver:
        return cls(driver_main(load_driver_script(script_file)), params)

    @property
    def params(self) -> Mapping[str, Any]:
        return MappingProxyType(self._params)

    def __call__(self, state: Any, answer: Answer | None) -> Any:
        return self._main(state, answer, MappingProxyType(copy.deepcopy(self._params)))
