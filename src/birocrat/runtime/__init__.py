"""Driver script runtimes."""

from .script import ScriptDriver, driver_main, load_driver_script

__all__ = ["ScriptDriver", "driver_main", "load_driver_script"]
