"""App import resolution: resolves ``"module:attribute"`` strings to App instances."""

import importlib
import inspect

from letterbox.app import App
from letterbox.config import AppConfig


def resolve_app(import_string: str, config: AppConfig | None = None) -> App:
    """Resolve an import string to a letterbox App instance.

    Accepts ``"module:attribute"`` format. When the attribute portion
    is omitted, defaults to ``"app"``.

    Factory functions are called. A factory that takes a parameter is
    handed *config*, so command-line overrides reach the app itself.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not an ``App`` or a factory
            returning one.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, App):
        try:
            takes_config = bool(inspect.signature(obj).parameters)
        except (TypeError, ValueError):
            takes_config = False
        try:
            obj = obj(config) if takes_config else obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a letterbox.App instance"
        raise TypeError(msg)

    return obj
