"""Import helpers for driver modules."""

import importlib
from importlib.util import find_spec
from typing import Any

__all__ = ("import_string", "module_available")


def module_available(module_name: str) -> bool:
    """Return whether a top-level module can be imported without importing it.

    Args:
        module_name: Dotted module name.

    Returns:
        True when the module is installed.
    """
    try:
        return find_spec(module_name) is not None
    except (ModuleNotFoundError, ValueError):
        return False


def import_string(dotted_path: str) -> "Any":
    """Dotted Path Import.

    Import a dotted module path and return the attribute/class designated by the
    last name in the path. A path naming a module returns the module itself.

    Args:
        dotted_path: The path of the module or attribute to import.

    Raises:
        ImportError: Could not import the module or attribute.

    Returns:
        object: The imported object.
    """
    parts = dotted_path.split(".")
    for i in range(len(parts), 0, -1):
        module_path = ".".join(parts[:i])
        try:
            module = importlib.import_module(module_path)
            break
        except ModuleNotFoundError:
            continue
    else:
        msg = f"{dotted_path} doesn't look like a module path"
        raise ImportError(msg)

    obj = module
    for attr in parts[i:]:
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            msg = f"Module '{module.__name__}' has no attribute '{attr}' in '{dotted_path}'"
            raise ImportError(msg) from e
    return obj
