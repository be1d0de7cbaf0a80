"""General utility functions."""

from functools import lru_cache
from importlib.util import find_spec

__all__ = ("module_available",)


@lru_cache(maxsize=None)
def module_available(dotted_path: str) -> bool:
    """Check whether a module can be imported without importing it.

    Args:
        dotted_path: The path of the module to look for.

    Returns:
        True if the module spec can be found.
    """
    try:
        return find_spec(dotted_path) is not None
    except ModuleNotFoundError:
        return False
