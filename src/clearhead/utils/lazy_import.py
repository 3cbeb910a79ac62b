"""Deferred imports for optional backends."""

from collections.abc import Callable
from functools import cache
from importlib import import_module

__all__ = [
    "lazy_import",
]


def lazy_import(module_name: str, name: str | None = None) -> Callable[[], object]:
    """Return a loader that imports ``module_name`` (or one attribute) on first call.

    The storage backend driver is only needed once a repository actually
    connects, so importing clearhead never requires it.

    Raises:
        ImportError: From the loader, naming the missing module
    """

    @cache
    def _load() -> object:
        try:
            module = import_module(module_name)
        except ImportError as e:
            raise ImportError(
                f"{module_name} is required for this backend; install it to continue"
            ) from e
        return getattr(module, name) if name else module

    return _load
