"""Base classes for configuration and state models.

Kept apart from config.py so that log.py can build its sink models
on BaseConfig without a circular import.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Protocol for objects that support close()."""

    def close(self) -> None:
        ...


class BaseCloseable(BaseModel):
    """Model that closes its Closeable fields on close().

    Works as a context manager. Closing cascades down the model tree:
    State -> Config -> Logger -> Sink. A failing child is reported on
    stderr and the remaining children are still closed.
    """

    def close(self):
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if isinstance(child, Closeable):
                try:
                    child.close()
                except Exception as e:
                    print(
                        f"Warning: Error closing {field_name}: {e}",
                        file=sys.stderr,
                    )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Marker base for configuration loaded from YAML/env/CLI."""


class BaseState(BaseCloseable):
    """Marker base for runtime state mutated during a command."""


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
