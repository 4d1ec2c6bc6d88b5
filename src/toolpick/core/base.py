"""Base classes for configuration and runtime state models.

- Closeable Protocol for anything holding resources
- BaseCloseable, a pydantic model that closes its Closeable fields
- BaseConfig / BaseState semantic markers

Kept apart from config.py so log.py can import them without a cycle.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Protocol for objects that support close()."""

    def close(self) -> None:
        """Release held resources."""
        ...


class BaseCloseable(BaseModel):
    """Pydantic model that closes its Closeable children.

    Subclasses become context managers. On close() every field
    implementing Closeable is closed in declaration order; a failing
    child is reported on stderr and the remaining children are still
    closed, so State -> Config -> Logger -> Sink all get released.
    """

    def close(self):
        """Close every Closeable field."""
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
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
    """Marker for configuration sections (YAML/env/CLI)."""


class BaseState(BaseCloseable):
    """Marker for runtime state sections (mutated while running)."""


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
