"""Infrastructure layer implementations."""

from batchtrace.infrastructure import storage

__all__ = ["storage"]
