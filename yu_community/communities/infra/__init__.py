"""Infrastructure helpers scoped to the communities domain."""

from . import redis_streams  # noqa: F401

__all__ = ["redis_streams"]
