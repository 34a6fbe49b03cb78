"""Fatal error taxonomy for the flattening transform."""

from __future__ import annotations


class TransformError(RuntimeError):
    """Base class for errors that abort a transform run."""

    def __init__(self, message: str, *, node: str | None = None) -> None:
        super().__init__(f"{message} (at {node})" if node else message)
        self.node = node


class InvariantViolation(TransformError):
    """Internal state disagreed with what an earlier phase recorded."""


class MalformedEventShape(TransformError):
    """An event marker reference cannot be turned into an event contract."""


__all__ = ["InvariantViolation", "MalformedEventShape", "TransformError"]
