"""High-level orchestration services."""

from .inline_service import InlineService  # noqa: F401

__all__: list[str] = [
    "InlineService",
]
