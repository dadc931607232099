"""Explicit outcome for enrichment reads."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger("enrichment")


@dataclass(frozen=True)
class Enrichment(Generic[T]):
    """Value of a non-critical read, or its fallback when the read failed."""

    name: str
    value: T
    degraded: bool = False
    error: Optional[str] = None


async def enrich(
    name: str,
    func: Callable[..., Awaitable[T]],
    *args: Any,
    fallback: T,
    **kwargs: Any,
) -> Enrichment[T]:
    """Run an enrichment read; any failure degrades to ``fallback``."""
    try:
        value = await func(*args, **kwargs)
    except Exception as e:
        logger.warning(f"Enrichment '{name}' degraded: {e}")
        return Enrichment(name=name, value=fallback, degraded=True, error=str(e))
    return Enrichment(name=name, value=value)
