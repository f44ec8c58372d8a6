"""
Per-unit error isolation.

A structural unit (sheet, slide, paragraph, table, layout block) is processed
through :func:`isolate`, which returns either :class:`Ok` with the unit's
result or :class:`Degraded` carrying an :class:`ErrorMarker`. Callers match
on both arms. Fatal conversion errors are never absorbed here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, TypeVar, Union

from ..exceptions import FatalConversionError
from ..models.blocks import ContentBlock, ErrorMarker

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Degraded:
    unit: str
    marker: ErrorMarker
    error: Exception


UnitResult = Union[Ok[T], Degraded]


def isolate(unit: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> UnitResult:
    """Run ``func`` for one unit and convert a failure into a :class:`Degraded` result."""
    try:
        return Ok(func(*args, **kwargs))
    except FatalConversionError:
        raise
    except Exception as exc:
        logger.warning(f"Unit {unit} degraded: {exc}")
        logger.debug("Unit failure details", exc_info=True)
        return Degraded(unit=unit, marker=ErrorMarker(message=str(exc) or type(exc).__name__), error=exc)


def collect_blocks(result: UnitResult) -> List[ContentBlock]:
    """Flatten a unit result that produced a block list into blocks."""
    match result:
        case Ok(value=blocks):
            return list(blocks)
        case Degraded(marker=marker):
            return [marker]
        case _:
            raise TypeError(f"Unexpected unit result: {result!r}")
