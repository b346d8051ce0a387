from collections.abc import Iterable
from enum import Enum
from numbers import Integral
from typing import TypeAlias

from .diagnostics import ErrorCode, ValidationError


class Wildcard(Enum):
    """Sentinel dimension name meaning "unconstrained"."""

    WILDCARD = "_"

    def __repr__(self) -> str:
        return "_"

    def __str__(self) -> str:
        return "_"


WILDCARD = Wildcard.WILDCARD

Name: TypeAlias = str | Wildcard
NameTuple: TypeAlias = tuple[Name, ...]
DimSelector: TypeAlias = str | int | Integral


def _validate_identifier(name: str) -> None:
    """Validate one concrete dimension name."""
    if not name:
        raise ValueError("dimension name cannot be empty")
    if not name.isidentifier():
        raise ValueError(f"dimension name must be a valid identifier: {name!r}")


def normalize_name(name: Name) -> Name:
    """Validate one dimension name, mapping `'_'` to `WILDCARD`."""
    if isinstance(name, Wildcard):
        return name
    if not isinstance(name, str):
        raise TypeError(
            f"dimension names must be strings or WILDCARD, got {type(name).__name__}"
        )
    if name == WILDCARD.value:
        return WILDCARD
    _validate_identifier(name)
    return name


def normalize_names(names: Iterable[Name], *, rank: int | None = None) -> NameTuple:
    """Normalize an iterable of names into a name tuple.

    Parameters
    ----------
    names
        Dimension names, one per axis. A bare string is treated as a single
        name rather than a sequence of characters.
    rank
        Expected number of names, if known.

    Returns
    -------
    NameTuple
        Validated names with `'_'` mapped to `WILDCARD`.

    Raises
    ------
    ValidationError
        If `rank` is given and does not match the number of names.
    """
    if isinstance(names, str | Wildcard):
        names = (names,)
    normalized = tuple(normalize_name(name) for name in names)
    if rank is not None and len(normalized) != rank:
        raise ValidationError(
            code=ErrorCode.NAME_COUNT_MISMATCH,
            message=(
                "name count mismatch: "
                f"got {len(normalized)} names for an array of rank {rank}"
            ),
            help="provide exactly one name per axis",
            related=("NamedArray construction",),
            data={"expected": rank, "got": len(normalized)},
        )
    return normalized


def wildcard_names(rank: int) -> NameTuple:
    """Return the all-wildcard name tuple of one rank."""
    if rank < 0:
        raise ValueError("rank must be non-negative")
    return (WILDCARD,) * rank


def is_wildcard(name: Name) -> bool:
    """Return whether one name is the wildcard."""
    return name is WILDCARD


def names_compatible(a: Name, b: Name) -> bool:
    """Return whether two names may refer to the same dimension."""
    return a == b or a is WILDCARD or b is WILDCARD


def dim(names: NameTuple, selector: DimSelector) -> int:
    """Resolve a dimension name or integer index to an axis index.

    Any integral selector (including numpy integer scalars) is an index;
    negative indices count from the last axis. Wildcards never resolve.
    """
    rank = len(names)
    if isinstance(selector, bool):
        raise TypeError("dimension selector must be a name or an int, not bool")
    if isinstance(selector, Integral):
        selector = int(selector)
        index = selector + rank if selector < 0 else selector
        if not 0 <= index < rank:
            raise ValidationError(
                code=ErrorCode.DIM_OUT_OF_RANGE,
                message=(
                    f"dim out of range: axis {selector} for an array of rank {rank}"
                ),
                help=f"use an axis index in [{-rank}, {rank})",
                related=("dim lookup",),
                data={"axis": selector, "rank": rank},
            )
        return index

    name = normalize_name(selector)
    if name is not WILDCARD:
        for index, candidate in enumerate(names):
            if candidate == name:
                return index
    rendered = ", ".join(str(candidate) for candidate in names)
    raise ValidationError(
        code=ErrorCode.UNKNOWN_DIM_NAME,
        message=f"unknown dim name: {name} not in ({rendered})",
        help="select a dimension by one of the array's concrete names",
        related=("dim lookup",),
        data={"name": str(name), "names": rendered},
    )


__all__ = [
    "DimSelector",
    "Name",
    "NameTuple",
    "WILDCARD",
    "Wildcard",
    "dim",
    "is_wildcard",
    "names_compatible",
    "normalize_name",
    "normalize_names",
    "wildcard_names",
]
