import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any

import numpy as np
from scipy import sparse

from .backend import BACKEND_RESOLVER
from .diagnostics import DimensionMismatchError
from .named_array import CoVector, NamedArray
from .names import wildcard_names
from .propagation import unsupported_rank_combination
from .validation import matrix_prod_names, valid_matmul_dims

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OperandKind:
    """Capability tag used to select a matrix-product rule."""

    named: bool
    rank: int
    covector: bool


@dataclass(slots=True)
class MatmulRegistry:
    """Plain array types allowed to meet a `NamedArray` in a matrix product."""

    _ranks_by_type: dict[type, frozenset[int]] = field(default_factory=dict)
    _lock: RLock = field(default_factory=RLock)

    def declare(self, plain_type: type, rank: int) -> None:
        """Declare that instances of `plain_type` may act as rank-`rank` operands."""
        if not isinstance(plain_type, type):
            raise TypeError("matmul declarations take a type")
        if rank not in (1, 2):
            raise ValueError("matmul declarations cover rank 1 (vector) or 2 (matrix)")
        with self._lock:
            declared = self._ranks_by_type.get(plain_type, frozenset())
            self._ranks_by_type[plain_type] = declared | {rank}
        logger.debug("declared matmul rank %d for %s", rank, plain_type.__qualname__)

    def declared_ranks(self, plain_type: type) -> frozenset[int]:
        """Return the ranks declared for `plain_type` or its nearest base class."""
        with self._lock:
            for klass in plain_type.__mro__:
                ranks = self._ranks_by_type.get(klass)
                if ranks is not None:
                    return ranks
        return frozenset()

    def classify(self, x: object) -> OperandKind | None:
        """Tag one operand, or return `None` when no rule applies."""
        if isinstance(x, NamedArray):
            return OperandKind(
                named=True,
                rank=x.ndim,
                covector=isinstance(x.parent, CoVector),
            )
        rank = getattr(x, "ndim", None)
        if rank is None or rank not in self.declared_ranks(type(x)):
            return None
        return OperandKind(named=False, rank=rank, covector=isinstance(x, CoVector))


MATMUL_REGISTRY = MatmulRegistry()


def declare_matmul(
    matrix_type: type,
    vector_type: type | None = None,
    *,
    registry: MatmulRegistry = MATMUL_REGISTRY,
) -> None:
    """Let a plain array type meet `NamedArray` operands in `@`.

    Declaring `matrix_type` (and optionally `vector_type`) once enables every
    named/plain combination of the matrix-product rules in both operand
    orders. The plain operand adopts all-wildcard names of its rank, so the
    named operand's names win.
    """
    registry.declare(matrix_type, 2)
    if vector_type is not None:
        registry.declare(vector_type, 1)


def matmul_payload(a: Any, b: Any) -> Any:
    """Multiply raw payloads; a rank-1 left operand is used as a column."""
    if a.ndim == 1 and b.ndim == 2:
        a = a[:, np.newaxis]
    return a @ b


def _named_matmul(a: NamedArray, b: NamedArray) -> Any:
    if a.ndim == 1 and b.ndim == 1:
        raise unsupported_rank_combination(a.names, b.names)

    if isinstance(a.parent, CoVector) and b.ndim == 1:
        if not valid_matmul_dims(a.names, b.names):
            raise DimensionMismatchError(a.names, b.names)
        return a.parent @ b.parent

    names = matrix_prod_names(a.names, b.names)
    BACKEND_RESOLVER.validate_family(a.parent, b.parent, op_name="matmul")
    return NamedArray(matmul_payload(a.parent, b.parent), names)


def dispatch_matmul(
    a: object, b: object, *, registry: MatmulRegistry = MATMUL_REGISTRY
) -> Any:
    """Resolve and apply the matrix-product rule for one operand pair.

    Returns `NotImplemented` when neither operand is named or when a plain
    operand has no declared rank signature.
    """
    kind_a = registry.classify(a)
    kind_b = registry.classify(b)
    if kind_a is None or kind_b is None:
        return NotImplemented
    if not (kind_a.named or kind_b.named):
        return NotImplemented

    if not kind_a.named:
        a = NamedArray(a, wildcard_names(kind_a.rank))
    if not kind_b.named:
        b = NamedArray(b, wildcard_names(kind_b.rank))
    return _named_matmul(a, b)


def matmul(a: Any, b: Any) -> Any:
    """Matrix product with dimension-name propagation.

    Plain operands multiply as usual; see `declare_matmul` for mixing plain
    and named operands.
    """
    if not (isinstance(a, NamedArray) or isinstance(b, NamedArray)):
        return a @ b
    result = dispatch_matmul(a, b)
    if result is NotImplemented:
        raise TypeError(
            "unsupported operand types for matmul: "
            f"{type(a).__name__!r} and {type(b).__name__!r}"
        )
    return result


declare_matmul(np.ndarray, np.ndarray)
declare_matmul(CoVector)
declare_matmul(sparse.sparray)
declare_matmul(sparse.spmatrix)


__all__ = [
    "MATMUL_REGISTRY",
    "MatmulRegistry",
    "OperandKind",
    "declare_matmul",
    "dispatch_matmul",
    "matmul",
    "matmul_payload",
]
