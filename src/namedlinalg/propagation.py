"""Output-name rules for linear-algebra operations.

Every rule is a pure function of input name tuples; none touches numeric data.
"""

from .diagnostics import ErrorCode, ValidationError
from .names import WILDCARD, NameTuple


def unsupported_rank_combination(a: NameTuple, b: NameTuple) -> ValidationError:
    """Build the error for a matrix product between unsupported ranks."""
    return ValidationError(
        code=ErrorCode.UNSUPPORTED_RANK_COMBINATION,
        message=(
            "unsupported rank combination: cannot take matrix product of "
            f"rank {len(a)} and rank {len(b)} arrays"
        ),
        help=(
            "matrix products need a matrix operand; "
            "transpose one vector for an inner product"
        ),
        related=("matrix product",),
        data={"lhs_rank": len(a), "rhs_rank": len(b)},
    )


def matmul_names(a: NameTuple, b: NameTuple) -> NameTuple:
    """Return the names of `a @ b` for already-validated operands.

    | a rank | b rank | result |
    |---|---|---|
    | 2 | 1 | `(a[0],)` |
    | 2 | 2 | `(a[0], b[1])` |
    | 1 | 2 | `(a[0], b[1])` |
    """
    match len(a), len(b):
        case (2, 1):
            return (a[0],)
        case (2, 2) | (1, 2):
            return (a[0], b[1])
    raise unsupported_rank_combination(a, b)


def inverse_names(names: NameTuple) -> NameTuple:
    """Return the names of a matrix inverse: input and output axes swap."""
    n1, n2 = names
    return (n2, n1)


def symmetric_names(names: NameTuple, axis: int) -> NameTuple:
    """Return the names of a correlation/covariance-style reduction.

    Reducing along one axis leaves a square result indexed by the surviving
    axis on both sides. Any axis other than 0 or 1 gives an all-wildcard pair.
    """
    n1, n2 = names
    if axis == 0:
        return (n2, n2)
    if axis == 1:
        return (n1, n1)
    return (WILDCARD, WILDCARD)


__all__ = [
    "inverse_names",
    "matmul_names",
    "symmetric_names",
    "unsupported_rank_combination",
]
