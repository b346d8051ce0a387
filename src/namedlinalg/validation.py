from .diagnostics import DimensionMismatchError
from .names import NameTuple, names_compatible
from .propagation import matmul_names, unsupported_rank_combination


def valid_matmul_dims(a: NameTuple, b: NameTuple) -> bool:
    """Return whether `a @ b` contracts compatible dimension names.

    A rank-1 left operand acts as a column vector whose contracted axis is an
    implicit singleton, so it is always compatible.
    """
    if len(a) == 1:
        return True
    if len(a) == 2 and b:
        return names_compatible(a[-1], b[0])
    raise unsupported_rank_combination(a, b)


def matrix_prod_names(a: NameTuple, b: NameTuple) -> NameTuple:
    """Validate a matrix product and return its output names.

    Raises
    ------
    DimensionMismatchError
        If the inner dimension names differ and neither is the wildcard.
    """
    if not valid_matmul_dims(a, b):
        raise DimensionMismatchError(a, b)
    return matmul_names(a, b)


__all__ = ["matrix_prod_names", "valid_matmul_dims"]
