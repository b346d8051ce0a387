import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
from scipy.linalg import get_lapack_funcs

from ..named_array import unname
from ..names import WILDCARD
from ..policy import resolve_op_policy
from .base import Factorization, eigtype, rewrap

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LU(Factorization):
    """LU factorization with partial pivoting, `P @ A == L @ U`.

    `factors` packs the unit lower factor below the diagonal and the upper
    factor on and above it; `ipiv` holds 0-based LAPACK row interchanges.
    """

    factors: Any
    ipiv: Any
    info: int

    structural_fields: ClassVar[tuple[str, ...]] = ("factors",)
    field_names: ClassVar = {
        "L": lambda n1, n2: (n1, WILDCARD),
        "U": lambda n1, n2: (WILDCARD, n2),
        "P": lambda n1, n2: (n1, n1),
        "p": lambda n1, n2: (n1,),
    }

    @property
    def L(self) -> Any:
        return self._derive("L", _lower)

    @property
    def U(self) -> Any:
        return self._derive("U", _upper)

    @property
    def p(self) -> Any:
        return self._derive("p", _permutation_vector)

    @property
    def P(self) -> Any:
        return self._derive("P", _permutation_matrix)

    def issuccess(self) -> bool:
        """Return whether the upper factor is nonsingular."""
        return self.info == 0

    def __iter__(self) -> Iterator[Any]:
        yield self.L
        yield self.U
        yield self.p


def _lower(fact: LU) -> np.ndarray:
    m, n = fact.factors.shape
    k = min(m, n)
    return np.tril(fact.factors[:, :k], -1) + np.eye(m, k, dtype=fact.factors.dtype)


def _upper(fact: LU) -> np.ndarray:
    m, n = fact.factors.shape
    return np.triu(fact.factors[: min(m, n), :])


def _permutation_vector(fact: LU) -> np.ndarray:
    perm = np.arange(fact.factors.shape[0])
    for row, pivot in enumerate(fact.ipiv):
        perm[row], perm[pivot] = perm[pivot], perm[row]
    return perm


def _permutation_matrix(fact: LU) -> np.ndarray:
    size = fact.factors.shape[0]
    return np.eye(size, dtype=fact.factors.dtype)[_permutation_vector(fact)]


def lu(a: Any, *, overwrite_a: bool = False, check: bool = True) -> LU:
    """LU-factorize a matrix, keeping the names of a `NamedArray` input.

    Parameters
    ----------
    a
        Matrix to factorize, named or plain.
    overwrite_a
        Let LAPACK reuse the payload's memory, as an in-place factorization.
        Only Fortran-ordered payloads of a LAPACK dtype are actually reused.
    check
        Raise `numpy.linalg.LinAlgError` when the matrix is singular. With
        `check=False` the LAPACK status is kept in `info` instead.
    """
    resolve_op_policy("lu").validate_rank(op_name="lu", rank=a.ndim)
    payload = unname(a)
    if overwrite_a:
        matrix = np.asarray(payload)
    else:
        matrix = np.array(payload, dtype=eigtype(payload.dtype), order="F", copy=True)

    logger.debug("lu factorization of a %s matrix", matrix.shape)
    (getrf,) = get_lapack_funcs(("getrf",), (matrix,))
    factors, ipiv, info = getrf(matrix, overwrite_a=True)
    if info < 0:
        raise ValueError(f"illegal value in argument {-info} of internal getrf")
    if check and info > 0:
        raise np.linalg.LinAlgError(
            f"singular matrix: U[{info - 1}, {info - 1}] is exactly zero"
        )
    return rewrap(LU(factors, ipiv, int(info)), a)


__all__ = ["LU", "lu"]
