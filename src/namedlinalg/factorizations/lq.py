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
class LQ(Factorization):
    """LQ factorization `A == L @ Q` in compact Householder form.

    `factors` has the shape of the factorized matrix; its transpose is the
    `geqrf` QR factorization of `A^H`, with reflector scalars in `tau`.
    """

    factors: Any
    tau: Any

    structural_fields: ClassVar[tuple[str, ...]] = ("factors",)
    field_names: ClassVar = {
        "L": lambda n1, n2: (n1, WILDCARD),
        "Q": lambda n1, n2: (WILDCARD, n2),
    }

    @property
    def L(self) -> Any:
        return self._derive("L", _lower)

    @property
    def Q(self) -> Any:
        return self._derive("Q", _orthonormal_rows)

    def __iter__(self) -> Iterator[Any]:
        yield self.L
        yield self.Q


def _lower(fact: LQ) -> np.ndarray:
    reflectors = fact.factors.T
    k = len(fact.tau)
    return np.triu(reflectors[:k, :]).conj().T


def _orthonormal_rows(fact: LQ) -> np.ndarray:
    reflectors = fact.factors.T
    k = len(fact.tau)
    (orgqr,) = get_lapack_funcs(("orgqr",), (reflectors,))
    q, _, info = orgqr(reflectors[:, :k], fact.tau)
    if info < 0:
        raise ValueError(f"illegal value in argument {-info} of internal orgqr")
    return q.conj().T


def lq(a: Any, *, overwrite_a: bool = False) -> LQ:
    """LQ-factorize a matrix, keeping the names of a `NamedArray` input.

    With `overwrite_a` LAPACK may reuse the memory of a real C-ordered payload,
    whose transpose is already Fortran ordered. Otherwise the adjoint is
    copied to the decomposition element type first.
    """
    resolve_op_policy("lq").validate_rank(op_name="lq", rank=a.ndim)
    payload = unname(a)
    if overwrite_a:
        adjoint = np.asarray(payload).conj().T
    else:
        adjoint = np.array(
            np.asarray(payload).conj().T,
            dtype=eigtype(payload.dtype),
            order="F",
            copy=True,
        )

    logger.debug("lq factorization of a %s matrix", adjoint.T.shape)
    (geqrf,) = get_lapack_funcs(("geqrf",), (adjoint,))
    reflectors, tau, _, info = geqrf(adjoint, overwrite_a=True)
    if info < 0:
        raise ValueError(f"illegal value in argument {-info} of internal geqrf")
    return rewrap(LQ(reflectors.T, tau), a)


__all__ = ["LQ", "lq"]
