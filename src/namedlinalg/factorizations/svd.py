import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
import scipy.linalg as sla

from ..named_array import unname
from ..names import WILDCARD
from ..policy import resolve_op_policy
from .base import Factorization, eigtype, rewrap

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SVD(Factorization):
    """Singular value decomposition `A == U @ diag(S) @ Vt`.

    The stored `u` and `vt` fields carry the names of the factorized matrix;
    the `U`, `V` and `Vt` attributes derive their own names from them.
    """

    u: Any
    s: Any
    vt: Any

    structural_fields: ClassVar[tuple[str, ...]] = ("u", "vt")
    field_names: ClassVar = {
        "U": lambda n1, n2: (n1, WILDCARD),
        "V": lambda n1, n2: (WILDCARD, n2),
        "Vt": lambda n1, n2: (n2, WILDCARD),
    }

    @property
    def U(self) -> Any:
        return self._derive("U", lambda fact: fact.u)

    @property
    def S(self) -> Any:
        return self._derive("S", lambda fact: fact.s)

    @property
    def Vt(self) -> Any:
        return self._derive("Vt", lambda fact: fact.vt)

    @property
    def V(self) -> Any:
        return self._derive("V", lambda fact: fact.vt.conj().T)

    def __iter__(self) -> Iterator[Any]:
        yield self.U
        yield self.S
        yield self.V


def svd(
    a: Any,
    *,
    full_matrices: bool = False,
    overwrite_a: bool = False,
    lapack_driver: str = "gesdd",
) -> SVD:
    """Singular value decomposition keeping the names of a `NamedArray`.

    Unless `overwrite_a` is set, the payload is first copied to its
    decomposition element type (see `eigtype`), so the caller's array is
    never modified.
    """
    resolve_op_policy("svd").validate_rank(op_name="svd", rank=a.ndim)
    payload = unname(a)
    if overwrite_a:
        matrix = np.asarray(payload)
    else:
        matrix = np.array(payload, dtype=eigtype(payload.dtype), copy=True)

    logger.debug("svd of a %s matrix with driver %s", matrix.shape, lapack_driver)
    u, s, vt = sla.svd(
        matrix,
        full_matrices=full_matrices,
        overwrite_a=True,
        lapack_driver=lapack_driver,
    )
    return rewrap(SVD(u, s, vt), a)


__all__ = ["SVD", "svd"]
