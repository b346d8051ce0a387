from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any, ClassVar, TypeAlias

try:
    from typing import Self
except ImportError:  # pragma: no cover
    from typing_extensions import Self

import numpy as np

from ..named_array import NamedArray, unname
from ..names import Name, NameTuple, normalize_names

NameRule: TypeAlias = Callable[[Name, Name], NameTuple]


@dataclass(frozen=True, slots=True)
class Factorization:
    """Matrix factorization whose structural fields may carry names.

    Structural fields hold 2-D projections of the factorized matrix and are
    stored as `NamedArray`s with the original `(n1, n2)` names. Auxiliary
    fields (pivots, Householder scalars, singular values) are always plain.
    Named views of the logical components are derived on every access from
    the stored names through `field_names`; nothing is cached.
    """

    structural_fields: ClassVar[tuple[str, ...]] = ()
    field_names: ClassVar[Mapping[str, NameRule]] = {}

    @property
    def names(self) -> NameTuple | None:
        """Names of the factorized matrix, or `None` for a plain factorization."""
        stored = getattr(self, self.structural_fields[0])
        if isinstance(stored, NamedArray):
            return stored.names
        return None

    def parent(self) -> Self:
        """Return the same factorization with every name stripped."""
        plain_fields = {
            field_name: unname(getattr(self, field_name))
            for field_name in self.structural_fields
        }
        return replace(self, **plain_fields)

    def with_names(self, names: NameTuple) -> Self:
        """Return the same factorization with structural fields named `names`."""
        normalized = normalize_names(names, rank=2)
        plain = self.parent()
        named_fields = {
            field_name: NamedArray(getattr(plain, field_name), normalized)
            for field_name in self.structural_fields
        }
        return replace(plain, **named_fields)

    def _derive(self, field_name: str, compute: Callable[[Self], Any]) -> Any:
        """Compute one logical component and attach its derived names."""
        value = compute(self.parent())
        names = self.names
        rule = self.field_names.get(field_name)
        if names is None or rule is None:
            return value
        n1, n2 = names
        return NamedArray(value, rule(n1, n2))


def eigtype(dtype: Any) -> np.dtype:
    """Element type used for decompositions of arrays of `dtype`.

    Inexact dtypes are kept (half precision is widened to single); integer
    and boolean dtypes become `float64`.
    """
    normalized = np.dtype(dtype)
    if np.issubdtype(normalized, np.inexact):
        return np.promote_types(normalized, np.float32)
    return np.dtype(np.float64)


def rewrap(factorization: Factorization, a: Any) -> Factorization:
    """Name `factorization` after `a` when `a` is a `NamedArray`."""
    if isinstance(a, NamedArray):
        return factorization.with_names(a.names)
    return factorization


__all__ = ["Factorization", "NameRule", "eigtype", "rewrap"]
