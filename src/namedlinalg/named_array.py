from collections.abc import Iterable
from typing import Any

import numpy as np

from .names import DimSelector, Name, NameTuple, dim, normalize_names, wildcard_names


class NamedArray:
    """A numeric payload carrying one dimension name per axis.

    Names are fixed at construction; every operation returns a new
    `NamedArray`. The wildcard name `_` matches any other name.

    Parameters
    ----------
    payload
        Raw array. Anything exposing `ndim` is kept as is; other inputs are
        converted with `numpy.asarray`.
    names
        One name per axis of `payload`.
    """

    __slots__ = ("_parent", "_names")

    # numpy defers `ndarray @ NamedArray` to `NamedArray.__rmatmul__`.
    __array_ufunc__ = None

    def __init__(self, payload: Any, names: Iterable[Name]) -> None:
        if isinstance(payload, NamedArray):
            raise TypeError("payload is already a NamedArray; pass its parent instead")
        if not hasattr(payload, "ndim"):
            payload = np.asarray(payload)
        self._parent = payload
        self._names = normalize_names(names, rank=payload.ndim)

    @property
    def names(self) -> NameTuple:
        """Dimension names, one per axis."""
        return self._names

    @property
    def parent(self) -> Any:
        """The raw payload without names."""
        return self._parent

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self._parent.shape)

    @property
    def ndim(self) -> int:
        return len(self._names)

    @property
    def dtype(self) -> Any:
        return self._parent.dtype

    @property
    def T(self) -> "NamedArray":
        from .reshaping import transpose

        return transpose(self)

    def dim(self, selector: DimSelector) -> int:
        """Resolve a dimension name or index to an axis index."""
        return dim(self._names, selector)

    def copy(self) -> "NamedArray":
        return NamedArray(self._parent.copy(), self._names)

    def astype(self, dtype: Any) -> "NamedArray":
        """Return a copy with the payload converted to `dtype`."""
        return NamedArray(self._parent.astype(dtype, copy=True), self._names)

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> np.ndarray:
        # copy=False raises ValueError when the conversion cannot be a view.
        return np.array(self._parent, dtype=dtype, copy=copy)

    def __matmul__(self, other: object) -> Any:
        from .dispatch import dispatch_matmul

        return dispatch_matmul(self, other)

    def __rmatmul__(self, other: object) -> Any:
        from .dispatch import dispatch_matmul

        return dispatch_matmul(other, self)

    def __len__(self) -> int:
        return len(self._parent)

    def __repr__(self) -> str:
        rendered = ", ".join(str(name) for name in self._names)
        if len(self._names) == 1:
            rendered += ","
        return f"NamedArray({self._parent!r}, names=({rendered}))"


class CoVector:
    """Row vector formed by transposing (or adjoining) a 1-D vector.

    A covector is rank 2 with shape `(1, n)`. Multiplying it by a vector is an
    inner product and yields a scalar.
    """

    __slots__ = ("vector", "conjugate")

    __array_ufunc__ = None

    ndim = 2

    def __init__(self, vector: Any, conjugate: bool = False) -> None:
        if getattr(vector, "ndim", None) != 1:
            raise TypeError("CoVector wraps a 1-dimensional vector")
        self.vector = vector
        self.conjugate = conjugate

    @property
    def shape(self) -> tuple[int, int]:
        return (1, self.vector.shape[0])

    @property
    def dtype(self) -> Any:
        return self.vector.dtype

    def row(self) -> Any:
        """Return the row entries as a 1-D vector."""
        if self.conjugate:
            return self.vector.conj()
        return self.vector

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> np.ndarray:
        if copy is False and self.conjugate and np.iscomplexobj(self.vector):
            raise ValueError(
                "a conjugated covector cannot be converted without a copy"
            )
        row = np.array(self.row(), dtype=dtype, copy=copy)
        return row[np.newaxis, :]

    def __matmul__(self, other: object) -> Any:
        if isinstance(other, NamedArray):
            return NotImplemented
        other_ndim = getattr(other, "ndim", None)
        if other_ndim == 1:
            return self.row() @ other
        if isinstance(other, CoVector):
            return np.asarray(self) @ np.asarray(other)
        if other_ndim == 2:
            return CoVector(self.row() @ other)
        return NotImplemented

    def __rmatmul__(self, other: object) -> Any:
        if isinstance(other, NamedArray):
            return NotImplemented
        if getattr(other, "ndim", None) == 2:
            return other @ np.asarray(self)
        return NotImplemented

    def __len__(self) -> int:
        return 1

    def __repr__(self) -> str:
        kind = "adjoint" if self.conjugate else "transpose"
        return f"CoVector({self.vector!r}, {kind})"


def unname(x: Any) -> Any:
    """Return the raw payload of a `NamedArray`, or `x` itself."""
    if isinstance(x, NamedArray):
        return x.parent
    return x


def dimnames(x: Any) -> NameTuple:
    """Return the names of `x`; plain arrays get all-wildcard names."""
    if isinstance(x, NamedArray):
        return x.names
    return wildcard_names(x.ndim)


__all__ = ["CoVector", "NamedArray", "dimnames", "unname"]
