from collections.abc import Sequence
from numbers import Integral
from typing import Any

import numpy as np

from .diagnostics import ErrorCode, ValidationError
from .named_array import CoVector, NamedArray, dimnames, unname
from .names import WILDCARD, DimSelector, NameTuple, dim
from .policy import resolve_op_policy


def _rename_like(x: Any, payload: Any, names: NameTuple) -> Any:
    if isinstance(x, NamedArray):
        return NamedArray(payload, names)
    return payload


def _dense(payload: Any) -> Any:
    if isinstance(payload, CoVector):
        return np.asarray(payload)
    return payload


def _flip(x: Any, *, conjugate: bool, op_name: str) -> Any:
    resolve_op_policy(op_name).validate_rank(op_name=op_name, rank=x.ndim)
    names = dimnames(x)
    payload = unname(x)
    if isinstance(payload, CoVector):
        row = payload.row()
        vector = row.conj() if conjugate else row
        return _rename_like(x, vector, (names[1],))
    if len(names) == 1:
        covector = CoVector(payload, conjugate=conjugate)
        return _rename_like(x, covector, (WILDCARD, names[0]))
    flipped = payload.conj().T if conjugate else payload.T
    return _rename_like(x, flipped, (names[1], names[0]))


def transpose(x: Any) -> Any:
    """Transpose a vector or matrix, reversing its names.

    A vector `(n,)` becomes a `CoVector` named `(_, n)`; transposing that
    covector gives back the vector.
    """
    return _flip(x, conjugate=False, op_name="transpose")


def adjoint(x: Any) -> Any:
    """Conjugate transpose; names follow `transpose`."""
    return _flip(x, conjugate=True, op_name="adjoint")


def permutedims(x: Any, perm: Sequence[DimSelector] | None = None) -> Any:
    """Permute axes, carrying names along.

    Without `perm` a vector becomes a `(1, n)` matrix named `(_, n)` and a
    matrix is transposed. `perm` lists every axis once, by name or index.
    """
    names = dimnames(x)
    payload = _dense(unname(x))
    if perm is None:
        if len(names) == 1:
            reshaped = payload.reshape(1, payload.shape[0])
            return _rename_like(x, reshaped, (WILDCARD, names[0]))
        if len(names) != 2:
            raise ValidationError(
                code=ErrorCode.INVALID_PERMUTATION,
                message=(
                    "invalid permutation: arrays of rank "
                    f"{len(names)} need an explicit permutation"
                ),
                help="pass perm listing every axis once",
                related=("permutedims",),
                data={"rank": len(names)},
            )
        perm = (1, 0)

    axes = tuple(dim(names, selector) for selector in perm)
    if sorted(axes) != list(range(len(names))):
        rendered = ", ".join(str(selector) for selector in perm)
        raise ValidationError(
            code=ErrorCode.INVALID_PERMUTATION,
            message=(
                f"invalid permutation: ({rendered}) is not a permutation of "
                f"{len(names)} axes"
            ),
            help="list every axis exactly once",
            related=("permutedims",),
            data={"rank": len(names), "perm": rendered},
        )
    permuted = np.transpose(payload, axes)
    return _rename_like(x, permuted, tuple(names[axis] for axis in axes))


def dropdims(x: Any, dims: DimSelector | Sequence[DimSelector]) -> Any:
    """Drop singleton axes selected by name or index."""
    names = dimnames(x)
    payload = _dense(unname(x))
    selectors = (dims,) if isinstance(dims, (str, Integral)) else tuple(dims)
    axes = tuple(sorted({dim(names, selector) for selector in selectors}))
    for axis in axes:
        if payload.shape[axis] != 1:
            raise ValidationError(
                code=ErrorCode.DROPDIMS_NON_SINGLETON,
                message=(
                    f"dropdims non-singleton: axis {axis} ({names[axis]}) has "
                    f"length {payload.shape[axis]}"
                ),
                help="only axes of length 1 can be dropped",
                related=("dropdims",),
                data={"axis": axis, "length": int(payload.shape[axis])},
            )
    squeezed = np.squeeze(payload, axis=axes)
    kept = tuple(name for axis, name in enumerate(names) if axis not in axes)
    return _rename_like(x, squeezed, kept)


__all__ = ["adjoint", "dropdims", "permutedims", "transpose"]
