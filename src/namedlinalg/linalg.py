from typing import Any

import numpy as np

from .backend import BACKEND_RESOLVER
from .named_array import NamedArray, dimnames, unname
from .names import DimSelector, dim
from .policy import resolve_op_policy
from .propagation import inverse_names, symmetric_names


def inv(a: Any) -> Any:
    """Matrix inverse; a named input `(n1, n2)` gives names `(n2, n1)`.

    Singular or non-square inputs fail inside the backend's `linalg.inv`.
    """
    resolve_op_policy("inv").validate_rank(op_name="inv", rank=a.ndim)
    payload = unname(a)
    namespace = BACKEND_RESOLVER.lookup(payload, op_name="inv").namespace
    data = namespace.linalg.inv(payload)
    if not isinstance(a, NamedArray):
        return data
    return NamedArray(data, inverse_names(a.names))


def _symmetric_reduction(
    op_name: str, a: Any, dims: DimSelector, reducer: Any, **kwargs: Any
) -> Any:
    resolve_op_policy(op_name).validate_rank(op_name=op_name, rank=a.ndim)
    axis = dim(dimnames(a), dims)
    # numpy treats rows as variables when rowvar is set, i.e. observations run along axis 1.
    data = np.atleast_2d(reducer(np.asarray(unname(a)), rowvar=(axis == 1), **kwargs))
    if not isinstance(a, NamedArray):
        return data
    return NamedArray(data, symmetric_names(a.names, axis))


def cov(a: Any, *, dims: DimSelector = 0, **kwargs: Any) -> Any:
    """Covariance matrix with observations along `dims`.

    `dims` is a dimension name or axis index. The result is square over the
    other axis and carries its name twice. Extra keyword arguments are passed
    to `numpy.cov`.
    """
    return _symmetric_reduction("cov", a, dims, np.cov, **kwargs)


def cor(a: Any, *, dims: DimSelector = 0, **kwargs: Any) -> Any:
    """Pearson correlation matrix with observations along `dims`."""
    return _symmetric_reduction("cor", a, dims, np.corrcoef, **kwargs)


__all__ = ["cor", "cov", "inv"]
