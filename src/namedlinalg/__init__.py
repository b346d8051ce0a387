import logging

from .diagnostics import (
    DimensionMismatchError,
    ErrorCode,
    NamedDimsError,
    ValidationError,
)
from .dispatch import declare_matmul, matmul
from .factorizations import LQ, LU, SVD, eigtype, lq, lu, svd
from .linalg import cor, cov, inv
from .named_array import CoVector, NamedArray, dimnames, unname
from .names import WILDCARD, dim, names_compatible, wildcard_names
from .propagation import inverse_names, matmul_names, symmetric_names
from .reshaping import adjoint, dropdims, permutedims, transpose
from .validation import matrix_prod_names, valid_matmul_dims

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CoVector",
    "DimensionMismatchError",
    "ErrorCode",
    "LQ",
    "LU",
    "NamedArray",
    "NamedDimsError",
    "SVD",
    "ValidationError",
    "WILDCARD",
    "adjoint",
    "cor",
    "cov",
    "declare_matmul",
    "dim",
    "dimnames",
    "dropdims",
    "eigtype",
    "inv",
    "inverse_names",
    "lq",
    "lu",
    "matmul",
    "matmul_names",
    "matrix_prod_names",
    "names_compatible",
    "permutedims",
    "svd",
    "symmetric_names",
    "transpose",
    "unname",
    "valid_matmul_dims",
    "wildcard_names",
]
