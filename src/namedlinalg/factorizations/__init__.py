from .base import Factorization, eigtype, rewrap
from .lq import LQ, lq
from .lu import LU, lu
from .svd import SVD, svd

__all__ = [
    "Factorization",
    "LQ",
    "LU",
    "SVD",
    "eigtype",
    "lq",
    "lu",
    "rewrap",
    "svd",
]
