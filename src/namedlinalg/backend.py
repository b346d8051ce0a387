from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias

from array_api_compat import array_namespace, is_array_api_obj

from .diagnostics import ErrorCode, ValidationError

BackendFamily: TypeAlias = str

_BACKEND_FAMILY_CANONICAL: dict[str, BackendFamily] = {
    "numpy": "numpy",
    "torch": "torch",
    "jax": "jax",
    "cupy": "cupy",
    "dask": "dask",
}


class ArrayNamespaceLike(Protocol):
    """Minimal Array API namespace protocol."""

    __name__: str


def derive_namespace_id(namespace: ArrayNamespaceLike) -> str:
    """Derive stable namespace identifier for modules and class-like namespaces."""
    namespace_name = getattr(namespace, "__name__", None)
    if not isinstance(namespace_name, str):
        raise TypeError("array namespace must define string __name__")

    stripped_name = namespace_name.strip()
    if not stripped_name:
        raise TypeError("array namespace __name__ cannot be empty")
    return stripped_name


def infer_backend_family(namespace_id: str) -> BackendFamily | None:
    """Infer canonical backend family from namespace identifier."""
    normalized_namespace_id = namespace_id.removeprefix("array_api_compat.")
    candidate = normalized_namespace_id.split(".")[0]
    return _BACKEND_FAMILY_CANONICAL.get(candidate)


def derive_family_key(namespace_id: str) -> str:
    """Derive backend-family key used for mixed-family validation."""
    backend_family = infer_backend_family(namespace_id)
    if backend_family is not None:
        return f"known:{backend_family}"
    return f"namespace:{namespace_id}"


@dataclass(frozen=True, slots=True)
class BackendProfile:
    """Resolved backend profile for one operation call."""

    namespace: Any
    namespace_id: str
    backend_family: BackendFamily | None


class BackendResolver:
    """Resolve the Array API namespace shared by raw payloads."""

    def lookup(self, *arrays: object, op_name: str) -> BackendProfile:
        """Lookup backend profile from raw payloads."""
        if not arrays:
            raise ValidationError(
                code=ErrorCode.BACKEND_DISPATCH_UNSUPPORTED_INPUT,
                message="backend dispatch unsupported input: no array inputs provided",
                help="pass one or more arrays to resolve backend dispatch",
                related=("backend dispatch",),
                data={"operation": op_name},
            )

        namespace_ids: list[str] = []
        family_keys: list[str] = []
        namespaces: list[Any] = []
        for array in arrays:
            try:
                namespace = array_namespace(array)
                namespace_id = derive_namespace_id(namespace)
            except Exception as exc:
                raise ValidationError(
                    code=ErrorCode.BACKEND_DISPATCH_UNSUPPORTED_INPUT,
                    message=(
                        "backend dispatch unsupported input: "
                        f"array type {type(array).__name__!r} is not Array API compatible"
                    ),
                    help="use arrays from a supported Array API compatible backend family",
                    related=("backend dispatch",),
                    data={"operation": op_name},
                ) from exc

            namespaces.append(namespace)
            namespace_ids.append(namespace_id)
            family_keys.append(derive_family_key(namespace_id))

        unique_families = tuple(dict.fromkeys(family_keys))
        if len(unique_families) != 1:
            raise ValidationError(
                code=ErrorCode.BACKEND_DISPATCH_MIXED_FAMILY,
                message=(
                    "backend dispatch mixed family: "
                    "all inputs must share one backend family"
                ),
                help=f"do not mix array families in one {op_name} call",
                related=("backend dispatch",),
                data={
                    "operation": op_name,
                    "families": len(unique_families),
                    "namespace_ids": ",".join(tuple(dict.fromkeys(namespace_ids))),
                },
            )
        return BackendProfile(
            namespace=namespaces[0],
            namespace_id=namespace_ids[0],
            backend_family=infer_backend_family(namespace_ids[0]),
        )

    def validate_family(self, *arrays: object, op_name: str) -> None:
        """Reject mixed backend families among Array API payloads.

        Payloads that are not Array API objects (sparse matrices, covectors)
        are left to their own operator overloads.
        """
        array_api_payloads = tuple(array for array in arrays if is_array_api_obj(array))
        if len(array_api_payloads) > 1:
            self.lookup(*array_api_payloads, op_name=op_name)


BACKEND_RESOLVER = BackendResolver()


__all__ = [
    "ArrayNamespaceLike",
    "BACKEND_RESOLVER",
    "BackendFamily",
    "BackendProfile",
    "BackendResolver",
    "derive_family_key",
    "derive_namespace_id",
    "infer_backend_family",
]
