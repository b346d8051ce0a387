from dataclasses import dataclass

import numpy as np
import pytest

from namedlinalg import CoVector, NamedArray, inv
from namedlinalg.backend import (
    BACKEND_RESOLVER,
    derive_family_key,
    infer_backend_family,
)
from namedlinalg.diagnostics import ErrorCode, ValidationError


class _FakeNamespaceA:
    __name__ = "fake.a"


class _FakeNamespaceB:
    __name__ = "fake.b"


@dataclass(frozen=True, slots=True)
class FakeArrayA:
    shape: tuple[int, ...]

    @property
    def ndim(self) -> int:
        return len(self.shape)

    def __array_namespace__(
        self, api_version: str | None = None
    ) -> type[_FakeNamespaceA]:
        _ = api_version
        return _FakeNamespaceA


@dataclass(frozen=True, slots=True)
class FakeArrayB:
    shape: tuple[int, ...]

    @property
    def ndim(self) -> int:
        return len(self.shape)

    def __array_namespace__(
        self, api_version: str | None = None
    ) -> type[_FakeNamespaceB]:
        _ = api_version
        return _FakeNamespaceB


@dataclass(frozen=True, slots=True)
class NamespaceWithInvalidNameArray:
    shape: tuple[int, ...]

    def __array_namespace__(self, api_version: str | None = None) -> object:
        _ = api_version

        class Namespace:
            def __init__(self) -> None:
                self.__name__ = "   "

        return Namespace()


@dataclass(frozen=True, slots=True)
class BrokenNamespaceArray:
    shape: tuple[int, ...]

    def __array_namespace__(self, api_version: str | None = None) -> object:
        _ = api_version
        raise RuntimeError("namespace hook failed")


def test_numpy_payload_resolves_numpy_family() -> None:
    profile = BACKEND_RESOLVER.lookup(np.ones((2, 2)), op_name="inv")

    assert profile.backend_family == "numpy"
    assert callable(profile.namespace.linalg.inv)


def test_lookup_rejects_non_array_input() -> None:
    with pytest.raises(ValidationError) as error:
        BACKEND_RESOLVER.lookup(object(), op_name="inv")

    assert error.value.code == ErrorCode.BACKEND_DISPATCH_UNSUPPORTED_INPUT.value
    assert error.value.data == {"operation": "inv"}


def test_lookup_rejects_empty_input() -> None:
    with pytest.raises(ValidationError) as error:
        BACKEND_RESOLVER.lookup(op_name="inv")

    assert error.value.code == "backend_dispatch_unsupported_input"


def test_lookup_rejects_blank_namespace_name() -> None:
    with pytest.raises(ValidationError) as error:
        BACKEND_RESOLVER.lookup(
            NamespaceWithInvalidNameArray(shape=(2,)), op_name="inv"
        )

    assert error.value.code == "backend_dispatch_unsupported_input"


def test_lookup_wraps_failing_namespace_hook() -> None:
    with pytest.raises(ValidationError) as error:
        BACKEND_RESOLVER.lookup(BrokenNamespaceArray(shape=(2,)), op_name="inv")

    assert error.value.code == "backend_dispatch_unsupported_input"
    assert isinstance(error.value.__cause__, RuntimeError)


def test_lookup_rejects_mixed_families() -> None:
    with pytest.raises(ValidationError) as error:
        BACKEND_RESOLVER.lookup(
            FakeArrayA(shape=(2,)), FakeArrayB(shape=(2,)), op_name="matmul"
        )

    assert error.value.code == "backend_dispatch_mixed_family"
    assert error.value.data["families"] == 2


def test_validate_family_ignores_non_array_api_payloads() -> None:
    BACKEND_RESOLVER.validate_family(
        FakeArrayA(shape=(2,)), CoVector(np.ones(2)), op_name="matmul"
    )

    with pytest.raises(ValidationError):
        BACKEND_RESOLVER.validate_family(
            FakeArrayA(shape=(2,)), FakeArrayB(shape=(2,)), op_name="matmul"
        )


def test_named_product_rejects_mixed_families() -> None:
    a = NamedArray(FakeArrayA(shape=(2, 2)), ("a", "b"))
    b = NamedArray(FakeArrayB(shape=(2, 2)), ("b", "c"))

    with pytest.raises(ValidationError) as error:
        _ = a @ b

    assert error.value.code == "backend_dispatch_mixed_family"


def test_inv_rejects_non_array_payload() -> None:
    with pytest.raises(ValidationError) as error:
        inv(NamedArray(CoVector(np.ones(1)), ("a", "b")))

    assert error.value.code == "backend_dispatch_unsupported_input"


def test_family_inference_strips_compat_prefix() -> None:
    assert infer_backend_family("array_api_compat.numpy") == "numpy"
    assert infer_backend_family("numpy.linalg") == "numpy"
    assert infer_backend_family("fake.a") is None
    assert derive_family_key("array_api_compat.torch") == "known:torch"
    assert derive_family_key("fake.a") == "namespace:fake.a"
