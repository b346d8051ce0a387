import numpy as np
import pytest

from namedlinalg import (
    WILDCARD,
    CoVector,
    NamedArray,
    ValidationError,
    dim,
    dimnames,
    unname,
)
from namedlinalg.names import (
    is_wildcard,
    names_compatible,
    normalize_names,
    wildcard_names,
)


def test_underscore_normalizes_to_wildcard() -> None:
    assert normalize_names(("x", "_")) == ("x", WILDCARD)
    assert is_wildcard(normalize_names(("_",))[0])
    assert repr(WILDCARD) == "_"
    assert str(WILDCARD) == "_"


def test_single_string_is_one_name() -> None:
    assert normalize_names("time") == ("time",)


def test_normalize_names_rejects_invalid_identifiers() -> None:
    with pytest.raises(ValueError):
        normalize_names(("x", "not a name"))
    with pytest.raises(ValueError):
        normalize_names(("",))


def test_normalize_names_rejects_non_string_names() -> None:
    with pytest.raises(TypeError):
        normalize_names(("x", 1))  # type: ignore[arg-type]


def test_normalize_names_checks_rank() -> None:
    with pytest.raises(ValidationError) as error:
        normalize_names(("x", "y"), rank=3)

    assert error.value.code == "name_count_mismatch"
    assert error.value.data == {"expected": 3, "got": 2}


def test_wildcard_matches_any_name() -> None:
    assert names_compatible("x", "x")
    assert names_compatible("x", WILDCARD)
    assert names_compatible(WILDCARD, "y")
    assert names_compatible(WILDCARD, WILDCARD)
    assert not names_compatible("x", "y")


def test_wildcard_names_has_requested_rank() -> None:
    assert wildcard_names(0) == ()
    assert wildcard_names(2) == (WILDCARD, WILDCARD)


def test_dim_resolves_names_and_indices() -> None:
    names = ("w", "x", "y")

    assert dim(names, "x") == 1
    assert dim(names, 2) == 2
    assert dim(names, -1) == 2


def test_dim_rejects_unknown_name() -> None:
    with pytest.raises(ValidationError) as error:
        dim(("x", "y"), "z")

    assert error.value.code == "unknown_dim_name"
    assert error.value.data["name"] == "z"


def test_dim_never_resolves_wildcard() -> None:
    with pytest.raises(ValidationError) as error:
        dim(("x", WILDCARD), "_")

    assert error.value.code == "unknown_dim_name"


def test_dim_rejects_out_of_range_index() -> None:
    with pytest.raises(ValidationError) as error:
        dim(("x", "y"), 2)

    assert error.value.code == "dim_out_of_range"
    assert error.value.data == {"axis": 2, "rank": 2}


def test_dim_accepts_numpy_integers() -> None:
    names = ("w", "x", "y")

    assert dim(names, np.int64(1)) == 1
    assert dim(names, np.argmax([0, 0, 5])) == 2
    assert dim(names, np.int32(-3)) == 0

    with pytest.raises(ValidationError) as error:
        dim(names, np.int64(3))
    assert error.value.data == {"axis": 3, "rank": 3}


def test_dim_rejects_bool_selector() -> None:
    with pytest.raises(TypeError):
        dim(("x", "y"), True)


def test_named_array_requires_one_name_per_axis() -> None:
    with pytest.raises(ValidationError) as error:
        NamedArray(np.ones((2, 3)), ("x",))

    assert error.value.code == "name_count_mismatch"


def test_named_array_exposes_payload_and_names() -> None:
    payload = np.arange(6.0).reshape(2, 3)
    nda = NamedArray(payload, ("x", "y"))

    assert nda.names == ("x", "y")
    assert nda.parent is payload
    assert nda.shape == (2, 3)
    assert nda.ndim == 2
    assert nda.dtype == payload.dtype
    assert nda.dim("y") == 1
    assert unname(nda) is payload
    np.testing.assert_array_equal(np.asarray(nda), payload)


def test_named_array_converts_sequences() -> None:
    nda = NamedArray([[1, 2], [3, 4]], ("x", "y"))

    assert isinstance(nda.parent, np.ndarray)
    assert nda.shape == (2, 2)


def test_named_array_rejects_nested_named_payload() -> None:
    nda = NamedArray(np.ones(3), ("x",))

    with pytest.raises(TypeError):
        NamedArray(nda, ("y",))


def test_copy_and_astype_keep_names_and_detach_payload() -> None:
    payload = np.arange(4).reshape(2, 2)
    nda = NamedArray(payload, ("x", "y"))

    copied = nda.copy()
    converted = nda.astype(np.float64)
    copied.parent[0, 0] = 99

    assert copied.names == ("x", "y")
    assert converted.names == ("x", "y")
    assert converted.dtype == np.float64
    assert payload[0, 0] == 0


def test_dimnames_of_plain_array_is_all_wildcard() -> None:
    assert dimnames(np.ones((2, 3))) == (WILDCARD, WILDCARD)
    assert dimnames(NamedArray(np.ones(3), ("x",))) == ("x",)
    assert unname(np.ones(2)).shape == (2,)


def test_array_conversion_honours_copy_flag() -> None:
    payload = np.ones(3, dtype=np.float32)
    nda = NamedArray(payload, ("x",))

    assert np.shares_memory(np.asarray(nda, copy=False), payload)
    assert not np.shares_memory(np.asarray(nda, copy=True), payload)
    with pytest.raises(ValueError):
        np.asarray(nda, dtype=np.float64, copy=False)


def test_conjugated_covector_conversion_needs_a_copy() -> None:
    covector = CoVector(np.array([1 + 1j, 2 - 1j]), conjugate=True)

    with pytest.raises(ValueError):
        np.asarray(covector, copy=False)
    np.testing.assert_array_equal(np.asarray(covector), [[1 - 1j, 2 + 1j]])
