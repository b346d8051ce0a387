from collections.abc import Mapping
from enum import Enum
from typing import Literal, TypeAlias

DiagnosticSeverity: TypeAlias = Literal["error"]
DiagnosticValue: TypeAlias = str | int | bool


class ErrorCode(str, Enum):
    """Canonical internal diagnostic codes."""

    DIMENSION_MISMATCH = "dimension_mismatch"
    UNSUPPORTED_RANK_COMBINATION = "unsupported_rank_combination"
    NAME_COUNT_MISMATCH = "name_count_mismatch"
    UNKNOWN_DIM_NAME = "unknown_dim_name"
    DIM_OUT_OF_RANGE = "dim_out_of_range"
    RANK_MISMATCH = "rank_mismatch"
    INVALID_PERMUTATION = "invalid_permutation"
    DROPDIMS_NON_SINGLETON = "dropdims_non_singleton"
    BACKEND_DISPATCH_UNSUPPORTED_INPUT = "backend_dispatch_unsupported_input"
    BACKEND_DISPATCH_MIXED_FAMILY = "backend_dispatch_mixed_family"


class NamedDimsError(ValueError):
    """Structured error for dimension-name and rank violations.

    `code` is the `snake_case` value of an `ErrorCode` member and
    `external_code` its member name. `data` is a flat mapping of scalar
    context values; `related` names the operations involved.
    """

    channel = "error"
    severity: DiagnosticSeverity = "error"

    def __init__(
        self,
        *,
        code: ErrorCode,
        message: str,
        help: str | None = None,
        related: tuple[str, ...] = (),
        data: Mapping[str, DiagnosticValue] | None = None,
    ) -> None:
        if not isinstance(code, ErrorCode):
            raise TypeError(
                f"diagnostic code must be an ErrorCode member, got {code!r}"
            )
        if not isinstance(message, str) or not message.strip():
            raise ValueError("diagnostic message must be a non-empty string")
        for note in related:
            if not isinstance(note, str) or not note.strip():
                raise ValueError("related diagnostic notes must be non-empty strings")
        context = dict(data or {})
        for key, value in context.items():
            if not isinstance(key, str) or not isinstance(value, str | int | bool):
                raise TypeError(
                    f"diagnostic data entry {key!r} must map a string to "
                    "a str, int or bool"
                )

        self.error_code = code
        self.code = code.value
        self.external_code = code.name
        self.help = help
        self.related = tuple(related)
        self.data = context
        self.message = message
        super().__init__(message)


class ValidationError(NamedDimsError):
    """Structured validation-phase error."""

    channel = "validation_error"


class DimensionMismatchError(ValidationError):
    """Contraction between arrays whose inner dimension names disagree."""

    def __init__(self, a: tuple[object, ...], b: tuple[object, ...]) -> None:
        rendered_a = _render_names(a)
        rendered_b = _render_names(b)
        super().__init__(
            code=ErrorCode.DIMENSION_MISMATCH,
            message=(
                "Cannot take matrix product of arrays with different inner "
                f"dimension names. {rendered_a} vs {rendered_b}"
            ),
            help=(
                "rename one operand so the contracted names agree, "
                "or use the wildcard '_'"
            ),
            related=("matrix product",),
            data={"lhs": rendered_a, "rhs": rendered_b},
        )
        self.lhs = a
        self.rhs = b


def _render_names(names: tuple[object, ...]) -> str:
    """Render a name tuple for diagnostics."""
    if len(names) == 1:
        return f"({names[0]},)"
    return "(" + ", ".join(str(name) for name in names) + ")"


__all__ = [
    "DimensionMismatchError",
    "ErrorCode",
    "NamedDimsError",
    "ValidationError",
]
