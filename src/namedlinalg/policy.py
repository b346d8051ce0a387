from dataclasses import dataclass

from .diagnostics import ErrorCode, ValidationError


@dataclass(frozen=True, slots=True)
class OpPolicy:
    """Canonical operand-rank policy for one operation."""

    ranks: frozenset[int] = frozenset((2,))

    def validate_rank(self, *, op_name: str, rank: int) -> None:
        """Validate one operand rank against this policy."""
        if rank in self.ranks:
            return
        expected = ", ".join(str(value) for value in sorted(self.ranks))
        raise ValidationError(
            code=ErrorCode.RANK_MISMATCH,
            message=(
                f"{op_name} rank mismatch: expected rank {expected}, got rank {rank}"
            ),
            help=f"pass a {expected}-dimensional array to {op_name}",
            related=(f"{op_name} schema",),
            data={"operation": op_name, "expected": expected, "got": rank},
        )


_DEFAULT_POLICY = OpPolicy()
_POLICIES_BY_OP = {
    "inv": OpPolicy(),
    "cov": OpPolicy(),
    "cor": OpPolicy(),
    "lu": OpPolicy(),
    "lq": OpPolicy(),
    "svd": OpPolicy(),
    "transpose": OpPolicy(ranks=frozenset((1, 2))),
    "adjoint": OpPolicy(ranks=frozenset((1, 2))),
}


def resolve_op_policy(op_name: str, /) -> OpPolicy:
    """Resolve canonical operation policy by name."""
    return _POLICIES_BY_OP.get(op_name, _DEFAULT_POLICY)


__all__ = ["OpPolicy", "resolve_op_policy"]
