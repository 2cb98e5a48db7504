"""Claim status transition graph."""

from claimflow.domain.entities import ClaimStatus

S = ClaimStatus

# Allowed targets per current status. DRAFT -> DRAFT is "save draft".
TRANSITIONS: dict[ClaimStatus, frozenset[ClaimStatus]] = {
    S.DRAFT: frozenset({S.DRAFT, S.SUBMITTED}),
    S.SUBMITTED: frozenset({S.DRAFT, S.UNDER_REVIEW}),
    S.UNDER_REVIEW: frozenset({S.SUBMITTED, S.APPROVED}),
    S.APPROVED: frozenset({S.UNDER_REVIEW, S.INVOICED}),
    S.INVOICED: frozenset({S.APPROVED}),
}

# (current, target) pairs that move one step down the lifecycle.
BACKWARD: frozenset[tuple[ClaimStatus, ClaimStatus]] = frozenset(
    {
        (S.SUBMITTED, S.DRAFT),
        (S.UNDER_REVIEW, S.SUBMITTED),
        (S.APPROVED, S.UNDER_REVIEW),
        (S.INVOICED, S.APPROVED),
    }
)


class StatusGraph:
    """Lookup-table view over the legal claim status transitions."""

    def __init__(
        self,
        transitions: dict[ClaimStatus, frozenset[ClaimStatus]] = TRANSITIONS,
        backward: frozenset[tuple[ClaimStatus, ClaimStatus]] = BACKWARD,
    ):
        self.transitions = transitions
        self.backward = backward

    def allowed_targets(self, current: ClaimStatus) -> tuple[ClaimStatus, ...]:
        """Statuses reachable from current, in lifecycle order."""
        targets = self.transitions.get(current, frozenset())
        return tuple(sorted(targets, key=lambda status: status.rank))

    def is_allowed(self, current: ClaimStatus, target: ClaimStatus) -> bool:
        return target in self.transitions.get(current, frozenset())

    def is_backward(self, current: ClaimStatus, target: ClaimStatus) -> bool:
        """True iff target is the lower-ranked adjacent status of current."""
        return (current, target) in self.backward
