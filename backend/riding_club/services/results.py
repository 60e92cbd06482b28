"""
Outcome of a best-effort fan-out over several bookings.
"""

from dataclasses import dataclass, field

from riding_club.core.errors import GroupOperationFailedError, PartialFailureError


@dataclass
class FanOutResult:
    operation: str
    target_id: str
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def outcome(self) -> str:
        if not self.failed:
            return "complete"
        if self.succeeded:
            return "partial"
        return "failed"

    def as_dict(self) -> dict:
        return {
            "operation": self.operation,
            "target_id": self.target_id,
            "outcome": self.outcome,
            "total": self.total,
            "succeeded": list(self.succeeded),
            "failed": list(self.failed),
        }

    def raise_for_outcome(self) -> "FanOutResult":
        """Raise unless every member succeeded; returns self for chaining."""
        if self.outcome == "partial":
            raise PartialFailureError(self)
        if self.outcome == "failed":
            raise GroupOperationFailedError(self)
        return self


@dataclass
class SubmissionResult(FanOutResult):
    created: list = field(default_factory=list)
    group_id: str | None = None

    def as_dict(self) -> dict:
        data = super().as_dict()
        data["group_id"] = self.group_id
        data["created"] = [r.model_dump(mode="json") for r in self.created]
        return data
