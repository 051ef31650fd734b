"""Per-item outcomes of batch commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from binfmt_manager.errors import BinfmtError


@dataclass
class OperationResult:
    """Outcome of one operation on one target (entry name or file path)."""

    action: str  # "register", "unregister", ...
    target: str
    error: BinfmtError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchReport:
    """Collected results of a reload or unregister-all run."""

    results: list[OperationResult] = field(default_factory=list)

    def add(self, result: OperationResult) -> None:
        self.results.append(result)

    def extend(self, other: BatchReport) -> None:
        self.results.extend(other.results)

    @property
    def failures(self) -> list[OperationResult]:
        return [r for r in self.results if not r.ok]

    @property
    def succeeded(self) -> list[OperationResult]:
        return [r for r in self.results if r.ok]

    @property
    def ok(self) -> bool:
        return not self.failures
