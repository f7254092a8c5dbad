from dataclasses import dataclass, field
from enum import Enum


class TokenStatus(Enum):
    GENERATED = "generated"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class TokenFailure:
    token_id: int
    error: Exception

    def __str__(self) -> str:
        return f"#{self.token_id}: {self.error}"


@dataclass
class GenerationReport:
    seed: str
    generated: list[int] = field(default_factory=list)
    failures: list[TokenFailure] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)   # not started after a stop
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failures and not self.skipped

    def record(self, token_id: int, status: TokenStatus, error: Exception | None = None):
        if status == TokenStatus.GENERATED:
            self.generated.append(token_id)
        elif status == TokenStatus.SKIPPED:
            self.skipped.append(token_id)
        else:
            self.failures.append(TokenFailure(token_id=token_id, error=error))

    def finish(self, elapsed: float):
        """Sort results by token id."""
        self.generated.sort()
        self.skipped.sort()
        self.failures.sort(key=lambda f: f.token_id)
        self.elapsed = elapsed

    def get_stats(self) -> dict[str, int]:
        """Get counts by status."""
        return {
            TokenStatus.GENERATED.value: len(self.generated),
            TokenStatus.FAILED.value: len(self.failures),
            TokenStatus.SKIPPED.value: len(self.skipped),
        }
