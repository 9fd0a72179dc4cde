"""Result and error types for file discovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


class DiscoveryError(Exception):
    """
    A root path could not be stat'd or listed. Raised per input so callers can
    skip the failing root and keep the rest of a batch.
    """

    def __init__(self, path: Path, error: OSError) -> None:
        super().__init__(f"Cannot read {path}: {error.strerror or error}")
        self.path: Path = path
        self.error: OSError = error


@dataclass(frozen=True)
class DiscoveryFailure:
    """A root that was skipped, with the error that caused it."""

    path: Path
    error: OSError

    @property
    def message(self) -> str:
        return f"{self.path}: {self.error.strerror or self.error}"


@dataclass
class DiscoveryResult:
    """
    Files found across several roots, in input order and without duplicates,
    plus the roots that failed.
    """

    files: list[Path] = field(default_factory=list)
    failures: list[DiscoveryFailure] = field(default_factory=list)
