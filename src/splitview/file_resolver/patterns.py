"""
Splitignore pattern matching.

Rules come in three kinds, decided by syntax alone:

- Directory rules end with `/` and match that directory and everything below
  it, on a path segment boundary (`dist/` matches `dist/a.js`, not
  `distribution/a.js`). A `*` inside a directory rule is literal.
- Wildcard rules contain `*`. They are translated to a regular expression with
  a fixed table (`.` is a literal dot, `*` is any sequence) and must match the
  whole path. `?`, character classes and `**` have no special meaning.
- Exact rules match only the identical path string.

Each rule is a pathspec `RegexPattern`, the same way pathspec builds its own
gitignore dialect on top of compiled regular expressions.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from enum import Enum

from pathspec import RegexPattern

logger = logging.getLogger(__name__)


class RuleKind(Enum):
    DIRECTORY = "directory"
    WILDCARD = "wildcard"
    EXACT = "exact"


def _is_blank_or_comment(line: str) -> bool:
    return not line or line.startswith("#")


def rule_kind(pattern: str) -> RuleKind:
    """Classify a trimmed rule. The trailing slash check comes first."""
    if pattern.endswith("/"):
        return RuleKind.DIRECTORY
    if "*" in pattern:
        return RuleKind.WILDCARD
    return RuleKind.EXACT


def _wildcard_to_regex(pattern: str) -> str:
    translated = pattern.replace(".", r"\.").replace("*", ".*")
    try:
        re.compile(translated)
    except re.error as e:
        # Not a valid expression once translated; fall back to a literal rule.
        logger.debug("Treating ignore rule %r literally: %s", pattern, e)
        translated = re.escape(pattern).replace(r"\*", ".*")
    return f"^{translated}$"


class SplitIgnorePattern(RegexPattern):
    """
    One splitignore rule. Blank and comment lines produce a null pattern
    (`include is None`) that never matches.
    """

    __slots__ = ("kind",)

    def __init__(self, pattern: str) -> None:
        text = pattern.strip()
        self.kind: RuleKind | None = None if _is_blank_or_comment(text) else rule_kind(text)
        super().__init__(text)

    @classmethod
    def pattern_to_regex(cls, pattern: str) -> tuple[str | None, bool | None]:  # pyright: ignore[reportIncompatibleMethodOverride]
        text = pattern.strip()
        if _is_blank_or_comment(text):
            return None, None

        kind = rule_kind(text)
        if kind is RuleKind.DIRECTORY:
            dir_pattern = re.escape(text[:-1])
            return f"^{dir_pattern}(?:/(?s:.*))?$", True
        if kind is RuleKind.WILDCARD:
            return _wildcard_to_regex(text), True
        return f"^{re.escape(text)}$", True

    def matches(self, path: str) -> bool:
        """Full-string match against an already normalized relative path."""
        if self.include is None:
            return False
        return self.regex.fullmatch(path) is not None


class IgnorePatterns:
    """
    An immutable, ordered set of splitignore rules built from raw lines.

    Construction never fails: empty lines and `#` comments are dropped, and
    everything else becomes a rule, even if it can never match anything.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        rules = (SplitIgnorePattern(line) for line in lines)
        self._rules: tuple[SplitIgnorePattern, ...] = tuple(
            rule for rule in rules if rule.include is not None
        )

    @classmethod
    def from_text(cls, text: str) -> IgnorePatterns:
        """Build from the contents of an ignore file."""
        return cls(text.split("\n"))

    @property
    def rules(self) -> tuple[SplitIgnorePattern, ...]:
        return self._rules

    @property
    def patterns(self) -> list[str]:
        """The normalized rule strings, in file order."""
        return [rule.pattern for rule in self._rules]

    def ignores(self, relative_path: str) -> bool:
        """
        True if any rule matches `relative_path`. Backslashes are treated as
        separators, so Windows-style relative paths match the same rules.
        """
        normalized = relative_path.replace("\\", "/")
        return any(rule.matches(normalized) for rule in self._rules)

    def __iter__(self) -> Iterator[SplitIgnorePattern]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"IgnorePatterns({self.patterns!r})"
