"""Skill subsystem exceptions."""

from __future__ import annotations

from pathlib import Path


class SkillError(Exception):
    """Base exception for all skill-related errors.

    All custom exceptions in the skills subsystem inherit from this class,
    allowing callers to catch all skill errors with a single handler.

    Attributes:
        message: Human-readable error message.
        suggestions: Hints a caller can show next to the message.
    """

    def __init__(self, message: str, suggestions: list[str] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            suggestions: Hints a caller can show next to the message.
        """
        self.message = message
        self.suggestions = list(suggestions or [])
        super().__init__(message)

    def __reduce__(self) -> tuple:
        """Support pickling by returning constructor arguments."""
        return (type(self), (self.message, self.suggestions))

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}({self.message!r})"


class SkillNotFoundError(SkillError):
    """Raised when no skill matches a query.

    Attributes:
        name: Query that matched nothing.
        suggestions: Closest display ids, best first.
    """

    def __init__(self, name: str, suggestions: list[str] | None = None) -> None:
        """Initialize the error.

        Args:
            name: Query that matched nothing.
            suggestions: Closest display ids, best first.
        """
        self.name = name
        super().__init__(f"Skill '{name}' not found", suggestions)

    def __reduce__(self) -> tuple:
        """Support pickling by returning constructor arguments."""
        return (type(self), (self.name, self.suggestions))

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}(name={self.name!r}, suggestions={self.suggestions!r})"


class AmbiguousSkillNameError(SkillError):
    """Raised when a query matches more than one skill.

    Attributes:
        name: Query that matched several skills.
        matches: Qualified display ids of every match.
    """

    def __init__(self, name: str, matches: list[str]) -> None:
        """Initialize the error.

        Args:
            name: Query that matched several skills.
            matches: Qualified display ids of every match.
        """
        self.name = name
        self.matches = list(matches)
        super().__init__(
            f"Skill name '{name}' is ambiguous. Multiple skills found: "
            f"{', '.join(self.matches)}",
            self.matches,
        )

    def __reduce__(self) -> tuple:
        """Support pickling by returning constructor arguments."""
        return (type(self), (self.name, self.matches))

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}(name={self.name!r}, matches={self.matches!r})"


class SkillValidationError(SkillError):
    """Raised when a manifest parsed but its required fields are invalid.

    Attributes:
        path: Manifest file that failed validation.
        issues: One message per failing field.
        suggestions: Remediation hints.
    """

    def __init__(
        self,
        path: str | Path,
        issues: list[str],
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            path: Manifest file that failed validation.
            issues: One message per failing field.
            suggestions: Remediation hints.
        """
        self.path = Path(path)
        self.issues = list(issues)
        super().__init__(
            f"Validation failed for {self.path}: {', '.join(self.issues)}",
            suggestions,
        )

    def __reduce__(self) -> tuple:
        """Support pickling by returning constructor arguments."""
        return (type(self), (str(self.path), self.issues, self.suggestions))

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{type(self).__name__}(path={str(self.path)!r}, "
            f"issues={self.issues!r})"
        )


class SkillParseError(SkillError):
    """Raised when a manifest cannot be read or its frontmatter cannot be decoded.

    Attributes:
        path: Manifest file that failed to parse.
        reason: What went wrong.
        suggestions: Remediation hints.
    """

    def __init__(
        self,
        path: str | Path,
        reason: str,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            path: Manifest file that failed to parse.
            reason: What went wrong.
            suggestions: Remediation hints.
        """
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to parse {self.path}: {reason}", suggestions)

    def __reduce__(self) -> tuple:
        """Support pickling by returning constructor arguments."""
        return (type(self), (str(self.path), self.reason, self.suggestions))

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{type(self).__name__}(path={str(self.path)!r}, "
            f"reason={self.reason!r})"
        )


class SelectorSyntaxError(SkillError):
    """Raised when an include/exclude selector cannot be parsed.

    Attributes:
        selector: Raw selector text.
        reason: Why the selector was rejected.
    """

    def __init__(self, selector: str, reason: str) -> None:
        """Initialize the error.

        Args:
            selector: Raw selector text.
            reason: Why the selector was rejected.
        """
        self.selector = selector
        self.reason = reason
        super().__init__(f"Invalid selector '{selector}': {reason}")

    def __reduce__(self) -> tuple:
        """Support pickling by returning constructor arguments."""
        return (type(self), (self.selector, self.reason))

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}(selector={self.selector!r}, reason={self.reason!r})"
