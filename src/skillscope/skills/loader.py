"""SKILL.md file loader and parser.

Parses SKILL.md files with YAML frontmatter and a markdown body. Only the
``name`` and ``description`` fields are validated; every other field passes
through untouched.

Failure modes are reported as distinct errors:
- ``SkillParseError``: the file could not be read, is not UTF-8, has no
  frontmatter block, or its YAML cannot be decoded.
- ``SkillValidationError``: the frontmatter decoded but a required field is
  missing, not a string, or empty.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from skillscope.skills.config import SKILL_FILE, ValidationResult
from skillscope.skills.errors import SkillParseError, SkillValidationError

logger = logging.getLogger(__name__)

# Required frontmatter fields.
_REQUIRED_FIELDS = ("name", "description")

_WHITESPACE = re.compile(r"\s+")


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that only reads ``true``/``false`` as booleans.

    YAML 1.1 also treats ``yes``, ``no``, ``on`` and ``off`` as booleans, which
    turns skills named ``on`` or ``off`` into invalid manifests.
    """


_BOOL_TAG = "tag:yaml.org,2002:bool"

_FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_FrontmatterLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)

_FRONTMATTER_TEMPLATE = [
    "Add a YAML frontmatter block at the top of SKILL.md:",
    "---",
    "name: <skill-name>",
    "description: <what the skill does>",
    "---",
]

_YAML_SUGGESTIONS = [
    "Check the YAML frontmatter for syntax issues (colons, indentation).",
    "Ensure the frontmatter is wrapped between leading and trailing '---' lines.",
]


@dataclass(frozen=True)
class ParsedManifest:
    """Result of parsing a SKILL.md file.

    Attributes:
        frontmatter: Decoded frontmatter with ``description`` normalized.
        body: Markdown after the closing ``---``.
        full_content: The whole file, frontmatter included.
    """

    frontmatter: dict[str, Any]
    body: str
    full_content: str

    @property
    def name(self) -> str:
        return self.frontmatter["name"]

    @property
    def description(self) -> str:
        return self.frontmatter["description"]


def normalize_description(description: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return _WHITESPACE.sub(" ", description).strip()


def _read_text(path: Path) -> str:
    """Read a manifest as strict UTF-8.

    Raises:
        SkillParseError: If the file cannot be read or is not valid UTF-8.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SkillParseError(path, exc.strerror or str(exc)) from exc

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SkillParseError(
            path,
            "Invalid UTF-8 encoding",
            [
                "Ensure SKILL.md is saved with UTF-8 encoding (no BOM).",
                "If the file was copied from another editor, re-save it as UTF-8.",
            ],
        ) from exc


def _split_frontmatter(content: str, path: Path) -> tuple[str, str]:
    """Split SKILL.md content into frontmatter YAML and markdown body.

    Expects content beginning with ``---`` and a closing ``---`` line. Only
    the first pair of markers is used, so horizontal rules in the body are
    preserved.

    Args:
        content: Raw file content.
        path: File path (for error messages).

    Returns:
        Tuple of (frontmatter_yaml, body).

    Raises:
        SkillParseError: If the ``---`` delimiters are missing.
    """
    stripped = content.lstrip()
    if not stripped.startswith("---"):
        raise SkillParseError(path, "Missing YAML frontmatter", list(_FRONTMATTER_TEMPLATE))

    lines = stripped.split("\n")
    closing_idx = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            closing_idx = i
            break

    if closing_idx is None:
        raise SkillParseError(
            path,
            "Missing closing '---' frontmatter delimiter",
            list(_YAML_SUGGESTIONS),
        )

    frontmatter_yaml = "\n".join(lines[1:closing_idx])
    body = "\n".join(lines[closing_idx + 1 :])
    return frontmatter_yaml, body


def _parse_yaml(yaml_str: str, path: Path) -> dict[str, Any]:
    """Parse YAML frontmatter string into a dictionary.

    Raises:
        SkillParseError: If the YAML is syntactically invalid or not a mapping.
    """
    try:
        data = yaml.load(yaml_str, Loader=_FrontmatterLoader)
    except yaml.YAMLError as exc:
        detail = str(exc)
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            detail = (
                f"YAML syntax error at line {mark.line + 1}, "
                f"column {mark.column + 1}: {getattr(exc, 'problem', exc)}"
            )
        raise SkillParseError(path, detail, list(_YAML_SUGGESTIONS)) from exc

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise SkillParseError(
            path,
            "Frontmatter must be a YAML mapping, got " + type(data).__name__,
            list(_YAML_SUGGESTIONS),
        )

    return data


def _validate_required(data: dict[str, Any], path: Path) -> None:
    """Check that ``name`` and ``description`` are non-empty strings.

    Raises:
        SkillValidationError: Listing every failing field.
    """
    issues: list[str] = []
    suggestions: list[str] = []

    for field_name in _REQUIRED_FIELDS:
        if field_name not in data or data[field_name] is None:
            issues.append(f"Missing required field '{field_name}' in {path}")
            suggestions.append(f"Add '{field_name}: <value>' to the YAML frontmatter.")
            continue

        value = data[field_name]
        if not isinstance(value, str):
            issues.append(f"{field_name}: Expected string, received {type(value).__name__}")
            suggestions.append(f"Quote the value of '{field_name}' so it is read as text.")
            continue

        if not value.strip():
            issues.append(f"{field_name}: Skill {field_name} cannot be empty")
            suggestions.append(f"Provide a non-empty value for '{field_name}'.")

    if issues:
        raise SkillValidationError(path, issues, suggestions)


def parse_skill_file(path: str | Path) -> ParsedManifest:
    """Parse and validate a SKILL.md (or .SKILL.md) file.

    Args:
        path: Path to the manifest file.

    Returns:
        ``ParsedManifest`` with trimmed ``name``, normalized ``description``,
        the body, and the full file text.

    Raises:
        SkillParseError: If the file cannot be read or decoded.
        SkillValidationError: If required fields are missing or empty.
    """
    file_path = Path(path)
    content = _read_text(file_path)
    frontmatter_yaml, body = _split_frontmatter(content, file_path)
    data = _parse_yaml(frontmatter_yaml, file_path)
    _validate_required(data, file_path)

    frontmatter = dict(data)
    frontmatter["name"] = data["name"].strip()
    frontmatter["description"] = normalize_description(data["description"])

    return ParsedManifest(frontmatter=frontmatter, body=body, full_content=content)


def validate_skill_file(path: str | Path) -> ValidationResult:
    """Validate a SKILL.md file without raising.

    Args:
        path: Path to a manifest file or the bundle directory holding it.

    Returns:
        ``ValidationResult`` with issues and suggestions on failure.
    """
    file_path = Path(path)
    if file_path.is_dir():
        file_path = file_path / SKILL_FILE

    try:
        parse_skill_file(file_path)
    except SkillValidationError as exc:
        return ValidationResult(
            valid=False,
            errors=exc.issues,
            suggestions=exc.suggestions,
            skill_path=file_path,
        )
    except SkillParseError as exc:
        return ValidationResult(
            valid=False,
            errors=[exc.reason],
            suggestions=exc.suggestions,
            skill_path=file_path,
        )

    logger.debug("Validated skill manifest %s", file_path)
    return ValidationResult(valid=True, skill_path=file_path)
