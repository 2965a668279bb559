"""Include/exclude selectors and the filter engine.

Selector grammar (comma-separated, case-insensitive patterns):

- ``pdf``                         auto-deduplicated name match
- ``claude`` / ``codex:pdf*``     provider, optionally with a name glob
- ``all:pdf``                     any provider, no deduplication
- ``@plugins[:plugin[:skill]]``   installed plugin skills
- ``claude:@plugins:doc*``        same, with explicit provider
- ``@plugin:skill``               one plugin-qualified skill
- ``claude:@plugin:skill``        same, as printed by ``format_skill_id``
- ``file:./path/to/bundle``       exact bundle path

Parsing runs an ordered list of small rule functions; the first rule that
recognises a selector produces the token.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from skillscope.skills.config import (
    LOCATION_PRIORITY,
    NAMESPACE_SEPARATOR,
    SkillLocation,
    SkillMetadata,
    SkillProvider,
)
from skillscope.skills.errors import SelectorSyntaxError

logger = logging.getLogger(__name__)

AUTO = "auto"
ALL = "all"
FILE = "file"
PLUGINS_GROUP = "plugins"

StateFilter = Literal["enabled", "disabled", "all"]

_SELECTOR_PROVIDERS = {AUTO, ALL, *(provider.value for provider in SkillProvider)}
_PLUGIN_CAPABLE = SkillProvider.CLAUDE.value
_WILDCARDS = re.compile(r"[*?]")


@dataclass(frozen=True)
class SelectorToken:
    """A parsed include or exclude selector.

    Attributes:
        provider: ``auto``, ``all``, ``file`` or a provider value.
        name_pattern: Glob or exact name, matched against full and short names.
        group: ``"plugins"`` to restrict to plugin records.
        plugin_name_pattern: Glob or exact plugin name.
        path: Exact bundle directory.
    """

    provider: str
    name_pattern: str | None = None
    group: str | None = None
    plugin_name_pattern: str | None = None
    path: Path | None = None


IncludeToken = SelectorToken
ExcludeToken = SelectorToken


@dataclass
class FilterParseResult:
    includes: list[IncludeToken] = field(default_factory=list)
    excludes: list[ExcludeToken] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Selector rules
# ---------------------------------------------------------------------------


def _split_segments(text: str) -> list[str]:
    return [part for part in text.split(NAMESPACE_SEPARATOR) if part]


def _plugin_group_token(segments: list[str]) -> SelectorToken:
    """Build a plugin-group token from ``[plugin[, skill...]]`` segments."""
    return SelectorToken(
        provider=_PLUGIN_CAPABLE,
        group=PLUGINS_GROUP,
        plugin_name_pattern=segments[0] if segments else None,
        name_pattern=NAMESPACE_SEPARATOR.join(segments[1:]) or None,
    )


def _rule_file(raw: str) -> SelectorToken | None:
    if not raw.startswith(f"{FILE}{NAMESPACE_SEPARATOR}"):
        return None
    literal = raw[len(FILE) + 1 :].strip()
    if not literal:
        raise SelectorSyntaxError(raw, "A path is required after 'file:'")
    return SelectorToken(provider=FILE, path=Path(os.path.abspath(Path(literal).expanduser())))


def _is_plugins_group(text: str) -> bool:
    return text.split(NAMESPACE_SEPARATOR, 1)[0] == f"@{PLUGINS_GROUP}"


def _rule_plugin_skill(raw: str) -> SelectorToken | None:
    at = raw.find("@")
    if at < 0 or NAMESPACE_SEPARATOR not in raw[at + 1 :] or _is_plugins_group(raw[at:]):
        return None

    prefix = raw[:at].rstrip(NAMESPACE_SEPARATOR)
    if prefix not in ("", _PLUGIN_CAPABLE):
        raise SelectorSyntaxError(
            raw, f"Only the {_PLUGIN_CAPABLE} provider supports plugin-qualified skill ids"
        )

    plugin, _, skill = raw[at + 1 :].partition(NAMESPACE_SEPARATOR)
    if not plugin:
        raise SelectorSyntaxError(raw, "Plugin name is required when using @plugin:skill syntax")
    return _plugin_group_token([plugin, *_split_segments(skill)])


def _rule_group(raw: str) -> SelectorToken | None:
    if not raw.startswith("@"):
        return None
    if not _is_plugins_group(raw):
        group = raw.split(NAMESPACE_SEPARATOR, 1)[0]
        raise SelectorSyntaxError(raw, f"Unsupported group token '{group}'")
    return _plugin_group_token(_split_segments(raw)[1:])


def _rule_provider(raw: str) -> SelectorToken | None:
    head, _, rest = raw.partition(NAMESPACE_SEPARATOR)
    head = head.lower()
    if head not in _SELECTOR_PROVIDERS:
        return None
    if not rest:
        return SelectorToken(provider=head)

    if rest.startswith("@"):
        if not _is_plugins_group(rest):
            group = rest.split(NAMESPACE_SEPARATOR, 1)[0]
            raise SelectorSyntaxError(raw, f"Unsupported group token '{group}'")
        if head not in (AUTO, ALL, _PLUGIN_CAPABLE):
            raise SelectorSyntaxError(raw, f"{head} provider does not support @{PLUGINS_GROUP}")
        return _plugin_group_token(_split_segments(rest)[1:])

    return SelectorToken(provider=head, name_pattern=rest)


def _rule_bare_name(raw: str) -> SelectorToken | None:
    return SelectorToken(provider=AUTO, name_pattern=raw)


_RULES: tuple[Callable[[str], SelectorToken | None], ...] = (
    _rule_file,
    _rule_plugin_skill,
    _rule_group,
    _rule_provider,
    _rule_bare_name,
)


def parse_selector(raw: str) -> SelectorToken:
    """Parse one selector string into a token.

    Raises:
        SelectorSyntaxError: If the selector is empty or malformed.
    """
    selector = raw.strip()
    if not selector:
        raise SelectorSyntaxError(raw, "Empty include/exclude selector")

    for rule in _RULES:
        token = rule(selector)
        if token is not None:
            return token

    raise SelectorSyntaxError(raw, "Unrecognised selector")  # pragma: no cover


def _split_arguments(arguments: Iterable[str] | str | None) -> list[str]:
    if arguments is None:
        return []
    if isinstance(arguments, str):
        arguments = [arguments]
    return [piece for argument in arguments for piece in argument.split(",")]


def parse_filters(
    includes: Iterable[str] | str | None = None,
    excludes: Iterable[str] | str | None = None,
) -> FilterParseResult:
    """Parse include and exclude arguments.

    Each argument may hold several comma-separated selectors. When no
    include is given, ``auto`` is used.

    Raises:
        SelectorSyntaxError: If any selector is malformed.
    """
    include_args = _split_arguments(includes) or [AUTO]
    return FilterParseResult(
        includes=[parse_selector(raw) for raw in include_args],
        excludes=[parse_selector(raw) for raw in _split_arguments(excludes)],
    )


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def matches_pattern(value: str, pattern: str | None) -> bool:
    """Match ``value`` against a glob or exact name, ignoring case.

    No pattern matches everything. Patterns without ``*`` or ``?`` compare
    as whole strings.
    """
    if not pattern:
        return True
    if not _WILDCARDS.search(pattern):
        return value.lower() == pattern.lower()
    return re.match(fnmatch.translate(pattern), value, re.IGNORECASE) is not None


def _matches_token(skill: SkillMetadata, token: SelectorToken) -> bool:
    if token.provider not in (AUTO, ALL, FILE) and skill.provider.value != token.provider:
        return False

    if token.group == PLUGINS_GROUP:
        if skill.location is not SkillLocation.PLUGIN:
            return False
        plugin_name = skill.plugin_info.plugin_name if skill.plugin_info else ""
        if not matches_pattern(plugin_name, token.plugin_name_pattern):
            return False

    if token.path is not None and skill.path != token.path:
        return False

    if token.name_pattern:
        return matches_pattern(skill.name, token.name_pattern) or matches_pattern(
            skill.short_name, token.name_pattern
        )
    return True


def manifest_mtime(skill: SkillMetadata) -> float:
    """Modification time of the record's manifest, then its directory, else 0."""
    for candidate in (skill.manifest_file, skill.path):
        try:
            return candidate.stat().st_mtime
        except OSError:
            continue
    return 0.0


def choose_fresher(current: SkillMetadata, challenger: SkillMetadata) -> SkillMetadata:
    """Pick the fresher of two records sharing a base name.

    Non-plugin beats plugin, then the newer manifest wins, then location
    priority (project, user, plugin). Full ties keep ``current``.
    """
    current_plugin = current.location is SkillLocation.PLUGIN
    challenger_plugin = challenger.location is SkillLocation.PLUGIN
    if current_plugin != challenger_plugin:
        return current if challenger_plugin else challenger

    current_mtime = manifest_mtime(current)
    challenger_mtime = manifest_mtime(challenger)
    if current_mtime != challenger_mtime:
        return challenger if challenger_mtime > current_mtime else current

    if LOCATION_PRIORITY[challenger.location] < LOCATION_PRIORITY[current.location]:
        return challenger
    return current


def dedupe_by_base_name(skills: list[SkillMetadata]) -> list[SkillMetadata]:
    """Keep the freshest record per base name, in first-seen order."""
    winners: dict[str, SkillMetadata] = {}
    for skill in skills:
        key = skill.short_name.lower()
        existing = winners.get(key)
        winners[key] = skill if existing is None else choose_fresher(existing, skill)
    return list(winners.values())


def select_by_token(
    skills: list[SkillMetadata],
    token: SelectorToken,
    *,
    dedupe: bool = True,
) -> list[SkillMetadata]:
    """Return the records ``token`` selects from ``skills``.

    ``auto`` tokens keep one record per base name unless ``dedupe`` is off.
    """
    selected = [skill for skill in skills if _matches_token(skill, token)]
    if token.provider == AUTO and dedupe:
        return dedupe_by_base_name(selected)
    return selected


def _filter_state(skills: list[SkillMetadata], state: StateFilter) -> list[SkillMetadata]:
    if state == "all":
        return list(skills)
    if state == "disabled":
        return [skill for skill in skills if skill.disabled]
    if state == "enabled":
        return [skill for skill in skills if not skill.disabled]
    raise ValueError(f"Unknown state filter: {state!r}")


def apply_filters(
    skills: list[SkillMetadata],
    includes: list[IncludeToken],
    excludes: list[ExcludeToken] | None = None,
    state: StateFilter = "enabled",
) -> list[SkillMetadata]:
    """Select the records a caller should see.

    The state filter runs first. Include tokens are then evaluated in order
    and unioned by path, so the first token to select a bundle decides which
    record represents it. Exclude tokens remove every included record they
    match, by path.

    Args:
        skills: Records from ``SkillRegistry.get_all()``.
        includes: Include tokens; ``[auto]`` when empty.
        excludes: Exclude tokens.
        state: ``enabled``, ``disabled`` or ``all``.

    Returns:
        The selected records in include order.

    Raises:
        ValueError: If ``state`` is not a known state filter.
    """
    candidates = _filter_state(skills, state)
    tokens = includes or [SelectorToken(provider=AUTO)]

    included: dict[Path, SkillMetadata] = {}
    for token in tokens:
        for skill in select_by_token(candidates, token):
            included.setdefault(skill.path, skill)

    excluded: set[Path] = set()
    for token in excludes or []:
        for skill in select_by_token(list(included.values()), token, dedupe=False):
            excluded.add(skill.path)

    result = [skill for path, skill in included.items() if path not in excluded]
    logger.debug(
        "Filters selected %d of %d skill(s) (state=%s)", len(result), len(skills), state
    )
    return result
