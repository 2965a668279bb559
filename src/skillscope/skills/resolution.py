"""Name resolution over an already filtered list of skills.

A query may carry a provider prefix (``claude:pdf``) and is matched
case-insensitively against every alias of every skill. Records sharing a
path are variants of one bundle and count as one match.
"""

from __future__ import annotations

from pathlib import Path

from skillscope.skills.config import NAMESPACE_SEPARATOR, SkillMetadata, SkillProvider
from skillscope.skills.errors import AmbiguousSkillNameError, SkillNotFoundError
from skillscope.skills.search import rank_strings

# Number of suggestions attached to a not-found error.
SUGGESTION_LIMIT = 3

_PROVIDER_PREFIXES = {provider.value: provider for provider in SkillProvider}


def _strip_plugin_prefix(name: str, plugin_name: str) -> str:
    prefix = f"{plugin_name}{NAMESPACE_SEPARATOR}"
    return name[len(prefix) :] if name.startswith(prefix) else name


def format_skill_id(skill: SkillMetadata, include_provider: bool = True) -> str:
    """Build a copy/paste friendly id for ``skill``.

    Plugin skills render as ``provider:@plugin:base``; others as
    ``provider:name``. With ``include_provider=False`` the provider part is
    dropped.
    """
    if skill.plugin_info is not None:
        plugin = skill.plugin_info.plugin_name
        base = _strip_plugin_prefix(skill.name, plugin)
        skill_id = f"@{plugin}{NAMESPACE_SEPARATOR}{base}"
    else:
        skill_id = skill.name

    if include_provider:
        return f"{skill.provider.value}{NAMESPACE_SEPARATOR}{skill_id}"
    return skill_id


def skill_aliases(skill: SkillMetadata) -> set[str]:
    """Return the lower-cased strings a query may use to name ``skill``."""
    full = skill.name.lower()
    aliases = {full, full.rsplit(NAMESPACE_SEPARATOR, 1)[-1]}

    if skill.plugin_info is not None:
        plugin = skill.plugin_info.plugin_name.lower()
        provider = skill.provider.value
        base = _strip_plugin_prefix(full, plugin)
        aliases.update(
            {
                f"{plugin}:{base}",
                f"@{plugin}:{base}",
                f"{provider}:{plugin}:{base}",
                f"{provider}:@{plugin}:{base}",
            }
        )

    return aliases


def split_provider_prefix(query: str) -> tuple[SkillProvider | None, str]:
    """Split an optional ``provider:`` prefix off a lower-cased query."""
    lowered = query.strip().lower()
    head, sep, rest = lowered.partition(NAMESPACE_SEPARATOR)
    if sep and rest and head in _PROVIDER_PREFIXES:
        return _PROVIDER_PREFIXES[head], rest
    return None, lowered


def collapse_by_path(skills: list[SkillMetadata]) -> list[SkillMetadata]:
    """Keep one record per path, preferring the enabled variant."""
    by_path: dict[Path, SkillMetadata] = {}
    for skill in skills:
        existing = by_path.get(skill.path)
        if existing is None or (existing.disabled and not skill.disabled):
            by_path[skill.path] = skill
    return list(by_path.values())


def match_skills(
    skills: list[SkillMetadata],
    target: str,
    provider: SkillProvider | None = None,
) -> list[SkillMetadata]:
    """Return skills with an alias equal to ``target``, collapsed by path."""
    target = target.lower()
    matches = [
        skill
        for skill in skills
        if (provider is None or skill.provider is provider) and target in skill_aliases(skill)
    ]
    return collapse_by_path(matches)


def suggest_skill_ids(
    skills: list[SkillMetadata],
    query: str,
    provider: SkillProvider | None = None,
    limit: int = SUGGESTION_LIMIT,
) -> list[str]:
    """Rank display ids against ``query`` and return the best ``limit``."""
    pool: list[str] = []
    for skill in skills:
        if provider is not None and skill.provider is not provider:
            continue
        skill_id = format_skill_id(skill)
        if skill_id not in pool:
            pool.append(skill_id)
    return [pool[index] for index in rank_strings(pool, query)[:limit]]


def resolve_skill(skills: list[SkillMetadata], query: str) -> SkillMetadata:
    """Resolve ``query`` to exactly one skill.

    Args:
        skills: Candidate skills.
        query: Name, alias or provider-prefixed alias.

    Returns:
        The single matching skill.

    Raises:
        AmbiguousSkillNameError: If several bundles match.
        SkillNotFoundError: If nothing matches.
    """
    provider, target = split_provider_prefix(query)
    matches = match_skills(skills, target, provider)

    if len(matches) == 1:
        return matches[0]
    if matches:
        raise AmbiguousSkillNameError(query, [format_skill_id(m) for m in matches])
    raise SkillNotFoundError(query, suggest_skill_ids(skills, query, provider))


def resolve_selectors(skills: list[SkillMetadata], queries: list[str]) -> list[SkillMetadata]:
    """Resolve several queries, keeping order and dropping repeated bundles.

    Raises:
        AmbiguousSkillNameError: If any query matches several bundles.
        SkillNotFoundError: If any query matches nothing.
    """
    selected: list[SkillMetadata] = []
    seen_paths: set[Path] = set()

    for query in queries:
        skill = resolve_skill(skills, query)
        if skill.path not in seen_paths:
            seen_paths.add(skill.path)
            selected.append(skill)

    return selected
