"""Fuzzy ranking for suggestions and free-text skill search."""

from __future__ import annotations

from difflib import SequenceMatcher

from skillscope.skills.config import NAMESPACE_SEPARATOR, SkillMetadata

# Minimum similarity for a candidate without a substring hit.
SIMILARITY_THRESHOLD = 0.5

_SUBSTRING_BONUS = 1.0
_PREFIX_BONUS = 0.5


def _score(candidate: str, needle: str) -> float:
    """Score ``candidate`` against an already lower-cased ``needle``."""
    text = candidate.lower()
    # Compare against each namespace segment too, so prefixes like
    # ``claude:@plugin:`` do not drown out a close base name.
    pieces = [text, *[p.lstrip("@") for p in text.split(NAMESPACE_SEPARATOR) if p]]
    ratio = max(SequenceMatcher(None, needle, piece).ratio() for piece in pieces)

    score = 0.0
    if needle in text:
        score += _SUBSTRING_BONUS
        if any(piece.startswith(needle) for piece in pieces):
            score += _PREFIX_BONUS
    elif ratio < SIMILARITY_THRESHOLD:
        return 0.0

    return score + ratio


def rank_strings(haystack: list[str], needle: str) -> list[int]:
    """Rank ``haystack`` entries by similarity to ``needle``.

    Args:
        haystack: Candidate strings.
        needle: Query text.

    Returns:
        Indices into ``haystack``, best match first. Candidates with no
        meaningful similarity are left out; a blank needle yields ``[]``.
    """
    query = needle.strip().lower()
    if not query:
        return []

    scored = [(index, _score(candidate, query)) for index, candidate in enumerate(haystack)]
    # Stable sort keeps haystack order among equal scores.
    scored.sort(key=lambda item: -item[1])
    return [index for index, score in scored if score > 0]


def contains_case_insensitive(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def search_skills(
    skills: list[SkillMetadata],
    query: str,
    limit: int | None = None,
) -> list[SkillMetadata]:
    """Search skills by name and description.

    Only skills whose name or description contains ``query`` are returned,
    ordered by fuzzy score.

    Args:
        skills: Skills to search.
        query: Free-text query.
        limit: Maximum number of results.

    Returns:
        Matching skills, best first.
    """
    haystack = [f"{skill.name} {skill.description}" for skill in skills]
    ranked = [
        skills[index]
        for index in rank_strings(haystack, query)
        if contains_case_insensitive(haystack[index], query.strip())
    ]
    return ranked[:limit] if limit is not None else ranked
