#!/usr/bin/env python3
"""List and inspect installed skills.

This example demonstrates:
- Building a registry from the default project, user and plugin roots
- Filtering with include/exclude selectors
- Resolving a name and loading its manifest
- Printing registry diagnostics

Optional environment:
- SKILLSCOPE_USER_DIR to point at a different home directory
- SKILLSCOPE_LOGGING__LEVEL=INFO to see discovery logs
"""

import sys

from skillscope import (
    SkillNotFoundError,
    SkillRegistry,
    SkillscopeSettings,
    apply_filters,
    parse_filters,
    setup_logging,
)
from skillscope.skills import format_skill_id, render_diagnostics


def main():
    """Print the skills visible with the default selectors."""
    settings = SkillscopeSettings()
    setup_logging(settings.logging)

    registry = SkillRegistry()

    # Default include is "auto": one copy per base name, freshest wins
    parsed = parse_filters(sys.argv[1:2] or None, sys.argv[2:3] or None)
    visible = apply_filters(registry.get_all(), parsed.includes, parsed.excludes)

    for skill in visible:
        print(f"{format_skill_id(skill):40} {skill.location.value:8} {skill.description}")

    if visible:
        try:
            skill = registry.load(visible[0].name)
        except SkillNotFoundError as exc:
            print(f"Could not load {visible[0].name}: {exc}")
        else:
            print(f"\nFirst skill manifest ({len(skill.content)} chars) at {skill.path}")

    print(render_diagnostics(registry.get_diagnostics()))


if __name__ == "__main__":
    main()
