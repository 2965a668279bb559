#!/usr/bin/env python3
"""Disable and re-enable skills on disk.

This example demonstrates:
- Including disabled bundles in discovery
- Selecting bundles with a selector
- Toggling them and reading the summary

Usage:
    python toggle_skills.py disable "codex:lint*"
    python toggle_skills.py enable "codex:lint*"
"""

import sys

from skillscope import DiscoveryOptions, SkillRegistry, apply_filters, parse_filters
from skillscope.skills import detect_variant_conflicts, toggle_skills


def main():
    """Toggle every bundle matching a selector."""
    if len(sys.argv) != 3 or sys.argv[1] not in ("enable", "disable"):
        print("usage: toggle_skills.py enable|disable SELECTOR")
        return

    mode, selector = sys.argv[1], sys.argv[2]
    registry = SkillRegistry(DiscoveryOptions(include_disabled=True))

    parsed = parse_filters([selector])
    # Disabling only makes sense for enabled bundles and vice versa
    state = "enabled" if mode == "disable" else "disabled"
    targets = apply_filters(registry.get_all(), parsed.includes, state=state)

    for conflict in detect_variant_conflicts(targets):
        print(f"warning: {conflict.path}: {conflict.reason}")

    summary = toggle_skills(mode, targets)
    for result in summary.results:
        suffix = f" ({result.error})" if result.error else ""
        print(f"{result.status.value:8} {result.skill}{suffix}")

    print(f"\n{summary.succeeded} {mode}d, {summary.skipped} skipped, {summary.failed} failed")


if __name__ == "__main__":
    main()
