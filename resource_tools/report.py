"""Human-readable report for unused identifiers with optional git provenance."""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from resource_tools.console import dim, red, yellow
from resource_tools.git_history import GitInfo, group_by_commit

INDENT = '\n             '

DetailFn = Callable[[str], List[Tuple[str, str]]]


def _indent(text: str) -> str:
    return text.replace('\n', INDENT)


def print_unused(
    items: Sequence[str],
    infos: Optional[Sequence[Optional[GitInfo]]],
    noun: str,
    details: Optional[DetailFn] = None,
) -> None:
    """Print each unused identifier, its details and last-seen commit, then the per-commit grouping.

    `infos` is None when the git lookup was skipped; otherwise it aligns
    with `items` and None entries are reported as not found.
    """
    for i, item in enumerate(items):
        print(yellow(f"* {item}"))
        for label, value in (details(item) if details else []):
            print(f"{label:>11}: " + dim(_indent(value)))
        if infos is None:
            continue
        info = infos[i]
        if info:
            print('  last seen: ' + dim(info.commit_hash))
            print('    subject: ' + dim(info.subject))
            print('      files: ' + dim(INDENT.join(info.files)))
        else:
            print(red('             not found in git history'))

    if infos is None:
        return
    by_commit, info_by_hash = group_by_commit(items, infos)
    if by_commit:
        print(f"{noun} grouped by last-seen commit:\n")
        for commit_hash, grouped in by_commit.items():
            print(yellow(f"* {commit_hash}") + ' ' + info_by_hash[commit_hash].subject)
            for item in grouped:
                print(f"   - {item}")
