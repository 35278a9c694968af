"""'Last seen' lookups in git history via pickaxe (git log -S).

Known limitation: -S is a literal substring search, so a term can match a
commit that only touched a longer identifier containing it.
"""
from __future__ import annotations

import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

FileFilter = Callable[[str], bool]

RECORD_SEP = '\x1e'


@dataclass
class GitInfo:
    commit_hash: str
    subject: str
    files: List[str] = field(default_factory=list)


def css_file_filter(path: str) -> bool:
    return not path.endswith('.css') and not path.endswith('.less')


def i18n_file_filter(path: str) -> bool:
    # JSON i18n catalogs and old-style .i18n.php files
    return not path.endswith('.json') and not path.endswith('i18n.php')


def parse_log_output(stdout: str, file_filter: FileFilter) -> Optional[GitInfo]:
    """Newest commit block whose touched files survive `file_filter`.

    Each block starts with RECORD_SEP, then the short hash, the subject and
    the touched paths, one per line.
    """
    for block in stdout.split(RECORD_SEP):
        lines = [ln.strip() for ln in block.strip().split('\n') if ln.strip()]
        if len(lines) < 2:
            continue
        files = [f for f in lines[2:] if file_filter(f)]
        if files:
            return GitInfo(commit_hash=lines[0], subject=lines[1], files=files)
    return None


def git_search(term: str, file_filter: FileFilter, cwd=None) -> Optional[GitInfo]:
    cmd = ['git', 'log', f'-S{term}', '--name-only', '--pretty=format:%x1e%h%n%s', '--']
    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, encoding='utf-8', errors='replace')
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return parse_log_output(result.stdout, file_filter)


def search_history(terms: Sequence[str], file_filter: FileFilter, cwd=None, jobs: int = 8) -> List[Optional[GitInfo]]:
    """One pickaxe query per term, run in parallel; results align with `terms`."""
    results: List[Optional[GitInfo]] = [None] * len(terms)
    if not terms:
        return results
    with ThreadPoolExecutor(max_workers=max(1, jobs)) as executor:
        futures = [executor.submit(git_search, term, file_filter, cwd) for term in terms]
        for i, future in enumerate(futures):
            try:
                results[i] = future.result()
            except Exception:
                results[i] = None
    return results


def group_by_commit(terms: Sequence[str], infos: Sequence[Optional[GitInfo]]) -> Tuple[Dict[str, List[str]], Dict[str, GitInfo]]:
    """hash -> terms last seen in that commit (first-seen order), and hash -> GitInfo."""
    by_commit: Dict[str, List[str]] = {}
    info_by_hash: Dict[str, GitInfo] = {}
    for term, info in zip(terms, infos):
        if info is None:
            continue
        by_commit.setdefault(info.commit_hash, []).append(term)
        info_by_hash[info.commit_hash] = info
    return by_commit, info_by_hash
