"""Glob include/ignore resolution compatible with the patterns used in config files.

Supports `**` (zero or more directories), `*`, `?`, `[...]` and `{a,b}`
alternation. Hidden files and directories are skipped unless dot=True.
"""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, List, Pattern


def expand_braces(pattern: str) -> List[str]:
    """'**/*.{css,less}' -> ['**/*.css', '**/*.less'] (nested braces supported)."""
    depth = 0
    start = -1
    for i, ch in enumerate(pattern):
        if ch == '{':
            if depth == 0:
                start = i
            depth += 1
        elif ch == '}' and depth:
            depth -= 1
            if depth == 0:
                body = pattern[start + 1:i]
                alternatives = _split_top_level(body)
                if len(alternatives) < 2:
                    # "{x}" is literal in node-glob
                    continue
                head, tail = pattern[:start], pattern[i + 1:]
                out: List[str] = []
                for alt in alternatives:
                    out.extend(expand_braces(head + alt + tail))
                return out
    return [pattern]


def _split_top_level(body: str) -> List[str]:
    parts = []
    depth = 0
    current = ''
    for ch in body:
        if ch == ',' and depth == 0:
            parts.append(current)
            current = ''
            continue
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
        current += ch
    parts.append(current)
    return parts


def _segment_regex(segment: str) -> str:
    out = ''
    i = 0
    n = len(segment)
    while i < n:
        ch = segment[i]
        if ch == '*':
            out += '[^/]*'
        elif ch == '?':
            out += '[^/]'
        elif ch == '[':
            j = segment.find(']', i + 1)
            if j == -1:
                out += re.escape(ch)
            else:
                cls = segment[i + 1:j]
                if cls.startswith('!'):
                    cls = '^' + cls[1:]
                out += '[' + cls + ']'
                i = j
        else:
            out += re.escape(ch)
        i += 1
    return out


def _single_glob_regex(pattern: str) -> str:
    parts = pattern.strip('/').split('/')
    regex = ''
    for idx, part in enumerate(parts):
        last = idx == len(parts) - 1
        if part == '**':
            if last:
                if regex.endswith('/'):
                    regex = regex[:-1] + '(?:/.*)?'
                else:
                    regex += '.*'
            else:
                regex += '(?:[^/]+/)*'
        else:
            regex += _segment_regex(part) + ('' if last else '/')
    return regex


def glob_to_regex(pattern: str) -> Pattern[str]:
    alternatives = [_single_glob_regex(p) for p in expand_braces(pattern)]
    return re.compile('(?:' + '|'.join(alternatives) + ')')


class GlobSet:
    """A compiled list of glob patterns; matches POSIX paths relative to the root."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = list(patterns)
        self._regexes = [glob_to_regex(p) for p in self.patterns]

    def match(self, rel_path: str) -> bool:
        return any(rx.fullmatch(rel_path) for rx in self._regexes)

    def __bool__(self) -> bool:
        return bool(self._regexes)


def resolve_files(root, patterns: Iterable[str], ignore: Iterable[str] = (), dot: bool = False) -> List[str]:
    """Walk `root` once and return relative POSIX paths matching any include pattern.

    Directories whose name matches an include pattern (e.g. "foo.js/") are
    returned as well; callers reading file contents must skip them.
    """
    include = GlobSet(patterns)
    excluded = GlobSet(ignore)
    root = Path(root)
    found: List[str] = []
    if not include:
        return found
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(os.path.relpath(dirpath, root)).as_posix()
        prefix = '' if rel_dir == '.' else rel_dir + '/'
        kept = []
        for name in sorted(dirnames):
            if not dot and name.startswith('.'):
                continue
            rel = prefix + name
            if excluded.match(rel):
                continue
            kept.append(name)
            if include.match(rel):
                found.append(rel)
        dirnames[:] = kept
        for name in filenames:
            if not dot and name.startswith('.'):
                continue
            rel = prefix + name
            if excluded.match(rel) or not include.match(rel):
                continue
            found.append(rel)
    return sorted(found)


def first_match(root, pattern: str) -> str | None:
    matches = resolve_files(root, [pattern])
    return matches[0] if matches else None
