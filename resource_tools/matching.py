"""Boundary-safe identifier matching over source text.

An identifier counts as referenced only when the characters on either side
of the occurrence are not identifier-continuation characters, so that
"foo-bar" is not found inside "foo-barbaz" or "xfoo-bar".
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Pattern, Set

from bs4 import BeautifulSoup

# Continuation characters (regex class bodies)
MESSAGE_KEY_CHARS = r'a-z\-_'
CSS_CLASS_CHARS = r'\-_a-zA-Z0-9'

MESSAGE_CALL_RE = re.compile(r"""(?:ve|mw)\.(?:msg|message)\( *['"]([a-zA-Z0-9\-_]+)['"] *\)""")


def boundary_pattern(identifier: str, continuation: str) -> Pattern[str]:
    return re.compile(
        '(?:^|[^' + continuation + '])(' + re.escape(identifier) + ')(?:$|[^' + continuation + '])'
    )


class BoundaryMatcher:
    """Per-identifier compiled patterns for one candidate set.

    A single alternation regex would be faster but misses cases where one
    identifier is a substring of another, so each identifier keeps its own.
    """

    def __init__(self, identifiers: Iterable[str], continuation: str):
        self.identifiers: List[str] = list(dict.fromkeys(identifiers))
        self.continuation = continuation
        self._patterns: Dict[str, Pattern[str]] = {
            ident: boundary_pattern(ident, continuation) for ident in self.identifiers
        }

    def matches(self, identifier: str, text: str) -> bool:
        # plain containment is only a cheap gate; the pattern decides
        return identifier in text and self._patterns[identifier].search(text) is not None

    def find(self, text: str) -> List[str]:
        """Identifiers referenced in `text`, in candidate order."""
        return [ident for ident in self.identifiers if self.matches(ident, text)]


def scan_files(matcher: BoundaryMatcher, root, paths: Iterable[str]) -> Set[str]:
    """OR-aggregate matches over every file; directories are skipped."""
    root = Path(root)
    used: Set[str] = set()
    for rel in paths:
        path = root / rel
        if path.is_dir():
            continue
        used.update(matcher.find(path.read_text(encoding='utf-8', errors='replace')))
    return used


def find_message_calls(text: str) -> List[str]:
    """Keys passed literally to mw.msg()/mw.message()/ve.msg()/ve.message()."""
    return list(dict.fromkeys(MESSAGE_CALL_RE.findall(text)))


def collect_markup_classes(text: str) -> Set[str]:
    """Class tokens from class="..." attributes in HTML-like markup."""
    soup = BeautifulSoup(text, 'html.parser')
    classes: Set[str] = set()
    for el in soup.find_all(class_=True):
        value = el.get('class')
        if isinstance(value, str):
            value = value.split()
        for cls in value or []:
            cls = cls.strip()
            # skip template expressions such as {{ cls }} or <?php echo ?>
            if cls and re.fullmatch(r'[-_a-zA-Z][-_a-zA-Z0-9]*', cls):
                classes.add(cls)
    return classes
