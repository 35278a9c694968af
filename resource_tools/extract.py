"""Candidate extraction: CSS classes from stylesheets, message keys from i18n catalogs,
and message keys implied by extension.json / skin.json."""
from __future__ import annotations

import json
import os
import re
import shlex
import subprocess
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from resource_tools import console

CLASS_RE = re.compile(r"\.([-_a-zA-Z0-9]+)[\s{\[,.:#]")

IGNORED_KEY_PREFIXES = ('@', 'tag-', 'apihelp-')
DESCRIPTOR_FILES = ('extension.json', 'skin.json')


# ----------------- Stylesheets -----------------

def extract_class_names(css_text: str) -> Set[str]:
    return set(CLASS_RE.findall(css_text))


def is_candidate_class(name: str, ignore_prefixes: Sequence[str] = ('oo-ui-',)) -> bool:
    # leading digits come from things like ".5em" or color codes, never a class
    if not name or name[0].isdigit():
        return False
    return not any(name.startswith(p) for p in ignore_prefixes)


def less_include_paths(file_path: Path, install_path: Optional[str]) -> List[str]:
    paths = [str(Path(file_path).parent)]
    if install_path:
        base = Path(install_path) / 'resources' / 'src' / 'mediawiki.less'
        paths.append(str((base / 'mediawiki.ui').resolve()))
        paths.append(str(base.resolve()))
    return paths


def compile_less(less_text: str, file_path: Path, install_path: Optional[str] = None) -> Optional[str]:
    """Compile LESS source with the external compiler; None on any failure."""
    cmd = shlex.split(os.getenv('LESSC', 'lessc'))
    include = os.pathsep.join(less_include_paths(file_path, install_path))
    cmd += [f"--include-path={include}", '-']
    try:
        result = subprocess.run(cmd, input=less_text, capture_output=True, text=True, encoding='utf-8', errors='replace')
    except OSError as e:
        console.error(f"Error processing LESS content ({file_path}): {e}")
        return None
    if result.returncode != 0:
        console.error(f"Error processing LESS content ({file_path}): {result.stderr.strip()}")
        return None
    return result.stdout


def collect_declared_classes(
    root,
    style_files: Iterable[str],
    install_path: Optional[str] = None,
    ignore_prefixes: Sequence[str] = ('oo-ui-',),
    jobs: int = 8,
) -> List[str]:
    """Classes declared across all stylesheets, in first-seen order.

    .less bodies are compiled in parallel; a file that fails to compile
    contributes nothing.
    """
    root = Path(root)
    files = [f for f in style_files if not (root / f).is_dir()]
    contents = [(root / f).read_text(encoding='utf-8', errors='replace') for f in files]

    css_bodies: List[Optional[str]] = [None] * len(files)
    less_jobs: List[Tuple[int, str]] = []
    for i, (name, text) in enumerate(zip(files, contents)):
        if name.endswith('.less'):
            less_jobs.append((i, text))
        else:
            css_bodies[i] = text

    if less_jobs:
        with ThreadPoolExecutor(max_workers=max(1, jobs)) as executor:
            futures = {
                i: executor.submit(compile_less, text, root / files[i], install_path)
                for i, text in less_jobs
            }
            for i, future in futures.items():
                try:
                    css_bodies[i] = future.result()
                except Exception as e:
                    console.error(f"Error processing LESS content ({files[i]}): {e}")
                    css_bodies[i] = None
                if css_bodies[i] is not None:
                    console.log(f"Compiled {files[i]}")

    classes: Dict[str, None] = {}
    for body in css_bodies:
        if not body:
            continue
        for name in sorted(extract_class_names(body)):
            if is_candidate_class(name, ignore_prefixes):
                classes.setdefault(name)
    return list(classes)


# ----------------- Message catalogs -----------------

def doc_catalog_path(message_file: Path) -> Path:
    return message_file.with_name(message_file.name.replace('en.json', 'qqq.json'))


def load_catalogs(root, message_files: Iterable[str]) -> Tuple[Dict[str, str], Dict[str, str], str]:
    """Fold every en.json (and its optional qqq.json) into single mappings.

    Returns (messages, documentation, all_values) where all_values is every
    message text joined by newlines, used to detect transclusion.
    """
    root = Path(root)
    messages: Dict[str, str] = {}
    docs: Dict[str, str] = {}
    for rel in message_files:
        path = root / rel
        if path.is_dir():
            continue
        messages.update(json.loads(path.read_text(encoding='utf-8')))
        qqq = doc_catalog_path(path)
        if qqq != path and qqq.exists():
            docs.update(json.loads(qqq.read_text(encoding='utf-8')))
    all_values = '\n'.join(v for v in messages.values() if isinstance(v, str))
    return messages, docs, all_values


def is_candidate_message_key(key: str) -> bool:
    # @metadata etc., plus families that are generated and checked elsewhere
    return not key.startswith(IGNORED_KEY_PREFIXES)


# ----------------- extension.json / skin.json -----------------

def load_descriptor(root, names: Sequence[str] = DESCRIPTOR_FILES, required: bool = False) -> List[Dict]:
    root = Path(root)
    found = []
    for name in names:
        path = root / name
        if path.exists():
            found.append(json.loads(path.read_text(encoding='utf-8')))
    if required and not found:
        raise FileNotFoundError(f"{' / '.join(names)} not found in repo root ({root})")
    return found


def synthesize_message_keys(descriptor: Dict) -> List[str]:
    """Message keys MediaWiki derives from descriptor entries; their presence counts as use."""
    keys: List[str] = []
    for right in descriptor.get('AvailableRights') or []:
        keys += [f'right-{right}', f'action-{right}']
    for grant in descriptor.get('GrantPermissions') or {}:
        keys.append(f'grant-{grant}')
    # many of these are core groups; harmless
    for group in descriptor.get('GroupPermissions') or {}:
        keys += [
            f'group-{group}',
            f'group-{group}-member',
            f'grouppage-{group}',
            f'group-{group}.js',
            f'group-{group}.css',
        ]
    for page in descriptor.get('SpecialPages') or {}:
        keys.append(page.lower())
    for log_type in descriptor.get('LogTypes') or []:
        keys += [
            f'log-name-{log_type}',
            f'log-description-{log_type}',
            f'logeventslist-{log_type}-log',
        ]
    for log_type, filters in (descriptor.get('ActionFilteredLogs') or {}).items():
        keys.append(f'log-action-filter-{log_type}')
        for name, actions in (filters or {}).items():
            keys.append(f'log-action-filter-{log_type}-{name}')
            if isinstance(actions, str):
                actions = [actions]
            for action in actions or []:
                keys.append(f'logentry-{log_type}-{action}')
    return keys
