"""
Configuration for the unused-resources checks.

Settings come from three layers (highest wins):

  1. CLI flags (--resource-files / --source-files / --ignore-files ...)
  2. .unused-resources.json in the repository root, keyed by check type
     ("css", "messages", "unloaded") with a "common" block merged underneath
  3. Built-in defaults below

Every list option X (resourceFiles, sourceFiles, ignoreFiles,
ignoreClassPrefixes) may be paired with extraX. extraX is appended to
whichever list wins, so {"sourceFiles": ["**/*.vue"], "extraSourceFiles":
["**/*.tpl"]} scans both, and so does a --source-files override. To drop the
built-in defaults entirely, set X and leave extraX out.

Environment (.env is honoured via python-dotenv):
  MW_INSTALL_PATH           MediaWiki core checkout, used for LESS include paths
  LESSC                     LESS compiler command (default: lessc)
  UNUSED_RESOURCES_CONFIG   Alternative path to the JSON config file
  UNUSED_RESOURCES_JOBS     Parallel workers for lessc / git lookups (default: 8)
"""
from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
from typing import Dict, List, Optional

CONFIG_FILENAME = '.unused-resources.json'

COMMON_IGNORE = [
    '**/node_modules/**',
    '**/build/**',
    '**/dist/**',
    '**/docs/**',
    '**/demos/**',
    '**/tests/**',
    '**/vendor/**',
    '**/coverage/**',
]

DEFAULTS: Dict[str, Dict[str, List[str]]] = {
    'css': {
        'resourceFiles': ['**/*.{css,less}'],
        'sourceFiles': ['**/*.{html,php,js,vue}'],
        'ignoreFiles': COMMON_IGNORE + ['**/ve/lib/**'],
        'ignoreClassPrefixes': ['oo-ui-'],
    },
    'messages': {
        'resourceFiles': ['**/en.json'],
        'sourceFiles': [
            '**/{src,resources,rebaser,includes,modules}/**/*.{js,php,vue,html}',
            '**/{extension,skin}.json',
        ],
        'ignoreFiles': COMMON_IGNORE + ['**/lib/**'],
    },
    'unloaded': {},
}

LIST_OPTIONS = ('resourceFiles', 'sourceFiles', 'ignoreFiles', 'ignoreClassPrefixes')


def config_path(root: Path, override: Optional[str] = None) -> Path:
    path = override or os.getenv('UNUSED_RESOURCES_CONFIG')
    if path:
        return Path(path)
    return Path(root) / CONFIG_FILENAME


def load_config(check_type: str, path: Path) -> Dict:
    """Return the raw options for one check: {**common, **config[check_type]}.

    A missing file means "no configuration" and yields {}.
    """
    if not path.exists():
        return {}
    data = json.loads(path.read_text(encoding='utf-8'))
    merged = dict(data.get('common') or {})
    merged.update(data.get(check_type) or {})
    return merged


def resolve_options(check_type: str, config: Dict, overrides: Optional[Dict] = None) -> Dict[str, List[str]]:
    """Layer CLI overrides > config > defaults for every list option.

    `extraX` entries from the config are appended to whichever base list won.
    """
    overrides = overrides or {}
    defaults = DEFAULTS.get(check_type, {})
    options: Dict[str, List[str]] = {}
    for name in LIST_OPTIONS:
        if overrides.get(name):
            base = list(overrides[name])
        elif config.get(name) is not None:
            base = list(config[name])
        else:
            base = list(defaults.get(name, []))
        extra_name = 'extra' + name[0].upper() + name[1:]
        base.extend(config.get(extra_name) or [])
        options[name] = base
    return options


def add_scan_arguments(parser: argparse.ArgumentParser, git_default: bool) -> None:
    """Flags shared by the repository-wide checks (unused-css, unused-messages)."""
    parser.add_argument('--root', default='.', help='Repository root to scan (default: current directory)')
    parser.add_argument('--config', help=f'Config file (default: <root>/{CONFIG_FILENAME}, env UNUSED_RESOURCES_CONFIG)')
    parser.add_argument('--git', dest='git', action='store_true', help='Look up the last commit that touched each unused identifier')
    parser.add_argument('--no-git', '--nogit', dest='git', action='store_false', help='Skip the git history lookup')
    parser.set_defaults(git=git_default)
    parser.add_argument('--resource-files', action='append', dest='resource_files', metavar='GLOB',
                        help='Declaration file glob (repeatable; replaces the configured list)')
    parser.add_argument('--source-files', action='append', dest='source_files', metavar='GLOB',
                        help='Source file glob (repeatable; replaces the configured list)')
    parser.add_argument('--ignore-files', action='append', dest='ignore_files', metavar='GLOB',
                        help='Ignore glob (repeatable; replaces the configured list)')
    parser.add_argument('--jobs', type=int, help='Parallel workers (fallback: env UNUSED_RESOURCES_JOBS)')


def cli_overrides(args: argparse.Namespace) -> Dict[str, List[str]]:
    return {
        'resourceFiles': args.resource_files or [],
        'sourceFiles': args.source_files or [],
        'ignoreFiles': args.ignore_files or [],
    }


def install_path() -> Optional[str]:
    return os.getenv('MW_INSTALL_PATH') or None


def job_count(cli_value: Optional[int] = None) -> int:
    if cli_value:
        return max(1, cli_value)
    try:
        return max(1, int(os.getenv('UNUSED_RESOURCES_JOBS', '8')))
    except ValueError:
        return 8
