#!/usr/bin/env python3
"""
Report i18n message keys declared in en.json that nothing uses.

A key counts as used when it appears (boundary-safe) in any source file, in
the text of another message (transclusion), or among the keys MediaWiki
derives from extension.json / skin.json (rights, groups, log types ...).

  unused-messages --root path/to/extension [--nogit]

Exit status is 1 when unused keys remain, 0 otherwise.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from resource_tools import config as cfg
from resource_tools.console import Timer, green, log, warn, yellow
from resource_tools.extract import (
    is_candidate_message_key,
    load_catalogs,
    load_descriptor,
    synthesize_message_keys,
)
from resource_tools.file_globs import resolve_files
from resource_tools.git_history import i18n_file_filter, search_history
from resource_tools.matching import MESSAGE_KEY_CHARS, BoundaryMatcher, scan_files
from resource_tools.reconcile import Reconciliation
from resource_tools.report import print_unused


def generated_message_keys(root) -> List[str]:
    keys: List[str] = []
    for descriptor in load_descriptor(root, required=False):
        keys.extend(synthesize_message_keys(descriptor))
    return keys


def find_unused_messages(root, options) -> Tuple[Reconciliation, Dict[str, str], Dict[str, str]]:
    """Return (reconciliation of declared keys, en messages, qqq documentation)."""
    root = Path(root)
    log('Finding i18n files...')
    message_files = resolve_files(root, options['resourceFiles'], options['ignoreFiles'])
    if not message_files:
        warn(f"No message files matched {options['resourceFiles']}")
    messages, docs, all_values = load_catalogs(root, message_files)

    keys = [key for key in messages if is_candidate_message_key(key)]
    result = Reconciliation(keys)
    matcher = BoundaryMatcher(keys, MESSAGE_KEY_CHARS)

    log('Searching code for message keys...')
    sources = resolve_files(root, options['sourceFiles'], options['ignoreFiles'])
    result.mark_used(scan_files(matcher, root, sources))
    # messages can transclude other messages
    result.mark_used(matcher.find(all_values))
    result.mark_used(matcher.find('  '.join(generated_message_keys(root))))
    return result, messages, docs


def run(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    ap = argparse.ArgumentParser(description='Find i18n message keys that are defined but never used')
    cfg.add_scan_arguments(ap, git_default=True)
    # legacy spellings
    ap.add_argument('--messageFilesPattern', action='append', dest='resource_files', help=argparse.SUPPRESS)
    ap.add_argument('--sourceCodePattern', action='append', dest='source_files', help=argparse.SUPPRESS)
    ap.add_argument('--ignore', action='append', dest='ignore_files', help=argparse.SUPPRESS)
    args = ap.parse_args(argv)

    root = Path(args.root)
    conf = cfg.load_config('messages', cfg.config_path(root, args.config))
    options = cfg.resolve_options('messages', conf, cfg.cli_overrides(args))
    jobs = cfg.job_count(args.jobs)

    with Timer('Searched code'):
        result, messages, docs = find_unused_messages(root, options)

    unused = result.unused
    if not unused:
        print(green(f"All {result.total} keys are used or documented in the source code."))
        return 0

    infos = None
    if args.git:
        log(f"Searching git history for {len(unused)} missing message keys...")
        with Timer('Searched git'):
            infos = search_history(unused, i18n_file_filter, cwd=root, jobs=jobs)

    def details(key):
        return [('en', str(messages.get(key, ''))), ('qqq', str(docs.get(key, '')))]

    print(yellow(f"\nWarning: {len(unused)} unused or undocumented keys found (out of {result.total}):\n"))
    print_unused(unused, infos, 'Messages', details)
    return 1


def main():
    sys.exit(run())


if __name__ == '__main__':
    main()
