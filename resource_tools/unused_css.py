#!/usr/bin/env python3
"""
Report CSS classes declared in .css/.less files that no source file references.

  unused-css --root path/to/extension [--git] [--report-undeclared]

LESS files are compiled with `lessc` first (include paths: the file's own
directory plus MW_INSTALL_PATH/resources/src/mediawiki.less[/mediawiki.ui]).
Exit status is 1 when unused classes remain, 0 otherwise.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from resource_tools import config as cfg
from resource_tools.console import Timer, green, log, warn, yellow
from resource_tools.extract import collect_declared_classes, is_candidate_class
from resource_tools.file_globs import resolve_files
from resource_tools.git_history import css_file_filter, search_history
from resource_tools.matching import CSS_CLASS_CHARS, BoundaryMatcher, collect_markup_classes
from resource_tools.reconcile import Reconciliation, undeclared
from resource_tools.report import print_unused

MARKUP_SUFFIXES = ('.html', '.php', '.vue')


def find_unused_css_classes(
    root,
    options,
    install_path: Optional[str] = None,
    jobs: int = 8,
) -> Tuple[Reconciliation, List[str]]:
    """Return (reconciliation of declared classes, classes used in markup but never declared)."""
    root = Path(root)
    prefixes = options.get('ignoreClassPrefixes', ['oo-ui-'])

    log('Finding style files...')
    style_files = resolve_files(root, options['resourceFiles'], options['ignoreFiles'])
    declared = collect_declared_classes(root, style_files, install_path, prefixes, jobs)
    result = Reconciliation(declared)
    matcher = BoundaryMatcher(declared, CSS_CLASS_CHARS)

    log('Searching code for CSS class names...')
    observed = set()
    for rel in resolve_files(root, options['sourceFiles'], options['ignoreFiles']):
        path = root / rel
        if path.is_dir():
            continue
        content = path.read_text(encoding='utf-8', errors='replace')
        result.mark_used(matcher.find(content))
        if rel.endswith(MARKUP_SUFFIXES):
            observed.update(c for c in collect_markup_classes(content) if is_candidate_class(c, prefixes))
    return result, undeclared(observed, declared)


def run(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    ap = argparse.ArgumentParser(description='Find CSS classes that are defined but never used in source code')
    cfg.add_scan_arguments(ap, git_default=False)
    ap.add_argument('--report-undeclared', action='store_true',
                    help='Also list classes used in markup class="..." attributes but defined in no stylesheet')
    args = ap.parse_args(argv)

    root = Path(args.root)
    conf = cfg.load_config('css', cfg.config_path(root, args.config))
    options = cfg.resolve_options('css', conf, cfg.cli_overrides(args))
    jobs = cfg.job_count(args.jobs)
    install_path = cfg.install_path()
    if not install_path:
        warn('MW_INSTALL_PATH not defined')

    with Timer('Searched code'):
        result, undeclared_classes = find_unused_css_classes(root, options, install_path, jobs)

    if args.report_undeclared and undeclared_classes:
        print(yellow(f"\n{len(undeclared_classes)} CSS classes used in markup but not defined:\n"))
        for name in undeclared_classes:
            print(f"  - {name}")

    unused = result.unused
    if not unused:
        print(green(f"No unused CSS classes found (out of {result.total})."))
        return 0

    infos = None
    if args.git:
        log(f"Searching git history for {len(unused)} missing CSS classes...")
        with Timer('Searched git'):
            infos = search_history(unused, css_file_filter, cwd=root, jobs=jobs)
    print(yellow(f"\nWarning: {len(unused)} unused CSS classes found (out of {result.total}):\n"))
    print_unused(unused, infos, 'Classes')
    return 1


def main():
    sys.exit(run())


if __name__ == '__main__':
    main()
