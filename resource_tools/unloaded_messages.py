#!/usr/bin/env python3
"""
Per ResourceLoader module, compare the messages a module loads with the ones its scripts use.

  - loaded but not used:  listed in "messages" yet absent from every script of the module
  - used but not loaded:  passed to mw.msg()/mw.message()/ve.msg()/ve.message() but not listed

Requires extension.json in the repository root.
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from dotenv import load_dotenv

from resource_tools.console import cyan, green, warn, yellow
from resource_tools.extract import load_descriptor
from resource_tools.file_globs import first_match
from resource_tools.matching import MESSAGE_KEY_CHARS, BoundaryMatcher, find_message_calls


@dataclass
class ModuleDescriptor:
    name: str
    messages: List[str]
    scripts: List[str]
    base_path: str = ''


@dataclass
class ModuleReport:
    name: str
    missing: List[str] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.extra


def _string_paths(value) -> List[str]:
    if isinstance(value, str):
        return [value]
    return [p for p in (value or []) if isinstance(p, str)]


def read_modules(extension: Dict) -> List[ModuleDescriptor]:
    modules = extension.get('ResourceModules') or extension.get('ResourceLoaderModules') or {}
    default_base = (extension.get('ResourceFileModulePaths') or {}).get('localBasePath', '')
    out = []
    for name, definition in modules.items():
        # TODO: support veModules (VisualEditor plugin registration)
        if definition.get('veModules'):
            continue
        out.append(ModuleDescriptor(
            name=name,
            messages=list(definition.get('messages') or []),
            scripts=_string_paths(definition.get('scripts')) + _string_paths(definition.get('packageFiles')),
            base_path=definition.get('localBasePath', default_base) or '',
        ))
    return out


def resolve_script(root: Path, module: ModuleDescriptor, script: str) -> Optional[Path]:
    """Path of a module script: direct path first, then the first glob match."""
    for base in dict.fromkeys([module.base_path, '']):
        path = root / base / script
        if path.is_file():
            return path
        match = first_match(root / base, script)
        if match and (root / base / match).is_file():
            return root / base / match
    return None


def check_module(root, module: ModuleDescriptor) -> ModuleReport:
    root = Path(root)
    report = ModuleReport(module.name)
    matcher = BoundaryMatcher(module.messages, MESSAGE_KEY_CHARS)
    used = set()
    called = set()
    for script in module.scripts:
        path = resolve_script(root, module, script)
        if path is None:
            warn(f"Script not found: {script} in module {module.name}")
            continue
        content = path.read_text(encoding='utf-8', errors='replace')
        used.update(matcher.find(content))
        called.update(find_message_calls(content))
    report.missing = [msg for msg in module.messages if msg not in used]
    listed = set(module.messages)
    report.extra = sorted(called - listed)
    return report


def check_modules(root) -> List[ModuleReport]:
    extension = load_descriptor(root, names=('extension.json',), required=True)[0]
    reports = []
    for module in read_modules(extension):
        if not module.messages or not module.scripts:
            continue
        reports.append(check_module(root, module))
    return reports


def print_reports(reports: Sequence[ModuleReport]) -> None:
    for report in reports:
        if report.ok:
            continue
        print(cyan(f"\nResourceLoader module: {report.name}"))
        if report.missing:
            print(yellow('  Messages loaded but not used in scripts:'))
            for msg in report.missing:
                print(f"    - {msg}")
        if report.extra:
            print(yellow('  Messages used in scripts but not loaded:'))
            for msg in report.extra:
                print(f"    - {msg}")


def run(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    ap = argparse.ArgumentParser(description='Compare messages loaded by ResourceLoader modules with those used by their scripts')
    ap.add_argument('--root', default='.', help='Repository root containing extension.json (default: current directory)')
    args = ap.parse_args(argv)

    try:
        reports = check_modules(Path(args.root))
    except FileNotFoundError as e:
        raise SystemExit(str(e))
    print_reports(reports)
    print(green('\nCheck complete.'))
    return 0 if all(r.ok for r in reports) else 1


def main():
    sys.exit(run())


if __name__ == '__main__':
    main()
