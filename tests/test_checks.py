import subprocess

import pytest

from resource_tools import extract, unloaded_messages, unused_css, unused_messages
from resource_tools.config import resolve_options
from resource_tools.git_history import GitInfo


# ----------------- unused-messages -----------------

def test_messages_end_to_end(make_repo, capsys):
    root = make_repo({
        'i18n/en.json': {'foo-msg': 'Hello', 'bar-msg': 'World'},
        'resources/app.js': "mw.msg('foo-msg');",
    })
    assert unused_messages.run(['--root', str(root), '--nogit']) == 1
    out = capsys.readouterr().out
    assert '* bar-msg' in out
    assert '* foo-msg' not in out
    assert '1 unused or undocumented keys found (out of 2)' in out
    assert '         en: World' in out


def test_messages_all_used_exits_zero(make_repo, capsys):
    root = make_repo({
        'i18n/en.json': {'@metadata': {'authors': []}, 'foo-msg': 'Hello'},
        'includes/Hooks.php': "wfMessage( 'foo-msg' )",
    })
    assert unused_messages.run(['--root', str(root), '--no-git']) == 0
    assert 'All 1 keys are used' in capsys.readouterr().out


def test_messages_partition_and_sources(make_repo):
    root = make_repo({
        'i18n/en.json': {
            'group-sysop': 'Admins',
            'linked': 'See {{int:transcluded}}',
            'transcluded': 'x',
            'dead': 'y',
            'dead-longer': 'z',
            'tag-foo': 'ignored',
        },
        'i18n/qqq.json': {'dead': 'Documentation'},
        'extension.json': {'GroupPermissions': {'sysop': {'edit': True}}},
        'modules/ui.js': "mw.msg( 'linked' ); // dead-longer-suffix",
        'node_modules/x/modules/y.js': "mw.msg('dead')",
    })
    result, messages, docs = unused_messages.find_unused_messages(root, resolve_options('messages', {}))
    assert result.unused == ['dead', 'dead-longer']
    assert set(result.used) == {'group-sysop', 'linked', 'transcluded'}
    assert set(result.used) | set(result.unused) == set(result.declared)
    assert not set(result.used) & set(result.unused)
    assert 'tag-foo' not in result.declared
    assert docs['dead'] == 'Documentation'


def test_messages_git_lookup_is_reported(make_repo, monkeypatch, capsys):
    root = make_repo({'i18n/en.json': {'a-msg': 'A', 'b-msg': 'B'}})
    calls = []

    def fake_history(terms, file_filter, cwd=None, jobs=8):
        calls.append(list(terms))
        return [GitInfo('abc1234', 'Remove widget', ['w.js']), None]

    monkeypatch.setattr(unused_messages, 'search_history', fake_history)
    assert unused_messages.run(['--root', str(root)]) == 1
    assert calls == [['a-msg', 'b-msg']]
    out = capsys.readouterr().out
    assert 'last seen: abc1234' in out
    assert 'not found in git history' in out
    assert '* abc1234 Remove widget\n   - a-msg' in out


def test_messages_respects_config_file(make_repo):
    root = make_repo({
        'i18n/en.json': {'only-in-templates': 'x'},
        'templates/t.mustache': '{{#msg}}only-in-templates{{/msg}}',
        '.unused-resources.json': {'messages': {'extraSourceFiles': ['**/*.mustache']}},
    })
    assert unused_messages.run(['--root', str(root), '--nogit']) == 0


# ----------------- unused-css -----------------

def test_css_end_to_end(make_repo, capsys):
    root = make_repo({
        'resources/widget.css': '.widget-a{color:red} .oo-ui-button{}',
        'resources/widget.js': "$el.addClass( 'widget-a' );",
    })
    assert unused_css.run(['--root', str(root)]) == 0
    out = capsys.readouterr().out
    assert 'oo-ui-button' not in out
    assert 'No unused CSS classes found (out of 1)' in out


def test_css_reports_unused_and_undeclared(make_repo, capsys):
    root = make_repo({
        'resources/a.css': '.used { } .unused-thing { } .unused { }',
        'templates/page.html': '<div class="used ghost oo-ui-widget"></div>',
        'tests/x.html': '<b class="unused-thing"></b>',
    })
    assert unused_css.run(['--root', str(root), '--report-undeclared']) == 1
    out = capsys.readouterr().out
    assert '2 unused CSS classes found (out of 3)' in out
    assert '* unused-thing' in out and '* unused\n' in out
    assert 'CSS classes used in markup but not defined' in out
    assert '  - ghost' in out
    assert 'oo-ui-widget' not in out


def test_css_less_failure_is_not_fatal(make_repo, monkeypatch):
    root = make_repo({
        'a.less': '.broken {',
        'b.css': '.fine { }',
        'index.php': '<div class="fine">',
    })

    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 1, stdout='', stderr='ParseError')

    monkeypatch.setattr(extract.subprocess, 'run', fake_run)
    result, _ = unused_css.find_unused_css_classes(root, resolve_options('css', {}))
    assert result.declared == ['fine']
    assert result.unused == []


# ----------------- unloaded-messages -----------------

EXTENSION = {
    'ResourceFileModulePaths': {'localBasePath': 'modules'},
    'ResourceModules': {
        'ext.demo': {
            'packageFiles': ['init.js', {'name': 'config.json', 'callback': 'X'}],
            'messages': ['demo-listed-used', 'demo-listed-unused'],
        },
        'ext.clean': {
            'scripts': 'clean.js',
            'messages': ['clean-msg'],
        },
        'ext.nomessages': {'scripts': ['init.js']},
        'ext.ve': {'veModules': ['x'], 'scripts': ['ve.js'], 'messages': ['ve-msg']},
        'ext.lost': {'scripts': ['gone.js'], 'messages': ['lost-msg']},
    },
}


def test_unloaded_messages(make_repo, capsys):
    root = make_repo({
        'extension.json': EXTENSION,
        'modules/init.js': "mw.msg( 'demo-listed-used' ); ve.msg( 'demo-not-listed' );",
        'modules/clean.js': "mw.message( 'clean-msg' ).text();",
    })
    reports = {r.name: r for r in unloaded_messages.check_modules(root)}
    assert set(reports) == {'ext.demo', 'ext.clean', 'ext.lost'}
    assert reports['ext.demo'].missing == ['demo-listed-unused']
    assert reports['ext.demo'].extra == ['demo-not-listed']
    assert reports['ext.clean'].ok
    assert reports['ext.lost'].missing == ['lost-msg']
    out = capsys.readouterr().out
    assert 'Script not found: gone.js in module ext.lost' in out


def test_unloaded_messages_cli_output(make_repo, capsys):
    root = make_repo({
        'extension.json': EXTENSION,
        'modules/init.js': "mw.msg( 'demo-listed-used' ); ve.msg( 'demo-not-listed' );",
        'modules/clean.js': "mw.message( 'clean-msg' ).text();",
    })
    assert unloaded_messages.run(['--root', str(root)]) == 1
    out = capsys.readouterr().out
    assert 'ResourceLoader module: ext.demo' in out
    assert 'Messages loaded but not used in scripts:\n    - demo-listed-unused' in out
    assert 'Messages used in scripts but not loaded:\n    - demo-not-listed' in out
    assert 'ResourceLoader module: ext.clean' not in out
    assert 'Check complete.' in out


def test_unloaded_messages_requires_extension_json(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        unloaded_messages.run(['--root', str(tmp_path)])
    assert 'extension.json not found' in str(excinfo.value)


def test_read_modules_prefers_resource_modules():
    modules = unloaded_messages.read_modules({
        'ResourceLoaderModules': {'legacy': {'scripts': ['a.js'], 'messages': ['m']}},
    })
    assert [m.name for m in modules] == ['legacy']
    assert modules[0].scripts == ['a.js']
    assert modules[0].messages == ['m']


# ----------------- non-UTF-8 input -----------------

def test_latin1_source_does_not_abort_message_check(make_repo):
    root = make_repo({'i18n/en.json': {'bar-msg': 'Bar'}})
    (root / 'resources').mkdir()
    (root / 'resources' / 'legacy.js').write_bytes(b"// caf\xe9\nmw.msg('bar-msg');")
    assert unused_messages.run(['--root', str(root), '--nogit']) == 0


def test_latin1_files_do_not_abort_css_check(make_repo):
    root = make_repo({'index.html': '<div class="legacy"></div>'})
    (root / 'old.css').write_bytes(b'/* caf\xe9 */ .legacy { }')
    (root / 'old.js').write_bytes(b"// \xe9t\xe9\n$('.legacy');")
    assert unused_css.run(['--root', str(root)]) == 0


def test_latin1_module_script_is_read(make_repo):
    root = make_repo({'extension.json': {
        'ResourceModules': {'ext.legacy': {'scripts': ['legacy.js'], 'messages': ['legacy-msg']}},
    }})
    (root / 'legacy.js').write_bytes(b"// caf\xe9\nmw.msg( 'legacy-msg' );")
    reports = unloaded_messages.check_modules(root)
    assert reports[0].ok
