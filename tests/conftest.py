import json
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ('UNUSED_RESOURCES_CONFIG', 'UNUSED_RESOURCES_JOBS', 'MW_INSTALL_PATH', 'LESSC'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('NO_COLOR', '1')


@pytest.fixture
def make_repo(tmp_path):
    """make_repo({'path/file': 'text' or dict}) -> root; dicts are written as JSON."""
    def _make(files):
        for rel, content in files.items():
            path = Path(tmp_path) / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                content = json.dumps(content)
            path.write_text(content, encoding='utf-8')
        return tmp_path
    return _make
