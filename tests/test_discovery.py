"""Tests for module discovery and loading."""

import pytest
from pathlib import Path
from tfusage.analyzer.discovery import list_modules, load_module
from tfusage.analyzer.errors import LoadError
from tfusage.utils import logger


FIXTURES_DIR = Path(__file__).parent / 'fixtures' / 'modules'


class TestListModules:

    def test_fixture_tree(self):
        modules = list_modules(FIXTURES_DIR)

        assert modules == {
            FIXTURES_DIR / 'network',
            FIXTURES_DIR / 'network' / 'modules' / 'endpoints',
            FIXTURES_DIR / 'locals_example',
            FIXTURES_DIR / 'broken',
        }

    def test_skips_terraform_cache(self):
        modules = list_modules(FIXTURES_DIR)
        assert not any('.terraform' in m.parts for m in modules)

    def test_intermediate_directories_without_files(self, tmp_path):
        deep = tmp_path / 'a' / 'b' / 'c'
        deep.mkdir(parents=True)
        (deep / 'main.tf').write_text('variable "x" {}\n')

        assert list_modules(tmp_path) == {deep}

    def test_root_is_a_module(self, tmp_path):
        (tmp_path / 'main.tf').write_text('')
        assert list_modules(tmp_path) == {tmp_path}

    def test_missing_root(self, tmp_path):
        with pytest.raises(LoadError):
            list_modules(tmp_path / 'nope')

    def test_debug_trace(self, tmp_path, capsys):
        (tmp_path / 'main.tf').write_text('')
        logger.set_verbose(True)
        try:
            list_modules(tmp_path)
        finally:
            logger.set_verbose(False)

        assert f"Visited: {tmp_path}" in capsys.readouterr().err


class TestLoadModule:

    def test_concatenates_in_name_order(self, tmp_path):
        (tmp_path / 'b.tf').write_bytes(b'B')
        (tmp_path / 'a.tf').write_bytes(b'A')
        (tmp_path / 'c.txt').write_bytes(b'C')

        assert load_module(tmp_path) == b'\nA\nB'

    def test_not_recursive(self, tmp_path):
        (tmp_path / 'main.tf').write_bytes(b'top')
        (tmp_path / 'sub').mkdir()
        (tmp_path / 'sub' / 'main.tf').write_bytes(b'nested')

        assert load_module(tmp_path) == b'\ntop'

    def test_no_config_files(self, tmp_path):
        (tmp_path / 'notes.md').write_text('hello')
        assert load_module(tmp_path) == b''

    def test_missing_directory(self, tmp_path):
        with pytest.raises(LoadError) as exc_info:
            load_module(tmp_path / 'missing')
        assert 'missing' in exc_info.value.path
