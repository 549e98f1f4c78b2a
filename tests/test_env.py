"""Tests for palette_picker.core.env — .env loading and walk-up logic."""

import os
from pathlib import Path

import pytest
from palette_picker.core.env import _find_dotenv, _parse_dotenv, load_env


class TestParseDotenv:
    def test_simple_key_value(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('PALETTE_TOOL_MAX_COLORS=16\n')
        assert _parse_dotenv(f) == {'PALETTE_TOOL_MAX_COLORS': '16'}

    def test_quoted_values(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('A="with # hash"\nB=\'single\'\n')
        assert _parse_dotenv(f) == {'A': 'with # hash', 'B': 'single'}

    def test_export_prefix(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('export PALETTE_TOOL_SIZE=64x64\n')
        assert _parse_dotenv(f) == {'PALETTE_TOOL_SIZE': '64x64'}

    def test_inline_comment_on_unquoted_value(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('PALETTE_TOOL_QUANTIZER=kmeans  # faster for small palettes\n')
        assert _parse_dotenv(f) == {'PALETTE_TOOL_QUANTIZER': 'kmeans'}

    def test_comments_blank_lines_and_junk_ignored(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('# comment\n\nNOEQUALS\nFOO=bar\n')
        assert _parse_dotenv(f) == {'FOO': 'bar'}


class TestFindDotenv:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert _find_dotenv(tmp_path) == dotenv

    def test_finds_in_parent(self, tmp_path: Path) -> None:
        subdir = tmp_path / 'sub'
        subdir.mkdir()
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert _find_dotenv(subdir) == dotenv

    def test_stops_at_git_dir(self, tmp_path: Path) -> None:
        repo = tmp_path / 'repo'
        (repo / '.git').mkdir(parents=True)
        (repo / 'src').mkdir()
        (tmp_path / '.env').write_text('X=1\n')
        assert _find_dotenv(repo / 'src') is None

    def test_stops_at_git_file(self, tmp_path: Path) -> None:
        repo = tmp_path / 'repo'
        repo.mkdir()
        (repo / '.git').write_text('gitdir: ../somewhere\n')
        (repo / 'src').mkdir()
        (tmp_path / '.env').write_text('X=1\n')
        assert _find_dotenv(repo / 'src') is None


class TestLoadEnv:
    def test_sets_missing_vars(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('PALETTE_TOOL_TEST_A', raising=False)
        (tmp_path / '.env').write_text('PALETTE_TOOL_TEST_A=from-file\n')
        monkeypatch.chdir(tmp_path)
        load_env()
        assert os.environ.get('PALETTE_TOOL_TEST_A') == 'from-file'
        monkeypatch.delenv('PALETTE_TOOL_TEST_A')

    def test_does_not_overwrite_existing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('PALETTE_TOOL_TEST_B', 'original')
        (tmp_path / '.env').write_text('PALETTE_TOOL_TEST_B=from-file\n')
        load_env(start=tmp_path)
        assert os.environ.get('PALETTE_TOOL_TEST_B') == 'original'

    def test_explicit_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('PALETTE_TOOL_TEST_C', raising=False)
        custom = tmp_path / 'custom.env'
        custom.write_text('PALETTE_TOOL_TEST_C=custom\n')
        assert load_env(env_file=str(custom)) == custom
        assert os.environ.get('PALETTE_TOOL_TEST_C') == 'custom'
        monkeypatch.delenv('PALETTE_TOOL_TEST_C')

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        assert load_env(env_file=str(tmp_path / 'nope.env')) is None

    def test_returns_none_when_no_file(self, tmp_path: Path) -> None:
        (tmp_path / '.git').mkdir()
        assert load_env(start=tmp_path) is None
