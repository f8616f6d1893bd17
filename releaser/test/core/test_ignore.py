"""Tests for releaser.core.ignore module."""

from __future__ import annotations

from pathlib import Path

import pytest

from releaser.core.ignore import (
    IgnoreList,
    glob_matches,
    load_ignore_list,
    parse_ignore_text,
)
from releaser.core.result import Err, Ok


class TestParseIgnoreText:
    def test_trims_and_drops_blank_lines(self) -> None:
        ignore = parse_ignore_text("  *.log \n\n.pdb\r\n   \nconfig/local.json")
        assert ignore.patterns == ("*.log", ".pdb", "config/local.json")

    def test_empty_text(self) -> None:
        assert parse_ignore_text("").patterns == ()
        assert len(parse_ignore_text("\n \n")) == 0


class TestGlobMatches:
    @pytest.mark.parametrize(
        ("pattern", "path"),
        [
            ("*.log", "app.log"),
            ("*.log", "logs/app.log"),
            ("*.log", "/abs/build/app.log"),
            ("?.txt", "a.txt"),
            ("[abc].txt", "b.txt"),
            ("[!abc].txt", "d.txt"),
            ("[^abc].txt", "d.txt"),
            ("[0-9].dat", "build/5.dat"),
            ("a/*.log", "x/a/b.log"),
            ("/abs/build/app.exe", "/abs/build/app.exe"),
            ("\\*.txt", "dir/*.txt"),
        ],
    )
    def test_matches(self, pattern: str, path: str) -> None:
        assert glob_matches(pattern, path)

    @pytest.mark.parametrize(
        ("pattern", "path"),
        [
            ("*.log", "app.log.bak"),
            ("a*c", "ab/c"),
            ("?.txt", "ab.txt"),
            ("[abc].txt", "d.txt"),
            ("[!abc].txt", "a.txt"),
            ("a/*.log", "x/ba/b.log"),
            ("\\*.txt", "a.txt"),
            ("[abc", "[abc"),
            ("trailing\\", "trailing\\"),
            ("[z-a].txt", "q.txt"),
            ("[z-a].txt", "/b/build/q.txt"),
        ],
    )
    def test_does_not_match(self, pattern: str, path: str) -> None:
        assert not glob_matches(pattern, path)


class TestShouldIgnore:
    def test_suffix_match(self) -> None:
        ignore = IgnoreList(patterns=(".pdb",))
        assert ignore.should_ignore("/build/app.pdb")
        assert not ignore.should_ignore("/build/app.exe")

    def test_suffix_match_with_directory(self) -> None:
        ignore = IgnoreList(patterns=("config/local.json",))
        assert ignore.should_ignore("/build/config/local.json")
        assert not ignore.should_ignore("/build/config/global.json")

    def test_glob_match(self) -> None:
        ignore = IgnoreList(patterns=("*.log",))
        assert ignore.should_ignore("/build/app.log")
        assert ignore.should_ignore("/build/logs/today.log")
        assert not ignore.should_ignore("/build/app.exe")

    def test_malformed_glob_still_suffix_matches(self) -> None:
        ignore = IgnoreList(patterns=("[abc",))
        assert ignore.should_ignore("/build/file[abc")
        assert not ignore.should_ignore("/build/a")

    def test_reversed_range_still_suffix_matches(self) -> None:
        ignore = IgnoreList(patterns=("[z-a].txt",))
        assert ignore.should_ignore("/build/[z-a].txt")
        assert not ignore.should_ignore("/build/q.txt")

    def test_accepts_path_objects(self) -> None:
        ignore = IgnoreList(patterns=("*.log",))
        assert ignore.should_ignore(Path("/build/app.log"))

    def test_empty_list_ignores_nothing(self) -> None:
        assert not IgnoreList().should_ignore("/build/app.log")

    def test_pattern_order_does_not_matter(self) -> None:
        patterns = ("*.log", ".pdb", "cache/[0-9]*")
        forward = IgnoreList(patterns=patterns)
        backward = IgnoreList(patterns=tuple(reversed(patterns)))
        paths = ["/b/a.log", "/b/a.pdb", "/b/cache/1x", "/b/cache/x1", "/b/app.exe"]

        assert [forward.should_ignore(p) for p in paths] == [
            backward.should_ignore(p) for p in paths
        ]
        assert [forward.should_ignore(p) for p in paths] == [True, True, True, False, False]


class TestLoadIgnoreList:
    def test_loads_patterns(self, tmp_path: Path) -> None:
        path = tmp_path / "ignore.txt"
        path.write_text("*.log\n.pdb\n", encoding="utf-8")

        result = load_ignore_list(path)

        assert isinstance(result, Ok)
        assert result.value.patterns == ("*.log", ".pdb")

    def test_empty_file_is_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "ignore.txt"
        path.write_text("", encoding="utf-8")

        result = load_ignore_list(path)

        assert isinstance(result, Ok)
        assert result.value.patterns == ()

    def test_missing_file_is_error(self, tmp_path: Path) -> None:
        result = load_ignore_list(tmp_path / "ignore.txt")

        assert isinstance(result, Err)
        assert "not found" in result.error.message
        assert result.error.path == tmp_path / "ignore.txt"
