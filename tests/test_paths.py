"""Tests for path normalization helpers (utils/paths.py)."""

from __future__ import annotations

import pytest

from ctreport.utils.paths import get_base_path, normalize_dir_path, normalize_file_path


class TestNormalizeFilePath:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("src/a.cpp", "src/a.cpp"),
            ("src\\a.cpp", "src/a.cpp"),
            ("  C:\\repo\\src\\a.cpp\n", "C:/repo/src/a.cpp"),
            ("", ""),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_file_path(raw) == expected


class TestNormalizeDirPath:
    def test_adds_trailing_slash(self) -> None:
        assert normalize_dir_path("/repo") == "/repo/"

    def test_keeps_existing_slash(self) -> None:
        assert normalize_dir_path("C:\\repo\\") == "C:/repo/"

    def test_without_trailing_slash(self) -> None:
        assert normalize_dir_path("/repo", add_trailing_slash=False) == "/repo"

    def test_empty(self) -> None:
        assert normalize_dir_path("") == ""


class TestGetBasePath:
    def test_tracked_path_has_empty_base(self) -> None:
        assert get_base_path("src/a.cpp", ["src/a.cpp"]) == ""

    def test_suffix_match(self) -> None:
        base = get_base_path("/home/ci/repo/src/a.cpp", ["src/a.cpp", "src/b.cpp"])
        assert base == "/home/ci/repo/"

    def test_longest_match_wins(self) -> None:
        tracked = ["a.cpp", "src/a.cpp", "lib/src/a.cpp"]
        assert get_base_path("/work/lib/src/a.cpp", tracked) == "/work/"

    def test_requires_component_boundary(self) -> None:
        assert get_base_path("/repo/mysrc/a.cpp", ["src/a.cpp"]) is None

    def test_windows_separators(self) -> None:
        assert get_base_path("D:\\ci\\repo\\src\\a.cpp", ["src\\a.cpp"]) == "D:/ci/repo/"

    def test_no_match(self) -> None:
        assert get_base_path("/usr/include/stdio.h", ["src/a.cpp"]) is None

    def test_empty_tracked_files(self) -> None:
        assert get_base_path("/repo/src/a.cpp", []) is None
