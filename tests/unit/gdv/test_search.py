"""Tests for the search pipeline."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from gdv.errors import CorpusDirError
from gdv.search import (
    compile_keywords,
    filter_lines,
    normalize_line,
    search_dependencies,
    search_lines,
)

ROOT_REPORT = "+--- org.a:lib:1.0\n+--- org.b:other:2.0 (*)\n"


@pytest.fixture
def corpus(tmp_path: Path) -> Path:
    run = tmp_path / "run"
    deps = run / "dependencies"
    deps.mkdir(parents=True)
    (run / "gdv-version.txt").write_text("0.3.0\n", encoding="utf-8")
    (deps / "root.txt").write_text(ROOT_REPORT, encoding="utf-8")
    (deps / "__app.txt").write_text(
        "compileClasspath - Compile classpath for source set 'main'.\n"
        "+--- org.a:lib:1.0\n"
        "|    \\--- org.c:tiny:0.1\r\n"
        "\\--- org.b:other:2.0 -> 2.1\n",
        encoding="utf-8",
    )
    return run


def test_search_single_keyword(corpus: Path) -> None:
    assert search_dependencies(corpus, ["org.a"]) == ["org.a:lib:1.0"]


def test_search_excludes_unresolved_marker(tmp_path: Path) -> None:
    (tmp_path / "root.txt").write_text(ROOT_REPORT, encoding="utf-8")
    assert search_dependencies(tmp_path, ["org"]) == ["org.a:lib:1.0"]


def test_search_keywords_are_or_combined_and_deduplicated(corpus: Path) -> None:
    assert search_dependencies(corpus, ["org.c", "org.a", "org.b"]) == [
        "org.a:lib:1.0",
        "org.b:other:2.0 -> 2.1",
        "org.c:tiny:0.1",
    ]


def test_search_is_idempotent_and_order_independent(corpus: Path, tmp_path: Path) -> None:
    first = search_dependencies(corpus, ["org"])
    assert first == search_dependencies(corpus, ["org"])

    shuffled = tmp_path / "shuffled"
    shuffled.mkdir()
    lines = []
    for path in sorted(corpus.rglob("*.txt")):
        lines.extend(path.read_text(encoding="utf-8").splitlines())
    (shuffled / "all.txt").write_text("\n".join(reversed(lines)) + "\n", encoding="utf-8")
    assert search_dependencies(shuffled, ["org"]) == first


def test_search_is_case_sensitive(corpus: Path) -> None:
    assert search_dependencies(corpus, ["ORG.A"]) == []


def test_search_zero_matches_is_empty(corpus: Path) -> None:
    assert search_dependencies(corpus, ["com.nothing"]) == []


def test_search_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(CorpusDirError, match="Not directory"):
        search_dependencies(tmp_path / "missing", ["org"])


def test_search_keywords_are_literal_by_default(tmp_path: Path) -> None:
    (tmp_path / "r.txt").write_text("+--- orgXa:lib:1.0\n+--- org.a:lib:1.0\n", encoding="utf-8")
    assert search_dependencies(tmp_path, ["org.a"]) == ["org.a:lib:1.0"]
    assert search_dependencies(tmp_path, ["org.a"], regexp=True) == ["org.a:lib:1.0", "orgXa:lib:1.0"]


@pytest.mark.parametrize(
    ("keyword", "expected"),
    [
        ("c++", ["com.c++:lib:1.0"]),
        ("(c)", ["org.a:constraint:1.0 (c)"]),
        ("1.+", ["org.x:dyn:1.+ -> 1.5"]),
    ],
)
def test_search_gradle_punctuation_matches_literally(tmp_path: Path, keyword: str, expected: list[str]) -> None:
    (tmp_path / "root.txt").write_text(
        "+--- com.c++:lib:1.0\n"
        "+--- org.a:constraint:1.0 (c)\n"
        "+--- org.x:dyn:1.+ -> 1.5\n"
        "+--- org.x:fixed:1.2\n",
        encoding="utf-8",
    )
    assert search_dependencies(tmp_path, [keyword]) == expected


def test_compile_keywords_rejects_invalid_pattern() -> None:
    with pytest.raises(re.error):
        compile_keywords(["org("], regexp=True)
    assert compile_keywords(["org("]).search("x org( y")
    with pytest.raises(ValueError):
        compile_keywords([])


def test_normalize_line_uses_last_separator() -> None:
    assert normalize_line("|    +--- org.a:lib:1.0") == "org.a:lib:1.0"
    assert normalize_line("a - b - c:d:1") == "c:d:1"
    assert normalize_line("+--- org.a:lib:1.0  ") == "org.a:lib:1.0  "
    assert normalize_line("  no separator here ") == "  no separator here "


def test_filter_drops_marker_anywhere() -> None:
    pattern = compile_keywords(["lib"])
    lines = ["+--- x:lib:1 (*)", "(*) x:lib:2", "+--- x:lib:3"]
    assert list(filter_lines(lines, pattern)) == ["+--- x:lib:3"]


def test_search_lines_drops_empty_identifiers() -> None:
    pattern = compile_keywords(["org"])
    assert search_lines(["org - ", "+--- org.a:b:1"], pattern) == ["org.a:b:1"]
