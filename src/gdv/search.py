"""Search pipeline: scan collected reports for keyword matches.

Stages, in order: read every file under the collection directory, keep
lines matching any keyword, drop unresolved ``(*)`` lines, reduce each
line to the text after its last ``- ``, then sort and deduplicate.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from gdv.gradle.guards import ensure_corpus_dir

UNRESOLVED_MARKER = "(*)"
TREE_SEPARATOR = "- "


def compile_keywords(keywords: Sequence[str], *, regexp: bool = False) -> re.Pattern[str]:
    """Combine keywords into one case-sensitive pattern with OR semantics.

    Keywords match literally unless ``regexp`` is set.

    Raises:
        ValueError: if no keyword is given.
        re.error: if a keyword is not a valid regular expression.
    """
    if not keywords:
        raise ValueError("at least one keyword is required")
    parts = [f"(?:{k})" if regexp else re.escape(k) for k in keywords]
    return re.compile("|".join(parts))


def iter_corpus_files(corpus_dir: Path) -> Iterator[Path]:
    """Yield every regular file below ``corpus_dir`` in sorted path order."""
    for path in sorted(corpus_dir.rglob("*")):
        if path.is_file():
            yield path


def iter_corpus_lines(corpus_dir: Path) -> Iterator[str]:
    for path in iter_corpus_files(corpus_dir):
        with open(path, encoding="utf-8", errors="replace") as f:
            for raw_line in f:
                yield raw_line.rstrip("\r\n")


def filter_lines(lines: Iterable[str], pattern: re.Pattern[str]) -> Iterator[str]:
    """Keep lines matching ``pattern`` that are not unresolved markers."""
    for line in lines:
        if pattern.search(line) is None:
            continue
        if UNRESOLVED_MARKER in line:
            continue
        yield line


def normalize_line(line: str) -> str:
    """Strip the tree-drawing prefix through the last ``- `` separator."""
    _, sep, tail = line.rpartition(TREE_SEPARATOR)
    return tail if sep else line


def deduplicate(identifiers: Iterable[str]) -> list[str]:
    return sorted({identifier for identifier in identifiers if identifier})


def search_lines(lines: Iterable[str], pattern: re.Pattern[str]) -> list[str]:
    return deduplicate(normalize_line(line) for line in filter_lines(lines, pattern))


def search_dependencies(
    corpus_dir: Path,
    keywords: Sequence[str],
    *,
    regexp: bool = False,
) -> list[str]:
    """Return sorted, unique dependency identifiers matching any keyword.

    A missing corpus directory raises ``CorpusDirError``. No matches is an
    empty list, not an error.
    """
    ensure_corpus_dir(corpus_dir)
    pattern = compile_keywords(keywords, regexp=regexp)
    return search_lines(iter_corpus_lines(corpus_dir), pattern)
