"""Reference counting over a fixed set of known files."""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Sequence, Tuple

from tqdm.auto import tqdm

from not_in_toc.resolver import resolve_line

LOGGER = logging.getLogger("not_in_toc.index")

CandidateFn = Callable[[str, Path], Iterable[str]]


class Presence(enum.Enum):
    ABSENT = "absent"
    UNREFERENCED = "unreferenced"
    REFERENCED = "referenced"


class ReferenceIndex:
    """Counts references to a set of paths fixed at construction time.

    Recording a path that is not one of the keys never inserts it; the path is
    appended to ``unindexed`` instead.
    """

    def __init__(self, keys: Iterable[str]) -> None:
        self._counts: Dict[str, int] = {key: 0 for key in keys}
        self.unindexed: List[str] = []

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, path: object) -> bool:
        return path in self._counts

    def record(self, path: str) -> bool:
        if path not in self._counts:
            self.unindexed.append(path)
            return False
        self._counts[path] += 1
        return True

    def lookup(self, path: str) -> Presence:
        count = self._counts.get(path)
        if count is None:
            return Presence.ABSENT
        if count == 0:
            return Presence.UNREFERENCED
        return Presence.REFERENCED

    def count(self, path: str) -> int:
        return self._counts.get(path, 0)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self._counts.items())

    def unreferenced(self) -> List[str]:
        return [key for key, count in self._counts.items() if count == 0]


def read_lines(path: Path) -> Iterator[str]:
    with path.open(encoding="utf-8", errors="ignore") as handle:
        for line in handle:
            yield line.rstrip("\r\n")


def scan_files(files: Sequence[Path], index: ReferenceIndex, candidates: CandidateFn, desc: str) -> ReferenceIndex:
    for path in tqdm(files, desc=desc, unit="file", disable=None, leave=False):
        for line in read_lines(path):
            for candidate in candidates(line, path.parent):
                index.record(candidate)
    return index


def media_candidates(line: str, base_dir: Path) -> List[str]:
    return resolve_line(line, base_dir, casefold=True, images_only=True)


def mentions_name(line: str, name: str) -> bool:
    return f"({name}" in line or f"/{name}" in line


def toc_line_references(line: str, base_dir: Path) -> List[str]:
    """Distinct topic paths a TOC line links to."""
    if "](" not in line:
        return []
    references: List[str] = []
    for path in resolve_line(line, base_dir):
        if path not in references:
            references.append(path)
    return references


def topic_candidates(line: str, base_dir: Path) -> List[str]:
    # A reference only counts when the line also names the file as "(name" or "/name".
    return [path for path in toc_line_references(line, base_dir) if mentions_name(line, Path(path).name)]


def build_media_index(media_files: Iterable[Path], markdown_files: Sequence[Path]) -> ReferenceIndex:
    index = ReferenceIndex(str(path).casefold() for path in media_files)
    scan_files(markdown_files, index, media_candidates, desc="markdown files")
    LOGGER.info(
        "Indexed %d media files, %d references outside the index",
        len(index),
        len(index.unindexed),
    )
    return index


def build_topic_index(topics: Iterable[Path], toc_files: Sequence[Path]) -> ReferenceIndex:
    index = ReferenceIndex(str(path) for path in topics)
    scan_files(toc_files, index, topic_candidates, desc="TOC files")
    for path in index.unindexed:
        LOGGER.debug("TOC reference outside the scanned topics: %s", path)
    return index
