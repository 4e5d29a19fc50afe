"""Extract file references from markdown lines and resolve them to absolute paths."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union

# ![Auto hide](../ide/media/vs2015_auto_hide.png)
# ### [Managing External Tools](ide/managing-external-tools.md)
LINK_RE = re.compile(r"\]\((?P<target>[^)\n]*)\)")
IMAGE_LINK_RE = re.compile(r"!\[[^\]\n]*\]\((?P<target>[^)\n]*)\)")
# <img src="../data-tools/media/logo_azure-datalake.svg" alt="">
IMG_SRC_MARKER = 'img src="'

LINK = "link"
IMG_SRC = "img_src"


@dataclass(frozen=True)
class ReferenceMatch:
    kind: str
    target: str
    start: int
    end: int


def match_link(text: str, pos: int = 0) -> Optional[ReferenceMatch]:
    """Return the first ``](target)`` occurrence at or after ``pos``."""
    match = LINK_RE.search(text, pos)
    if match is None:
        return None
    return ReferenceMatch(LINK, match.group("target"), match.start(), match.end())


def match_image_link(text: str, pos: int = 0) -> Optional[ReferenceMatch]:
    """Return the first ``![alt](target)`` occurrence at or after ``pos``."""
    match = IMAGE_LINK_RE.search(text, pos)
    if match is None:
        return None
    return ReferenceMatch(LINK, match.group("target"), match.start(), match.end())


def match_img_src(text: str, pos: int = 0) -> Optional[ReferenceMatch]:
    """Return the first ``img src="target"`` occurrence at or after ``pos``."""
    start = text.find(IMG_SRC_MARKER, pos)
    if start == -1:
        return None
    value_start = start + len(IMG_SRC_MARKER)
    value_end = text.find('"', value_start)
    if value_end == -1:
        return None
    return ReferenceMatch(IMG_SRC, text[value_start:value_end], start, value_end + 1)


def iter_references(line: str, images_only: bool = False) -> Iterator[ReferenceMatch]:
    """Yield every link occurrence on the line, then every ``img src`` occurrence.

    With ``images_only`` plain ``[text](target)`` links are skipped and only
    ``![alt](target)`` images are yielded before the ``img src`` occurrences.
    """
    find_link = match_image_link if images_only else match_link
    pos = 0
    while (match := find_link(line, pos)) is not None:
        yield match
        pos = match.end
    pos = 0
    while (match := match_img_src(line, pos)) is not None:
        yield match
        pos = match.end


def clean_target(match: ReferenceMatch) -> Optional[str]:
    """Return the relative path named by ``match``, or None for out-of-tree targets."""
    target = match.target.lstrip()
    if not target or target.startswith("/") or target.startswith("http"):
        return None
    if match.kind == LINK:
        # Drop titles such as ![x](media/x.png "Caption").
        target = target.split(" ", 1)[0]
    return target or None


def extract_target(text: str) -> Optional[str]:
    """Relative target of the first reference in ``text``; links win over ``img src``."""
    match = match_link(text) or match_img_src(text)
    if match is None:
        return None
    return clean_target(match)


def resolve_target(target: str, base_dir: Union[str, Path]) -> str:
    joined = os.path.join(os.fspath(base_dir), target.replace("\\", "/"))
    return os.path.abspath(joined)


def resolve_line(
    line: str,
    base_dir: Union[str, Path],
    casefold: bool = False,
    images_only: bool = False,
) -> List[str]:
    """Resolve every reference on ``line`` relative to ``base_dir``."""
    resolved: List[str] = []
    for match in iter_references(line, images_only):
        target = clean_target(match)
        if target is None:
            continue
        path = resolve_target(target, base_dir)
        resolved.append(path.casefold() if casefold else path)
    return resolved
