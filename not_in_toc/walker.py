"""Enumerate topics, TOC files and media files in a documentation tree."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Union

LOGGER = logging.getLogger("not_in_toc.walker")

DOCFX_MARKER = "docfx.json"
TOC_FILE_NAME = "TOC.md"
MEDIA_DIR_NAME = "media"
INCLUDES_DIR_NAME = "includes"


class DocFxNotFoundError(FileNotFoundError):
    """Raised when no docfx.json exists at or above the scanned directory."""


def absolute(path: Union[str, Path]) -> Path:
    return Path(os.path.abspath(os.fspath(path)))


def _glob(root: Path, pattern: str, recursive: bool) -> Iterable[Path]:
    return root.rglob(pattern) if recursive else root.glob(pattern)


def list_markdown_files(root: Union[str, Path], recursive: bool) -> List[Path]:
    root = absolute(root)
    files = sorted(path for path in _glob(root, "*.md", recursive) if path.is_file())
    LOGGER.info("Found %d markdown files under %s", len(files), root)
    return files


def find_docfx_directory(start: Union[str, Path]) -> Path:
    """Return ``start`` or its nearest ancestor that contains docfx.json."""
    directory = absolute(start)
    while not (directory / DOCFX_MARKER).is_file():
        if directory.parent == directory:
            raise DocFxNotFoundError(
                f"Could not find {DOCFX_MARKER} file in directory structure above {absolute(start)}."
            )
        directory = directory.parent
    return directory


def list_toc_files(root: Union[str, Path]) -> List[Path]:
    docfx_dir = find_docfx_directory(root)
    LOGGER.info("Using %s as the documentation root", docfx_dir)
    files = sorted(path for path in docfx_dir.rglob(TOC_FILE_NAME) if path.is_file())
    LOGGER.info("Found %d %s files", len(files), TOC_FILE_NAME)
    return files


def list_media_files(root: Union[str, Path], recursive: bool) -> List[Path]:
    """Files inside every ``media`` directory, including all of its subdirectories.

    ``recursive`` only controls where ``media`` directories are looked for; once
    found, a media directory is always walked completely.
    """
    root = absolute(root)
    found: Dict[str, Path] = {}
    for media_dir in _glob(root, MEDIA_DIR_NAME, recursive):
        if not media_dir.is_dir():
            continue
        for path in media_dir.rglob("*"):
            if path.is_file():
                found.setdefault(str(path).casefold(), path)
    files = sorted(found.values())
    LOGGER.info("Found %d media files under %s", len(files), root)
    return files


def is_include(path: Path) -> bool:
    return INCLUDES_DIR_NAME in path.parent.parts


def is_toc(path: Path) -> bool:
    return path.name == TOC_FILE_NAME
