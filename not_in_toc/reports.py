"""The three scans: orphaned topics, topics listed more than once, orphaned media."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from not_in_toc.index import (
    Presence,
    build_media_index,
    build_topic_index,
    mentions_name,
    read_lines,
    toc_line_references,
)
from not_in_toc.walker import is_include, is_toc, list_markdown_files

LOGGER = logging.getLogger("not_in_toc.reports")

REDIRECT_MARKER = "redirect_url:"
# Lots of topics are called index.md, name collisions for it are noise.
COMMON_TOPIC_NAME = "index.md"


@dataclass
class ScanReport:
    title: str
    findings: List[str] = field(default_factory=list)
    summary: Optional[str] = None
    diagnostics_title: Optional[str] = None
    diagnostics: List[str] = field(default_factory=list)


def has_redirect(path: Path) -> bool:
    return any(REDIRECT_MARKER in line for line in read_lines(path))


def similar_file_names(topics: Sequence[Path], toc_files: Sequence[Path]) -> List[str]:
    """TOC lines that name a topic's file name but point at a different path."""
    by_name: Dict[str, List[Path]] = {}
    for topic in topics:
        if topic.name != COMMON_TOPIC_NAME:
            by_name.setdefault(topic.name, []).append(topic)

    messages: List[str] = []
    seen: Set[Tuple[str, str, str]] = set()
    for toc in toc_files:
        for line in read_lines(toc):
            references = toc_line_references(line, toc.parent)
            for reference in references:
                name = Path(reference).name
                if not mentions_name(line, name):
                    continue
                for topic in by_name.get(name, []):
                    key = (str(topic), str(toc), line)
                    if str(topic) in references or key in seen:
                        continue
                    seen.add(key)
                    messages.append(f"File '{topic}' has same file name as a file in {toc}: '{line}'")
    return messages


def find_orphaned_topics(
    toc_files: Sequence[Path],
    markdown_files: Sequence[Path],
    ignore_redirects: bool = False,
) -> ScanReport:
    topics = [path for path in markdown_files if not is_include(path) and not is_toc(path)]
    index = build_topic_index(topics, toc_files)

    report = ScanReport(title="Topics not in any TOC file:", diagnostics_title="Similar file names:")
    for topic in topics:
        if index.lookup(str(topic)) is not Presence.UNREFERENCED:
            continue
        if ignore_redirects and has_redirect(topic):
            LOGGER.debug("Skipping redirected topic %s", topic)
            continue
        report.findings.append(str(topic))
    report.summary = f"Found {len(report.findings)} total .md files that are not referenced in a TOC."
    report.diagnostics = similar_file_names(topics, toc_files)
    return report


def find_multiples(toc_files: Sequence[Path], markdown_files: Sequence[Path]) -> ScanReport:
    # Counts add up over every TOC line in every TOC file.
    topics = [path for path in markdown_files if not is_include(path)]
    index = build_topic_index(topics, toc_files)
    report = ScanReport(
        title="Topics that appear more than once in TOC files:",
        diagnostics_title=(
            "TOC references to files outside the scanned topics. "
            "This can happen for topics above the input directory, or for typos:"
        ),
    )
    for path, count in index.items():
        if count > 1:
            report.findings.append(f"Topic '{path}' appears more than once in a TOC file.")
    report.summary = f"Found {len(report.findings)} topics that appear more than once in a TOC."
    report.diagnostics = list(dict.fromkeys(index.unindexed))
    return report


def find_orphaned_images(root: Union[str, Path], media_files: Sequence[Path]) -> ScanReport:
    markdown_files = list_markdown_files(root, recursive=True)
    index = build_media_index(media_files, markdown_files)
    report = ScanReport(
        title="The following media files are not referenced from any .md file:",
        diagnostics_title=(
            "The following referenced images were not found in our dictionary. "
            "This can happen if the image is in a parent directory of the input directory:"
        ),
    )
    for path in media_files:
        if index.lookup(str(path).casefold()) is Presence.UNREFERENCED:
            report.findings.append(str(path))
    report.diagnostics = list(index.unindexed)
    return report


def render_report(report: ScanReport, verbose: bool = False) -> str:
    lines: List[str] = ["", report.title, ""]
    lines.extend(report.findings)
    if report.summary:
        lines.extend(["", report.summary])
    if verbose and report.diagnostics_title:
        lines.extend(["", report.diagnostics_title, ""])
        lines.extend(report.diagnostics)
    return "\n".join(lines) + "\n"
