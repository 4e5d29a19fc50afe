"""Command line interface for auditing DocFX documentation trees."""

from __future__ import annotations

import argparse
import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from not_in_toc.reports import (
    ScanReport,
    find_multiples,
    find_orphaned_images,
    find_orphaned_topics,
    render_report,
)
from not_in_toc.walker import (
    DocFxNotFoundError,
    absolute,
    list_markdown_files,
    list_media_files,
    list_toc_files,
)

LOGGER = logging.getLogger("not_in_toc")


class ScanMode(enum.Enum):
    ORPHANED_TOPICS = "orphaned topics"
    MULTIPLES = "topics that appear more than once in one or more TOC.md files"
    ORPHANED_IMAGES = "orphaned images"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Find markdown topics missing from every TOC.md, topics listed more "
            "than once, and media files no topic references."
        )
    )
    parser.add_argument("-d", "--directory", required=True, type=Path, help="Directory to scan")
    modes = parser.add_mutually_exclusive_group(required=True)
    modes.add_argument(
        "-o",
        "--find-orphaned-topics",
        dest="mode",
        action="store_const",
        const=ScanMode.ORPHANED_TOPICS,
        help="List .md files that no TOC.md file references",
    )
    modes.add_argument(
        "-m",
        "--find-multiples",
        dest="mode",
        action="store_const",
        const=ScanMode.MULTIPLES,
        help="List topics referenced more than once across TOC.md files",
    )
    modes.add_argument(
        "-i",
        "--find-orphaned-images",
        dest="mode",
        action="store_const",
        const=ScanMode.ORPHANED_IMAGES,
        help="List files in media directories that no .md file references",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Also search subdirectories of --directory",
    )
    parser.add_argument(
        "-g",
        "--ignore-redirects",
        action="store_true",
        help="Do not report orphaned topics that carry a redirect_url: entry",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Also print similar file names and references outside the media index",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args(argv)


@dataclass(frozen=True)
class ScanOptions:
    directory: Path
    mode: ScanMode
    recursive: bool = False
    ignore_redirects: bool = False
    verbose: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ScanOptions":
        directory = args.directory.expanduser()
        if not directory.is_dir():
            raise SystemExit(f"Directory {directory} does not exist.")
        return cls(
            directory=absolute(directory),
            mode=args.mode,
            recursive=args.recursive,
            ignore_redirects=args.ignore_redirects,
            verbose=args.verbose,
        )


class DocAudit:
    def __init__(self, options: ScanOptions) -> None:
        self.options = options

    def header(self) -> str:
        return f"Searching the {self.options.directory} directory and its subdirectories for {self.options.mode.value}."

    def scan(self) -> ScanReport:
        options = self.options
        if options.mode is ScanMode.ORPHANED_IMAGES:
            media_files = list_media_files(options.directory, options.recursive)
            return find_orphaned_images(options.directory, media_files)
        toc_files = list_toc_files(options.directory)
        markdown_files = list_markdown_files(options.directory, options.recursive)
        if options.mode is ScanMode.MULTIPLES:
            return find_multiples(toc_files, markdown_files)
        return find_orphaned_topics(toc_files, markdown_files, options.ignore_redirects)

    def run(self) -> None:
        print(f"\n{self.header()}")
        report = self.scan()
        LOGGER.info("%s: %d findings", self.options.mode.name.lower(), len(report.findings))
        print(render_report(report, self.options.verbose), end="")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)
    audit = DocAudit(ScanOptions.from_args(args))
    try:
        audit.run()
    except DocFxNotFoundError as exc:
        raise SystemExit(str(exc)) from exc
