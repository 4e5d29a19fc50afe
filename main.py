#!/usr/bin/env python
"""Audit a DocFX documentation tree for orphaned topics, duplicate TOC entries and orphaned media."""

from __future__ import annotations

from not_in_toc.cli import main

if __name__ == "__main__":
    main()
