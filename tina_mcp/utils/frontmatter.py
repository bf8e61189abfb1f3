"""YAML frontmatter parsing and writing utilities.

This module splits a document into its frontmatter block and body, decodes
the block with PyYAML and renders a mapping back around the untouched body.

Frontmatter format:
---
title: Hello World
draft: true
tags: [news, release]
---

Body content here...

A document has frontmatter only when its first line is a ``---`` delimiter
and a second delimiter line follows later. Detection is a line scan, so
there is no backtracking and only the first block is ever considered.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..exceptions import FrontmatterFormatError

DELIMITER = "---"


def _iter_lines(content: str) -> Iterator[tuple[int, int, int]]:
    """Yield ``(start, end, next_start)`` offsets for each line, newline excluded."""
    pos = 0
    length = len(content)
    while pos < length:
        newline = content.find("\n", pos)
        if newline == -1:
            yield pos, length, length
            return
        yield pos, newline, newline + 1
        pos = newline + 1


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """Split content into its raw frontmatter block and body.

    Returns:
        Tuple of (block text or None, body). Without a complete delimiter pair
        at the head of the document the block is None and the body is the
        original content, unchanged.
    """
    if not content:
        return None, content

    lines = _iter_lines(content)
    start, end, block_start = next(lines)
    if not _is_delimiter(content[start:end]):
        return None, content

    for start, end, next_start in lines:
        if _is_delimiter(content[start:end]):
            block = content[block_start:start]
            body = content[next_start:].lstrip("\r\n")
            return block, body

    return None, content


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter from document content.

    Args:
        content: Full file content that may contain frontmatter

    Returns:
        Tuple of (metadata dict, body). The dict is empty when no frontmatter
        is present or the block is empty.

    Raises:
        FrontmatterFormatError: If the block is not valid YAML or its top level
            is not a mapping.
    """
    block, body = split_frontmatter(content)
    if block is None:
        return {}, body

    try:
        metadata = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise FrontmatterFormatError(str(e)) from e

    if metadata is None:
        return {}, body
    if not isinstance(metadata, dict):
        raise FrontmatterFormatError(
            f"expected a mapping at the top level, got {type(metadata).__name__}"
        )
    return {str(key): value for key, value in metadata.items()}, body


def render_frontmatter(metadata: dict[str, Any], body: str) -> str:
    """Render metadata as a frontmatter block followed by the body.

    The body is appended verbatim, separated from the block by one blank line
    when it is non-empty.
    """
    yaml_str = ""
    if metadata:
        yaml_str = yaml.safe_dump(
            metadata, default_flow_style=False, allow_unicode=True, sort_keys=False
        )
        if not yaml_str.endswith("\n"):
            yaml_str += "\n"

    parts = [f"{DELIMITER}\n", yaml_str, f"{DELIMITER}\n"]
    if body:
        parts.append("\n")
        parts.append(body)
    return "".join(parts)


def merge_frontmatter(existing: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Shallow merge: every key in ``updates`` replaces or adds that key.

    Nested mappings are replaced wholesale and ``None`` is stored as null.
    """
    merged = dict(existing)
    for key, value in updates.items():
        merged[key] = value
    return merged

