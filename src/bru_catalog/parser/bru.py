"""Bruno (.bru) request definition parser.

A .bru file is a sequence of blocks, each opened by a header line ending
in ``{`` and closed by a bare ``}`` line::

    meta {
      name: Read Partner Account
    }
    get {
      url: {{base_url}}/v2/accounts/:partner_account_id
      body: none
    }
    params:path {
      partner_account_id: krn:partner:global:account:123
    }

The parser is a small state machine: the current Section selects a line
handler from _HANDLERS. The only block that needs more than a line at a
time is ``body:json``, whose content is itself JSON with its own braces.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Callable

from bru_catalog.fs import FileSource, LocalFileSource
from .base import ParsedRequestDefinition

logger = logging.getLogger(__name__)

FOLDER_FILE = "folder.bru"

_METHOD_HEADER = re.compile(r"^(get|post|patch|put|delete) \{$", re.IGNORECASE)
_PARAM_LINE = re.compile(r"^(\w+):\s*(.+)$")
_HEADER_LINE = re.compile(r"^([^:]+):\s*(.+)$")


class Section(Enum):
    NONE = "none"
    META = "meta"
    METHOD = "method"
    PATH_PARAMS = "params:path"
    QUERY_PARAMS = "params:query"
    HEADERS = "headers"
    BODY_JSON = "body:json"


_BLOCK_HEADERS = {
    "meta {": Section.META,
    "params:path {": Section.PATH_PARAMS,
    "params:query {": Section.QUERY_PARAMS,
    "headers {": Section.HEADERS,
    "body:json {": Section.BODY_JSON,
}


def scan_section(line: str) -> tuple[Section, str | None] | None:
    """Classify a stripped line as a block header.

    Returns (section, http_method) for header lines, None otherwise.
    http_method is only set for request blocks such as ``post {``.
    """
    match = _METHOD_HEADER.match(line)
    if match:
        return Section.METHOD, match.group(1).upper()
    for prefix, section in _BLOCK_HEADERS.items():
        if line.startswith(prefix):
            return section, None
    return None


class BodyBraceTracker:
    """Buffers body:json lines and keeps a running brace balance."""

    def __init__(self):
        self.lines: list[str] = []
        self.depth = 0

    def append(self, raw_line: str) -> None:
        self.lines.append(raw_line)
        self.depth += raw_line.count("{") - raw_line.count("}")

    @property
    def balanced(self) -> bool:
        return self.depth == 0

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class _Accumulator:
    name: str = ""
    method: str = "GET"
    url: str = ""
    path_params: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    body_type: str = "none"
    tracker: BodyBraceTracker = field(default_factory=BodyBraceTracker)


def _ignore(acc: _Accumulator, line: str, raw: str) -> Section:
    return Section.NONE


def _meta_line(acc: _Accumulator, line: str, raw: str) -> Section:
    if line.startswith("name:"):
        acc.name = line[5:].strip()
    return Section.META


def _method_line(acc: _Accumulator, line: str, raw: str) -> Section:
    if line.startswith("url:"):
        acc.url = line[4:].strip()
    elif line.startswith("body:"):
        value = line[5:].strip()
        acc.body_type = value if value in ("json", "none") else "text"
    return Section.METHOD


def _path_param_line(acc: _Accumulator, line: str, raw: str) -> Section:
    match = _PARAM_LINE.match(line)
    if match:
        acc.path_params[match.group(1)] = match.group(2)
    return Section.PATH_PARAMS


def _query_param_line(acc: _Accumulator, line: str, raw: str) -> Section:
    match = _PARAM_LINE.match(line)
    if match:
        acc.query_params[match.group(1)] = match.group(2)
    return Section.QUERY_PARAMS


def _header_line(acc: _Accumulator, line: str, raw: str) -> Section:
    match = _HEADER_LINE.match(line)
    if match:
        acc.headers[match.group(1).strip()] = match.group(2).strip()
    return Section.HEADERS


def _body_line(acc: _Accumulator, line: str, raw: str) -> Section:
    acc.tracker.append(raw)
    return Section.BODY_JSON


_HANDLERS: dict[Section, Callable[[_Accumulator, str, str], Section]] = {
    Section.NONE: _ignore,
    Section.META: _meta_line,
    Section.METHOD: _method_line,
    Section.PATH_PARAMS: _path_param_line,
    Section.QUERY_PARAMS: _query_param_line,
    Section.HEADERS: _header_line,
    Section.BODY_JSON: _body_line,
}


def _enter(acc: _Accumulator, section: Section, method: str | None) -> Section:
    if method is not None:
        acc.method = method
    if section is Section.BODY_JSON:
        acc.body_type = "json"
    acc.tracker = BodyBraceTracker()
    return section


def _close(acc: _Accumulator, section: Section, raw: str) -> Section:
    if section is Section.BODY_JSON and acc.tracker.lines:
        # A "}" line inside the JSON itself: keep it and stay in the block
        if not acc.tracker.balanced:
            acc.tracker.append(raw)
            return Section.BODY_JSON
        acc.body = acc.tracker.text
    acc.tracker = BodyBraceTracker()
    return Section.NONE


def parse_definition(text: str) -> ParsedRequestDefinition:
    """Parse the text of a .bru file.

    Never fails on content: unknown blocks and lines are ignored, and a
    file without ``name:`` or ``url:`` yields a definition with those
    fields empty (see ParsedRequestDefinition.is_complete).
    """
    acc = _Accumulator()
    section = Section.NONE

    # Only "\n" ends a line; other Unicode line breaks may sit inside JSON strings
    for raw in text.split("\n"):
        raw = raw.removesuffix("\r")
        line = raw.strip()

        header = scan_section(line)
        if header is not None:
            section = _enter(acc, *header)
        elif line == "}":
            section = _close(acc, section, raw)
        else:
            section = _HANDLERS[section](acc, line, raw)

    if section is Section.BODY_JSON:
        logger.debug("body:json block not closed before end of file; body dropped")

    return ParsedRequestDefinition(
        name=acc.name,
        method=acc.method,
        url=acc.url,
        path_params=acc.path_params,
        query_params=acc.query_params,
        headers=acc.headers,
        body=acc.body,
        body_type=acc.body_type,
    )


def parse_definition_file(path: PurePath, source: FileSource | None = None) -> ParsedRequestDefinition | None:
    """Read and parse one .bru file, returning None if it cannot be read."""
    source = source or LocalFileSource()
    try:
        text = source.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read definition file %s: %s", path, e)
        return None
    return parse_definition(text)


def is_definition_file(name: str) -> bool:
    """True for request files; folder.bru only carries folder settings."""
    return name.endswith(".bru") and name != FOLDER_FILE

