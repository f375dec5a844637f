"""Walks a Bruno collection directory and builds the preset hierarchy."""

import json
import logging
import re
import unicodedata
from pathlib import PurePath

from bru_catalog.fs import FileSource, LocalFileSource
from bru_catalog.parser.base import CatalogNode, EndpointPreset, ParameterDefinition, ParsedRequestDefinition
from bru_catalog.parser.bru import is_definition_file, parse_definition_file
from bru_catalog.parser.urls import extract_path_params, normalize_url, path_param_definitions
from .naming import classify_category, generate_id

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{[^}]+\}\}")


def _char_class(c: str) -> int:
    if c.isspace():
        return 0
    if c.isdigit():
        return 2
    if c.isalpha():
        return 3
    return 1


def sort_key(name: str) -> tuple[tuple[tuple[int, str], ...], str]:
    """Locale-style ordering: case and accents only break ties.

    Whitespace sorts before punctuation, punctuation before digits and
    digits before letters. On a tie lower case comes first.
    """
    folded = unicodedata.normalize("NFKD", name.casefold())
    base = tuple((_char_class(c), c) for c in folded if not unicodedata.combining(c))
    return base, name.swapcase()


def build_preset(definition: ParsedRequestDefinition, path: PurePath, relative_path: PurePath) -> EndpointPreset:
    """Turn a parsed .bru definition into an EndpointPreset.

    ``path`` is the full file path (used for the category), ``relative_path``
    the path below the collection root (used for the id).
    """
    endpoint = normalize_url(definition.url)
    path_params = path_param_definitions(extract_path_params(endpoint), definition.path_params)

    query_params = [
        ParameterDefinition(
            name=name,
            description=f"Query parameter: {name}",
            required=False,
            type="string",
            example=value,
        )
        for name, value in definition.query_params.items()
    ]

    body_template = None
    if definition.body and definition.body_type == "json":
        _check_json_body(definition.body, path)
        # Kept as text so {{placeholders}} survive for the templating step
        body_template = definition.body

    required_headers = [
        ParameterDefinition(
            name=name,
            description=f"Header: {name}",
            required=True,
            type="string",
            example=value,
        )
        for name, value in definition.headers.items()
        if not name.startswith("{{")
    ]

    return EndpointPreset(
        id=generate_id(relative_path, definition.name),
        name=definition.name,
        description=definition.name,
        method=definition.method,
        endpoint=endpoint,
        category=classify_category(path),
        body_template=body_template,
        path_params=path_params or None,
        query_params=query_params or None,
        required_headers=required_headers or None,
        source=str(path),
    )


def _check_json_body(body: str, path: PurePath) -> None:
    """Warn when a body is not JSON even with its placeholders filled in.

    A bare number is valid both inside a string and as a standalone value.
    """
    try:
        json.loads(_PLACEHOLDER.sub("0", body))
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON body in %s: %s", path, e)


def build_hierarchy(root: PurePath | str, source: FileSource | None = None) -> CatalogNode:
    """Build the folder tree of presets rooted at ``root``.

    A missing root gives an empty node. Unreadable or incomplete files are
    skipped; nothing below the root makes this raise.
    """
    source = source or LocalFileSource()
    root = PurePath(root)
    node = CatalogNode(name=root.name, path=str(root))

    if not source.exists(root):
        logger.warning("Collection directory not found: %s", root)
        return node

    _walk(root, root, node, source)
    return node


def _walk(root: PurePath, current: PurePath, node: CatalogNode, source: FileSource) -> None:
    try:
        entries = source.list_dir(current)
    except OSError as e:
        logger.warning("Could not list directory %s: %s", current, e)
        return

    for entry in entries:
        full_path = current / entry.name
        if entry.is_dir:
            subfolder = CatalogNode(name=entry.name, path=str(full_path))
            _walk(root, full_path, subfolder, source)
            node.subfolders.append(subfolder)
        elif is_definition_file(entry.name):
            preset = _load_preset(root, full_path, source)
            if preset is not None:
                node.presets.append(preset)

    node.subfolders.sort(key=lambda n: sort_key(n.name))
    node.presets.sort(key=lambda p: sort_key(p.name))


def _load_preset(root: PurePath, path: PurePath, source: FileSource) -> EndpointPreset | None:
    definition = parse_definition_file(path, source)
    if definition is None:
        return None
    if not definition.is_complete:
        logger.debug("Skipping %s: missing name or url", path)
        return None
    return build_preset(definition, path, path.relative_to(root))


def flatten_hierarchy(node: CatalogNode) -> list[EndpointPreset]:
    """All presets of a tree, each folder's own presets before its subfolders'."""
    presets = list(node.presets)
    for subfolder in node.subfolders:
        presets.extend(flatten_hierarchy(subfolder))
    return presets


def count_presets(node: CatalogNode | None) -> int:
    if node is None:
        return 0
    return len(node.presets) + sum(count_presets(sub) for sub in node.subfolders)
