"""URL template helpers.

Bruno URLs look like ``{{base_url}}{{version}}/accounts/:account_id``.
Presets use the OpenAPI-style ``/v2/accounts/{account_id}`` form instead.
"""

import re

from .base import ParameterDefinition

# {name} (also inside {{name}}) or :name
_BRACE_OR_COLON_PARAM = re.compile(r"\{(\w+)\}|:(\w+)")
_COLON_PARAM = re.compile(r":(\w+)")


def normalize_url(url: str) -> str:
    """Convert a Bruno URL template to a path template.

    Other ``{{placeholders}}`` are kept; they are resolved at request time.
    """
    url = url.replace("{{base_url}}", "")
    url = url.replace("{{version}}", "/v2")
    url = _COLON_PARAM.sub(r"{\1}", url)
    return re.sub(r"^/+", "/", url)


def extract_path_params(url: str) -> list[str]:
    """Return path parameter names in order of first appearance.

    Accepts both ``{name}`` and ``:name`` styles. A ``{{placeholder}}``
    left in the path counts as a parameter too.
    """
    names: list[str] = []
    for match in _BRACE_OR_COLON_PARAM.finditer(url):
        name = match.group(1) or match.group(2)
        if name not in names:
            names.append(name)
    return names


def path_param_definitions(names: list[str], examples: dict[str, str] | None = None) -> list[ParameterDefinition]:
    examples = examples or {}
    return [
        ParameterDefinition(
            name=name,
            description=f"Path parameter: {name}",
            required=True,
            type="string",
            example=examples.get(name),
        )
        for name in names
    ]
