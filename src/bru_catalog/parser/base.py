"""Unified data models for parsed Bruno collections.

The parser produces ParsedRequestDefinition; the catalog builder turns
those into EndpointPreset entries arranged in a CatalogNode tree.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

HttpMethod = Literal["GET", "POST", "PATCH", "PUT", "DELETE"]
BodyType = Literal["json", "none", "text"]


class Category(str, Enum):
    """Endpoint categories used to group presets."""

    CREDENTIALS = "credentials"
    ACCOUNTS = "accounts"
    ONBOARDING = "onboarding"
    PAYMENTS = "payments"
    WEBHOOKS = "webhooks"
    SETTLEMENTS = "settlements"
    OTHER = "other"


class CatalogModel(BaseModel):
    """Base for models serialized to the UI (camelCase on the wire)."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ParsedRequestDefinition(BaseModel):
    """Raw contents of one .bru file, before any normalization."""

    model_config = {"frozen": True}

    name: str = ""
    method: HttpMethod = "GET"
    url: str = ""  # {{base_url}}/v2/accounts/:account_id
    path_params: dict[str, str] = {}
    query_params: dict[str, str] = {}
    headers: dict[str, str] = {}
    body: str | None = None
    body_type: BodyType = "none"

    @property
    def is_complete(self) -> bool:
        return bool(self.name and self.url)


class ParameterDefinition(CatalogModel):
    """A path, query or header parameter shown in the request form."""

    name: str
    description: str | None = None
    required: bool
    type: Literal["string", "number", "boolean"] | None = None
    example: str | None = None


class EndpointPreset(CatalogModel):
    """A ready-to-display API endpoint, static or parsed from a .bru file."""

    id: str
    name: str
    description: str
    method: HttpMethod
    endpoint: str  # /v2/accounts/{account_id}
    category: Category
    body_template: Any = None
    headers: dict[str, str] | None = None
    path_params: list[ParameterDefinition] | None = None
    query_params: list[ParameterDefinition] | None = None
    required_headers: list[ParameterDefinition] | None = None
    source: str | None = Field(default=None, exclude=True)  # originating .bru file


class CatalogNode(CatalogModel):
    """One folder of the collection with its presets and subfolders."""

    name: str
    path: str
    presets: list[EndpointPreset] = []
    subfolders: list["CatalogNode"] = []


class CategoryInfo(CatalogModel):
    id: Category
    name: str
    description: str
