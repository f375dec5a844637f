"""Preset naming: category classification and id slugs."""

import re
from pathlib import PurePath, PurePosixPath

from bru_catalog.parser.base import Category
from bru_catalog.parser.bru import FOLDER_FILE

# First matching rule wins, so order matters ("payment-accounts" is an account path).
CATEGORY_RULES: list[tuple[tuple[str, ...], Category]] = [
    (("credential", "api-key", "client-identifier"), Category.CREDENTIALS),
    (("account", "business-entit"), Category.ACCOUNTS),
    (("onboard", "distribution"), Category.ONBOARDING),
    (("payment", "transaction"), Category.PAYMENTS),
    (("webhook", "notification"), Category.WEBHOOKS),
    (("settlement",), Category.SETTLEMENTS),
]


def classify_category(path: PurePath | str) -> Category:
    """Pick a category from keywords in a file path."""
    path_lower = str(path).lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in path_lower for keyword in keywords):
            return category
    return Category.OTHER


def generate_id(relative_path: PurePath | str, name: str) -> str:
    """Slug from a file path relative to the collection root plus its name.

    ``Accounts/Brands/read.bru`` + ``Read Brand`` -> ``accounts-brands-read-bru-read-brand``.
    Ids are not checked for uniqueness here; see find_duplicate_ids.
    """
    parts = [p for p in PurePosixPath(PurePath(relative_path).as_posix()).parts if p not in ("/", FOLDER_FILE)]
    slug = "-".join([*parts, name]).lower()
    slug = re.sub(r"[^a-z0-9-]", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")
