"""End-to-end: a Bruno collection on disk to the exported catalog payload."""

import json
from pathlib import Path

from click.testing import CliRunner

from bru_catalog.catalog.builder import build_hierarchy, flatten_hierarchy
from bru_catalog.cli import main
from bru_catalog.parser.bru import is_definition_file, parse_definition_file

FIXTURES = Path(__file__).parent / "fixtures"
COLLECTION = FIXTURES / "reference" / "Partner API"


def _complete_definitions(root: Path) -> list[str]:
    names = []
    for path in root.rglob("*.bru"):
        if not is_definition_file(path.name):
            continue
        definition = parse_definition_file(path)
        if definition is not None and definition.is_complete:
            names.append(definition.name)
    return names


class TestCollectionToCatalog:
    def test_tree_holds_every_definition_exactly_once(self):
        root = build_hierarchy(COLLECTION)
        assert sorted(p.name for p in flatten_hierarchy(root)) == sorted(_complete_definitions(COLLECTION))

    def test_ids_unique_in_fixture(self):
        presets = flatten_hierarchy(build_hierarchy(COLLECTION))
        assert len({p.id for p in presets}) == len(presets)

    def test_export_payload(self, tmp_path):
        output_file = tmp_path / "catalog.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "--reference-dir", str(FIXTURES / "reference"),
            "export", "-o", str(output_file),
        ])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        categories = {c["id"]: c for c in data["categories"]}
        assert set(categories) == {"credentials", "accounts", "onboarding", "payments", "webhooks", "settlements"}
        assert any(p["id"] == "list-api-keys" for p in categories["credentials"]["presets"])

        accounts = data["hierarchy"]["subfolders"][0]
        update = accounts["presets"][1]
        assert update["name"] == "Update Partner Account"
        assert update["method"] == "PATCH"
        assert "{{partner_account_name}}" in update["bodyTemplate"]
        assert update["requiredHeaders"] == [
            {
                "name": "Content-Type",
                "description": "Header: Content-Type",
                "required": True,
                "type": "string",
                "example": "application/json",
            }
        ]
