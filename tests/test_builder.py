from collections import Counter
from pathlib import Path, PurePosixPath

from bru_catalog.catalog.builder import (
    build_hierarchy,
    build_preset,
    count_presets,
    flatten_hierarchy,
    sort_key,
)
from bru_catalog.fs import MemoryFileSource
from bru_catalog.parser.base import CatalogNode, Category
from bru_catalog.parser.bru import parse_definition

FIXTURES = Path(__file__).parent / "fixtures"
COLLECTION = FIXTURES / "reference" / "Partner API"


def _request(name: str, url: str, method: str = "get") -> str:
    return f"meta {{\n  name: {name}\n}}\n\n{method} {{\n  url: {url}\n  body: none\n}}\n"


def _walk(node: CatalogNode):
    yield node
    for subfolder in node.subfolders:
        yield from _walk(subfolder)


class TestBuildPreset:
    def test_scenario(self):
        definition = parse_definition(
            "meta {\n  name: Foo\n}\nget {\n  url: {{base_url}}/v2/x/:id\n}\nparams:path {\n  id: abc\n}\n"
        )
        preset = build_preset(definition, PurePosixPath("/ref/API/Things/foo.bru"), PurePosixPath("Things/foo.bru"))

        assert preset.id == "things-foo-bru-foo"
        assert preset.name == "Foo"
        assert preset.description == "Foo"
        assert preset.method == "GET"
        assert preset.endpoint == "/v2/x/{id}"
        assert preset.category == Category.OTHER
        assert [p.name for p in preset.path_params] == ["id"]
        assert preset.path_params[0].example == "abc"
        assert preset.body_template is None
        assert preset.required_headers is None
        assert preset.source == "/ref/API/Things/foo.bru"

    def test_placeholder_headers_skipped(self):
        definition = parse_definition(
            _request("H", "/v2/h") + "headers {\n  X-Trace: 1\n  {{dynamic}}: value\n}\n"
        )
        preset = build_preset(definition, PurePosixPath("/h.bru"), PurePosixPath("h.bru"))
        assert [h.name for h in preset.required_headers] == ["X-Trace"]
        header = preset.required_headers[0]
        assert header.description == "Header: X-Trace"
        assert header.required is True
        assert header.example == "1"

    def test_json_body_kept_verbatim(self):
        body = '  {\n    "id": "{{partner_id}}",\n    "count": {{count}}\n  }'
        definition = parse_definition(_request("B", "/v2/b", "post") + "body:json {\n" + body + "\n}\n")
        preset = build_preset(definition, PurePosixPath("/b.bru"), PurePosixPath("b.bru"))
        assert preset.body_template == body

    def test_invalid_json_body_warns_but_is_kept(self, caplog):
        body = '  {\n    "items": [1,,]\n  }'
        definition = parse_definition(_request("B", "/v2/b", "post") + "body:json {\n" + body + "\n}\n")
        preset = build_preset(definition, PurePosixPath("/b.bru"), PurePosixPath("b.bru"))
        assert preset.body_template == body
        assert "Invalid JSON body" in caplog.text

    def test_query_params(self):
        definition = parse_definition(_request("Q", "/v2/q") + "params:query {\n  size: 20\n}\n")
        preset = build_preset(definition, PurePosixPath("/q.bru"), PurePosixPath("q.bru"))
        assert preset.query_params[0].name == "size"
        assert preset.query_params[0].required is False
        assert preset.query_params[0].example == "20"

    def test_serialization_uses_camel_case_and_hides_source(self):
        definition = parse_definition(_request("Foo", "/v2/x/:id"))
        preset = build_preset(definition, PurePosixPath("/foo.bru"), PurePosixPath("foo.bru"))
        data = preset.to_dict()
        assert "pathParams" in data
        assert "source" not in data
        assert "bodyTemplate" not in data
        assert data["category"] == "other"


class TestBuildHierarchyFromDisk:
    def test_tree_shape(self):
        root = build_hierarchy(COLLECTION)
        assert root.name == "Partner API"
        assert root.presets == []
        assert [f.name for f in root.subfolders] == ["Accounts", "Credentials", "Misc", "Settlements"]

        accounts = root.subfolders[0]
        assert [p.name for p in accounts.presets] == ["Read Partner Account", "Update Partner Account"]

        credentials = root.subfolders[1]
        assert credentials.presets == []
        assert [p.name for p in credentials.subfolders[0].presets] == ["Create API Key", "List API Keys"]

    def test_incomplete_and_folder_files_excluded(self):
        root = build_hierarchy(COLLECTION)
        names = [p.name for p in flatten_hierarchy(root)]
        assert "Incomplete" not in names
        assert "Accounts" not in names
        assert count_presets(root) == 6

    def test_preset_details(self):
        root = build_hierarchy(COLLECTION)
        read = root.subfolders[0].presets[0]
        assert read.id == "accounts-read-partner-account-bru-read-partner-account"
        assert read.endpoint == "/v2/accounts/{partner_account_id}"
        assert read.path_params[0].example == "krn:partner:global:account:123"
        assert [h.name for h in read.required_headers] == ["Authorization"]

        update = root.subfolders[0].presets[1]
        assert update.method == "PATCH"
        assert '"given_name": "John"' in update.body_template

    def test_missing_root_gives_empty_node(self, tmp_path, caplog):
        root = build_hierarchy(tmp_path / "nope")
        assert root.name == "nope"
        assert root.presets == []
        assert root.subfolders == []
        assert "not found" in caplog.text

    def test_symlink_to_ancestor_does_not_repeat_presets(self, tmp_path):
        collection = tmp_path / "col"
        (collection / "a").mkdir(parents=True)
        (collection / "a" / "r.bru").write_text(_request("R", "/v2/r"), encoding="utf-8")
        (collection / "a" / "loop").symlink_to(collection, target_is_directory=True)

        root = build_hierarchy(collection)

        assert [p.name for p in flatten_hierarchy(root)] == ["R"]
        assert [f.name for f in root.subfolders] == ["a"]
        assert root.subfolders[0].subfolders == []

    def test_serializable(self):
        data = build_hierarchy(COLLECTION).to_dict()
        assert data["name"] == "Partner API"
        assert data["subfolders"][0]["presets"][0]["method"] == "GET"


class TestBuildHierarchyInMemory:
    def test_files_belong_to_their_own_folder(self):
        source = MemoryFileSource({
            "top.bru": _request("Top", "/v2/top"),
            "payments/pay.bru": _request("Pay", "/v2/pay"),
            "payments/refunds/refund.bru": _request("Refund", "/v2/refund"),
        }, root="/col")
        root = build_hierarchy("/col", source)

        assert [p.name for p in root.presets] == ["Top"]
        payments = root.subfolders[0]
        assert [p.name for p in payments.presets] == ["Pay"]
        assert [p.name for p in payments.subfolders[0].presets] == ["Refund"]
        assert payments.subfolders[0].path == "/col/payments/refunds"
        assert payments.presets[0].category == Category.PAYMENTS
        assert payments.presets[0].id == "payments-pay-bru-pay"

    def test_sorted_at_every_level(self):
        source = MemoryFileSource({
            "zeta/b.bru": _request("beta", "/v2/b"),
            "zeta/a.bru": _request("Alpha", "/v2/a"),
            "Alpha/c.bru": _request("gamma", "/v2/c"),
            "beta/d.bru": _request("Delta", "/v2/d"),
            "c.bru": _request("charlie", "/v2/c"),
            "d.bru": _request("Bravo", "/v2/d"),
        })
        root = build_hierarchy("/", source)
        for node in _walk(root):
            preset_keys = [sort_key(p.name) for p in node.presets]
            folder_keys = [sort_key(f.name) for f in node.subfolders]
            assert preset_keys == sorted(preset_keys)
            assert folder_keys == sorted(folder_keys)
        assert [f.name for f in root.subfolders] == ["Alpha", "beta", "zeta"]
        assert [p.name for p in root.presets] == ["Bravo", "charlie"]

    def test_every_definition_appears_once(self):
        files = {
            f"group{g}/sub{s}/req{r}.bru": _request(f"Req {g}{s}{r}", f"/v2/{g}/{s}/{r}")
            for g in range(3)
            for s in range(2)
            for r in range(3)
        }
        root = build_hierarchy("/", MemoryFileSource(files))
        names = Counter(p.name for p in flatten_hierarchy(root))
        assert names == Counter(f"Req {g}{s}{r}" for g in range(3) for s in range(2) for r in range(3))

    def test_unreadable_file_skipped(self, caplog):
        source = MemoryFileSource({
            "a/ok.bru": _request("Ok", "/v2/ok"),
            "a/locked.bru": PermissionError("denied"),
        })
        root = build_hierarchy("/", source)
        assert [p.name for p in flatten_hierarchy(root)] == ["Ok"]
        assert "locked.bru" in caplog.text

    def test_sort_key_is_case_insensitive(self):
        assert sorted(["b", "A", "a", "B"], key=sort_key) == ["a", "A", "b", "B"]

    def test_sort_key_accents_break_ties_only(self):
        assert sorted(["f", "É", "e"], key=sort_key) == ["e", "É", "f"]

    def test_sort_key_punctuation_before_digits_before_letters(self):
        assert sorted(["b", "~x", "2a", "_y", "a b", "ab"], key=sort_key) == ["_y", "~x", "2a", "a b", "ab", "b"]
