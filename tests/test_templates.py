"""Tests for clip templates."""

import json

import pytest

from pageclip.models.page import PageData
from pageclip.templates import (
    ClipTemplate,
    FieldMapping,
    MappingSource,
    TemplateStore,
    build_save_payload,
    export_templates,
    import_templates,
    selectable_images,
)


@pytest.fixture
def page():
    return PageData(
        title="Page Title",
        url="https://example.com/a",
        description="About things",
        banner_image="https://example.com/cover.jpg",
        images=["https://example.com/cover.jpg"],
        body_markdown="# Page Title\nBody",
    )


def make_template(template_id: str = "t1", **kwargs) -> ClipTemplate:
    data = {
        "id": template_id,
        "name": f"Template {template_id}",
        "collectionGuid": "c1",
        "mappings": [],
    }
    data.update(kwargs)
    return ClipTemplate.model_validate(data)


class TestBuildSavePayload:
    """Tests for build_save_payload."""

    def test_maps_sources(self, page):
        """Test every mapping source reads the right value."""
        template = make_template(
            mappings=[
                {"fieldId": "name", "source": "page-title"},
                {"fieldId": "link", "source": "page-url"},
                {"fieldId": "summary", "source": "page-description"},
                {"fieldId": "kind", "source": "static", "staticValue": "article"},
                {"fieldId": "note", "source": "custom"},
            ],
            clipContent=True,
        )

        payload = build_save_payload(template, page, custom_values={"note": "read later"})

        assert payload["collectionGuid"] == "c1"
        assert payload["title"] == "Page Title"
        assert payload["properties"] == {
            "name": "Page Title",
            "link": "https://example.com/a",
            "summary": "About things",
            "kind": "article",
            "note": "read later",
        }
        assert payload["bannerUrl"] is None
        assert payload["bodyMarkdown"] == "# Page Title\nBody"

    def test_title_override(self, page):
        """Test an edited title replaces the page title everywhere."""
        template = make_template(mappings=[{"fieldId": "name", "source": "page-title"}])

        payload = build_save_payload(template, page, title="Edited")

        assert payload["title"] == "Edited"
        assert payload["properties"]["name"] == "Edited"

    def test_banner(self, page):
        """Test an image mapping enables the banner."""
        template = make_template(mappings=[{"fieldId": "cover", "source": "page-image"}])

        assert build_save_payload(template, page)["bannerUrl"] == "https://example.com/cover.jpg"
        assert build_save_payload(template, page, banner_url="https://x.org/b.png")["bannerUrl"] == (
            "https://x.org/b.png"
        )
        assert "cover" not in build_save_payload(template, page)["properties"]

    def test_body_only_when_clipping(self, page):
        """Test the body is sent only when content clipping is on."""
        assert build_save_payload(make_template(), page)["bodyMarkdown"] is None

    def test_reserved_keys_skipped(self, page):
        """Test reserved field ids never reach the properties."""
        template = make_template(mappings=[{"fieldId": "__proto__", "source": "page-url"}])

        assert build_save_payload(template, page)["properties"] == {}


class TestSelectableImages:
    """Tests for banner image filtering."""

    def test_filters_artifacts_and_schemes(self):
        images = [
            "https://example.com/photo.jpg",
            "https://example.com/loading.gif",
            "data:image/png;base64,AAAA",
            "javascript:alert(1)",
            "ftp://example.com/x.jpg",
        ]

        assert selectable_images(images) == ["https://example.com/photo.jpg", "data:image/png;base64,AAAA"]


class TestImportExport:
    """Tests for template import and export."""

    def test_export_uses_camel_case(self):
        """Test exported JSON keeps the extension's key names."""
        template = make_template(mappings=[{"fieldId": "x", "source": "static", "staticValue": "y"}])

        data = json.loads(export_templates([template]))

        assert data[0]["collectionGuid"] == "c1"
        assert data[0]["mappings"][0]["fieldId"] == "x"
        assert data[0]["clipContent"] is False

    def test_import_round_trip(self):
        templates = [make_template("a"), make_template("b", clipContent=True)]

        assert import_templates(export_templates(templates)) == templates

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            '{"id": "t1"}',
            '[{"id": "t1"}]',
            '[{"id": "t1", "name": "", "collectionGuid": "c1"}]',
        ],
    )
    def test_import_rejects_invalid(self, text):
        """Test malformed files raise ValueError."""
        with pytest.raises(ValueError):
            import_templates(text)

    def test_mapping_by_field_name(self):
        """Test mappings can be built with Python field names."""
        mapping = FieldMapping(field_id="x", source=MappingSource.PAGE_URL)

        assert mapping.model_dump(by_alias=True)["fieldId"] == "x"


class TestTemplateStore:
    """Tests for TemplateStore."""

    def test_missing_file_is_empty(self, tmp_path):
        assert TemplateStore(tmp_path / "templates.json").templates == []

    def test_upsert_persists(self, tmp_path):
        """Test templates survive a reload."""
        path = tmp_path / "nested" / "templates.json"
        store = TemplateStore(path)

        store.upsert(make_template("a"))
        store.upsert(make_template("b"))
        store.upsert(make_template("a", name="Renamed"))

        reloaded = TemplateStore(path)
        assert [t.id for t in reloaded.templates] == ["a", "b"]
        assert reloaded.get("a").name == "Renamed"

    def test_delete(self, tmp_path):
        store = TemplateStore(tmp_path / "templates.json")
        store.upsert(make_template("a"))

        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.get("a") is None

    def test_move(self, tmp_path):
        """Test reordering templates."""
        store = TemplateStore(tmp_path / "templates.json")
        for template_id in "abc":
            store.upsert(make_template(template_id))

        store.move(2, 0)

        assert [t.id for t in store.templates] == ["c", "a", "b"]
        with pytest.raises(IndexError):
            store.move(0, 3)

    def test_replace_all(self, tmp_path):
        store = TemplateStore(tmp_path / "templates.json")
        store.upsert(make_template("old"))

        count = store.replace_all(export_templates([make_template("x"), make_template("y")]))

        assert count == 2
        assert [t.id for t in store.templates] == ["x", "y"]
