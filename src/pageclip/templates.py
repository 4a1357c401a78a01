"""Clip templates: how page data maps onto a collection's fields."""

import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError

from .models.page import PageData

logger = logging.getLogger(__name__)

# Keys that must never be written into a properties mapping
DANGEROUS_KEYS = {"__proto__", "constructor", "prototype"}

# Images offered as banner alternatives skip obvious loading artifacts
_UNSELECTABLE_IMAGE_RE = re.compile(r"loading|placeholder|spinner|lazy|transparent|blank|spacer", re.IGNORECASE)
SAFE_IMAGE_SCHEMES = {"http", "https", "data"}


class MappingSource(str, Enum):
    """Where a mapped field takes its value from."""

    PAGE_TITLE = "page-title"
    PAGE_URL = "page-url"
    PAGE_DESCRIPTION = "page-description"
    PAGE_IMAGE = "page-image"
    STATIC = "static"
    CUSTOM = "custom"


class FieldChoice(BaseModel):
    """One option of a choice field."""

    id: str
    label: str

    model_config = {"extra": "ignore"}


class FieldMapping(BaseModel):
    """Maps one collection field to a page-data source."""

    field_id: str = Field(..., alias="fieldId")
    field_type: Optional[str] = Field(None, alias="fieldType")
    field_label: Optional[str] = Field(None, alias="fieldLabel")
    source: MappingSource
    static_value: Optional[str] = Field(None, alias="staticValue")
    choices: Optional[list[FieldChoice]] = None

    model_config = {"extra": "ignore", "populate_by_name": True}


class ClipTemplate(BaseModel):
    """
    A saved clip template.

    Serialized with camelCase keys so exported files stay compatible
    with the browser extension's template format.
    """

    id: str
    name: str = Field(..., min_length=1)
    collection_guid: str = Field(..., alias="collectionGuid")
    collection_name: Optional[str] = Field(None, alias="collectionName")
    mappings: list[FieldMapping] = Field(default_factory=list)
    clip_content: bool = Field(False, alias="clipContent")

    model_config = {"extra": "ignore", "populate_by_name": True}

    @property
    def has_banner(self) -> bool:
        return any(m.source == MappingSource.PAGE_IMAGE for m in self.mappings)


def build_save_payload(
    template: ClipTemplate,
    page: PageData,
    title: Optional[str] = None,
    custom_values: Optional[dict[str, str]] = None,
    banner_url: Optional[str] = None,
) -> dict[str, Any]:
    """
    Build the save-record payload for a page.

    Args:
        template: Template to apply
        page: Extracted page data
        title: Record title (defaults to the page title)
        custom_values: Values entered for ``custom`` mappings, by field id
        banner_url: Banner chosen by the user (defaults to the page banner)

    Returns:
        Payload for the THYMER_SAVE_RECORD request
    """
    record_title = page.title if title is None else title
    custom_values = custom_values or {}
    properties: dict[str, Any] = {}

    for mapping in template.mappings:
        if mapping.field_id in DANGEROUS_KEYS:
            logger.warning(f"Refusing to map reserved key {mapping.field_id!r}")
            continue

        if mapping.source == MappingSource.PAGE_TITLE:
            properties[mapping.field_id] = record_title
        elif mapping.source == MappingSource.PAGE_URL:
            properties[mapping.field_id] = page.url
        elif mapping.source == MappingSource.PAGE_DESCRIPTION:
            properties[mapping.field_id] = page.description
        elif mapping.source == MappingSource.STATIC:
            properties[mapping.field_id] = mapping.static_value
        elif mapping.source == MappingSource.CUSTOM:
            properties[mapping.field_id] = custom_values.get(mapping.field_id, "")

    return {
        "collectionGuid": template.collection_guid,
        "title": record_title,
        "properties": properties,
        "bannerUrl": (banner_url or page.banner_image) if template.has_banner else None,
        "bodyMarkdown": page.body_markdown if template.clip_content else None,
    }


def selectable_images(images: list[str]) -> list[str]:
    """Filter page images down to those worth offering as a banner."""
    selectable = []
    for url in images:
        if _UNSELECTABLE_IMAGE_RE.search(url):
            continue
        if urlparse(url).scheme not in SAFE_IMAGE_SCHEMES:
            continue
        selectable.append(url)
    return selectable


def export_templates(templates: list[ClipTemplate]) -> str:
    """Serialize templates to indented JSON."""
    return json.dumps([t.model_dump(mode="json", by_alias=True) for t in templates], indent=2)


def import_templates(text: str) -> list[ClipTemplate]:
    """
    Parse templates from exported JSON.

    Raises:
        ValueError: If the text is not a JSON list of valid templates
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid template file: {e}") from e

    if not isinstance(data, list):
        raise ValueError("Invalid template file: expected a list of templates")

    try:
        return [ClipTemplate.model_validate(item) for item in data]
    except ValidationError as e:
        raise ValueError(f"Invalid template file: {e}") from e


class TemplateStore:
    """
    Ordered template list persisted as a JSON file.

    Example:
        store = TemplateStore(Path("~/.pageclip/templates.json").expanduser())
        store.upsert(template)
        store.move(2, 0)
    """

    def __init__(self, path: Path):
        self.path = path
        self._templates: list[ClipTemplate] = self._load()

    def _load(self) -> list[ClipTemplate]:
        if not self.path.exists():
            return []
        return import_templates(self.path.read_text(encoding="utf-8"))

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(export_templates(self._templates), encoding="utf-8")

    @property
    def templates(self) -> list[ClipTemplate]:
        return list(self._templates)

    def get(self, template_id: str) -> Optional[ClipTemplate]:
        return next((t for t in self._templates if t.id == template_id), None)

    def upsert(self, template: ClipTemplate) -> None:
        """Replace the template with the same id, or append it."""
        for index, existing in enumerate(self._templates):
            if existing.id == template.id:
                self._templates[index] = template
                break
        else:
            self._templates.append(template)
        self.save()

    def delete(self, template_id: str) -> bool:
        remaining = [t for t in self._templates if t.id != template_id]
        if len(remaining) == len(self._templates):
            return False
        self._templates = remaining
        self.save()
        return True

    def move(self, old_index: int, new_index: int) -> None:
        """
        Move a template to a new position.

        Raises:
            IndexError: If either index is out of range
        """
        if not (0 <= old_index < len(self._templates)) or not (0 <= new_index < len(self._templates)):
            raise IndexError(f"Cannot move template {old_index} to {new_index}")
        if old_index == new_index:
            return
        moved = self._templates.pop(old_index)
        self._templates.insert(new_index, moved)
        self.save()

    def replace_all(self, text: str) -> int:
        """Import templates from JSON, replacing the current list."""
        self._templates = import_templates(text)
        self.save()
        return len(self._templates)
