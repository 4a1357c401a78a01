"""Tests for the document-store integration."""

from typing import Any, Optional

import pytest

from pageclip.bridge import BridgeClient, InMemoryChannel
from pageclip.models.blocks import BlockType, ContentBlock, InlineSegment, SegmentType
from pageclip.store import (
    ClipperPlugin,
    insert_blocks,
    insert_markdown,
    is_mappable_field,
    native_type,
    parse_number,
)


class FakeLineItem:
    def __init__(
        self,
        item_type: str,
        parent: Optional["FakeLineItem"],
        after: Optional["FakeLineItem"] = None,
        broken: bool = False,
    ):
        self.type = item_type
        self.parent = parent
        self.after = after
        self.broken = broken
        self.segments: Optional[list[dict[str, str]]] = None
        self.heading_size: Optional[int] = None
        self.language: Optional[str] = None

    def set_segments(self, segments):
        if self.broken:
            raise RuntimeError("segments rejected")
        self.segments = segments

    def set_heading_size(self, size):
        self.heading_size = size

    def set_highlight_language(self, language):
        self.language = language


class FakeProperty:
    def __init__(self):
        self.value: Any = None

    def set(self, value):
        self.value = value


class FakeRecord:
    def __init__(
        self,
        guid: str,
        property_names: list[str],
        fail_types: Optional[set[str]] = None,
        broken_types: Optional[set[str]] = None,
    ):
        self.guid = guid
        self.props = {name: FakeProperty() for name in property_names}
        self.items: list[FakeLineItem] = []
        self._fail_types = fail_types or set()
        self._broken_types = broken_types or set()

    def prop(self, name):
        return self.props.get(name)

    async def create_line_item(self, parent, after, item_type):
        if item_type in self._fail_types:
            raise RuntimeError(f"cannot create {item_type}")
        item = FakeLineItem(item_type, parent, after, broken=item_type in self._broken_types)
        self.items.append(item)
        return item

    @property
    def top_level(self) -> list[FakeLineItem]:
        return [item for item in self.items if item.parent is None]


class FakeCollection:
    def __init__(self, guid: str, name: str, fields: list[dict[str, Any]], create_fails: bool = False):
        self.guid = guid
        self.configuration = {"name": name, "fields": fields}
        self.records: list[FakeRecord] = []
        self._create_fails = create_fails

    def create_record(self, title):
        if self._create_fails:
            return None
        labels = [field["label"] for field in self.configuration["fields"]]
        record = FakeRecord(f"r{len(self.records) + 1}", labels)
        record.title = title
        self.records.append(record)
        return record.guid

    async def get_all_records(self):
        return list(self.records)


class FakeData:
    def __init__(self, collections: list[FakeCollection]):
        self.collections = collections

    async def get_all_collections(self):
        return list(self.collections)


class FakeToaster:
    def __init__(self):
        self.toasts: list[dict[str, Any]] = []

    def add_toaster(self, title, message, dismissible=True, auto_destroy_time=2500):
        self.toasts.append({"title": title, "message": message})


FIELDS = [
    {"id": "title", "label": "Title", "type": "text", "active": True},
    {"id": "url", "label": "URL", "type": "url", "active": True},
    {"id": "rating", "label": "Rating", "type": "number", "active": True},
    {"id": "cover", "label": "Cover", "type": "banner", "active": True},
    {
        "id": "status",
        "label": "Status",
        "type": "choice",
        "active": True,
        "choices": [
            {"id": "new", "label": "New", "active": True},
            {"id": "old", "label": "Archived", "active": False},
        ],
    },
    {"id": "legacy", "label": "Legacy", "type": "text", "active": False},
    {"id": "created_at", "label": "Created", "type": "datetime", "active": True},
    {"id": "icon", "label": "Icon", "type": "text", "active": True},
]


class TestHelpers:
    """Tests for field helpers."""

    def test_parse_number(self):
        """Test leading numbers are parsed from strings."""
        assert parse_number("4.5 stars") == 4.5
        assert parse_number(" -3") == -3.0
        assert parse_number(7) == 7.0
        assert parse_number("n/a") is None

    def test_is_mappable_field(self):
        """Test inactive and system fields are hidden."""
        mappable = [field["id"] for field in FIELDS if is_mappable_field(field)]

        assert mappable == ["title", "url", "rating", "cover", "status"]

    def test_native_types(self):
        """Test block types map onto native line-item types."""
        assert native_type(ContentBlock(BlockType.UNORDERED_ITEM)) == "ulist"
        assert native_type(ContentBlock(BlockType.ORDERED_ITEM)) == "olist"
        assert native_type(ContentBlock(BlockType.TASK_ITEM)) == "task"
        assert native_type(ContentBlock(BlockType.RULE)) == "br"
        assert native_type(ContentBlock(BlockType.CODE)) == "block"
        assert native_type(ContentBlock(BlockType.BLANK)) == "text"


class TestInsertion:
    """Tests for block insertion."""

    @pytest.mark.asyncio
    async def test_insert_markdown(self):
        """Test Markdown becomes line items in document order."""
        record = FakeRecord("r1", [])

        created = await insert_markdown(record, "## Notes\n\nSome **bold** text\n```py\na = 1\nb = 2\n```")

        assert created == 4
        heading, blank, text, code = record.top_level
        assert heading.type == "heading"
        assert heading.heading_size == 2
        assert heading.segments == [{"type": "text", "text": "Notes"}]
        assert blank.segments == [{"type": "text", "text": " "}]
        assert text.segments[1] == {"type": "bold", "text": "bold"}
        assert code.type == "block"
        assert code.language == "py"
        assert code.segments == []

        lines = [item for item in record.items if item.parent is code]
        assert [line.segments[0]["text"] for line in lines] == ["a = 1", "b = 2"]
        assert all(line.type == "text" for line in lines)

    @pytest.mark.asyncio
    async def test_failed_block_is_skipped(self):
        """Test one failing block does not abort the rest."""
        record = FakeRecord("r1", [], fail_types={"quote"})
        blocks = [
            ContentBlock(BlockType.TEXT, [InlineSegment(SegmentType.TEXT, "before")]),
            ContentBlock(BlockType.QUOTE, [InlineSegment(SegmentType.TEXT, "quoted")]),
            ContentBlock(BlockType.TEXT, [InlineSegment(SegmentType.TEXT, "after")]),
        ]

        created = await insert_blocks(record, blocks)

        assert created == 2
        assert [item.segments[0]["text"] for item in record.top_level] == ["before", "after"]

    @pytest.mark.asyncio
    async def test_half_filled_item_keeps_order(self):
        """Test blocks after an item whose content failed are placed after it."""
        record = FakeRecord("r1", [], broken_types={"quote"})
        blocks = [
            ContentBlock(BlockType.TEXT, [InlineSegment(SegmentType.TEXT, "before")]),
            ContentBlock(BlockType.QUOTE, [InlineSegment(SegmentType.TEXT, "quoted")]),
            ContentBlock(BlockType.TEXT, [InlineSegment(SegmentType.TEXT, "after")]),
        ]

        created = await insert_blocks(record, blocks)

        before, quote, after = record.top_level
        assert created == 3
        assert before.after is None
        assert quote.after is before
        assert after.after is quote


class TestClipperPlugin:
    """Tests for ClipperPlugin."""

    @pytest.fixture
    def collection(self):
        return FakeCollection("c1", "Reading List", FIELDS)

    @pytest.fixture
    def toaster(self):
        return FakeToaster()

    @pytest.fixture
    def plugin(self, collection, toaster):
        return ClipperPlugin(FakeData([collection]), InMemoryChannel(), toaster=toaster)

    @pytest.mark.asyncio
    async def test_get_collections(self, plugin):
        """Test collections are listed by guid and name."""
        assert await plugin.get_collections() == {"collections": [{"guid": "c1", "name": "Reading List"}]}

    @pytest.mark.asyncio
    async def test_get_fields(self, plugin):
        """Test only mappable fields and active choices are described."""
        result = await plugin.get_fields("c1")

        ids = [field["id"] for field in result["fields"]]
        assert ids == ["title", "url", "rating", "cover", "status"]
        status = result["fields"][-1]
        assert status["choices"] == [{"id": "new", "label": "New"}]
        assert result["fields"][0]["choices"] is None

    @pytest.mark.asyncio
    async def test_get_fields_unknown_collection(self, plugin):
        assert await plugin.get_fields("nope") == {"fields": []}

    @pytest.mark.asyncio
    async def test_save_record(self, plugin, collection, toaster):
        """Test a clip payload creates and fills a record."""
        result = await plugin.save_record(
            {
                "collectionGuid": "c1",
                "title": "Great Article",
                "properties": {
                    "title": "ignored",
                    "url": "https://example.com/a",
                    "rating": "4.5 stars",
                    "cover": "https://example.com/cover.jpg",
                    "status": "",
                },
                "bannerUrl": "https://example.com/cover.jpg",
                "bodyMarkdown": "# Heading\nBody",
            }
        )

        assert result == {"success": True, "recordGuid": "r1"}
        record = collection.records[0]
        assert record.title == "Great Article"
        assert record.props["URL"].value == "https://example.com/a"
        assert record.props["Rating"].value == 4.5
        assert record.props["Cover"].value == {
            "name": "Great Article Cover",
            "imgUrl": "https://example.com/cover.jpg",
        }
        assert record.props["Title"].value is None
        assert record.props["Status"].value is None
        assert [item.type for item in record.top_level] == ["heading", "text"]
        assert toaster.toasts == [{"title": "Saved!", "message": '"Great Article" added to Reading List'}]

    @pytest.mark.asyncio
    async def test_save_record_unknown_collection(self, plugin):
        assert await plugin.save_record({"collectionGuid": "missing"}) == {"error": "Collection not found"}

    @pytest.mark.asyncio
    async def test_save_record_create_fails(self, toaster):
        """Test a record the store refuses to create is reported."""
        collection = FakeCollection("c1", "Broken", FIELDS, create_fails=True)
        plugin = ClipperPlugin(FakeData([collection]), InMemoryChannel(), toaster=toaster)

        assert await plugin.save_record({"collectionGuid": "c1", "title": "x"}) == {
            "error": "Failed to create record"
        }
        assert toaster.toasts == []

    @pytest.mark.asyncio
    async def test_bridge_round_trip(self, collection, toaster):
        """Test the plugin answers a client over a shared channel."""
        channel = InMemoryChannel()
        plugin = ClipperPlugin(FakeData([collection]), channel, toaster=toaster)
        plugin.on_load()

        async with BridgeClient(channel) as client:
            connected = await client.ping()
            saved = await client.save_record({"collectionGuid": "c1", "title": "Via bridge", "properties": {}})

        plugin.on_unload()

        assert connected is True
        assert saved["recordGuid"] == "r1"
        assert channel.listener_count == 0
