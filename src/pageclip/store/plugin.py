"""Host integration: answers bridge requests against the document store."""

import logging
import re
from typing import Any, Optional

from ..bridge.channel import MessageChannel
from ..bridge.dispatcher import MessageDispatcher
from ..bridge.protocol import Envelope, MessageType
from ..models.config import BridgeConfig
from ..parsing.markdown import MarkdownParser
from .insertion import insert_markdown
from .protocols import Collection, DataApi, Record, Toaster

logger = logging.getLogger(__name__)

# Fields never offered for mapping
HIDDEN_FIELD_IDS = {"created_at", "updated_at", "icon"}

_LEADING_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def parse_number(value: Any) -> Optional[float]:
    """Parse the leading number of a value, or return None."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    match = _LEADING_NUMBER_RE.match(str(value))
    if not match:
        return None
    return float(match.group(1))


def is_mappable_field(field: dict[str, Any]) -> bool:
    """Return True for active fields a clip template may write to."""
    if not field.get("active"):
        return False
    if field.get("id") in HIDDEN_FIELD_IDS or field.get("type") == "icon":
        return False
    return str(field.get("label") or "").lower() != "icon"


class ClipperPlugin:
    """
    Store-side integration for saving clipped pages.

    Implements the host lifecycle: ``on_load`` starts answering bridge
    requests on the channel and ``on_unload`` stops. All state lives on
    the instance the host owns.

    Example:
        plugin = ClipperPlugin(host.data, channel, toaster=host.ui)
        plugin.on_load()
        ...
        plugin.on_unload()
    """

    def __init__(
        self,
        data: DataApi,
        channel: MessageChannel,
        toaster: Optional[Toaster] = None,
        config: Optional[BridgeConfig] = None,
        parser: Optional[MarkdownParser] = None,
    ):
        """
        Initialize the plugin.

        Args:
            data: Store data API
            channel: Channel shared with the clipper
            toaster: Optional host notification API
            config: Bridge settings (uses defaults if None)
            parser: Markdown parser for record bodies (uses default if None)
        """
        self._data = data
        self._toaster = toaster
        self._parser = parser or MarkdownParser()
        self._dispatcher = MessageDispatcher(channel, config)
        self._dispatcher.register(MessageType.THYMER_PING, self._handle_ping)
        self._dispatcher.register(MessageType.THYMER_GET_COLLECTIONS, self._handle_get_collections)
        self._dispatcher.register(MessageType.THYMER_GET_COLLECTION_FIELDS, self._handle_get_fields)
        self._dispatcher.register(MessageType.THYMER_SAVE_RECORD, self._handle_save_record)

    @property
    def dispatcher(self) -> MessageDispatcher:
        return self._dispatcher

    def on_load(self) -> None:
        self._dispatcher.install()
        logger.info("Clipper plugin loaded")

    def on_unload(self) -> None:
        self._dispatcher.uninstall()
        logger.info("Clipper plugin unloaded")

    # Bridge handlers

    async def _handle_ping(self, envelope: Envelope) -> dict[str, Any]:
        return {"connected": True}

    async def _handle_get_collections(self, envelope: Envelope) -> dict[str, Any]:
        return await self.get_collections()

    async def _handle_get_fields(self, envelope: Envelope) -> dict[str, Any]:
        return await self.get_fields(envelope.get("collectionGuid"))

    async def _handle_save_record(self, envelope: Envelope) -> dict[str, Any]:
        return await self.save_record(envelope.get("payload") or {})

    # Store operations

    async def get_collections(self) -> dict[str, Any]:
        collections = await self._data.get_all_collections()
        return {
            "collections": [
                {"guid": collection.guid, "name": collection.configuration.get("name")}
                for collection in collections
            ]
        }

    async def find_collection(self, guid: Optional[str]) -> Optional[Collection]:
        if not guid:
            return None
        for collection in await self._data.get_all_collections():
            if collection.guid == guid:
                return collection
        return None

    async def get_fields(self, collection_guid: Optional[str]) -> dict[str, Any]:
        """
        Describe the fields a template can map page data to.

        Args:
            collection_guid: Target collection

        Returns:
            ``{"fields": [...]}``; empty when the collection is unknown
        """
        collection = await self.find_collection(collection_guid)
        if collection is None:
            return {"fields": []}

        fields = []
        for field in collection.configuration.get("fields") or []:
            if not is_mappable_field(field):
                continue
            choices = field.get("choices")
            fields.append(
                {
                    "id": field.get("id"),
                    "label": field.get("label"),
                    "type": field.get("type"),
                    "choices": (
                        [{"id": c.get("id"), "label": c.get("label")} for c in choices if c.get("active")]
                        if choices is not None
                        else None
                    ),
                }
            )
        return {"fields": fields}

    async def save_record(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Create a record from a clip payload.

        Args:
            payload: ``collectionGuid``, ``title``, ``properties``,
                ``bannerUrl`` and ``bodyMarkdown``

        Returns:
            ``{"success": True, "recordGuid": ...}`` or ``{"error": ...}``
        """
        collection = await self.find_collection(payload.get("collectionGuid"))
        if collection is None:
            return {"error": "Collection not found"}

        title = str(payload.get("title") or "")
        config = collection.configuration
        fields = config.get("fields") or []

        record_guid = collection.create_record(title)
        if not record_guid:
            return {"error": "Failed to create record"}

        record = next((r for r in await collection.get_all_records() if r.guid == record_guid), None)
        if record is None:
            return {"error": "Record not found"}

        banner_url = payload.get("bannerUrl")
        if banner_url:
            self._set_banner(record, fields, title, banner_url)

        self._set_properties(record, fields, payload.get("properties") or {})

        body_markdown = payload.get("bodyMarkdown")
        if body_markdown:
            created = await insert_markdown(record, body_markdown, self._parser)
            logger.debug(f"Inserted {created} body items into {record_guid}")

        if self._toaster is not None:
            self._toaster.add_toaster(
                title="Saved!",
                message=f'"{title}" added to {config.get("name")}',
                dismissible=True,
                auto_destroy_time=2500,
            )

        logger.info(f"Saved record {record_guid} to {config.get('name')}")
        return {"success": True, "recordGuid": record_guid}

    @staticmethod
    def _set_banner(record: Record, fields: list[dict[str, Any]], title: str, banner_url: str) -> None:
        banner_field = next((f for f in fields if f.get("type") == "banner" and f.get("active")), None)
        if banner_field is None:
            return
        prop = record.prop(banner_field.get("label")) or record.prop(banner_field.get("id"))
        if prop is not None:
            prop.set({"name": f"{title} Cover", "imgUrl": banner_url})

    @staticmethod
    def _set_properties(record: Record, fields: list[dict[str, Any]], properties: dict[str, Any]) -> None:
        fields_by_id = {f.get("id"): f for f in fields}

        for field_id, value in properties.items():
            if not value or field_id == "title":
                continue
            field = fields_by_id.get(field_id)
            if field is None:
                continue
            prop = record.prop(field.get("label")) or record.prop(field_id)
            if prop is None:
                continue

            if field.get("type") == "number":
                number = parse_number(value)
                if number is not None:
                    prop.set(number)
            elif field.get("type") != "banner":
                prop.set(str(value))
