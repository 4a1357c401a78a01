"""Protocol definitions for the host document store."""

from typing import Any, Optional, Protocol


class HostLifecycle(Protocol):
    """Load/unload callbacks a host invokes on an integration."""

    def on_load(self) -> None:
        ...

    def on_unload(self) -> None:
        ...


class LineItem(Protocol):
    """One line of a record body."""

    def set_segments(self, segments: list[dict[str, str]]) -> None:
        ...

    def set_heading_size(self, size: int) -> None:
        ...

    def set_highlight_language(self, language: str) -> None:
        ...


class Property(Protocol):
    """A record field value."""

    def set(self, value: Any) -> None:
        ...


class Record(Protocol):
    """A document in a collection."""

    @property
    def guid(self) -> str:
        ...

    def prop(self, name: str) -> Optional[Property]:
        """Look up a field by label or id."""
        ...

    async def create_line_item(
        self,
        parent: Optional[LineItem],
        after: Optional[LineItem],
        item_type: str,
    ) -> Optional[LineItem]:
        """
        Create a body line.

        Args:
            parent: Parent item, None for top level
            after: Sibling to insert after, None for first position
            item_type: Native line type ("text", "heading", "block", ...)
        """
        ...


class Collection(Protocol):
    """A typed collection of records."""

    @property
    def guid(self) -> str:
        ...

    @property
    def configuration(self) -> dict[str, Any]:
        """Collection configuration: ``name`` and ``fields``."""
        ...

    def create_record(self, title: str) -> Optional[str]:
        """Create a record and return its guid."""
        ...

    async def get_all_records(self) -> list[Record]:
        ...


class DataApi(Protocol):
    """Entry point to the store's collections."""

    async def get_all_collections(self) -> list[Collection]:
        ...


class Toaster(Protocol):
    """Transient notifications in the host UI."""

    def add_toaster(self, title: str, message: str, dismissible: bool = True, auto_destroy_time: int = 2500) -> None:
        ...
