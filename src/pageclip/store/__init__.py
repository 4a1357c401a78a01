"""Document-store integration: block insertion and the host plugin."""

from .insertion import NATIVE_TYPES, insert_blocks, insert_markdown, native_type
from .plugin import ClipperPlugin, is_mappable_field, parse_number
from .protocols import Collection, DataApi, HostLifecycle, LineItem, Property, Record, Toaster

__all__ = [
    # Protocols
    "Collection",
    "DataApi",
    "HostLifecycle",
    "LineItem",
    "Property",
    "Record",
    "Toaster",
    # Insertion
    "NATIVE_TYPES",
    "insert_blocks",
    "insert_markdown",
    "native_type",
    # Plugin
    "ClipperPlugin",
    "is_mappable_field",
    "parse_number",
]
