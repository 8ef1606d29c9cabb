"""Placeholder scanning and parameter binding."""

from dbd.parameters.binder import ParameterBinder, ParameterVector
from dbd.parameters.layout import DEFAULT_SLOT_LAYOUT, LargeObjectSlotLayout, SlotLayout
from dbd.parameters.scanner import PLACEHOLDER_SUFFIXES, PlaceholderScanner, scan_placeholders
from dbd.parameters.types import INTEGER_RANGES, LARGE_OBJECT_TYPES, ParameterType, Placeholder, PlaceholderScan

__all__ = (
    "DEFAULT_SLOT_LAYOUT",
    "INTEGER_RANGES",
    "LARGE_OBJECT_TYPES",
    "PLACEHOLDER_SUFFIXES",
    "LargeObjectSlotLayout",
    "ParameterBinder",
    "ParameterType",
    "ParameterVector",
    "Placeholder",
    "PlaceholderScan",
    "PlaceholderScanner",
    "SlotLayout",
    "scan_placeholders",
)
