"""Slot layouts for the positional parameter vector.

Drivers that follow the APR DBD calling convention expect large objects
(BLOB/CLOB) to occupy four consecutive slots: the data, its length and two
reserved entries. Scalars take a single slot. The layout is kept in one
place so a driver with a different large object convention can swap it
without touching the scanner or the resolver.
"""

from typing import TYPE_CHECKING, Any, Final, Optional

from dbd.parameters.types import LARGE_OBJECT_TYPES, ParameterType

if TYPE_CHECKING:
    from dbd.arguments import ResolvedArgument

__all__ = ("DEFAULT_SLOT_LAYOUT", "LargeObjectSlotLayout", "SlotLayout")


class SlotLayout:
    """Base layout: every placeholder, large objects included, occupies exactly one slot."""

    __slots__ = ()

    def slot_count(self, parameter_type: ParameterType) -> int:
        return 1

    def pack(self, parameter_type: ParameterType, resolved: "ResolvedArgument") -> "list[Any]":
        """Lay a resolved argument out as the slots for ``parameter_type``.

        Args:
            parameter_type: The placeholder type.
            resolved: The resolved argument bound to the placeholder.

        Returns:
            The slot values, ``slot_count(parameter_type)`` entries long.
        """
        return [resolved.data]

    def unpack(self, parameter_type: ParameterType, slots: "list[Any]") -> "Optional[bytes]":
        """Recover the argument bytes from the slots written by :meth:`pack`."""
        return slots[0]


class LargeObjectSlotLayout(SlotLayout):
    """APR DBD layout: large objects expand to ``(data, length, None, None)``."""

    __slots__ = ()

    LARGE_OBJECT_SLOTS: Final[int] = 4

    def slot_count(self, parameter_type: ParameterType) -> int:
        if parameter_type in LARGE_OBJECT_TYPES:
            return self.LARGE_OBJECT_SLOTS
        return 1

    def pack(self, parameter_type: ParameterType, resolved: "ResolvedArgument") -> "list[Any]":
        if parameter_type in LARGE_OBJECT_TYPES:
            return [resolved.data, resolved.length, None, None]
        return [resolved.data]

    def unpack(self, parameter_type: ParameterType, slots: "list[Any]") -> "Optional[bytes]":
        if parameter_type in LARGE_OBJECT_TYPES:
            data, length = slots[0], slots[1]
            if data is None:
                return None
            return bytes(data[:length])
        return slots[0]


DEFAULT_SLOT_LAYOUT: Final[SlotLayout] = LargeObjectSlotLayout()
