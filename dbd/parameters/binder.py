"""Pairs resolved arguments with scanned placeholders."""

from typing import TYPE_CHECKING, Any, Optional

from dbd.arguments import ArgumentResolver
from dbd.exceptions import ArgumentCountMismatchError, ArgumentReadError
from dbd.parameters.layout import SlotLayout
from dbd.parameters.scanner import PlaceholderScanner
from dbd.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from dbd.arguments import ArgumentSource, ResolvedArgument
    from dbd.parameters.types import Placeholder, PlaceholderScan

__all__ = ("ParameterBinder", "ParameterVector")

logger = get_logger("parameters.binder")


class ParameterVector:
    """Positional slot values for one query, laid out per placeholder."""

    __slots__ = ("layout", "resolved", "scan", "slots")

    def __init__(
        self,
        scan: "PlaceholderScan",
        slots: "list[Any]",
        resolved: "Sequence[ResolvedArgument]",
        layout: SlotLayout,
    ) -> None:
        self.scan = scan
        self.slots = slots
        self.resolved = tuple(resolved)
        self.layout = layout

    @property
    def placeholders(self) -> "tuple[Placeholder, ...]":
        return self.scan.placeholders

    def values(self) -> "Iterator[tuple[Placeholder, Optional[bytes]]]":
        """Yield each placeholder with the bytes bound to it.

        Large object slots are folded back into a single value.
        """
        offset = 0
        for placeholder in self.scan.placeholders:
            window = self.slots[offset : offset + placeholder.slot_count]
            yield placeholder, self.layout.unpack(placeholder.type, window)
            offset += placeholder.slot_count

    def __len__(self) -> int:
        return len(self.slots)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.scan.sql!r}, slots={len(self.slots)!r})"


class ParameterBinder:
    """Builds the parameter vector for a query from its argument sources."""

    __slots__ = ("resolver", "scanner")

    def __init__(
        self, resolver: Optional[ArgumentResolver] = None, scanner: Optional[PlaceholderScanner] = None
    ) -> None:
        self.resolver = resolver or ArgumentResolver()
        self.scanner = scanner or PlaceholderScanner()

    @property
    def layout(self) -> SlotLayout:
        return self.scanner.layout

    def bind(self, sql: str, sources: "Sequence[ArgumentSource]") -> ParameterVector:
        """Bind argument sources to the placeholders of ``sql``.

        Args:
            sql: Query text containing printf-style placeholders.
            sources: Argument sources in command line order.

        Raises:
            ArgumentCountMismatchError: If the number of sources differs from
                the number of placeholders. Nothing is resolved in that case.
            ArgumentReadError: If a file backed argument cannot be read.

        Returns:
            The parameter vector, ``scan.slot_count`` entries long.
        """
        scan = self.scanner.scan(sql)
        if len(sources) != scan.argument_count:
            raise ArgumentCountMismatchError(scan.argument_count, len(sources), sql)

        slots: list[Any] = []
        resolved_arguments: list[ResolvedArgument] = []
        for placeholder, source in zip(scan.placeholders, sources):
            try:
                resolved = self.resolver.resolve(source)
            except ArgumentReadError as e:
                raise ArgumentReadError(e.path, e.cause, sql=sql) from e
            resolved_arguments.append(resolved)
            slots.extend(self.layout.pack(placeholder.type, resolved))

        logger.debug("Bound %d arguments into %d slots", scan.argument_count, len(slots))
        return ParameterVector(scan, slots, resolved_arguments, self.layout)
