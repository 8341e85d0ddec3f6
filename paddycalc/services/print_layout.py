"""Page slot assignment and fit-to-region scaling for printed ledgers."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, Iterator, NamedTuple, Optional, Sequence, Tuple, TypeVar, Union

T = TypeVar("T")

MIN_SCALE = 0.1
MAX_SCALE = 3.0
MAX_FONT_SCALE = 2.5


class Quadrant(Enum):
    """The four fixed regions of the 2x2 page grid, in slot order."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    @property
    def column(self) -> int:
        return 0 if self in (Quadrant.TOP_LEFT, Quadrant.BOTTOM_LEFT) else 1

    @property
    def row(self) -> int:
        return 0 if self in (Quadrant.TOP_LEFT, Quadrant.TOP_RIGHT) else 1


SLOT_ORDER: Tuple[Quadrant, ...] = tuple(Quadrant)


class PrintPosition(Enum):
    """Where a single ledger is printed."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    FULL = "full"

    @classmethod
    def default(cls) -> "PrintPosition":
        return cls.TOP_RIGHT

    @classmethod
    def from_value(cls, value) -> "PrintPosition":
        if isinstance(value, PrintPosition):
            return value
        normalized = str(value or "").strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        return cls.default()

    def display_name(self) -> str:
        if self is PrintPosition.FULL:
            return "Full (entire page)"
        return self.value.replace("-", " ").capitalize()

    def quadrant(self) -> Optional[Quadrant]:
        if self is PrintPosition.FULL:
            return None
        return Quadrant(self.value)


class Size(NamedTuple):
    width: float
    height: float


class Rect(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)


# A region is either one quadrant or the whole page (None).
Region = Optional[Quadrant]


@dataclass(frozen=True)
class PageLayout(Generic[T]):
    """Placement of ledgers on one page.

    ``full`` is set only when a single ledger spans the whole page; otherwise
    ``slots`` maps each quadrant to its ledger or None.
    """

    slots: Dict[Quadrant, Optional[T]] = field(
        default_factory=lambda: {quadrant: None for quadrant in SLOT_ORDER}
    )
    full: Optional[T] = None

    @property
    def is_full_page(self) -> bool:
        return self.full is not None

    def occupied(self, quadrant: Quadrant) -> bool:
        return self.slots.get(quadrant) is not None

    def placements(self) -> Iterator[Tuple[Region, T]]:
        """Yield (region, item) for every filled region in slot order."""
        if self.full is not None:
            yield None, self.full
            return
        for quadrant in SLOT_ORDER:
            item = self.slots.get(quadrant)
            if item is not None:
                yield quadrant, item

    def __len__(self) -> int:
        return sum(1 for _ in self.placements())


def layout_page(
    items: Sequence[T], position: Union[PrintPosition, str] = PrintPosition.TOP_RIGHT
) -> PageLayout[T]:
    """Assign ledgers to page regions.

    A single ledger goes to the chosen position (or the whole page); two to
    four ledgers fill the quadrants in index order regardless of position.
    """
    items = list(items)
    slots: Dict[Quadrant, Optional[T]] = {quadrant: None for quadrant in SLOT_ORDER}
    if not items:
        return PageLayout(slots=slots)

    if len(items) == 1:
        quadrant = PrintPosition.from_value(position).quadrant()
        if quadrant is None:
            return PageLayout(slots=slots, full=items[0])
        slots[quadrant] = items[0]
        return PageLayout(slots=slots)

    for quadrant, item in zip(SLOT_ORDER, items):
        slots[quadrant] = item
    return PageLayout(slots=slots)


def region_rect(page: Size, region: Region) -> Rect:
    """Return the rectangle of ``region`` on a page (None is the whole page)."""
    if region is None:
        return Rect(0.0, 0.0, float(page.width), float(page.height))
    half_w = page.width / 2.0
    half_h = page.height / 2.0
    return Rect(region.column * half_w, region.row * half_h, half_w, half_h)


def available_size(page: Size, *, full: bool, padding: float = 40, minimum: float = 200) -> Size:
    """Space a ledger may fill, leaving ``padding`` inside its region."""
    factor = 1.0 if full else 0.5
    return Size(
        max(minimum, page.width * factor - padding),
        max(minimum, page.height * factor - padding),
    )


@dataclass(frozen=True)
class ScaleDecision:
    """How to fit a ledger into its region.

    Upscaling enlarges the font and keeps geometry at 1; downscaling shrinks
    the geometry and keeps the font at 1.
    """

    factor: float
    font_scale: float = 1.0
    geometric_scale: float = 1.0


def compute_scale(natural: Size, available: Size) -> ScaleDecision:
    natural_w = max(1.0, float(natural.width))
    natural_h = max(1.0, float(natural.height))
    factor = min(available.width / natural_w, available.height / natural_h)
    factor = max(MIN_SCALE, min(MAX_SCALE, factor))
    if factor > 1:
        return ScaleDecision(factor=factor, font_scale=min(MAX_FONT_SCALE, factor))
    return ScaleDecision(factor=factor, geometric_scale=factor)
