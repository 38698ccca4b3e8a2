"""Slotting of recommended items into the outfit categories used for rendering.

The recommendation model labels each item with a free-text ``type``. The image
prompt needs one value per category, so items are matched to slots by a
case-insensitive substring test against each slot's keywords:

- tops, bottoms and footwear are singular: the first matching item in list
  order wins;
- accessories aggregate every matching item, joined with ``", "``;
- a slot with no match gets the placeholder ``"any appropriate <label>"``.

One item may fill several slots if its type contains several keywords. The
model's vocabulary is not fixed, so matching is inherently fuzzy.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from outfitai.models.domain.item import RecommendedItem

ACCESSORY_SEPARATOR = ", "


@dataclass(frozen=True)
class Slot:
    name: str
    label: str
    keywords: Tuple[str, ...]
    aggregate: bool = False

    @property
    def placeholder(self) -> str:
        return f"any appropriate {self.label}"

    def matches(self, item_type: str) -> bool:
        lowered = item_type.lower()
        return any(keyword in lowered for keyword in self.keywords)


SLOTS: Tuple[Slot, ...] = (
    Slot(name="tops", label="top", keywords=("top",)),
    Slot(name="bottoms", label="bottom", keywords=("bottom",)),
    Slot(name="footwear", label="footwear", keywords=("footwear", "shoe")),
    Slot(name="accessories", label="accessories", keywords=("accessor",), aggregate=True),
)


@dataclass(frozen=True)
class OutfitSlots:
    """Item names for each category of the styled image prompt."""
    tops: str
    bottoms: str
    footwear: str
    accessories: str


def match_slot(slot: Slot, items: Sequence[RecommendedItem]) -> Optional[str]:
    """Return the item name(s) filling ``slot``, or None when nothing matches."""
    matched: List[str] = [item.name for item in items if slot.matches(item.type)]
    if not matched:
        return None
    if slot.aggregate:
        return ACCESSORY_SEPARATOR.join(matched)
    return matched[0]


def assign_slots(items: Sequence[RecommendedItem]) -> OutfitSlots:
    """Fill every slot from ``items``, falling back to placeholders."""
    values: Dict[str, str] = {}
    for slot in SLOTS:
        values[slot.name] = match_slot(slot, items) or slot.placeholder
    return OutfitSlots(**values)
