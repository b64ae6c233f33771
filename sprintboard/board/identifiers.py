"""
Drag source and drop target identities.

The drag layer hands out flat string ids: a column is addressed by its own
id, a card by ``card-<cardId>-column-<columnId>``. They are parsed here, once,
into ``CardRef`` / ``ColumnRef`` values so the reconciler only ever sees a
typed variant. The ``card-`` prefix is reserved: no column id may start with it.
"""
import re
from dataclasses import dataclass
from typing import Optional, Union

CARD_PREFIX = "card-"

# Card ids never contain "-column-", so the first occurrence splits the pair;
# client-generated column ids ("column-1712...") may contain it again.
_CARD_DRAG_ID = re.compile(r"^card-(.+?)-column-(.+)$")


@dataclass(frozen=True)
class CardRef:
    card_id: str
    column_id: str

    @property
    def drag_id(self) -> str:
        return f"{CARD_PREFIX}{self.card_id}-column-{self.column_id}"


@dataclass(frozen=True)
class ColumnRef:
    column_id: str

    @property
    def drag_id(self) -> str:
        return self.column_id


DragRef = Union[CardRef, ColumnRef]


def is_reserved_column_id(column_id: str) -> bool:
    return column_id.startswith(CARD_PREFIX)


def parse_drag_id(value) -> Optional[DragRef]:
    """Turn a drag-layer id into a typed reference, or None if malformed"""
    if not isinstance(value, str) or not value:
        return None
    if value.startswith(CARD_PREFIX):
        match = _CARD_DRAG_ID.match(value)
        if not match:
            return None
        return CardRef(card_id=match.group(1), column_id=match.group(2))
    return ColumnRef(column_id=value)


@dataclass(frozen=True)
class DragEnd:
    """A finished drag: what was dragged and where it was dropped.

    ``over`` is None when the item was released outside any drop target.
    """
    active: DragRef
    over: Optional[DragRef] = None

    @classmethod
    def from_ids(cls, active_id, over_id) -> Optional["DragEnd"]:
        active = parse_drag_id(active_id)
        if active is None:
            return None
        return cls(active=active, over=parse_drag_id(over_id))
