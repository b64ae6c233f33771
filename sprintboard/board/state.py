"""
In-memory board state.

``Card``, ``Column`` and ``Board`` are frozen values; every mutation returns a
new ``Board`` and leaves the old one untouched. ``BoardStore`` owns the
current snapshot and is the only thing the sync controller mutates.

Invariant: a card id appears in at most one column. Mutations that would
break it raise ``ValueError``; mutations naming an unknown column raise
``KeyError``.
"""
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sprintboard.board.identifiers import is_reserved_column_id

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "medium"
DEFAULT_COLOR = "#3b82f6"

# Fixed buckets shown on every board, in display order
DEFAULT_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("todo", "To Do"),
    ("in-progress", "In Progress"),
    ("done", "Done"),
)
KNOWN_COLUMN_TITLES = {
    "todo": "To Do",
    "in-progress": "In Progress",
    "done": "Done",
    "backlog": "Backlog",
    "review": "Review",
    "archived": "Archived",
}


def _parse_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()


@dataclass(frozen=True)
class Card:
    id: str
    title: str
    description: str = ""
    priority: str = DEFAULT_PRIORITY
    color: str = DEFAULT_COLOR
    due_date: Optional[date] = None
    labels: Tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Card":
        """Build a card from the JSON the card API returns"""
        card_id = data.get("id") or data.get("_id")
        if not card_id:
            raise ValueError(f"card without an id: {dict(data)!r}")
        priority = data.get("priority") or DEFAULT_PRIORITY
        return cls(
            id=str(card_id),
            title=data.get("title") or "",
            description=data.get("description") or "",
            priority=priority if priority in PRIORITIES else DEFAULT_PRIORITY,
            color=data.get("color") or DEFAULT_COLOR,
            due_date=_parse_date(data.get("dueDate", data.get("due_date"))),
            labels=tuple(data.get("labels") or ()),
        )

    def with_changes(self, **changes) -> "Card":
        if "labels" in changes:
            changes["labels"] = tuple(changes["labels"] or ())
        if "due_date" in changes:
            changes["due_date"] = _parse_date(changes["due_date"])
        changes.pop("id", None)
        return replace(self, **changes)


@dataclass(frozen=True)
class Column:
    id: str
    title: str
    cards: Tuple[Card, ...] = ()

    def card_ids(self) -> List[str]:
        return [card.id for card in self.cards]

    def find(self, card_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None


@dataclass(frozen=True)
class Board:
    columns: Tuple[Column, ...] = field(default_factory=tuple)

    @classmethod
    def default(cls) -> "Board":
        return cls(tuple(Column(id=column_id, title=title) for column_id, title in DEFAULT_COLUMNS))

    @classmethod
    def from_gateway(cls, payload: Mapping[str, Sequence[Card]]) -> "Board":
        """Build a board from a ``{columnId: [Card]}`` listing.

        The default columns always come first. Any other column is shown
        only when it holds cards, so cards in non-default buckets are never
        hidden. A card listed twice is kept in the first column seen.
        """
        seen = set()

        def unique(cards):
            kept = []
            for card in cards:
                if card.id not in seen:
                    seen.add(card.id)
                    kept.append(card)
            return tuple(kept)

        columns = [
            Column(id=column_id, title=title, cards=unique(payload.get(column_id, ())))
            for column_id, title in DEFAULT_COLUMNS
        ]
        default_ids = {column_id for column_id, _ in DEFAULT_COLUMNS}
        for column_id, cards in payload.items():
            if column_id in default_ids or not cards:
                continue
            kept = unique(cards)
            if kept:
                title = KNOWN_COLUMN_TITLES.get(column_id, column_id)
                columns.append(Column(id=column_id, title=title, cards=kept))
        return cls(tuple(columns))

    # reads

    def column(self, column_id: str) -> Optional[Column]:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def column_ids(self) -> List[str]:
        return [column.id for column in self.columns]

    def index_of(self, column_id: str) -> int:
        for index, column in enumerate(self.columns):
            if column.id == column_id:
                return index
        raise KeyError(column_id)

    def column_of(self, card_id: str) -> Optional[str]:
        for column in self.columns:
            if column.find(card_id) is not None:
                return column.id
        return None

    def find_card(self, card_id: str) -> Optional[Card]:
        for column in self.columns:
            card = column.find(card_id)
            if card is not None:
                return card
        return None

    def card_ids(self) -> List[str]:
        return [card.id for column in self.columns for card in column.cards]

    def layout(self) -> Dict[str, List[str]]:
        """Column id to card ids, in display order"""
        return {column.id: column.card_ids() for column in self.columns}

    # mutations

    def _with_column(self, column_id: str, **changes) -> "Board":
        index = self.index_of(column_id)
        columns = list(self.columns)
        columns[index] = replace(columns[index], **changes)
        return Board(tuple(columns))

    def insert_card(self, column_id: str, card: Card) -> "Board":
        """Append a card to the end of a column"""
        if self.column_of(card.id) is not None:
            raise ValueError(f"card {card.id} is already on the board")
        column = self.column(column_id)
        if column is None:
            raise KeyError(column_id)
        return self._with_column(column_id, cards=column.cards + (card,))

    def remove_card(self, column_id: str, card_id: str) -> "Board":
        column = self.column(column_id)
        if column is None:
            raise KeyError(column_id)
        return self._with_column(
            column_id, cards=tuple(card for card in column.cards if card.id != card_id)
        )

    def move_card(self, card_id: str, source_id: str, target_id: str) -> "Board":
        """Take a card out of ``source_id`` and append it to ``target_id``"""
        source = self.column(source_id)
        if source is None:
            raise KeyError(source_id)
        if self.column(target_id) is None:
            raise KeyError(target_id)
        card = source.find(card_id)
        if card is None:
            raise KeyError(card_id)
        if source_id == target_id:
            return self
        return self.remove_card(source_id, card_id).insert_card(target_id, card)

    def update_card(self, card_id: str, **changes) -> "Board":
        column_id = self.column_of(card_id)
        if column_id is None:
            raise KeyError(card_id)
        column = self.column(column_id)
        cards = tuple(
            card.with_changes(**changes) if card.id == card_id else card
            for card in column.cards
        )
        return self._with_column(column_id, cards=cards)

    def move_column(self, column_id: str, to_index: int) -> "Board":
        """Move a column to ``to_index``, shifting the ones in between"""
        from_index = self.index_of(column_id)
        columns = list(self.columns)
        column = columns.pop(from_index)
        to_index = max(0, min(to_index, len(columns)))
        columns.insert(to_index, column)
        return Board(tuple(columns))

    def add_column(self, column_id: str, title: str) -> "Board":
        if is_reserved_column_id(column_id):
            raise ValueError(f"column id {column_id!r} uses the reserved card prefix")
        if self.column(column_id) is not None:
            raise ValueError(f"column {column_id} already exists")
        return Board(self.columns + (Column(id=column_id, title=title),))

    def rename_column(self, column_id: str, title: str) -> "Board":
        return self._with_column(column_id, title=title)

    def delete_column(self, column_id: str) -> "Board":
        """Drop a column together with its cards"""
        self.index_of(column_id)
        return Board(tuple(column for column in self.columns if column.id != column_id))


def is_done_column(column: Column) -> bool:
    return column.id == "done" or "done" in column.title.lower()


class BoardStore:
    """Holds the current board snapshot and applies mutations to it"""

    def __init__(self, board: Optional[Board] = None):
        self._board = board if board is not None else Board()

    @property
    def board(self) -> Board:
        return self._board

    def replace(self, board: Board) -> Board:
        self._board = board
        return board

    def insert_card(self, column_id: str, card: Card) -> Board:
        return self.replace(self._board.insert_card(column_id, card))

    def remove_card(self, column_id: str, card_id: str) -> Board:
        return self.replace(self._board.remove_card(column_id, card_id))

    def move_card(self, card_id: str, source_id: str, target_id: str) -> Board:
        return self.replace(self._board.move_card(card_id, source_id, target_id))

    def update_card(self, card_id: str, **changes) -> Board:
        return self.replace(self._board.update_card(card_id, **changes))

    def move_column(self, column_id: str, to_index: int) -> Board:
        return self.replace(self._board.move_column(column_id, to_index))

    def add_column(self, column_id: str, title: str) -> Board:
        return self.replace(self._board.add_column(column_id, title))

    def rename_column(self, column_id: str, title: str) -> Board:
        return self.replace(self._board.rename_column(column_id, title))

    def delete_column(self, column_id: str) -> Board:
        return self.replace(self._board.delete_column(column_id))

    def open_card_count(self) -> int:
        """Cards outside any done column"""
        return sum(
            len(column.cards) for column in self._board.columns
            if not is_done_column(column)
        )
