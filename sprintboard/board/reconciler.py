"""
Drag-end reconciliation.

``reconcile`` is a pure function: it takes the current board and a finished
drag and returns the next board plus, when a card changed column, the one
persistence call needed to match it. Anything it cannot resolve (unknown
card, unknown column, dropped outside a target) comes back as "no change";
it never raises and never touches the network.
"""
from dataclasses import dataclass
from typing import Optional

from sprintboard.board.identifiers import CardRef, ColumnRef, DragEnd
from sprintboard.board.state import Board


@dataclass(frozen=True)
class MoveIntent:
    """Persist ``card_id`` as belonging to ``column_id``"""
    card_id: str
    column_id: str


@dataclass(frozen=True)
class Reconciliation:
    board: Board
    intent: Optional[MoveIntent] = None
    changed: bool = False


def _unchanged(board: Board) -> Reconciliation:
    return Reconciliation(board=board)


def _reorder_columns(board: Board, active: ColumnRef, over) -> Reconciliation:
    # Columns only reorder against other columns
    if not isinstance(over, ColumnRef) or over.column_id == active.column_id:
        return _unchanged(board)
    if board.column(active.column_id) is None or board.column(over.column_id) is None:
        return _unchanged(board)
    target_index = board.index_of(over.column_id)
    return Reconciliation(
        board=board.move_column(active.column_id, target_index),
        changed=True,
    )


def _target_column(board: Board, over) -> Optional[str]:
    if isinstance(over, ColumnRef):
        return over.column_id if board.column(over.column_id) is not None else None
    if isinstance(over, CardRef):
        # The board, not the encoded id, says where the target card lives
        return board.column_of(over.card_id)
    return None


def _move_card(board: Board, active: CardRef, over) -> Reconciliation:
    source_id = board.column_of(active.card_id)
    target_id = _target_column(board, over)
    if source_id is None or target_id is None:
        return _unchanged(board)
    # In-column reordering is not supported; same-column drops are absorbed
    if source_id == target_id:
        return _unchanged(board)
    return Reconciliation(
        board=board.move_card(active.card_id, source_id, target_id),
        intent=MoveIntent(card_id=active.card_id, column_id=target_id),
        changed=True,
    )


def reconcile(board: Board, event: Optional[DragEnd]) -> Reconciliation:
    """Compute the board after a drag and the persistence intent it implies"""
    if event is None or event.over is None:
        return _unchanged(board)
    if isinstance(event.active, CardRef):
        return _move_card(board, event.active, event.over)
    if isinstance(event.active, ColumnRef):
        return _reorder_columns(board, event.active, event.over)
    return _unchanged(board)
