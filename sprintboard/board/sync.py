"""
Optimistic board synchronisation.

``BoardSyncController`` owns the ``BoardStore`` and is the only place that
talks to the card gateway. Local changes are applied first so the board
reacts immediately; the gateway call follows. A failed drag is recovered by
reloading the whole board from the server. Failed card edits are only
reported through ``error``: there is no rollback and no automatic retry.

Responses are not sequenced against newer local changes, so a slow reply
can land after a later mutation.
"""
import enum
import time
from datetime import date
from typing import Iterable, Optional

from sprintboard.board.gateway import CardGateway, GatewayError, NotAuthenticated
from sprintboard.board.identifiers import DragEnd
from sprintboard.board.reconciler import Reconciliation, reconcile
from sprintboard.board.state import Board, BoardStore, Card, Column
from sprintboard.logs import debug_logger

LOGIN_REQUIRED_MESSAGE = "Please log in to view your kanban board"
LOAD_FAILED_MESSAGE = "Failed to load kanban data. Please try again."

# Card attributes a local edit may change
EDITABLE_FIELDS = ("title", "description", "priority", "color", "due_date", "labels")


class LoadStatus(str, enum.Enum):
    LOADED = "loaded"
    NOT_AUTHENTICATED = "not_authenticated"
    FAILED = "failed"


class BoardSyncController:
    def __init__(self, gateway: CardGateway, store: Optional[BoardStore] = None):
        self.gateway = gateway
        self.store = store or BoardStore()
        self.error: Optional[str] = None
        self.login_required = False
        self.loading = False

    @property
    def board(self) -> Board:
        return self.store.board

    async def load(self) -> LoadStatus:
        """Replace the board with the server's copy"""
        self.loading = True
        try:
            columns = await self.gateway.list()
        except NotAuthenticated:
            debug_logger.warning("Board load rejected: not authenticated")
            self.login_required = True
            self.error = LOGIN_REQUIRED_MESSAGE
            return LoadStatus.NOT_AUTHENTICATED
        except GatewayError as e:
            debug_logger.error(f"Board load failed: {e}")
            self.error = LOAD_FAILED_MESSAGE
            self.store.replace(Board.default())
            return LoadStatus.FAILED
        finally:
            self.loading = False

        self.store.replace(Board.from_gateway(columns))
        self.error = None
        self.login_required = False
        return LoadStatus.LOADED

    async def handle_drag_end(self, event: Optional[DragEnd]) -> Reconciliation:
        """Apply a drag locally, then persist a card move if there was one"""
        result = reconcile(self.store.board, event)
        if not result.changed:
            return result

        self.store.replace(result.board)
        if result.intent is None:
            return result

        intent = result.intent
        try:
            await self.gateway.update(intent.card_id, column_id=intent.column_id)
        except GatewayError as e:
            debug_logger.warning(
                f"Moving card {intent.card_id} to {intent.column_id} failed ({e}); reloading board"
            )
            await self.load()
        return result

    async def add_card(
        self,
        column_id: str,
        title: str,
        description: str = "",
        priority: str = "medium",
        color: Optional[str] = None,
        due_date: Optional[date] = None,
        labels: Iterable[str] = (),
    ) -> Optional[Card]:
        """Create a card on the server and append it to ``column_id``.

        The id is server-assigned, so nothing is shown until the gateway
        answers.
        """
        try:
            card = await self.gateway.create(
                column_id,
                title=title,
                description=description,
                priority=priority,
                color=color,
                due_date=due_date,
                labels=labels,
            )
        except GatewayError as e:
            debug_logger.error(f"Failed to add card to {column_id}: {e}")
            self.error = "Failed to add card"
            return None

        board = self.store.board
        if board.column(column_id) is None:
            debug_logger.warning(f"Column {column_id} vanished before card {card.id} was created")
        elif board.column_of(card.id) is None:
            self.store.insert_card(column_id, card)
        return card

    async def update_card(self, column_id: str, card_id: str, **changes) -> bool:
        """Edit a card locally, then send the same change to the server.

        The column sent along is the one the card is in on the board, so an
        out-of-date ``column_id`` never moves the card on the server only.
        """
        changes = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}
        current_column = self.store.board.column_of(card_id)
        if current_column is not None:
            if current_column != column_id:
                debug_logger.warning(
                    f"Card {card_id} is in {current_column}, not {column_id}; keeping {current_column}"
                )
            self.store.update_card(card_id, **changes)

        try:
            await self.gateway.update(card_id, column_id=current_column, **changes)
        except GatewayError as e:
            debug_logger.error(f"Failed to update card {card_id}: {e}")
            self.error = "Failed to update card"
            return False
        return True

    async def delete_card(self, column_id: str, card_id: str) -> bool:
        """Remove a card locally, then delete it on the server"""
        current_column = self.store.board.column_of(card_id)
        if current_column is not None:
            self.store.remove_card(current_column, card_id)

        try:
            await self.gateway.delete(card_id)
        except GatewayError as e:
            debug_logger.error(f"Failed to delete card {card_id}: {e}")
            self.error = "Failed to delete card"
            return False
        return True

    # Columns live only on the client

    def add_column(self, title: str) -> Column:
        column_id = f"column-{int(time.time() * 1000)}"
        suffix = 1
        while self.store.board.column(column_id) is not None:
            column_id = f"column-{int(time.time() * 1000)}-{suffix}"
            suffix += 1
        self.store.add_column(column_id, title)
        return self.store.board.column(column_id)

    def rename_column(self, column_id: str, title: str) -> None:
        self.store.rename_column(column_id, title)

    def delete_column(self, column_id: str) -> None:
        self.store.delete_column(column_id)

    def open_card_count(self) -> int:
        return self.store.open_card_count()
