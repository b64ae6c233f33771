# Client-side kanban board
#
#   identifiers.py - typed drag source / drop target references
#   state.py       - immutable Card / Column / Board values and BoardStore
#   reconciler.py  - pure drag-end reconciliation
#   gateway.py     - async client for the card API
#   sync.py        - optimistic sync controller
from sprintboard.board.identifiers import CardRef, ColumnRef, DragEnd, parse_drag_id
from sprintboard.board.state import Board, BoardStore, Card, Column
from sprintboard.board.reconciler import MoveIntent, Reconciliation, reconcile
from sprintboard.board.gateway import (
    CardGateway,
    GatewayError,
    NotAuthenticated,
    NotFound,
    NetworkOrServerError,
)
from sprintboard.board.sync import BoardSyncController, LoadStatus
