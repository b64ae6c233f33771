import pytest
from datetime import date

from sprintboard.board.state import Board, BoardStore, Card, Column


def make_board():
    return Board((
        Column(id="A", title="Alpha", cards=(Card(id="x", title="X"), Card(id="y", title="Y"))),
        Column(id="B", title="Beta", cards=(Card(id="z", title="Z"),)),
        Column(id="C", title="Gamma"),
    ))


def assert_each_card_once(board):
    ids = board.card_ids()
    assert len(ids) == len(set(ids))


class TestCard:
    """Card values built from API payloads"""

    def test_from_api_defaults(self):
        card = Card.from_api({"id": "c1", "title": "Write report"})
        assert card.id == "c1"
        assert card.description == ""
        assert card.priority == "medium"
        assert card.color == "#3b82f6"
        assert card.due_date is None
        assert card.labels == ()

    def test_from_api_full_payload(self):
        card = Card.from_api({
            "id": "c2",
            "title": "Ship",
            "description": "release",
            "priority": "high",
            "color": "#ff0000",
            "dueDate": "2025-05-29T20:59:59.000Z",
            "labels": ["work", "urgent"],
        })
        assert card.priority == "high"
        assert card.due_date == date(2025, 5, 29)
        assert card.labels == ("work", "urgent")

    def test_from_api_requires_id(self):
        with pytest.raises(ValueError):
            Card.from_api({"title": "No id"})

    def test_from_api_unknown_priority_falls_back(self):
        assert Card.from_api({"id": "c3", "title": "t", "priority": "urgent"}).priority == "medium"

    def test_with_changes_keeps_id(self):
        card = Card(id="c1", title="old")
        changed = card.with_changes(id="other", title="new", labels=["a"])
        assert changed.id == "c1"
        assert changed.title == "new"
        assert changed.labels == ("a",)
        assert card.title == "old"


class TestBoardMutations:
    """Pure board transformations"""

    def test_default_board_has_three_columns(self):
        assert Board.default().column_ids() == ["todo", "in-progress", "done"]

    def test_insert_card_appends(self):
        board = make_board().insert_card("B", Card(id="w", title="W"))
        assert board.layout()["B"] == ["z", "w"]

    def test_insert_existing_card_rejected(self):
        with pytest.raises(ValueError):
            make_board().insert_card("C", Card(id="x", title="X"))

    def test_insert_into_unknown_column(self):
        with pytest.raises(KeyError):
            make_board().insert_card("nope", Card(id="w", title="W"))

    def test_remove_card(self):
        board = make_board().remove_card("A", "x")
        assert board.layout()["A"] == ["y"]
        assert board.find_card("x") is None

    def test_move_card_between_columns(self):
        original = make_board()
        board = original.move_card("x", "A", "C")
        assert board.layout() == {"A": ["y"], "B": ["z"], "C": ["x"]}
        # the source snapshot is untouched
        assert original.layout()["A"] == ["x", "y"]
        assert_each_card_once(board)

    def test_move_card_missing_card(self):
        with pytest.raises(KeyError):
            make_board().move_card("z", "A", "C")

    def test_update_card(self):
        board = make_board().update_card("z", title="Zed", priority="low")
        card = board.find_card("z")
        assert card.title == "Zed"
        assert card.priority == "low"
        assert board.column_of("z") == "B"

    def test_move_column_to_front(self):
        board = make_board().move_column("C", 0)
        assert board.column_ids() == ["C", "A", "B"]

    def test_move_column_to_back(self):
        board = make_board().move_column("A", 2)
        assert board.column_ids() == ["B", "C", "A"]

    def test_add_column(self):
        board = make_board().add_column("column-1", "Later")
        assert board.column_ids()[-1] == "column-1"
        assert board.column("column-1").cards == ()

    def test_add_column_rejects_card_prefix(self):
        with pytest.raises(ValueError):
            make_board().add_column("card-1", "Bad")

    def test_add_duplicate_column(self):
        with pytest.raises(ValueError):
            make_board().add_column("A", "Again")

    def test_rename_column(self):
        board = make_board().rename_column("B", "Doing")
        assert board.column("B").title == "Doing"
        assert board.column("B").card_ids() == ["z"]

    def test_delete_column_drops_its_cards(self):
        board = make_board().delete_column("A")
        assert board.column_ids() == ["B", "C"]
        assert board.find_card("x") is None
        assert board.find_card("y") is None


class TestFromGateway:
    """Boards built from a {column: [cards]} listing"""

    def test_default_columns_first_and_extra_non_empty_columns_appended(self):
        payload = {
            "todo": [Card(id="a", title="A")],
            "in-progress": [],
            "done": [],
            "backlog": [],
            "review": [Card(id="b", title="B")],
            "column-99": [Card(id="c", title="C")],
        }
        board = Board.from_gateway(payload)
        assert board.column_ids() == ["todo", "in-progress", "done", "review", "column-99"]
        assert board.column("review").title == "Review"
        assert board.column("column-99").title == "column-99"

    def test_duplicate_card_kept_once(self):
        payload = {
            "todo": [Card(id="a", title="A")],
            "done": [Card(id="a", title="A")],
        }
        board = Board.from_gateway(payload)
        assert board.layout()["todo"] == ["a"]
        assert board.layout()["done"] == []
        assert_each_card_once(board)

    def test_missing_default_columns_are_empty(self):
        board = Board.from_gateway({})
        assert board.layout() == {"todo": [], "in-progress": [], "done": []}


class TestBoardStore:
    """State container"""

    def test_mutations_replace_snapshot(self):
        store = BoardStore(make_board())
        before = store.board
        store.move_card("x", "A", "B")
        assert store.board is not before
        assert store.board.layout()["B"] == ["z", "x"]
        assert before.layout()["B"] == ["z"]

    def test_open_card_count_skips_done_columns(self):
        board = Board((
            Column(id="todo", title="To Do", cards=(Card(id="a", title="A"),)),
            Column(id="done", title="Done", cards=(Card(id="b", title="B"),)),
            Column(id="column-1", title="Almost Done", cards=(Card(id="c", title="C"),)),
            Column(id="column-2", title="Later", cards=(Card(id="d", title="D"), Card(id="e", title="E"))),
        ))
        assert BoardStore(board).open_card_count() == 3

    def test_empty_store(self):
        store = BoardStore()
        assert store.board.columns == ()
        assert store.open_card_count() == 0
