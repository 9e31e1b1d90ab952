import pytest

from models.board import Board, Cell
from models.exceptions import CellOccupied


def test_new_board_is_empty():
    board = Board()
    assert all(cell == Cell.EMPTY for row in board.rows() for cell in row)
    assert not board.is_full()
    assert board.winner() is None


def test_place_sets_cell():
    board = Board()
    board.place(1, 2, Cell.GUEST)
    assert board.cell(1, 2) == Cell.GUEST


def test_place_on_occupied_cell_keeps_first_mark():
    board = Board()
    board.place(0, 0, Cell.HOST)
    with pytest.raises(CellOccupied):
        board.place(0, 0, Cell.GUEST)
    assert board.cell(0, 0) == Cell.HOST


@pytest.mark.parametrize("row, col", [(-1, 0), (0, 3), (3, 3), (0, -1)])
def test_place_outside_board(row, col):
    board = Board()
    with pytest.raises(ValueError):
        board.place(row, col, Cell.HOST)
    assert board == Board()


def test_place_empty_mark_rejected():
    with pytest.raises(ValueError):
        Board().place(0, 0, Cell.EMPTY)


@pytest.mark.parametrize(
    "cells",
    [
        [(0, 0), (0, 1), (0, 2)],
        [(2, 0), (2, 1), (2, 2)],
        [(0, 1), (1, 1), (2, 1)],
        [(0, 0), (1, 1), (2, 2)],
        [(0, 2), (1, 1), (2, 0)],
    ],
)
def test_winner_lines(cells):
    board = Board()
    for row, col in cells:
        board.place(row, col, Cell.HOST)
    assert board.winner() == Cell.HOST


def test_mixed_line_is_not_a_win():
    board = Board()
    board.place(0, 0, Cell.HOST)
    board.place(0, 1, Cell.GUEST)
    board.place(0, 2, Cell.HOST)
    assert board.winner() is None


def test_full_board():
    # X O X / X O O / O X X
    layout = [
        [Cell.HOST, Cell.GUEST, Cell.HOST],
        [Cell.HOST, Cell.GUEST, Cell.GUEST],
        [Cell.GUEST, Cell.HOST, Cell.HOST],
    ]
    board = Board()
    for r, row in enumerate(layout):
        for c, mark in enumerate(row):
            board.place(r, c, mark)
    assert board.is_full()
    assert board.winner() is None


def test_from_list_rejects_bad_shape():
    with pytest.raises(ValueError):
        Board.from_list([[2, 2, 2], [2, 2, 2]])
    with pytest.raises(ValueError):
        Board.from_list([[2, 2, 2], [2, 2, 2], [2, 2, 7]])


def test_symbols():
    assert Cell.HOST.symbol == "❎"
    assert Cell.GUEST.symbol == "⭕"
    assert Cell.EMPTY.symbol == " "
