import unittest

from pbmjigsaw.errors import CollisionError, InvalidArgumentsError
from pbmjigsaw.grid import Grid, PuzzleDimensions, build_initial_grid


class PuzzleDimensionsTests(unittest.TestCase):
    def test_grid_size_shares_borders(self) -> None:
        dims = PuzzleDimensions(10, 8, 7)
        self.assertEqual(dims.grid_width, 61)
        self.assertEqual(dims.grid_height, 49)
        self.assertEqual(dims.piece_count, 80)

    def test_out_of_range_values_are_rejected(self) -> None:
        for width, height, edge in ((1, 2, 3), (2, 501, 3), (2, 2, 1), (2, 2, 9), (0, 0, 0)):
            with self.subTest(width=width, height=height, edge=edge):
                with self.assertRaises(InvalidArgumentsError):
                    PuzzleDimensions(width, height, edge)

    def test_non_integer_values_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            PuzzleDimensions(2, 2.5, 3)
        with self.assertRaises(InvalidArgumentsError):
            PuzzleDimensions(True, 2, 3)

    def test_piece_origin_uses_canonical_row_major_index(self) -> None:
        dims = PuzzleDimensions(3, 2, 4)
        self.assertEqual(dims.piece_position(4), (1, 1))
        self.assertEqual(dims.piece_origin(4), (3, 3))
        self.assertEqual(dims.piece_origin(2), (0, 6))
        with self.assertRaises(IndexError):
            dims.piece_origin(6)


class InitialGridTests(unittest.TestCase):
    def test_two_by_two_edge_three_leaves_middle_cross_unset(self) -> None:
        grid = build_initial_grid(PuzzleDimensions(2, 2, 3))
        self.assertEqual(grid.shape, (5, 5))
        self.assertEqual(
            grid.snapshot(),
            [
                [0, 0, None, 1, 1],
                [0, 0, None, 1, 1],
                [None, None, None, None, None],
                [2, 2, None, 3, 3],
                [2, 2, None, 3, 3],
            ],
        )

    def test_uncontested_outer_border_is_set(self) -> None:
        grid = build_initial_grid(PuzzleDimensions(3, 4, 4))
        rows, cols = grid.shape
        ring = {(r, c) for r in range(rows) for c in range(cols) if r in (0, rows - 1) or c in (0, cols - 1)}
        for row, col in ring:
            owners = grid.touching_pieces(row, col)
            with self.subTest(cell=(row, col)):
                if len(owners) == 1:
                    self.assertEqual(grid[(row, col)], owners[0])
                else:
                    self.assertIsNone(grid[(row, col)])

    def test_every_contested_cell_is_unset(self) -> None:
        grid = build_initial_grid(PuzzleDimensions(4, 3, 5))
        for row, col in grid.unset_cells():
            self.assertIn(len(grid.touching_pieces(row, col)), (2, 4))

    def test_edge_two_only_sets_puzzle_corners(self) -> None:
        grid = build_initial_grid(PuzzleDimensions(3, 2, 2))
        snapshot = grid.snapshot()
        self.assertEqual(snapshot[0][0], 0)
        self.assertEqual(snapshot[0][3], 2)
        self.assertEqual(snapshot[2][0], 3)
        self.assertEqual(snapshot[2][3], 5)
        set_cells = sum(value is not None for row in snapshot for value in row)
        self.assertEqual(set_cells, 4)

    def test_touching_pieces(self) -> None:
        grid = Grid(PuzzleDimensions(2, 2, 3))
        self.assertEqual(grid.touching_pieces(0, 0), [0])
        self.assertEqual(grid.touching_pieces(0, 2), [0, 1])
        self.assertEqual(grid.touching_pieces(2, 4), [1, 3])
        self.assertEqual(grid.touching_pieces(2, 2), [0, 1, 2, 3])

    def test_second_claim_is_a_collision(self) -> None:
        grid = build_initial_grid(PuzzleDimensions(2, 2, 3))
        with self.assertRaises(CollisionError) as ctx:
            grid.claim(1, 1, 3)
        self.assertEqual((ctx.exception.existing, ctx.exception.piece), (0, 3))
        self.assertEqual((ctx.exception.row, ctx.exception.col), (1, 1))

    def test_new_grid_is_entirely_unset(self) -> None:
        grid = Grid(PuzzleDimensions(2, 3, 4))
        self.assertFalse(grid.is_complete())
        self.assertEqual(grid.first_unset(), (0, 0))
        self.assertEqual(len(list(grid.unset_cells())), 7 * 10)

    def test_format_marks_unset_cells(self) -> None:
        grid = build_initial_grid(PuzzleDimensions(2, 2, 3))
        lines = grid.format().splitlines()
        self.assertEqual(len(lines), 5)
        self.assertEqual(lines[0].split(), ["0", "0", "?", "1", "1"])
        self.assertEqual(lines[2].split(), ["?"] * 5)


if __name__ == "__main__":
    unittest.main()
