import random
import unittest

from pbmjigsaw.grid import PuzzleDimensions, build_initial_grid
from pbmjigsaw.resolver import intersection_cells, resolve_interlocks, seam_cells

SIZES = [(2, 2, 2), (2, 2, 3), (3, 2, 2), (2, 3, 2), (4, 3, 5), (5, 5, 8), (6, 2, 3)]


class InterlockResolverTests(unittest.TestCase):
    def test_resolution_leaves_no_unset_cells(self) -> None:
        for width, height, edge in SIZES:
            for seed in range(5):
                with self.subTest(size=(width, height, edge), seed=seed):
                    dims = PuzzleDimensions(width, height, edge)
                    grid = resolve_interlocks(build_initial_grid(dims), random.Random(seed))
                    self.assertTrue(grid.is_complete())
                    self.assertIsNone(grid.first_unset())

    def test_every_cell_goes_to_a_touching_piece(self) -> None:
        for width, height, edge in SIZES:
            with self.subTest(size=(width, height, edge)):
                grid = resolve_interlocks(build_initial_grid(PuzzleDimensions(width, height, edge)), random.Random(11))
                rows, cols = grid.shape
                for row in range(rows):
                    for col in range(cols):
                        self.assertIn(grid[(row, col)], grid.touching_pieces(row, col))

    def test_initialized_cells_are_never_changed(self) -> None:
        for width, height, edge in SIZES:
            with self.subTest(size=(width, height, edge)):
                grid = build_initial_grid(PuzzleDimensions(width, height, edge))
                before = grid.snapshot()
                resolve_interlocks(grid, random.Random(3))
                after = grid.snapshot()
                for row, values in enumerate(before):
                    for col, value in enumerate(values):
                        if value is not None:
                            self.assertEqual(after[row][col], value)

    def test_contested_cells_split_into_seams_and_intersections(self) -> None:
        grid = build_initial_grid(PuzzleDimensions(2, 2, 3))
        self.assertEqual(
            seam_cells(grid),
            [(0, 2), (1, 2), (2, 0), (2, 1), (2, 3), (2, 4), (3, 2), (4, 2)],
        )
        self.assertEqual(intersection_cells(grid), [(2, 2)])

    def test_two_by_two_edge_three_resolves_all_cells(self) -> None:
        grid = resolve_interlocks(build_initial_grid(PuzzleDimensions(2, 2, 3)), random.Random(0))
        values = [value for row in grid.snapshot() for value in row]
        self.assertEqual(len(values), 25)
        self.assertTrue(all(value in (0, 1, 2, 3) for value in values))

    def test_intersection_copies_a_neighbour(self) -> None:
        dims = PuzzleDimensions(4, 4, 4)
        for seed in range(10):
            grid = build_initial_grid(dims)
            crossings = intersection_cells(grid)
            resolve_interlocks(grid, random.Random(seed))
            for row, col in crossings:
                neighbours = {grid[(row, col - 1)], grid[(row, col + 1)], grid[(row + 1, col)], grid[(row - 1, col)]}
                self.assertIn(grid[(row, col)], neighbours)

    def test_same_seed_gives_same_grid(self) -> None:
        dims = PuzzleDimensions(5, 4, 6)
        first = resolve_interlocks(build_initial_grid(dims), random.Random(42)).snapshot()
        second = resolve_interlocks(build_initial_grid(dims), random.Random(42)).snapshot()
        self.assertEqual(first, second)

    def test_seam_cells_take_both_sides_over_many_draws(self) -> None:
        owners = set()
        for seed in range(40):
            grid = resolve_interlocks(build_initial_grid(PuzzleDimensions(2, 2, 3)), random.Random(seed))
            owners.add(grid[(0, 2)])
        self.assertEqual(owners, {0, 1})


if __name__ == "__main__":
    unittest.main()
