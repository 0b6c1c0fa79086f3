import random
import unittest
from unittest import mock

import numpy as np

from pbmjigsaw.codec import Rotation, decode_piece, encode_piece, local_offset, offset_table
from pbmjigsaw.errors import CollisionError, MalformedInputError
from pbmjigsaw.grid import Grid, PuzzleDimensions, build_initial_grid
from pbmjigsaw.resolver import resolve_interlocks


def _resolved(width: int, height: int, edge: int, seed: int = 5) -> Grid:
    return resolve_interlocks(build_initial_grid(PuzzleDimensions(width, height, edge)), random.Random(seed))


class RotationTests(unittest.TestCase):
    def test_from_degrees(self) -> None:
        self.assertIs(Rotation.from_degrees(270), Rotation.R270)
        self.assertIs(Rotation.from_degrees("90"), Rotation.R90)
        with self.assertRaises(ValueError):
            Rotation.from_degrees(45)

    def test_quarter_turns_wrap(self) -> None:
        self.assertIs(Rotation.from_quarter_turns(5), Rotation.R90)
        self.assertEqual(Rotation.R180.quarter_turns, 2)


class OffsetTableTests(unittest.TestCase):
    def test_offsets_follow_the_rotation_table(self) -> None:
        edge = 5
        jk, ik = 1, 3
        self.assertEqual(local_offset(Rotation.R0, jk, ik, edge), (1, 3))
        self.assertEqual(local_offset(Rotation.R90, jk, ik, edge), (edge - 1 - ik, jk))
        self.assertEqual(local_offset(Rotation.R180, jk, ik, edge), (edge - 1 - jk, edge - 1 - ik))
        self.assertEqual(local_offset(Rotation.R270, jk, ik, edge), (ik, edge - 1 - jk))

    def test_every_rotation_is_a_bijection_on_the_bounding_box(self) -> None:
        for edge in range(2, 9):
            cells = {(r, c) for r in range(edge) for c in range(edge)}
            for rotation in Rotation:
                with self.subTest(edge=edge, rotation=rotation):
                    rows, cols = offset_table(rotation, edge)
                    mapped = set(zip(rows.ravel().tolist(), cols.ravel().tolist()))
                    self.assertEqual(mapped, cells)

    def test_table_matches_scalar_offsets(self) -> None:
        rows, cols = offset_table(Rotation.R270, 4)
        for jk in range(4):
            for ik in range(4):
                self.assertEqual((rows[jk, ik], cols[jk, ik]), local_offset(Rotation.R270, jk, ik, 4))


class EncodeTests(unittest.TestCase):
    def test_first_piece_keeps_its_interior_block(self) -> None:
        grid = _resolved(2, 2, 3)
        bitmap = encode_piece(grid, 0, Rotation.R0)
        self.assertEqual(bitmap.shape, (3, 3))
        self.assertEqual(bitmap.dtype, np.bool_)
        self.assertTrue(bitmap[:2, :2].all())

    def test_rotations_turn_the_bitmap_clockwise(self) -> None:
        grid = _resolved(4, 3, 6)
        for piece in range(12):
            upright = encode_piece(grid, piece, Rotation.R0)
            for rotation in Rotation:
                with self.subTest(piece=piece, rotation=rotation):
                    expected = np.rot90(upright, -rotation.quarter_turns)
                    np.testing.assert_array_equal(encode_piece(grid, piece, rotation), expected)

    def test_bitmaps_partition_the_grid(self) -> None:
        grid = _resolved(3, 3, 4)
        total = sum(int(encode_piece(grid, piece, Rotation.R0).sum()) for piece in range(9))
        self.assertEqual(total, grid.shape[0] * grid.shape[1])

    def test_encoding_reads_only_the_bounding_box(self) -> None:
        grid = build_initial_grid(PuzzleDimensions(100, 100, 8))
        top, left = grid.dimensions.piece_origin(5050)
        expected = grid.piece_mask(5050)[top : top + 8, left : left + 8]
        set_cells = grid.shape[0] * grid.shape[1] - len(list(grid.unset_cells()))
        with mock.patch.object(Grid, "piece_mask", side_effect=AssertionError("scanned the whole grid")):
            np.testing.assert_array_equal(encode_piece(grid, 5050, Rotation.R0), expected)
            total = sum(int(encode_piece(grid, piece, Rotation.R90).sum()) for piece in range(10000))
        self.assertEqual(total, set_cells)


class DecodeTests(unittest.TestCase):
    def test_decoding_restores_the_encoded_cells(self) -> None:
        for width, height, edge in ((2, 2, 2), (2, 2, 3), (3, 4, 5), (2, 3, 8)):
            grid = _resolved(width, height, edge, seed=width * 100 + edge)
            dims = grid.dimensions
            for piece in range(dims.piece_count):
                for rotation in Rotation:
                    with self.subTest(size=(width, height, edge), piece=piece, rotation=rotation):
                        target = Grid(dims)
                        claimed = decode_piece(target, piece, rotation, encode_piece(grid, piece, rotation))
                        self.assertEqual(target.cells_of(piece), grid.cells_of(piece))
                        self.assertEqual(claimed, len(grid.cells_of(piece)))

    def test_wrong_bitmap_size_is_malformed(self) -> None:
        grid = Grid(PuzzleDimensions(2, 2, 3))
        with self.assertRaises(MalformedInputError):
            decode_piece(grid, 0, Rotation.R0, np.ones((4, 4), dtype=bool))

    def test_overlapping_bit_is_a_collision(self) -> None:
        grid = Grid(PuzzleDimensions(2, 2, 3))
        grid.claim(0, 2, 0)
        bitmap = np.zeros((3, 3), dtype=bool)
        bitmap[0, 0] = True
        with self.assertRaises(CollisionError) as ctx:
            decode_piece(grid, 1, Rotation.R0, bitmap)
        self.assertEqual((ctx.exception.existing, ctx.exception.piece), (0, 1))
        self.assertEqual((ctx.exception.row, ctx.exception.col), (0, 2))


if __name__ == "__main__":
    unittest.main()
