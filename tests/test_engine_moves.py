import unittest

import numpy as np

from twisty_sim.geometry import AXES, FACE_INDEX, FACE_ORDER, face_turn_permutation, slice_turn_permutation
from twisty_sim.moves import FaceTurn, InvalidMoveError, SliceTurn, WholeRotation, inverse_sequence
from twisty_sim.rotation import apply_move, apply_moves, rotate_face, rotate_slice, rotate_whole_cube
from twisty_sim.state import CubeState

SIZES = (2, 3, 4, 5)


def labelled_state(size: int) -> CubeState:
    """State whose every cell holds a distinct token, so any misplaced cell shows."""
    grids = np.arange(6 * size * size, dtype=np.int32).reshape(6, size, size)
    return CubeState(size=size, grids=grids)


def random_moves(size: int, count: int, seed: int) -> list:
    rng = np.random.default_rng(seed)
    moves = []
    for _ in range(count):
        kind = int(rng.integers(3 if size >= 3 else 2))
        clockwise = bool(rng.integers(2))
        if kind == 0:
            moves.append(FaceTurn(FACE_ORDER[int(rng.integers(6))], clockwise))
        elif kind == 1:
            moves.append(WholeRotation(AXES[int(rng.integers(3))], clockwise))
        else:
            moves.append(SliceTurn(AXES[int(rng.integers(3))], int(rng.integers(1, size - 1)), clockwise))
    return moves


class TestEngineMoves(unittest.TestCase):
    def test_inverse_turns_restore_state(self):
        for size in SIZES:
            for face in FACE_ORDER:
                state = labelled_state(size)
                initial = state.copy()
                rotate_face(state, face, True)
                rotate_face(state, face, False)
                self.assertEqual(state, initial, msg=f"Failed for {face} on {size}x{size}")

    def test_four_quarter_turns_restore_state(self):
        for size in SIZES:
            for face in FACE_ORDER:
                state = labelled_state(size)
                initial = state.copy()
                for _ in range(4):
                    rotate_face(state, face, True)
                self.assertEqual(state, initial, msg=f"Failed for {face} on {size}x{size}")

    def test_quarter_turn_is_not_identity(self):
        for size in SIZES:
            for face in FACE_ORDER:
                state = labelled_state(size)
                initial = state.copy()
                rotate_face(state, face, True)
                self.assertNotEqual(state, initial, msg=f"{face} on {size}x{size} did nothing")

    def test_sequence_then_inverse_sequence_restores_state(self):
        for size in SIZES:
            state = labelled_state(size)
            initial = state.copy()
            moves = random_moves(size, 40, seed=size)
            apply_moves(state, moves)
            self.assertNotEqual(state, initial)
            apply_moves(state, inverse_sequence(moves))
            self.assertEqual(state, initial, msg=f"Failed on {size}x{size}")

    def test_up_turn_cycles_top_rows(self):
        state = labelled_state(3)
        before = state.copy()
        rotate_face(state, "U", True)

        self.assertTrue(np.array_equal(state.face("L")[0], before.face("F")[0]))
        self.assertTrue(np.array_equal(state.face("B")[0], before.face("L")[0]))
        self.assertTrue(np.array_equal(state.face("R")[0], before.face("B")[0]))
        self.assertTrue(np.array_equal(state.face("F")[0], before.face("R")[0]))
        for label in ("L", "B", "R", "F"):
            self.assertTrue(np.array_equal(state.face(label)[1:], before.face(label)[1:]))
        self.assertTrue(np.array_equal(state.face("D"), before.face("D")))

    def test_up_turn_on_solved_cube(self):
        state = CubeState.solved(3)
        rotate_face(state, "U", True)
        self.assertEqual(state.face("L")[0].tolist(), [FACE_INDEX["F"]] * 3)
        self.assertEqual(state.face("B")[0].tolist(), [FACE_INDEX["L"]] * 3)
        self.assertEqual(state.face("R")[0].tolist(), [FACE_INDEX["B"]] * 3)
        self.assertEqual(state.face("F")[0].tolist(), [FACE_INDEX["R"]] * 3)

    def test_clockwise_turn_rotates_own_grid_clockwise(self):
        for size in SIZES:
            for face in FACE_ORDER:
                state = labelled_state(size)
                before = state.copy()
                rotate_face(state, face, True)
                expected = np.rot90(before.face(face), k=-1)
                self.assertTrue(np.array_equal(state.face(face), expected), msg=f"{face} on {size}x{size}")

    def test_turn_moves_face_and_adjacent_strips(self):
        """Face turns must move side strips too (not face-only rotation)."""
        for size in SIZES:
            base = np.arange(6 * size * size)
            own_moved = size * size - (size % 2)
            for face in FACE_ORDER:
                for clockwise in (True, False):
                    moved = base[face_turn_permutation(size, face, clockwise)]
                    changed = moved != base

                    face_start = FACE_INDEX[face] * size * size
                    face_end = face_start + size * size
                    changed_on_face = int(changed[face_start:face_end].sum())
                    changed_off_face = int(changed.sum()) - changed_on_face

                    self.assertEqual(changed_on_face, own_moved, msg=f"{face} on {size}x{size}")
                    self.assertEqual(changed_off_face, 4 * size, msg=f"{face} on {size}x{size}")

    def test_slice_turn_moves_one_band_only(self):
        for size in (3, 4, 5):
            base = np.arange(6 * size * size)
            for axis in AXES:
                for layer in range(1, size - 1):
                    changed = base[slice_turn_permutation(size, axis, layer, True)] != base
                    self.assertEqual(int(changed.sum()), 4 * size, msg=f"{axis}{layer} on {size}x{size}")

    def test_slice_follows_right_face_direction(self):
        state = labelled_state(3)
        before = state.copy()
        rotate_slice(state, "x", 1, True)
        self.assertTrue(np.array_equal(state.face("U")[:, 1], before.face("F")[:, 1]))
        self.assertTrue(np.array_equal(state.face("F")[:, 1], before.face("D")[:, 1]))
        for label in ("L", "R"):
            self.assertTrue(np.array_equal(state.face(label), before.face(label)))

    def test_whole_rotation_matches_all_layer_turns(self):
        for size in (2, 3, 4):
            whole = labelled_state(size)
            layered = labelled_state(size)
            rotate_whole_cube(whole, "x", True)

            rotate_face(layered, "R", True)
            for layer in range(1, size - 1):
                rotate_slice(layered, "x", layer, True)
            rotate_face(layered, "L", False)

            self.assertTrue(np.array_equal(whole.grids, layered.grids), msg=f"{size}x{size}")

    def test_whole_rotation_relabels_orientation(self):
        state = CubeState.solved(3)
        rotate_whole_cube(state, "x", True)
        self.assertEqual(
            state.orientation,
            {"U": "F", "F": "D", "D": "B", "B": "U", "L": "L", "R": "R"},
        )
        self.assertEqual(state.face("U").tolist(), [[FACE_INDEX["F"]] * 3] * 3)

        rotate_whole_cube(state, "x", False)
        self.assertEqual(state, CubeState.solved(3))

    def test_four_whole_rotations_restore_state(self):
        for axis in AXES:
            state = labelled_state(4)
            initial = state.copy()
            for _ in range(4):
                rotate_whole_cube(state, axis, True)
            self.assertEqual(state, initial, msg=f"axis {axis}")

    def test_invalid_moves_rejected_without_mutation(self):
        bad_moves = [
            FaceTurn("Q"),
            FaceTurn("U", clockwise="yes"),
            SliceTurn("w", 1),
            SliceTurn("x", 0),
            SliceTurn("x", 2),
            SliceTurn("x", 1.0),
            WholeRotation("X"),
        ]
        for move in bad_moves:
            state = labelled_state(3)
            initial = state.copy()
            with self.assertRaises(InvalidMoveError, msg=f"{move!r}"):
                apply_move(state, move)
            self.assertEqual(state, initial)

    def test_two_by_two_has_no_slices(self):
        state = CubeState.solved(2)
        with self.assertRaises(InvalidMoveError):
            rotate_slice(state, "y", 0)
        with self.assertRaises(InvalidMoveError):
            rotate_slice(state, "y", 1)

    def test_batch_validates_before_applying(self):
        state = labelled_state(3)
        initial = state.copy()
        with self.assertRaises(InvalidMoveError):
            apply_moves(state, [FaceTurn("R"), SliceTurn("z", 5)])
        self.assertEqual(state, initial)


if __name__ == "__main__":
    unittest.main()
