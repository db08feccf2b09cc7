import unittest

from tictac.board import Board, Mark
from tictac.eval import eval_oracle_agreement_all_states
from tictac.search import Move, Outcome, SearchEngine, apply_permanent, apply_temporary

X = Mark.CROSS
O = Mark.NOUGHT


def make_board(size=3, crosses=(), noughts=()):
    b = Board(size)
    for row, col in crosses:
        assert b.set(b.index(row, col), X) is None
    for row, col in noughts:
        assert b.set(b.index(row, col), O) is None
    return b


class TestMoveApplication(unittest.TestCase):
    def test_temporary_move_is_reverted(self):
        b = Board(3)
        with apply_temporary(b, Move(O, 4)) as placed:
            self.assertTrue(placed)
            self.assertIs(b.get(4), O)
        self.assertIsNone(b.get(4))

    def test_temporary_move_reverted_on_break(self):
        b = Board(3)
        for pos in range(9):
            with apply_temporary(b, Move(X, pos)):
                if pos == 2:
                    break
        self.assertEqual(b, Board(3))

    def test_temporary_move_reverted_on_exception(self):
        b = Board(3)
        with self.assertRaises(RuntimeError):
            with apply_temporary(b, Move(X, 0)):
                raise RuntimeError("boom")
        self.assertIsNone(b.get(0))

    def test_temporary_move_on_occupied_cell(self):
        b = make_board(crosses=[(1, 1)])
        with apply_temporary(b, Move(O, 4)) as placed:
            self.assertFalse(placed)
        self.assertIs(b.get(4), X)

    def test_permanent_move(self):
        b = Board(3)
        self.assertIsNone(apply_permanent(b, Move(O, 4)))
        self.assertIs(b.get(4), O)
        self.assertIs(apply_permanent(b, Move(X, 4)), O)
        self.assertIs(b.get(4), O)


class TestSearchEngine(unittest.TestCase):
    def assert_only_added(self, before, after, pos, mark):
        for p in range(len(before)):
            if p == pos:
                self.assertIsNone(before.get(p))
                self.assertIs(after.get(p), mark, f"pos={p}")
            else:
                self.assertIs(after.get(p), before.get(p), f"pos={p}")

    def test_sides(self):
        engine = SearchEngine(O)
        self.assertIs(engine.get_machine_side(), O)
        self.assertIs(engine.max_side, O)
        self.assertIs(engine.min_side, X)

    def test_wins_as_cross(self):
        b = make_board(crosses=[(2, 0), (1, 1)], noughts=[(2, 2), (1, 2)])
        before = b.copy()
        self.assertTrue(SearchEngine(X).select_and_apply_move(b))
        self.assert_only_added(before, b, b.index(0, 2), X)
        self.assertIs(b.winner(), X)

    def test_wins_as_nought(self):
        b = make_board(crosses=[(1, 1), (2, 0), (2, 1)], noughts=[(0, 0), (0, 2)])
        before = b.copy()
        self.assertTrue(SearchEngine(O).select_and_apply_move(b))
        self.assert_only_added(before, b, b.index(0, 1), O)

    def test_averts_defeat_as_cross(self):
        b = make_board(crosses=[(1, 1), (0, 0)], noughts=[(0, 2), (2, 2)])
        before = b.copy()
        self.assertTrue(SearchEngine(X).select_and_apply_move(b))
        self.assert_only_added(before, b, b.index(1, 2), X)

    def test_averts_defeat_as_nought(self):
        b = make_board(crosses=[(1, 1), (2, 0)], noughts=[(0, 0)])
        before = b.copy()
        self.assertTrue(SearchEngine(O).select_and_apply_move(b))
        self.assert_only_added(before, b, b.index(0, 2), O)

    def test_tolerates_full_board(self):
        b = Board(3)
        for pos in range(9):
            b.set(pos, X)
        before = b.copy()
        self.assertFalse(SearchEngine(O).select_and_apply_move(b))
        self.assertEqual(b, before)

    def test_full_board_without_winner(self):
        b = Board(3)
        for pos, mark in zip(range(9), [X, O, X, X, O, O, O, X, X]):
            b.set(pos, mark)
        before = b.copy()
        self.assertFalse(SearchEngine(X).select_and_apply_move(b))
        self.assertEqual(b, before)

    def test_decided_game_is_left_alone(self):
        b = make_board(crosses=[(0, 0), (0, 1), (0, 2)], noughts=[(1, 0), (1, 1)])
        before = b.copy()
        self.assertFalse(SearchEngine(O).select_and_apply_move(b))
        self.assertFalse(SearchEngine(X).select_and_apply_move(b))
        self.assertEqual(b, before)

    def test_lost_position_still_moves(self):
        # Cross threatens (0, 2) and (2, 0); every reply loses.
        b = make_board(crosses=[(0, 0), (0, 1), (1, 0)], noughts=[(1, 1), (2, 2)])
        before = b.copy()
        engine = SearchEngine(O)
        self.assertEqual(engine.evaluate(b, O), Outcome.LOSS)
        self.assertTrue(engine.select_and_apply_move(b))
        # last legal move tried in row-major order
        self.assert_only_added(before, b, b.index(2, 1), O)

    def test_ties_go_to_first_position(self):
        b = Board(3)
        self.assertTrue(SearchEngine(X).select_and_apply_move(b))
        self.assert_only_added(Board(3), b, 0, X)

    def test_opening_reply_keeps_the_draw(self):
        b = make_board(crosses=[(1, 1)])
        engine = SearchEngine(O)
        self.assertTrue(engine.select_and_apply_move(b))
        self.assertEqual(engine.evaluate(b, X), Outcome.DRAW)
        # a corner is the only non-losing reply to a centre opening
        self.assertIs(b.get(0), O)

    def test_evaluate_leaves_board_unchanged(self):
        boards = [
            Board(3),
            make_board(crosses=[(1, 1)], noughts=[(0, 0)]),
            make_board(crosses=[(2, 0), (1, 1)], noughts=[(2, 2), (1, 2)]),
            make_board(crosses=[(0, 0), (0, 1), (1, 0)], noughts=[(1, 1), (2, 2)]),
        ]
        for b in boards:
            before = b.copy()
            for machine in (X, O):
                for to_move in (X, O):
                    SearchEngine(machine).evaluate(b, to_move)
                    self.assertEqual(b, before)

    def test_evaluate_values(self):
        self.assertEqual(SearchEngine(X).evaluate(Board(3), X), Outcome.DRAW)
        b = make_board(crosses=[(2, 0), (1, 1)], noughts=[(2, 2), (1, 2)])
        self.assertEqual(SearchEngine(X).evaluate(b, X), Outcome.WIN)
        self.assertEqual(SearchEngine(O).evaluate(b, X), Outcome.LOSS)
        self.assertEqual(SearchEngine(O).evaluate(b, O), Outcome.WIN)

    def test_board_intact_at_every_node(self):
        # every node sees exactly the marks of its ancestors
        start = make_board(crosses=[(1, 1)], noughts=[(0, 0)])
        filled = len(start) - len(start.empty_positions())

        occupied = [p for p in range(len(start)) if start.get(p) is not None]

        def on_ply(depth, board):
            self.assertEqual(len(board) - len(board.empty_positions()), filled + depth)
            for p in occupied:
                self.assertIs(board.get(p), start.get(p), f"pos={p} depth={depth}")

        b = start.copy()
        SearchEngine(X, on_ply=on_ply).select_and_apply_move(b)
        changed = [p for p in range(len(b)) if b.get(p) is not start.get(p)]
        self.assertEqual(len(changed), 1)
        self.assertIsNone(start.get(changed[0]))
        self.assertIs(b.get(changed[0]), X)

    def test_two_by_two_first_mover_wins(self):
        b = Board(2)
        engine = SearchEngine(X)
        self.assertEqual(engine.evaluate(b, X), Outcome.WIN)
        self.assertTrue(engine.select_and_apply_move(b))
        self.assertIs(b.get(0), X)


class TestOptimality(unittest.TestCase):
    def test_engine_matches_oracle_on_every_position(self):
        result = eval_oracle_agreement_all_states(3)
        self.assertEqual(result["n_states"], 4520)
        self.assertEqual(result["_disagreements"], [])
        self.assertEqual(result["move_opt_acc"], 1.0)
        self.assertEqual(result["value_exact_acc"], 1.0)

    def test_two_by_two_positions(self):
        result = eval_oracle_agreement_all_states(2)
        self.assertGreater(result["n_states"], 0)
        self.assertEqual(result["_disagreements"], [])


if __name__ == "__main__":
    unittest.main()
