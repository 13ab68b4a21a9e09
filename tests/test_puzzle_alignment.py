import numpy as np
import pytest

from src.stonelock.factory import PuzzleFactory
from src.stonelock.puzzle import StonePuzzle, rescale_position


def _foundation_document(target: int = 3) -> dict:
    symbols = []
    for i in range(6):
        symbols.append(
            {
                "id": f"glyph_{i}",
                "label": f"Glyph {i}",
                "orientations": [
                    {"clue": f"Glyph {i} sits at slot {i}", "solution": "fixed", "target_position": i}
                ],
            }
        )
    symbols[4]["id"] = "X"
    symbols[4]["orientations"] = [
        {"clue": "X waits below the horn.", "solution": "fixed", "target_position": target},
        {"clue": "X hides opposite the horn.", "solution": "fixed", "target_position": target},
    ]
    return {"cavernstone": {"symbols": symbols}}


def test_foundation_scenario():
    puzzle = StonePuzzle(orientations=_foundation_document(), seed=0)
    disc = puzzle.add_disc("cavernstone")
    puzzle.set_solution({"cavernstone": "X"})

    puzzle.apply_solution()

    assert disc.symbol_at_position(3).id == "X"
    assert puzzle.is_solved()
    for steps in range(1, 13):
        disc.rotate(steps)
        assert puzzle.is_solved() is (steps % 6 == 0)
        disc.rotate(-steps)


def test_single_disc_is_reachable_within_one_turn():
    puzzle = PuzzleFactory.create_basic_puzzle(rng=np.random.default_rng(11))
    disc = puzzle.get_disc("cavernstone")
    solved_count = 0
    for _ in range(len(disc)):
        disc.rotate(1)
        solved_count += puzzle.is_solved()
    assert solved_count == 1


@pytest.mark.parametrize("seed", range(20))
@pytest.mark.parametrize(
    "create",
    [
        PuzzleFactory.create_basic_puzzle,
        PuzzleFactory.create_intermediate_puzzle,
        PuzzleFactory.create_full_puzzle,
    ],
)
def test_apply_then_check(create, seed):
    puzzle = create(rng=np.random.default_rng(seed))
    assert len(puzzle.get_solution()) == len(puzzle.all_discs())

    puzzle.apply_solution()

    assert puzzle.is_solved()


def test_every_full_solution_is_solvable():
    puzzle = PuzzleFactory.create_full_puzzle(rng=np.random.default_rng(0))
    cavern, god, world = (puzzle.get_disc(name) for name in ("cavernstone", "godstone", "worldstone"))
    for c in cavern.symbol_ids():
        for g in god.symbol_ids():
            for w in world.symbol_ids():
                puzzle.set_solution({"cavernstone": c, "godstone": g, "worldstone": w})
                puzzle.reset()
                puzzle.apply_solution()
                assert puzzle.is_solved(), (c, g, w)


def test_secondary_target_depends_on_foundation_solution():
    puzzle = PuzzleFactory.create_custom_puzzle(
        ["cavernstone", "godstone", "worldstone"],
        {"cavernstone": "resonance_water", "godstone": "apsu", "worldstone": "verdant_garden"},
    )
    # apsu under water sits behind (slot 5 of 6), slot 3 of 4
    assert puzzle.effective_target_position("cavernstone") == 3
    assert puzzle.effective_target_position("godstone") == 3
    assert puzzle.effective_target_position("worldstone") == 1

    puzzle.set_solution({"cavernstone": "resonance_life", "godstone": "desna", "worldstone": "verdant_garden"})
    assert puzzle.effective_target_position("godstone") == 0
    assert puzzle.effective_target_position("worldstone") == 0

    puzzle.apply_solution()
    assert puzzle.get_disc("godstone").symbol_at_position(0).id == "desna"
    assert puzzle.is_solved()


def test_clue_consistency_for_two_discs():
    puzzle = PuzzleFactory.create_intermediate_puzzle(rng=np.random.default_rng(5))
    solution = puzzle.get_solution()
    clues = puzzle.get_clues_for_solution()
    assert len(clues) == 2

    cavern = puzzle.get_disc("cavernstone")
    god = puzzle.get_disc("godstone")
    foundation_symbol = cavern.find_symbol(solution["cavernstone"])
    assert clues[0] in [clue.clue for clue in foundation_symbol.orientations]

    cavern.set_symbol_to_position(foundation_symbol.id, foundation_symbol.orientations[0].target_position)

    god_symbol = god.find_symbol(solution["godstone"])
    god_clue = next(clue for clue in god_symbol.orientations if clue.clue == clues[1])
    assert god_clue.applies_to_symbol(solution["cavernstone"])

    target = rescale_position(god_clue.target_position, len(cavern), len(god))
    god.set_symbol_to_position(god_symbol.id, target)
    assert puzzle.is_solved()


def test_brute_force_finds_full_solution():
    puzzle = PuzzleFactory.create_full_puzzle(rng=np.random.default_rng(21))
    cavern, god, world = (puzzle.get_disc(name) for name in ("cavernstone", "godstone", "worldstone"))
    solved = False
    for _ in range(len(cavern)):
        cavern.rotate()
        for _ in range(len(god)):
            god.rotate()
            for _ in range(len(world)):
                world.rotate()
                solved = solved or puzzle.is_solved()
    assert solved


def test_broken_chain_leaves_disc_unsolved():
    puzzle = PuzzleFactory.create_custom_puzzle(
        ["cavernstone", "worldstone"],
        {"cavernstone": "resonance_life", "worldstone": "deep_springs"},
    )
    puzzle.apply_solution()

    assert not puzzle.is_solved()
    assert puzzle.effective_target_position("worldstone") is None
    assert len(puzzle.get_clues_for_solution()) == 1


def test_soft_failures():
    puzzle = PuzzleFactory.create_basic_puzzle(rng=np.random.default_rng(1))

    assert puzzle.add_disc("moonstone") is None
    assert puzzle.get_disc("worldstone") is None
    assert puzzle.remove_disc("worldstone") is False

    puzzle.set_solution({"cavernstone": "bogus"})
    puzzle.apply_solution()
    assert not puzzle.is_solved()
    assert puzzle.get_clues_for_solution() == []

    puzzle.set_solution({"godstone": "desna"})
    assert not puzzle.is_solved()

    puzzle.set_solution({})
    assert not puzzle.is_solved()


def test_add_disc_overwrites_and_remove_promotes_next_foundation():
    puzzle = PuzzleFactory.create_intermediate_puzzle(rng=np.random.default_rng(2))
    old = puzzle.get_disc("cavernstone")
    old.rotate(3)
    new = puzzle.add_disc("cavernstone")

    assert new is not old
    assert new.current_rotation == 0
    assert [disc.stone_type for disc in puzzle.all_discs()] == ["cavernstone", "godstone"]

    assert puzzle.remove_disc("cavernstone")
    assert puzzle.foundation_stone() == "godstone"


def test_get_solution_is_a_copy():
    puzzle = PuzzleFactory.create_basic_puzzle(rng=np.random.default_rng(3))
    snapshot = puzzle.get_solution()
    snapshot["cavernstone"] = "tampered"
    assert puzzle.get_solution()["cavernstone"] != "tampered"


def test_seeded_generation_is_deterministic():
    first = PuzzleFactory.create_full_puzzle(rng=np.random.default_rng(99))
    second = PuzzleFactory.create_full_puzzle(rng=np.random.default_rng(99))

    assert first.get_solution() == second.get_solution()
    assert first.get_clues_for_solution() == second.get_clues_for_solution()


def test_random_solution_covers_every_symbol():
    puzzle = PuzzleFactory.create_basic_puzzle(rng=np.random.default_rng(4))
    seen = set()
    for _ in range(200):
        puzzle.generate_random_solution()
        seen.add(puzzle.get_solution()["cavernstone"])
    assert seen == set(puzzle.get_disc("cavernstone").symbol_ids())


def test_state_snapshot():
    puzzle = PuzzleFactory.create_full_puzzle(rng=np.random.default_rng(8))
    state = puzzle.get_state()

    assert [disc["stone_type"] for disc in state["discs"]] == ["cavernstone", "godstone", "worldstone"]
    assert state["discs"][0]["current_symbol"] == "resonance_life"
    assert state["discs"][0]["current_label"] == "Resonance of Life"
    assert state["solution"] == puzzle.get_solution()

    puzzle.apply_solution()
    assert puzzle.get_state()["is_solved"] is True


def test_resonance_alignment():
    puzzle = PuzzleFactory.create_full_puzzle(rng=np.random.default_rng(6))
    puzzle.get_disc("cavernstone").set_symbol_to_position("resonance_thunder", 2)

    assert puzzle.align_symbol_with_resonance("godstone", "zevgavizeb", "resonance_thunder")
    assert puzzle.get_disc("godstone").symbol_position("zevgavizeb") == 1
    assert puzzle.is_alignment_valid("godstone", "zevgavizeb", "resonance_thunder")

    puzzle.get_disc("godstone").rotate(1)
    assert not puzzle.is_alignment_valid("godstone", "zevgavizeb", "resonance_thunder")
    assert not puzzle.is_alignment_valid("cavernstone", "resonance_life", "resonance_life")
    assert not puzzle.align_symbol_with_resonance("godstone", "zevgavizeb", "resonance_void")


@pytest.mark.parametrize(
    "position, from_size, to_size, expected",
    [(0, 6, 4, 0), (1, 6, 4, 1), (2, 6, 4, 1), (3, 6, 4, 2), (4, 6, 4, 3), (5, 6, 4, 3), (3, 4, 4, 3)],
)
def test_rescale_position(position, from_size, to_size, expected):
    assert rescale_position(position, from_size, to_size) == expected


def _conflicting_clue_document() -> dict:
    cavern = [
        {
            "id": f"resonance_{kind}",
            "label": kind.title(),
            "orientations": [{"clue": f"{kind} rests at {i}", "solution": "fixed", "target_position": i}],
        }
        for i, kind in enumerate("abcdef")
    ]
    god = [{"id": f"god_{i}", "label": f"God {i}"} for i in range(6)]
    god[2]["orientations"] = [
        {"clue": "Two steps round", "solution": "A", "target_position": 1, "applies_to": ["resonance_a"]},
        {"clue": "Opposite the blank face", "solution": "A", "target_position": 4, "applies_to": ["resonance_a"]},
        {"clue": "Just past the horn", "solution": "A", "target_position": 1, "applies_to": ["resonance_a"]},
    ]
    return {"cavernstone": {"symbols": cavern}, "godstone": {"symbols": god}}


@pytest.mark.parametrize("seed", range(10))
def test_chosen_clue_agrees_with_target_slot(seed):
    puzzle = StonePuzzle(orientations=_conflicting_clue_document(), seed=seed)
    puzzle.add_disc("cavernstone")
    god = puzzle.add_disc("godstone")
    puzzle.set_solution({"cavernstone": "resonance_a", "godstone": "god_2"})

    puzzle.apply_solution()
    clues = puzzle.get_clues_for_solution()

    assert puzzle.is_solved()
    assert god.symbol_position("god_2") == 1
    assert clues[1] in {"Two steps round", "Just past the horn"}
