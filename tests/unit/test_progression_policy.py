"""
Unit tests for the progression policy.

Tests cover:
- Linear progression table (fixed repetition targets)
- Double progression table (repetition ranges)
- First-week baseline branch
- Minimum increment resolution
- Weight floor and target bounds across every branch
"""

import pytest

from backend.core.progression_policy import (
    baseline_target,
    compute_double_progression,
    compute_linear_progression,
    compute_progression,
    resolve_minimum_increment,
)
from domain.models import Difficulty, ProgressionSnapshot, ProgressionType, RepsRange


def make_snapshot(**overrides) -> ProgressionSnapshot:
    """Steady-state double progression snapshot with sensible defaults."""
    fields = dict(
        current_weight=50.0,
        programmed_reps="8-12",
        executed_reps=10,
        sets=3,
        min_increment=2.5,
        target_reps=10,
        difficulty=Difficulty.MODERADO,
        fatigue=3,
    )
    fields.update(overrides)
    return ProgressionSnapshot(**fields)


RANGE_8_12 = RepsRange(min_reps=8, max_reps=12)


# =============================================================================
# Linear mode
# =============================================================================


@pytest.mark.unit
class TestLinearProgression:
    """Tests for the fixed-target table."""

    @pytest.mark.parametrize("difficulty,expected_weight", [
        (Difficulty.MUITO_FACIL, 55.0),
        (Difficulty.FACIL, 52.5),
        (Difficulty.MODERADO, 52.5),
        (Difficulty.DIFICIL, 50.0),
    ])
    def test_target_reached(self, difficulty, expected_weight):
        weight, is_deload = compute_linear_progression(50.0, 10, 10, difficulty, 2.5)
        assert weight == expected_weight
        assert is_deload is False

    def test_very_hard_deloads(self):
        result = compute_progression(make_snapshot(
            programmed_reps="10",
            executed_reps=10,
            target_reps=10,
            difficulty=Difficulty.MUITO_DIFICIL,
        ))
        assert result.new_weight == 47.5
        assert result.is_deload is True
        assert result.progression_type is ProgressionType.LINEAR
        assert result.new_reps == "10"
        assert result.reps_programadas == 10

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_one_short_of_target_never_advances(self, difficulty):
        weight, is_deload = compute_linear_progression(50.0, 10, 9, difficulty, 2.5)
        assert weight == 50.0
        assert is_deload is False

    def test_hard_at_target_holds_weight_exactly(self):
        result = compute_progression(make_snapshot(
            programmed_reps="10", executed_reps=10, difficulty=Difficulty.DIFICIL,
        ))
        assert result.new_weight == 50.0
        assert result.is_deload is False

    def test_exceeding_target_counts_as_reached(self):
        weight, _ = compute_linear_progression(50.0, 10, 14, Difficulty.FACIL, 2.5)
        assert weight == 52.5

    def test_missing_difficulty_holds(self):
        weight, is_deload = compute_linear_progression(50.0, 10, 10, None, 2.5)
        assert (weight, is_deload) == (50.0, False)


# =============================================================================
# Double mode
# =============================================================================


@pytest.mark.unit
class TestDoubleProgression:
    """Tests for the repetition-range table."""

    def test_moderate_advances_target(self):
        result = compute_progression(make_snapshot(executed_reps=10, target_reps=10))
        assert result.new_weight == 50.0
        assert result.reps_programadas == 11
        assert result.new_reps == "8-12"
        assert result.progression_type is ProgressionType.DOUBLE

    def test_moderate_at_top_jumps_weight(self):
        result = compute_progression(make_snapshot(executed_reps=12, target_reps=10))
        assert result.new_weight == 52.5
        assert result.reps_programadas == 8

    def test_moderate_below_target_holds_everything(self):
        weight, target, is_deload = compute_double_progression(
            50.0, RANGE_8_12, 10, 9, Difficulty.MODERADO, 2.5
        )
        assert (weight, target, is_deload) == (50.0, 10, False)

    def test_very_easy_double_increment_and_reset(self):
        weight, target, _ = compute_double_progression(
            50.0, RANGE_8_12, 11, 11, Difficulty.MUITO_FACIL, 2.5
        )
        assert weight == 55.0
        assert target == 8

    def test_easy_near_top_jumps_weight(self):
        weight, target, _ = compute_double_progression(
            50.0, RANGE_8_12, 10, 11, Difficulty.FACIL, 2.5
        )
        assert weight == 52.5
        assert target == 8

    def test_easy_below_top_advances_target(self):
        weight, target, _ = compute_double_progression(
            50.0, RANGE_8_12, 9, 9, Difficulty.FACIL, 2.5
        )
        assert weight == 50.0
        assert target == 10

    def test_hard_holds_everything(self):
        weight, target, is_deload = compute_double_progression(
            50.0, RANGE_8_12, 10, 12, Difficulty.DIFICIL, 2.5
        )
        assert (weight, target, is_deload) == (50.0, 10, False)

    def test_very_hard_deloads_and_lowers_target(self):
        weight, target, is_deload = compute_double_progression(
            50.0, RANGE_8_12, 10, 7, Difficulty.MUITO_DIFICIL, 2.5
        )
        assert weight == 47.5
        assert target == 9
        assert is_deload is True

    def test_very_hard_target_floored_at_range_minimum(self):
        _, target, _ = compute_double_progression(
            50.0, RANGE_8_12, 8, 6, Difficulty.MUITO_DIFICIL, 2.5
        )
        assert target == 8

    def test_target_capped_at_range_maximum(self):
        _, target, _ = compute_double_progression(
            50.0, RANGE_8_12, 12, 11, Difficulty.FACIL, 2.5
        )
        assert target <= 12

    def test_out_of_range_target_is_clamped(self):
        _, target, _ = compute_double_progression(
            50.0, RANGE_8_12, 20, 5, Difficulty.DIFICIL, 2.5
        )
        assert target == 12


# =============================================================================
# Properties across branches
# =============================================================================


@pytest.mark.unit
class TestPolicyInvariants:
    """Weight floor, target bounds and set pass-through for every branch."""

    @pytest.mark.parametrize("programmed_reps", ["10", "8-12", "6-6", "3-5"])
    @pytest.mark.parametrize("difficulty", list(Difficulty) + [None])
    @pytest.mark.parametrize("executed_reps", [0, 4, 8, 11, 12, 20])
    def test_weight_floor_and_target_bounds(self, programmed_reps, difficulty, executed_reps):
        reps_range = RepsRange(
            min_reps=int(programmed_reps.split("-")[0]),
            max_reps=int(programmed_reps.split("-")[-1]),
        )
        result = compute_progression(make_snapshot(
            current_weight=1.0,
            programmed_reps=programmed_reps,
            executed_reps=executed_reps,
            target_reps=reps_range.min_reps,
            difficulty=difficulty,
            min_increment=10.0,
            sets=4,
        ))
        assert result.new_weight >= 0
        assert reps_range.min_reps <= result.reps_programadas <= reps_range.max_reps
        assert result.new_sets == 4

    def test_zero_weight_deload_stays_at_zero(self):
        result = compute_progression(make_snapshot(
            current_weight=0.0, difficulty=Difficulty.MUITO_DIFICIL,
        ))
        assert result.new_weight == 0.0
        assert result.is_deload is True

    def test_pain_does_not_change_result(self):
        without_pain = compute_progression(make_snapshot(pain=None))
        with_pain = compute_progression(make_snapshot(pain=5))
        assert without_pain == with_pain

    def test_weight_rounded_to_two_decimals(self):
        result = compute_progression(make_snapshot(
            current_weight=20.1, executed_reps=12, min_increment=1.25,
        ))
        assert result.new_weight == 21.35


# =============================================================================
# First week
# =============================================================================


@pytest.mark.unit
class TestFirstWeek:
    """First completion establishes the baseline instead of using a table."""

    def test_first_week_returns_baseline(self):
        result = compute_progression(make_snapshot(
            is_first_week=True,
            target_reps=None,
            executed_reps=8,
            difficulty=Difficulty.MUITO_FACIL,
        ))
        assert result.progression_type is ProgressionType.BASELINE
        assert result.reps_programadas == 8
        assert result.new_weight == 50.0
        assert result.new_sets == 3
        assert result.is_deload is False

    def test_missing_target_is_treated_as_first_week(self):
        result = compute_progression(make_snapshot(target_reps=None, executed_reps=10))
        assert result.progression_type is ProgressionType.BASELINE
        assert result.reps_programadas == 10

    def test_baseline_target_clamped_into_range(self):
        assert baseline_target(5, RANGE_8_12) == 8
        assert baseline_target(15, RANGE_8_12) == 12
        assert baseline_target(9, RANGE_8_12) == 9

    def test_baseline_target_without_execution_is_minimum(self):
        assert baseline_target(0, RANGE_8_12) == 8
        assert baseline_target(None, RANGE_8_12) == 8


# =============================================================================
# Invalid specs and increments
# =============================================================================


@pytest.mark.unit
class TestFallbacks:
    """Defensive handling of malformed inputs."""

    def test_invalid_range_falls_back_to_default(self):
        result = compute_progression(make_snapshot(programmed_reps="abc-def"))
        assert result.new_reps == "8-12"
        assert result.progression_type is ProgressionType.DOUBLE

    def test_invalid_fixed_spec_holds_default_minimum(self):
        result = compute_progression(make_snapshot(
            programmed_reps="muitas", target_reps=8, executed_reps=8, difficulty=Difficulty.FACIL,
        ))
        assert result.progression_type is ProgressionType.LINEAR
        assert result.new_reps == "8"
        assert result.new_weight == 52.5

    def test_explicit_increment_wins(self):
        assert resolve_minimum_increment(1.0, 5.0) == 1.0

    def test_inherited_increment_used_when_missing(self):
        assert resolve_minimum_increment(None, 5.0) == 5.0

    def test_default_increment(self):
        assert resolve_minimum_increment(None, None) == 2.5
        assert resolve_minimum_increment(0, None, default=1.25) == 1.25
