"""
Unit tests for NextInstanceLocator.

Tests cover:
- Chronological selection of the next pending instance
- Deterministic tie-break on equal workout timestamps (instance id)
- Scoping to chain identity and program enrollment
- First-occurrence detection
"""

import pytest

from backend.core.next_instance_locator import NextInstanceLocator
from domain.exceptions import AmbiguousChainIdentityError, ExerciseLookupError
from domain.models import ChainIdentity
from tests.fakes import FakeExerciseInstanceRepository, create_chain_repo

SUPINO = ChainIdentity.original("supino-reto")


@pytest.fixture
def repo():
    return create_chain_repo(weeks=3)


@pytest.fixture
def locator(repo):
    return NextInstanceLocator(repo)


@pytest.mark.unit
class TestFindNext:
    """Tests for NextInstanceLocator.find_next()."""

    def test_returns_earliest_pending_instance(self, locator):
        result = locator.find_next(SUPINO, "prog-1", exclude_instance_id="ex-1")

        assert result.ok
        assert result.value.id == "ex-2"

    def test_skips_completed_instances(self, repo, locator):
        repo.update("ex-2", {"concluido": True})

        result = locator.find_next(SUPINO, "prog-1", exclude_instance_id="ex-1")

        assert result.value.id == "ex-3"

    def test_order_follows_workout_creation_not_insertion(self):
        repo = FakeExerciseInstanceRepository()
        repo.seed_workouts([
            {"id": "t-late", "programa_usuario_id": "prog-1", "created_at": "2024-03-10T08:00:00+00:00"},
            {"id": "t-early", "programa_usuario_id": "prog-1", "created_at": "2024-03-03T08:00:00+00:00"},
        ])
        repo.seed_instances([
            {"id": "a", "treino_usuario_id": "t-late", "exercicio_original_id": "supino-reto"},
            {"id": "b", "treino_usuario_id": "t-early", "exercicio_original_id": "supino-reto"},
        ])

        result = NextInstanceLocator(repo).find_next(SUPINO, "prog-1")

        assert result.value.id == "b"

    def test_equal_timestamps_break_ties_by_id(self):
        repo = FakeExerciseInstanceRepository()
        repo.seed_workouts([
            {"id": "t-1", "programa_usuario_id": "prog-1", "created_at": "2024-03-03T08:00:00+00:00"},
        ])
        repo.seed_instances([
            {"id": "zz", "treino_usuario_id": "t-1", "exercicio_original_id": "supino-reto"},
            {"id": "aa", "treino_usuario_id": "t-1", "exercicio_original_id": "supino-reto"},
        ])
        locator = NextInstanceLocator(repo)

        first = locator.find_next(SUPINO, "prog-1")
        second = locator.find_next(SUPINO, "prog-1")

        assert first.value.id == second.value.id == "aa"

    def test_scoped_to_program(self, repo, locator):
        repo.seed_workouts([
            {"id": "other", "programa_usuario_id": "prog-2", "created_at": "2023-12-01T08:00:00+00:00"},
        ])
        repo.seed_instances([
            {"id": "ex-other", "treino_usuario_id": "other", "exercicio_original_id": "supino-reto"},
        ])

        result = locator.find_next(SUPINO, "prog-1", exclude_instance_id="ex-1")

        assert result.value.id == "ex-2"

    def test_scoped_to_chain(self, locator):
        result = locator.find_next(ChainIdentity.original("agachamento"), "prog-1")

        assert result.ok
        assert result.value is None

    def test_custom_chain(self):
        repo = create_chain_repo(weeks=2, exercise_id=None, custom_id="meu-supino")

        result = NextInstanceLocator(repo).find_next(
            ChainIdentity.custom("meu-supino"), "prog-1", exclude_instance_id="ex-1"
        )

        assert result.value.id == "ex-2"

    def test_none_when_chain_exhausted(self):
        result = NextInstanceLocator(create_chain_repo(weeks=1)).find_next(
            SUPINO, "prog-1", exclude_instance_id="ex-1"
        )
        assert result.value is None

    def test_unchainable_identity(self, locator):
        result = locator.find_next(ChainIdentity.none(), "prog-1", exclude_instance_id="ex-1")

        assert isinstance(result.error, AmbiguousChainIdentityError)

    def test_read_failure(self, repo, locator):
        repo.fail_reads = True

        result = locator.find_next(SUPINO, "prog-1", exclude_instance_id="ex-1")

        assert isinstance(result.error, ExerciseLookupError)


@pytest.mark.unit
class TestIsFirstOccurrence:
    """Tests for NextInstanceLocator.is_first_occurrence()."""

    def test_true_when_nothing_completed(self, locator):
        assert locator.is_first_occurrence(SUPINO, "prog-1", "ex-1").value is True

    def test_current_instance_does_not_count(self, repo, locator):
        repo.update("ex-1", {"concluido": True})

        assert locator.is_first_occurrence(SUPINO, "prog-1", "ex-1").value is True

    def test_false_after_another_completion(self, repo, locator):
        repo.update("ex-1", {"concluido": True})

        assert locator.is_first_occurrence(SUPINO, "prog-1", "ex-2").value is False

    def test_completion_in_other_program_does_not_count(self, repo, locator):
        repo.seed_workouts([
            {"id": "other", "programa_usuario_id": "prog-2", "created_at": "2023-12-01T08:00:00+00:00"},
        ])
        repo.seed_instances([
            {"id": "ex-old", "treino_usuario_id": "other", "exercicio_original_id": "supino-reto", "concluido": True},
        ])

        assert locator.is_first_occurrence(SUPINO, "prog-1", "ex-1").value is True


@pytest.mark.unit
class TestFindPreviousCompleted:
    """Tests for NextInstanceLocator.find_previous_completed()."""

    def test_most_recently_completed(self, repo, locator):
        repo.update("ex-1", {"concluido": True})
        repo.update("ex-2", {"concluido": True})

        result = locator.find_previous_completed(SUPINO, "prog-1", current_instance_id="ex-3")

        assert result.value.id == "ex-2"

    def test_skips_current_workout(self, repo, locator):
        repo.update("ex-1", {"concluido": True})
        repo.seed_instances([
            {"id": "ex-1b", "treino_usuario_id": "treino-3", "exercicio_original_id": "supino-reto",
             "concluido": True, "updated_at": "2099-12-31T00:00:00+00:00"},
        ])

        result = locator.find_previous_completed(
            SUPINO, "prog-1", current_instance_id="ex-3", current_workout_id="treino-3"
        )

        assert result.value.id == "ex-1"

    def test_none_without_history(self, locator):
        result = locator.find_previous_completed(SUPINO, "prog-1", current_instance_id="ex-1")
        assert result.ok
        assert result.value is None


@pytest.mark.unit
class TestLoadInstance:
    """Tests for NextInstanceLocator.load_instance()."""

    def test_loads_with_program(self, locator):
        result = locator.load_instance("ex-2")

        assert result.value.programa_usuario_id == "prog-1"
        assert result.value.treino_created_at == "2024-01-02T08:00:00+00:00"
        assert result.value.chain_identity == SUPINO

    def test_missing(self, locator):
        result = locator.load_instance("missing")
        assert isinstance(result.error, ExerciseLookupError)
        with pytest.raises(ExerciseLookupError):
            result.unwrap()
