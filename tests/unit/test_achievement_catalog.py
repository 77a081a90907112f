"""Unit tests for the achievement catalog."""

from readrmood.domain.entities import PredicateKind
from readrmood.domain.services import achievement_catalog


def test_codes_are_unique():
    codes = [d.code for d in achievement_catalog.definitions()]
    assert len(codes) == len(set(codes))


def test_initial_state_is_locked_and_ordered():
    """Test that seeding yields one locked record per entry, in catalog order."""
    state = achievement_catalog.initial_state()

    assert [a.code for a in state] == [d.code for d in achievement_catalog.definitions()]
    assert all(not a.is_unlocked and a.unlocked_at is None for a in state)


def test_initial_state_has_fresh_ids():
    first = achievement_catalog.initial_state()
    second = achievement_catalog.initial_state()
    assert first[0].id != second[0].id


def test_definition_lookup():
    definition = achievement_catalog.definition_for("streak_7")

    assert definition is not None
    assert definition.predicate == PredicateKind.STREAK_DAYS
    assert definition.threshold == 7
    assert achievement_catalog.definition_for("missing") is None


def test_points_for():
    assert achievement_catalog.points_for("first_session") == 10
    assert achievement_catalog.points_for("missing") == 0


def test_every_predicate_kind_is_used():
    used = {d.predicate for d in achievement_catalog.definitions()}
    assert used == set(PredicateKind)
