"""
Unit Tests for the synthetic profile generator.
"""

import pytest

from creditkeeper.infrastructure.synthetic import ARCHETYPES, SyntheticProfileGenerator, generate_profile
from creditkeeper.service.scoring.score_engine import compute_score


class TestDeterminism:
    """Same archetype, seed and date always yield the same snapshot."""

    @pytest.mark.parametrize("archetype", sorted(ARCHETYPES))
    def test_same_seed_same_snapshot(self, as_of, archetype):
        first = generate_profile(archetype, seed=7, as_of=as_of)
        second = generate_profile(archetype, seed=7, as_of=as_of)

        assert first == second

    def test_different_seed_different_history(self, as_of):
        first = generate_profile("risky", seed=1, as_of=as_of)
        second = generate_profile("risky", seed=2, as_of=as_of)

        assert first.id != second.id
        assert first.transactions != second.transactions

    def test_unknown_archetype(self, as_of):
        with pytest.raises(KeyError):
            SyntheticProfileGenerator(as_of=as_of).generate("millionaire")


class TestArchetypeShape:
    """Tests for the layout of generated histories."""

    @pytest.mark.parametrize("archetype", sorted(ARCHETYPES))
    def test_billing_cycles_end_at_as_of(self, as_of, archetype):
        snapshot = generate_profile(archetype, as_of=as_of)
        recipe = ARCHETYPES[archetype]

        assert len(snapshot.billing_cycles) == recipe.num_cycles
        assert snapshot.last_cycle.statement_end == as_of
        assert snapshot.last_cycle.statement_balance == recipe.balance
        assert snapshot.last_cycle.is_paid is False
        for previous, cycle in zip(snapshot.billing_cycles, snapshot.billing_cycles[1:]):
            assert cycle.statement_start == previous.statement_end

    @pytest.mark.parametrize("archetype", sorted(ARCHETYPES))
    def test_transactions_newest_first(self, as_of, archetype):
        snapshot = generate_profile(archetype, as_of=as_of)
        dates = [t.date for t in snapshot.transactions]

        assert snapshot.transactions
        assert dates == sorted(dates, reverse=True)

    def test_ids_derive_from_archetype_and_seed(self, as_of):
        snapshot = generate_profile("healthy", seed=3, as_of=as_of)

        assert snapshot.id == "profile-healthy-3"
        assert snapshot.credit_account.id == "profile-healthy-3-card"
        assert snapshot.archetype == "healthy"
        assert all(c.id.startswith("profile-healthy-3-cycle-") for c in snapshot.billing_cycles)

    def test_missed_cycles_are_unpaid(self, as_of):
        snapshot = generate_profile("poor", as_of=as_of)

        missed = [c for c in snapshot.billing_cycles if c.is_missed(as_of)]
        assert [c.id for c in missed] == ["profile-poor-0-cycle-1", "profile-poor-0-cycle-3"]

    def test_observed_income(self, as_of):
        snapshot = generate_profile("excellent", as_of=as_of)

        assert snapshot.monthly_paycheck_income(as_of) >= 4000.0


class TestArchetypeScores:
    """Archetypes land in clearly separated score ranges."""

    @pytest.mark.parametrize("seed", [0, 1, 42])
    def test_scores_ordered(self, as_of, seed):
        scores = {
            key: compute_score(generate_profile(key, seed=seed, as_of=as_of), as_of).final_score
            for key in ARCHETYPES
        }

        assert scores["excellent"] > scores["healthy"] > scores["risky"] > scores["poor"]

    def test_excellent_is_perfect(self, as_of):
        result = compute_score(generate_profile("excellent", as_of=as_of), as_of)

        assert result.final_score == 850
