"""
Unit tests for the sealed-bid phase resolver.
"""

import pytest

from hammer.core.auction import Phase, phase, phase_at, require_phase, seconds_until_next_phase
from hammer.core.errors import AuctionEnded, PhaseMismatch, UnsupportedOperation


class TestPhaseAt:
    """Boundaries belong to the later phase."""

    @pytest.mark.parametrize("now, expected", [
        (0, Phase.COMMIT),
        (999, Phase.COMMIT),
        (1000, Phase.REVEAL),
        (1500, Phase.REVEAL),
        (1999, Phase.REVEAL),
        (2000, Phase.ENDED),
        (10**9, Phase.ENDED),
    ])
    def test_boundaries(self, now, expected):
        assert phase_at(1000, 2000, now) == expected

    def test_empty_reveal_window(self):
        assert phase_at(1000, 1000, 999) == Phase.COMMIT
        assert phase_at(1000, 1000, 1000) == Phase.ENDED


class TestPhase:
    """Tests for phase() on snapshots."""

    def test_reveal_then_ended(self, make_snapshot):
        snapshot = make_snapshot("Vickrey", commit_phase_end=1000, reveal_phase_end=2000)
        assert phase(snapshot, 1500) == Phase.REVEAL
        assert phase(snapshot, 2000) == Phase.ENDED

    def test_is_pure(self, make_snapshot):
        snapshot = make_snapshot("Vickrey")
        assert phase(snapshot, 1500) == phase(snapshot, 1500)
        assert phase(snapshot, 500) == Phase.COMMIT

    @pytest.mark.parametrize("protocol", ["English", "Linear", "Exponential", "Logarithmic"])
    def test_other_protocols_refused(self, protocol, make_snapshot):
        with pytest.raises(UnsupportedOperation):
            phase(make_snapshot(protocol), 1500)

    def test_seconds_until_next_phase(self, make_snapshot):
        snapshot = make_snapshot("Vickrey")
        assert seconds_until_next_phase(snapshot, 400) == 600
        assert seconds_until_next_phase(snapshot, 1500) == 500
        assert seconds_until_next_phase(snapshot, 2500) is None


class TestRequirePhase:
    """Tests for require_phase()."""

    def test_matching_phase(self, make_snapshot):
        require_phase(make_snapshot("Vickrey"), 500, Phase.COMMIT)
        require_phase(make_snapshot("Vickrey"), 1500, Phase.REVEAL)

    def test_reveal_during_commit(self, make_snapshot):
        with pytest.raises(PhaseMismatch) as exc:
            require_phase(make_snapshot("Vickrey"), 500, Phase.REVEAL)
        assert exc.value.expected == Phase.REVEAL
        assert exc.value.actual == Phase.COMMIT
        assert exc.value.boundary == 1000
        assert exc.value.to_dict()["actual"] == "COMMIT"

    def test_commit_during_reveal(self, make_snapshot):
        with pytest.raises(PhaseMismatch) as exc:
            require_phase(make_snapshot("Vickrey"), 1500, Phase.COMMIT)
        assert exc.value.boundary == 2000

    def test_after_end(self, make_snapshot):
        with pytest.raises(AuctionEnded) as exc:
            require_phase(make_snapshot("Vickrey"), 2000, Phase.REVEAL)
        assert exc.value.deadline == 2000
