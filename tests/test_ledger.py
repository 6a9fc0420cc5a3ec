"""
Tests for ContextLedger — monotonic depths and staleness
"""

import pytest

from ambit.core.ledger import ContextLedger, ReadDepth
from ambit.core.merkle import content_hash


H1 = content_hash("version one")
H2 = content_hash("version two")


class TestReadDepth:
    """Ordering and labels."""

    def test_total_order(self):
        order = [ReadDepth.UNSEEN, ReadDepth.NAME_ONLY, ReadDepth.OVERVIEW,
                 ReadDepth.SIGNATURE, ReadDepth.FULL_BODY, ReadDepth.STALE]
        assert sorted(reversed(order)) == order
        assert ReadDepth.FULL_BODY < ReadDepth.STALE

    def test_is_seen(self):
        assert not ReadDepth.UNSEEN.is_seen
        assert ReadDepth.NAME_ONLY.is_seen
        assert ReadDepth.STALE.is_seen

    def test_labels_round_trip(self):
        for depth in ReadDepth:
            assert ReadDepth.from_label(depth.label) is depth
        assert ReadDepth.from_label("FULL_BODY") is ReadDepth.FULL_BODY
        assert str(ReadDepth.OVERVIEW) == "overview"

    def test_unknown_label(self):
        with pytest.raises(ValueError, match="Unknown read depth"):
            ReadDepth.from_label("skimmed")


class TestRecord:
    """Depth only goes up; STALE always applies."""

    def test_unknown_id_is_unseen(self, ledger):
        assert ledger.depth_of("nope") is ReadDepth.UNSEEN
        assert ledger.entry("nope") is None

    def test_first_record_applies(self, ledger):
        assert ledger.record("a", ReadDepth.OVERVIEW, H1, "agent", 5) is True
        entry = ledger.entry("a")
        assert entry.depth is ReadDepth.OVERVIEW
        assert entry.content_hash_at_read == H1
        assert entry.agent_id == "agent"
        assert entry.token_count == 5

    def test_lower_depth_never_downgrades(self, ledger):
        ledger.record("a", ReadDepth.FULL_BODY, H1, "agent", 5)
        assert ledger.record("a", ReadDepth.NAME_ONLY, H2, "other", 1) is False
        entry = ledger.entry("a")
        assert entry.depth is ReadDepth.FULL_BODY
        # Rejected writes leave every field alone
        assert entry.content_hash_at_read == H1
        assert entry.agent_id == "agent"

    def test_equal_depth_is_a_no_op(self, ledger):
        ledger.record("a", ReadDepth.SIGNATURE, H1, "agent", 5)
        assert ledger.record("a", ReadDepth.SIGNATURE, H2, "other", 9) is False
        assert ledger.entry("a").agent_id == "agent"

    def test_higher_depth_refreshes_fields(self, ledger):
        ledger.record("a", ReadDepth.NAME_ONLY, H1, "agent", 1)
        assert ledger.record("a", ReadDepth.FULL_BODY, H2, "other", 9) is True
        entry = ledger.entry("a")
        assert entry.depth is ReadDepth.FULL_BODY
        assert entry.content_hash_at_read == H2
        assert entry.agent_id == "other"
        assert entry.token_count == 9

    def test_stale_always_applies(self, ledger):
        ledger.record("a", ReadDepth.FULL_BODY, H1, "agent", 1)
        assert ledger.record("a", ReadDepth.STALE, H2, "agent", 1) is True
        assert ledger.depth_of("a") is ReadDepth.STALE

    def test_stale_is_sticky(self, ledger):
        """Re-reading a stale symbol does not clear STALE."""
        ledger.record("a", ReadDepth.STALE, H1, "agent", 1)
        assert ledger.record("a", ReadDepth.FULL_BODY, H2, "agent", 1) is False
        assert ledger.depth_of("a") is ReadDepth.STALE

    def test_rejected_unseen_write_creates_no_entry(self, ledger):
        assert ledger.record("a", ReadDepth.UNSEEN, H1, "agent", 0) is False
        assert "a" not in ledger
        assert len(ledger) == 0

    def test_timestamp_is_utc(self, ledger):
        ledger.record("a", ReadDepth.NAME_ONLY, H1, "agent", 1)
        assert ledger.entry("a").timestamp.tzinfo is not None


class TestAgentView:
    """Per-agent depth lookups."""

    def test_other_agent_reads_unseen(self, ledger):
        ledger.record("a", ReadDepth.FULL_BODY, H1, "alice", 1)
        assert ledger.depth_of("a", "alice") is ReadDepth.FULL_BODY
        assert ledger.depth_of("a", "bob") is ReadDepth.UNSEEN
        assert ledger.depth_of("a") is ReadDepth.FULL_BODY


class TestStaleness:
    """mark_stale_if_changed."""

    def test_changed_hash_marks_stale(self, ledger):
        ledger.record("a", ReadDepth.SIGNATURE, H1, "agent", 1)
        assert ledger.mark_stale_if_changed("a", H2) is True
        assert ledger.depth_of("a") is ReadDepth.STALE

    def test_same_hash_is_untouched(self, ledger):
        ledger.record("a", ReadDepth.SIGNATURE, H1, "agent", 1)
        assert ledger.mark_stale_if_changed("a", H1) is False
        assert ledger.depth_of("a") is ReadDepth.SIGNATURE

    def test_unknown_id_is_a_no_op(self, ledger):
        assert ledger.mark_stale_if_changed("ghost", H2) is False
        assert "ghost" not in ledger

    def test_already_stale_reports_false(self, ledger):
        ledger.record("a", ReadDepth.FULL_BODY, H1, "agent", 1)
        ledger.mark_stale_if_changed("a", H2)
        assert ledger.mark_stale_if_changed("a", H2) is False
        assert ledger.depth_of("a") is ReadDepth.STALE


class TestSummaries:
    """Counts and serialization."""

    def test_counts(self, ledger):
        ledger.record("a", ReadDepth.FULL_BODY, H1, "agent", 1)
        ledger.record("b", ReadDepth.FULL_BODY, H1, "agent", 1)
        ledger.record("c", ReadDepth.NAME_ONLY, H1, "agent", 1)
        assert ledger.total_seen() == 3
        assert ledger.count_by_depth() == {ReadDepth.FULL_BODY: 2, ReadDepth.NAME_ONLY: 1}

    def test_to_dict_sorted_by_id(self, ledger):
        ledger.record("b", ReadDepth.OVERVIEW, H1, "agent", 1)
        ledger.record("a", ReadDepth.FULL_BODY, H1, "agent", 1)
        data = ledger.to_dict()
        assert list(data) == ["a", "b"]
        assert data["a"]["depth"] == "full"

    def test_fresh_ledger_is_empty(self):
        assert len(ContextLedger()) == 0
