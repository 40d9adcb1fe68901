"""Tests for collation keys and common word-sequence matching."""

from __future__ import annotations

from hypothesis import given, settings, strategies as st

from medialens.core.matching.collation import (
    CollationKey,
    collate,
    split_keys,
    synthesize,
    tokenize_and_key,
)
from medialens.core.matching.common_sequence import (
    UNBOUNDED,
    CommonSequenceMatcher,
    match_common_sequence,
)

left_tokens = st.lists(st.integers(min_value=0, max_value=9), min_size=1, max_size=8)
right_tokens = st.lists(st.integers(min_value=10, max_value=19), max_size=8)


def _is_slice(run, sequence) -> bool:
    n = len(run)
    return any(tuple(sequence[i : i + n]) == tuple(run) for i in range(len(sequence) - n + 1))


class TestCollation:
    """Test accent- and case-insensitive word keys."""

    def test_collate_folds_case_and_accents(self):
        assert collate("Amélie") == collate("AMELIE") == "amelie"

    def test_keys_compare_by_collation(self):
        """Keys of equivalent words are equal and hash alike."""
        a, b = CollationKey("Pokémon"), CollationKey("POKEMON")
        assert a == b
        assert hash(a) == hash(b)
        assert a != CollationKey("Digimon")

    def test_tokenize_and_key_normalizes_punctuation(self):
        keys = tokenize_and_key("Amélie.Poulain")
        assert [k.key for k in keys] == ["amelie", "poulain"]
        assert [k.source for k in keys] == ["Amélie", "Poulain"]

    def test_split_keys_does_not_normalize(self):
        """Only whitespace separates words."""
        assert [k.key for k in split_keys("S.H.I.E.L.D agents")] == ["s.h.i.e.l.d", "agents"]

    def test_synthesize(self):
        assert synthesize(split_keys("Breaking  Bad")) == "Breaking Bad"
        assert synthesize(None) is None


class TestMatchCommonSequence:
    """Test the bounded longest-common-run search."""

    def test_longest_run(self):
        assert match_common_sequence([1, 5, 2, 3], [1, 9, 2, 3], UNBOUNDED) == (2, 3)

    def test_return_first_match(self):
        """The first non-empty run is returned when asked for."""
        assert match_common_sequence([1, 5, 2, 3], [1, 9, 2, 3], UNBOUNDED, return_first_match=True) == (1,)

    def test_ties_prefer_first_run(self):
        """Of two equally long runs the earlier one in the first sequence wins."""
        assert match_common_sequence([1, 2, 9, 3, 4], [3, 4, 8, 1, 2], UNBOUNDED) == (1, 2)

    def test_start_offset_bound(self):
        """Runs starting beyond the bound in either sequence are ignored."""
        assert match_common_sequence(["x"], ["y", "y", "x"], 1) is None
        assert match_common_sequence(["x"], ["y", "y", "x"], 2) == ("x",)
        assert match_common_sequence(["y", "y", "x"], ["x"], 1) is None

    def test_run_may_extend_past_bound(self):
        """Only the start is bounded, not the end of the run."""
        assert match_common_sequence(["a", "b", "c"], ["a", "b", "c"], 0) == ("a", "b", "c")

    def test_empty_sequences(self):
        assert match_common_sequence([], [1], UNBOUNDED) is None
        assert match_common_sequence([1], [], UNBOUNDED) is None

    @given(a=left_tokens, prefix=right_tokens, suffix=right_tokens)
    @settings(max_examples=200, deadline=None)
    def test_contained_sequence_is_found(self, a, prefix, suffix):
        """A sequence embedded in another is matched completely."""
        b = prefix + a + suffix
        result = match_common_sequence(a, b, UNBOUNDED)
        assert result == tuple(a)

    @given(a=left_tokens, b=right_tokens)
    @settings(max_examples=200, deadline=None)
    def test_disjoint_sequences_share_nothing(self, a, b):
        """Sequences without a common element never match."""
        assert match_common_sequence(a, b, UNBOUNDED) is None

    @given(a=left_tokens, b=left_tokens, bound=st.integers(min_value=-1, max_value=4))
    @settings(max_examples=200, deadline=None)
    def test_result_is_common_run(self, a, b, bound):
        """Any result is a contiguous run of both inputs."""
        result = match_common_sequence(a, b, bound)
        if result is not None:
            assert result
            assert _is_slice(result, a)
            assert _is_slice(result, b)


class TestCommonSequenceMatcher:
    """Test folding the match over several names."""

    def test_common_sequence_of_names(self):
        matcher = CommonSequenceMatcher(UNBOUNDED)
        result = matcher.match_first_common_sequence_str(
            "The Big Bang Theory S01E01", "The Big Bang Theory S01E02", "Big Bang Theory S02E01"
        )
        assert result == "Big Bang Theory"

    def test_words_of_first_name_are_kept(self):
        """Matching is case-insensitive; the first name's spelling is returned."""
        matcher = CommonSequenceMatcher(0)
        assert matcher.match_first_common_sequence_str("DEXTER s01", "Dexter s02") == "DEXTER"

    def test_no_common_sequence(self):
        matcher = CommonSequenceMatcher(0)
        assert matcher.match_first_common_sequence_str("Dexter", "Lost") is None

    def test_single_name(self):
        matcher = CommonSequenceMatcher(0)
        assert matcher.match_first_common_sequence_str("Dexter") == "Dexter"
