"""Tests for the version comparison strategies."""

import itertools

import pytest

from ordering import (
    InvalidSegmentError,
    MavenVersionComparator,
    MercuryVersionComparator,
    NumericVersionComparator,
    get_version_comparator,
)
from ordering.tokens import ArtifactVersion, qualifier_key


CORPUS = [
    "1", "1.0", "1.0.0", "1.0.1", "1.1", "1.10", "1.9", "2.0",
    "1.0-SNAPSHOT", "1.0-alpha-1", "1.0-beta", "1.0-rc1", "1.0-sp1",
    "1.0-ga", "1.0-foo", "1.0-20240101.120000-3", "2.0.0-beta", "1-2",
]

NUMERIC_CORPUS = ["1", "1.0", "1.0.0", "1.0.1", "1.1", "1.10", "1.9", "2", "2.0", "10.0.1"]

# The numeric strategy only orders plain dotted numbers consistently.
ORDERINGS = [
    (MavenVersionComparator(), CORPUS),
    (MercuryVersionComparator(), CORPUS),
    (NumericVersionComparator(), NUMERIC_CORPUS),
]


class TestComparatorFactory:
    """Strategy selection by name."""

    def test_names(self):
        assert isinstance(get_version_comparator("numeric"), NumericVersionComparator)
        assert isinstance(get_version_comparator("MERCURY"), MercuryVersionComparator)
        assert isinstance(get_version_comparator("maven"), MavenVersionComparator)

    def test_unknown_name_defaults_to_maven(self):
        assert isinstance(get_version_comparator(None), MavenVersionComparator)
        assert isinstance(get_version_comparator("whatever"), MavenVersionComparator)


class TestNumericComparator:
    """Dot-separated numeric ordering."""

    def setup_method(self):
        self.comparator = NumericVersionComparator()

    def test_numeric_atoms(self):
        assert self.comparator.compare("1.10", "1.9") == 1
        assert self.comparator.compare("1.0.1", "1.0") == 1
        assert self.comparator.compare("2", "10") == -1

    def test_mixed_atoms(self):
        assert self.comparator.compare("5.1.0.0.24", "5.1.0.0.9") > 0
        assert self.comparator.compare("5.1.0.0.2a4", "5.1.0.0.9") < 0

    def test_trailing_zero_makes_older(self):
        assert self.comparator.compare("1", "1.0") == 1
        assert self.comparator.compare("1.0", "1") == -1
        assert self.comparator.compare("1.0", "1.0.0") == 1

    def test_qualifier_sorts_before_plain_atom(self):
        assert self.comparator.compare("1.0-SNAPSHOT", "1.0") == -1
        assert self.comparator.compare("1.0", "1.0-SNAPSHOT") == 1

    def test_equal(self):
        assert self.comparator.compare("1.2.3", "1.2.3") == 0

    def test_increment_segment(self):
        assert self.comparator.increment_segment("1.2.3", 1) == "1.3.0"
        assert self.comparator.increment_segment("1.2.3", 0) == "2.0.0"
        assert self.comparator.increment_segment("1.2.3", 2) == "1.2.4"

    def test_invalid_segment(self):
        with pytest.raises(InvalidSegmentError):
            self.comparator.increment_segment("1.2", 2)
        with pytest.raises(InvalidSegmentError):
            self.comparator.increment_segment("1.2", -1)


class TestMavenComparator:
    """Default ordering."""

    def setup_method(self):
        self.comparator = MavenVersionComparator()

    def test_basic_oracle(self):
        assert self.comparator.compare("1", "1") == 0
        assert self.comparator.compare("1", "2") < 0
        assert self.comparator.compare("1.1", "1") > 0

    def test_release_above_snapshot(self):
        assert self.comparator.compare("1", "1-SNAPSHOT") == 1
        assert self.comparator.compare("1.0", "1.0-SNAPSHOT") == 1

    def test_fewer_explicit_components_is_newer(self):
        assert self.comparator.compare("1", "1.0") == 1
        assert self.comparator.compare("1.0", "1.0.0") == 1

    def test_qualifier_ladder(self):
        ladder = ["1.0-alpha-1", "1.0-beta", "1.0-rc1", "1.0-SNAPSHOT", "1.0", "1.0-sp1", "1.0.1"]
        for lower, upper in zip(ladder, ladder[1:]):
            assert self.comparator.compare(lower, upper) == -1, (lower, upper)

    def test_release_synonyms(self):
        assert self.comparator.compare("1.0-ga", "1.0-final") == 0
        assert self.comparator.compare("1.0-release", "1.0-ga") == 0

    def test_unknown_qualifier_below_alpha(self):
        assert self.comparator.compare("1.0-foo", "1.0-alpha") == -1
        assert self.comparator.compare("1.0-bar", "1.0-foo") == -1

    def test_timestamp_snapshot_is_snapshot(self):
        assert self.comparator.compare("1.0-20240101.120000-3", "1.0") == -1
        assert self.comparator.compare("1.0-20240101.120000-3", "1.0-rc1") == 1

    def test_build_number(self):
        assert self.comparator.compare("1-2", "1") == 1
        assert self.comparator.compare("1-2", "1-10") == -1

    def test_segment_count(self):
        assert self.comparator.segment_count("1.2.3") == 3
        assert self.comparator.segment_count("1.2.3-beta") == 4
        assert self.comparator.segment_count("1.2-4") == 3

    def test_increment_segment(self):
        assert self.comparator.increment_segment("1.2.3", 1) == "1.3.0"
        assert self.comparator.increment_segment("1.2.3-beta", 0) == "2.0.0"
        assert self.comparator.increment_segment("1.2-4", 2) == "1.2-5"
        assert self.comparator.increment_segment("1.0-a9z", 2) == "1.0-b0a"

    def test_invalid_segment(self):
        with pytest.raises(InvalidSegmentError):
            self.comparator.increment_segment("1.2.3", 3)


class TestMercuryComparator:
    """Item-wise ordering."""

    def setup_method(self):
        self.comparator = MercuryVersionComparator()

    def test_missing_item_below_zero(self):
        assert self.comparator.compare("1", "1.0") == -1

    def test_missing_item_above_pre_release(self):
        assert self.comparator.compare("1", "1-SNAPSHOT") == 1

    def test_post_release_above_missing(self):
        assert self.comparator.compare("1.0-sp", "1.0") == 1

    def test_release_synonyms_dropped(self):
        assert self.comparator.compare("1.0-ga", "1.0") == 0

    def test_increment_segment(self):
        assert self.comparator.increment_segment("1.2.3", 1) == "1.3.0"
        assert self.comparator.increment_segment("1.2-beta-3", 1) == "1.3"


class TestOrderingProperties:
    """Every strategy is a total order over the corpus."""

    @pytest.mark.parametrize("comparator,corpus", ORDERINGS, ids=["maven", "mercury", "numeric"])
    def test_antisymmetry(self, comparator, corpus):
        for a, b in itertools.product(corpus, repeat=2):
            assert comparator.compare(a, b) == -comparator.compare(b, a), (a, b)

    @pytest.mark.parametrize("comparator,corpus", ORDERINGS, ids=["maven", "mercury", "numeric"])
    def test_transitivity(self, comparator, corpus):
        for a, b, c in itertools.product(corpus, repeat=3):
            if comparator.compare(a, b) <= 0 and comparator.compare(b, c) <= 0:
                assert comparator.compare(a, c) <= 0, (a, b, c)

    @pytest.mark.parametrize("comparator,corpus", ORDERINGS, ids=["maven", "mercury", "numeric"])
    def test_sort_and_max_agree(self, comparator, corpus):
        ordered = comparator.sort(corpus)
        assert comparator.equals(comparator.max(corpus), ordered[-1])
        assert comparator.max([]) is None


class TestArtifactVersion:
    """Parsed version structure."""

    def test_parse_components_and_qualifier(self):
        parsed = ArtifactVersion.parse("1.2.3-beta-2")
        assert parsed.components == (1, 2, 3)
        assert parsed.qualifier == "beta-2"
        assert (parsed.major, parsed.minor, parsed.incremental) == (1, 2, 3)

    def test_parse_build_number(self):
        parsed = ArtifactVersion.parse("1.2-7")
        assert parsed.build_number == 7
        assert parsed.qualifier is None
        assert parsed.incremental == 0

    def test_snapshot_detection(self):
        assert ArtifactVersion.parse("1.0-SNAPSHOT").is_snapshot
        assert ArtifactVersion.parse("1.0-20240101.120000-3").is_snapshot
        assert not ArtifactVersion.parse("1.0").is_snapshot

    def test_single_letter_alias_needs_number(self):
        assert qualifier_key("b2") == qualifier_key("beta2")
        assert qualifier_key("b")[0] == -1
