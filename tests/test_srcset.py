"""Tests for srcset parsing and candidate selection."""

from substack_twin.models import ImageCandidate
from substack_twin.srcset import parse_srcset, pick_best_candidate, pick_best_from_srcset

BASE = "https://jane.substack.com/"


class TestParseSrcset:
    """Tests for parse_srcset."""

    def test_width_descriptors(self):
        candidates = parse_srcset("img-300.png 300w, img-600.png 600w")

        assert candidates == [
            ImageCandidate(url="img-300.png", width=300),
            ImageCandidate(url="img-600.png", width=600),
        ]

    def test_density_descriptors(self):
        candidates = parse_srcset("a.png 1x, b.png 1.5x")

        assert [c.dpr for c in candidates] == [1.0, 1.5]
        assert all(c.width == 0 for c in candidates)

    def test_urls_containing_commas(self):
        srcset = (
            "https://substackcdn.com/image/fetch/w_112,h_112,c_fill/avatar.png 112w, "
            "https://substackcdn.com/image/fetch/w_424,h_424,c_fill/avatar.png 424w"
        )

        candidates = parse_srcset(srcset)

        assert [c.url for c in candidates] == [
            "https://substackcdn.com/image/fetch/w_112,h_112,c_fill/avatar.png",
            "https://substackcdn.com/image/fetch/w_424,h_424,c_fill/avatar.png",
        ]

    def test_empty_and_missing(self):
        assert parse_srcset("") == []
        assert parse_srcset(None) == []

    def test_entries_without_descriptor_are_ignored(self):
        assert parse_srcset("plain.png") == []


class TestPickBestCandidate:
    """Tests for pick_best_candidate."""

    def test_no_candidates(self):
        assert pick_best_candidate([]) is None

    def test_first_width_in_preferred_band(self):
        candidates = [
            ImageCandidate(url="c.png", width=500),
            ImageCandidate(url="a.png", width=100),
            ImageCandidate(url="b.png", width=300),
        ]

        assert pick_best_candidate(candidates).url == "b.png"

    def test_largest_width_when_none_in_band(self):
        candidates = [ImageCandidate(url="a.png", width=100), ImageCandidate(url="b.png", width=800)]

        assert pick_best_candidate(candidates).url == "b.png"

    def test_band_edges_are_inclusive(self):
        assert pick_best_candidate([ImageCandidate(url="x.png", width=256)]).url == "x.png"
        candidates = [ImageCandidate(url="a.png", width=512), ImageCandidate(url="b.png", width=1024)]
        assert pick_best_candidate(candidates).url == "a.png"

    def test_first_dpr_at_least_two(self):
        candidates = [
            ImageCandidate(url="c.png", dpr=3.0),
            ImageCandidate(url="a.png", dpr=1.0),
            ImageCandidate(url="b.png", dpr=2.0),
        ]

        assert pick_best_candidate(candidates).url == "b.png"

    def test_largest_dpr_when_all_below_two(self):
        candidates = [ImageCandidate(url="b.png", dpr=1.5), ImageCandidate(url="a.png", dpr=1.0)]

        assert pick_best_candidate(candidates).url == "b.png"

    def test_widths_take_precedence_over_densities(self):
        candidates = [ImageCandidate(url="dense.png", dpr=2.0), ImageCandidate(url="wide.png", width=900)]

        assert pick_best_candidate(candidates).url == "wide.png"


class TestPickBestFromSrcset:
    """Tests for pick_best_from_srcset."""

    def test_in_band_width_resolved_absolute(self):
        best = pick_best_from_srcset("img-300.png 300w, img-600.png 600w", BASE)

        assert best == "https://jane.substack.com/img-300.png"

    def test_largest_when_none_in_band(self):
        best = pick_best_from_srcset("img-100.png 100w, img-800.png 800w", BASE)

        assert best == "https://jane.substack.com/img-800.png"

    def test_density_selection(self):
        assert pick_best_from_srcset("a.png 1x, b.png 2x, c.png 3x", BASE) == "https://jane.substack.com/b.png"

    def test_root_relative_url(self):
        best = pick_best_from_srcset("/img/avatar.png 300w", "https://jane.substack.com/about")

        assert best == "https://jane.substack.com/img/avatar.png"

    def test_protocol_relative_url(self):
        assert pick_best_from_srcset("//cdn.example.com/a.png 2x", BASE) == "https://cdn.example.com/a.png"

    def test_absolute_url_unchanged(self):
        url = "https://substackcdn.com/image/fetch/w_424,h_424,c_fill/avatar.png"

        assert pick_best_from_srcset(f"{url} 424w", BASE) == url

    def test_nothing_usable(self):
        assert pick_best_from_srcset("", BASE) is None
