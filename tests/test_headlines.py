"""Tests for latest-headline extraction."""

from storyline.headlines import latest_headlines
from storyline.timeline import normalize_timeline


class TestLatestHeadlines:
    def test_newest_first(self):
        timeline = [
            {"title": "January", "date": "2024-01-01"},
            {"title": "March", "date": "2024-03-01"},
            {"title": "February", "date": "2024-02-01"},
        ]
        headlines = latest_headlines(timeline, 2)
        assert [headline.title for headline in headlines] == ["March", "February"]
        assert [headline.date_label for headline in headlines] == ["01/03/2024", "01/02/2024"]

    def test_default_limit_is_two(self):
        timeline = [{"title": str(i), "date": f"2024-01-0{i}"} for i in range(1, 6)]
        assert len(latest_headlines(timeline)) == 2

    def test_ids_are_unique_for_duplicate_titles(self):
        timeline = [
            {"title": "Vote", "date": "2024-01-01"},
            {"title": "Vote", "date": "2024-01-02"},
        ]
        ids = [headline.id for headline in latest_headlines(timeline)]
        assert ids == ["Vote-0-1", "Vote-1-0"]

    def test_source_id_prefix(self):
        headlines = latest_headlines([{"title": "Vote", "date": "2024-01-01"}], source_id="story-9")
        assert headlines[0].id == "story-9-0-0"

    def test_undated_events_sort_by_position_behind_dated_ones(self):
        timeline = [{"title": "A"}, {"title": "B", "date": "2024-01-01"}, {"title": "C"}]
        titles = [headline.title for headline in latest_headlines(timeline, 3)]
        assert titles == ["B", "C", "A"]

    def test_untitled_default_and_empty_label(self):
        (headline,) = latest_headlines([{"description": "only text"}])
        assert headline.title == "Untitled update"
        assert headline.date_label == ""
        assert headline.id == "headline-0-0"

    def test_legacy_raw_input(self):
        (headline,) = latest_headlines([{"event": "Launch", "timestamp": {"seconds": 1700000000}}], 1)
        assert headline.title == "Launch"
        assert headline.date_label == "14/11/2023"

    def test_images_are_not_headlines(self):
        timeline = [{"type": "image", "url": "https://img"}, {"title": "Only event", "date": "2024-01-01"}]
        headlines = latest_headlines(timeline, 5)
        assert [headline.title for headline in headlines] == ["Only event"]
        assert headlines[0].index == 1

    def test_accepts_normalized_blocks(self):
        blocks = normalize_timeline([{"title": "x", "date": "2024-01-01"}])
        assert latest_headlines(blocks)[0].title == "x"

    def test_empty_or_invalid_input(self):
        assert latest_headlines(None) == []
        assert latest_headlines([]) == []
        assert latest_headlines([{"title": "x"}], limit=0) == []

    def test_to_dict(self):
        (headline,) = latest_headlines([{"title": "x", "date": "2024-03-01"}])
        assert headline.to_dict() == {"id": "x-0-0", "title": "x", "dateLabel": "01/03/2024"}
