"""Tests for phase resolution over a timeline."""

from storyline.phases import PHASE_PALETTE, phase_range_lookup, phase_start_lookup, resolve_phases


class TestResolvePhases:
    def test_end_defaults_to_next_start(self):
        phases = resolve_phases(
            [{"startIndex": 0, "title": "Start"}, {"startIndex": 3, "title": "Mid", "color": "#000000"}],
            timeline_length=6,
        )
        assert [(p.start_index, p.end_index) for p in phases] == [(0, 2), (3, 5)]
        assert phases[0].accent_color == PHASE_PALETTE[0]
        assert phases[1].accent_color == "#000000"

    def test_accent_color_preferred_over_color(self):
        (phase,) = resolve_phases([{"accentColor": "#111111", "color": "#222222"}], 3)
        assert phase.accent_color == "#111111"

    def test_palette_cycles(self):
        phases = resolve_phases([{"startIndex": i} for i in range(10)], 10)
        assert phases[9].accent_color == PHASE_PALETTE[0]
        assert phases[1].accent_color == PHASE_PALETTE[1]

    def test_indices_are_clamped(self):
        phases = resolve_phases(
            [{"startIndex": -2, "endIndex": 99}, {"startIndex": 10}],
            timeline_length=4,
        )
        assert (phases[0].start_index, phases[0].end_index) == (0, 3)
        assert (phases[1].start_index, phases[1].end_index) == (3, 3)

    def test_end_never_before_start(self):
        (phase,) = resolve_phases([{"startIndex": 2, "endIndex": 1}], 5)
        assert (phase.start_index, phase.end_index) == (2, 2)

    def test_title_description_and_extras(self):
        (phase,) = resolve_phases([{"title": "Fallout", "description": "", "icon": "flag"}], 2)
        assert phase.title == "Fallout"
        assert phase.description is None
        assert phase.to_dict()["icon"] == "flag"

    def test_non_list_and_bad_entries(self):
        assert resolve_phases(None, 3) == []
        (phase,) = resolve_phases([None], 3)
        assert (phase.start_index, phase.end_index) == (0, 2)


class TestLookups:
    PHASES = resolve_phases([{"startIndex": 0, "title": "A"}, {"startIndex": 2, "title": "B"}], 4)

    def test_start_lookup(self):
        lookup = phase_start_lookup(self.PHASES)
        assert sorted(lookup) == [0, 2]
        assert lookup[2].title == "B"

    def test_range_lookup(self):
        lookup = phase_range_lookup(self.PHASES)
        assert [lookup[idx].title for idx in range(4)] == ["A", "A", "B", "B"]

    def test_contains(self):
        assert self.PHASES[0].contains(1)
        assert not self.PHASES[0].contains(2)
