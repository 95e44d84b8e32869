"""Tests for the static quality-session template library."""

import pytest

from run_planner.models.workout_library import (
    WORKOUT_LIBRARY,
    QualityType,
    format_pace,
    get_template,
    pace_range,
)
from run_planner.services.workout_sanitizer import is_cool_down, is_warm_up, sanitize
from run_planner.services.fallback_planner import build_easy_option
from run_planner.models.schemas import WorkoutPlan


class TestQualityTypeLookup:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("intervals", QualityType.INTERVALS),
            ("Tempo", QualityType.TEMPO),
            ("long run", QualityType.LONG_RUN),
            ("long_run", QualityType.LONG_RUN),
            ("Long-Run", QualityType.LONG_RUN),
        ],
    )
    def test_known_categories(self, value, expected):
        assert QualityType.resolve(value) is expected

    @pytest.mark.parametrize("value", ["fartlek", "", None, "hills"])
    def test_unknown_falls_back_to_tempo(self, value):
        assert QualityType.lookup(value) is None
        assert QualityType.resolve(value) is QualityType.TEMPO


class TestTemplates:
    @pytest.mark.parametrize("quality_type", list(QualityType))
    def test_structure_is_warm_up_main_cool_down(self, quality_type):
        option = get_template(quality_type)

        assert 3 <= len(option.segments) <= 5
        assert is_warm_up(option.segments[0])
        assert is_cool_down(option.segments[-1])
        assert all(segment.target_pace and segment.rpe for segment in option.segments)
        assert all(segment.workout_type == "RUN" for segment in option.segments)

    @pytest.mark.parametrize("quality_type", list(QualityType))
    def test_templates_already_satisfy_sanitizer(self, quality_type):
        plan = WorkoutPlan(easy_option=build_easy_option(8), quality_option=get_template(quality_type))

        assert sanitize(plan) == plan

    def test_interval_block_is_repeated(self):
        option = get_template("intervals")
        main = option.segments[1]

        assert main.repeat == 6
        assert "walking rest" in main.instruction

    def test_each_call_returns_fresh_objects(self):
        first = get_template(QualityType.TEMPO)
        first.segments.clear()

        assert len(get_template(QualityType.TEMPO).segments) == 3

    def test_library_covers_every_category(self):
        assert set(WORKOUT_LIBRARY) == set(QualityType)


class TestPacePersonalisation:
    def test_format_pace(self):
        assert format_pace(5.5) == "5:30"
        assert format_pace(4.0) == "4:00"
        assert format_pace(4.999) == "5:00"

    def test_pace_range_uses_band_multipliers(self):
        # 5:00/km average: tempo 0.92-1.00 -> 4:36-5:00
        assert pace_range(5.0, "tempo") == "4:36-5:00 min/km"

    def test_template_paces_follow_average_pace(self):
        option = get_template(QualityType.TEMPO, average_pace_min_km=5.0)

        assert option.target_pace == "4:36-5:00 min/km"
        assert option.segments[0].target_pace == pace_range(5.0, "easy")
        assert option.segments[1].target_pace == "4:36-5:00 min/km"

    def test_canned_paces_without_average(self):
        option = get_template(QualityType.TEMPO, average_pace_min_km=None)

        assert option.target_pace == WORKOUT_LIBRARY[QualityType.TEMPO]["target_pace"]
