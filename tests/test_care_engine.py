"""Tests for CareEngine - pure logic, no HA fixtures needed.

Covers log type parsing, instance expansion (slot prefix, goals, per-cat)
and completion matching across the business day and period windows.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from custom_components.catcare import const
from custom_components.catcare.engines.care_engine import (
    CareEngine,
    ParsedLogType,
    aggregate,
)

SETTINGS = {const.CONF_DAY_START_HOUR: 4}

FOOD_MORNING = {
    const.DATA_ID: "care_food",
    const.DATA_CARE_TASK_TITLE: "Food",
    const.DATA_CARE_TASK_MEAL_SLOTS: [const.SLOT_MORNING],
}

FOOD_ALL_SLOTS = {
    const.DATA_ID: "care_food",
    const.DATA_CARE_TASK_TITLE: "Food",
    const.DATA_CARE_TASK_MEAL_SLOTS: [
        const.SLOT_NIGHT,
        const.SLOT_MORNING,
        const.SLOT_EVENING,
        const.SLOT_NOON,
    ],
}

WATER_WEEKLY = {
    const.DATA_ID: "care_water_change",
    const.DATA_CARE_TASK_TITLE: "Water change",
    const.DATA_CARE_TASK_FREQUENCY: const.FREQUENCY_WEEKLY,
    const.DATA_CARE_TASK_FREQUENCY_COUNT: 3,
}


def _log(log_type: str, done_at: datetime, **extra) -> dict:
    """Build a care log row."""
    return {
        const.DATA_ID: f"log-{log_type}-{done_at.isoformat()}",
        const.DATA_CARE_LOG_TYPE: log_type,
        const.DATA_CARE_LOG_DONE_AT: done_at.isoformat(),
        **extra,
    }


# =============================================================================
# TEST: LOG TYPE PARSING
# =============================================================================


class TestParseLogType:
    """Test care log type parsing."""

    def test_colon_separator(self) -> None:
        """'care_food:morning' splits on the current separator."""
        assert CareEngine.parse_log_type("care_food:morning") == ParsedLogType(
            "care_food", const.SLOT_MORNING
        )

    def test_legacy_underscore_separator(self) -> None:
        """'care_food_morning' is the legacy spelling of the same slot."""
        assert CareEngine.parse_log_type("care_food_morning") == ParsedLogType(
            "care_food", const.SLOT_MORNING
        )

    def test_plain_id_has_no_slot(self) -> None:
        """A type without a slot suffix is the definition id itself."""
        parsed = CareEngine.parse_log_type("care_water")
        assert parsed.base_id == "care_water"
        assert parsed.slot is None

    def test_non_slot_suffix_not_split(self) -> None:
        """Only real slot names count as a suffix."""
        parsed = CareEngine.parse_log_type("care_water_change")
        assert parsed.base_id == "care_water_change"
        assert parsed.slot is None

    def test_known_definition_id_never_split(self) -> None:
        """A type that is itself a definition id stays whole."""
        parsed = CareEngine.parse_log_type("care_night", {"care_night"})
        assert parsed == ParsedLogType("care_night")

    def test_empty_type(self) -> None:
        """Empty or missing types parse to an empty base id."""
        assert CareEngine.parse_log_type(None).base_id == ""
        assert CareEngine.parse_log_type("").base_id == ""


# =============================================================================
# TEST: NORMALIZATION
# =============================================================================


class TestNormalizeDefinition:
    """Test defensive defaults on raw definitions."""

    def test_unknown_frequency_falls_back_to_daily(self) -> None:
        """Unknown frequency → daily."""
        definition = CareEngine.normalize_definition(
            {const.DATA_ID: "x", const.DATA_CARE_TASK_FREQUENCY: "fortnightly"}
        )
        assert definition.frequency == const.FREQUENCY_DAILY

    def test_invalid_count_falls_back_to_one(self) -> None:
        """Missing, invalid or < 1 frequency_count → 1."""
        for raw_count in (None, "abc", 0, -2):
            definition = CareEngine.normalize_definition(
                {const.DATA_ID: "x", const.DATA_CARE_TASK_FREQUENCY_COUNT: raw_count}
            )
            assert definition.frequency_count == 1

    def test_slots_sorted_and_filtered(self) -> None:
        """Slots come back in fixed order with unknown names dropped."""
        definition = CareEngine.normalize_definition(
            {
                const.DATA_ID: "x",
                const.DATA_CARE_TASK_MEAL_SLOTS: ["night", "brunch", "morning"],
            }
        )
        assert definition.meal_slots == (const.SLOT_MORNING, const.SLOT_NIGHT)
        assert definition.is_slot_based

    def test_title_defaults_to_id(self) -> None:
        """A definition without a title shows its id."""
        assert CareEngine.normalize_definition({const.DATA_ID: "x"}).title == "x"


# =============================================================================
# TEST: SLOTS
# =============================================================================


class TestSlots:
    """Test slot buckets and prefix semantics."""

    def test_current_slot_boundaries(self) -> None:
        """Bucket start hours: 5 morning, 11 noon, 15 evening, 20 night."""
        assert CareEngine.current_slot(5) == const.SLOT_MORNING
        assert CareEngine.current_slot(10) == const.SLOT_MORNING
        assert CareEngine.current_slot(11) == const.SLOT_NOON
        assert CareEngine.current_slot(15) == const.SLOT_EVENING
        assert CareEngine.current_slot(20) == const.SLOT_NIGHT
        assert CareEngine.current_slot(2) == const.SLOT_NIGHT

    def test_slots_due_is_prefix(self) -> None:
        """Only slots up to the current bucket are due."""
        all_slots = list(const.SLOT_ORDER)
        assert CareEngine.slots_due(all_slots, 8) == [const.SLOT_MORNING]
        assert CareEngine.slots_due(all_slots, 16) == [
            const.SLOT_MORNING,
            const.SLOT_NOON,
            const.SLOT_EVENING,
        ]

    def test_slots_due_skips_unconfigured(self) -> None:
        """Unconfigured slots are never due."""
        assert CareEngine.slots_due([const.SLOT_EVENING], 12) == []
        assert CareEngine.slots_due([const.SLOT_EVENING], 21) == [const.SLOT_EVENING]


# =============================================================================
# TEST: EXPANSION
# =============================================================================


class TestExpandInstances:
    """Test instance expansion."""

    def test_future_slots_invisible(self) -> None:
        """At 16:00 a four-slot task shows morning, noon and evening."""
        now = datetime(2025, 3, 3, 16, 0, tzinfo=UTC)
        instances = CareEngine.expand_instances([FOOD_ALL_SLOTS], now, 4)
        assert [i.instance_id for i in instances] == [
            "care_food:morning",
            "care_food:noon",
            "care_food:evening",
        ]
        assert instances[0].label == "Food (Morning)"
        assert instances[0].action_type == "care_food:morning"

    def test_goal_instances_numbered(self) -> None:
        """Goal definitions emit frequency_count numbered instances."""
        now = datetime(2025, 3, 3, 6, 0, tzinfo=UTC)
        instances = CareEngine.expand_instances([WATER_WEEKLY], now, 4)
        assert [i.instance_id for i in instances] == [
            "care_water_change#1",
            "care_water_change#2",
            "care_water_change#3",
        ]
        assert instances[1].label == "Water change (2/3)"
        assert all(i.slot is None for i in instances)

    def test_single_goal_label_has_no_counter(self) -> None:
        """A count of one keeps the plain title."""
        now = datetime(2025, 3, 3, 6, 0, tzinfo=UTC)
        instances = CareEngine.expand_instances(
            [{const.DATA_ID: "care_water", const.DATA_CARE_TASK_TITLE: "Water"}],
            now,
            4,
        )
        assert [i.label for i in instances] == ["Water"]

    def test_disabled_definitions_skipped(self) -> None:
        """Disabled definitions produce no instances."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        disabled = {**FOOD_MORNING, const.DATA_CARE_TASK_ENABLED: False}
        assert CareEngine.expand_instances([disabled], now, 4) == []

    def test_per_cat_expansion(self) -> None:
        """Per-cat definitions expand once per targeted cat."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        cats = [
            {const.DATA_ID: "c1", const.DATA_CAT_NAME: "Mochi"},
            {const.DATA_ID: "c2", const.DATA_CAT_NAME: "Tofu"},
            {const.DATA_ID: "c3", const.DATA_CAT_NAME: "Kuro"},
        ]
        definition = {
            **FOOD_MORNING,
            const.DATA_CARE_TASK_PER_CAT: True,
            const.DATA_CARE_TASK_TARGET_CAT_IDS: ["c1", "c3"],
        }
        instances = CareEngine.expand_instances([definition], now, 4, cats)
        assert [i.instance_id for i in instances] == [
            "care_food:morning:c1",
            "care_food:morning:c3",
        ]
        assert instances[1].cat_name == "Kuro"

    def test_per_cat_without_cats_is_shared(self) -> None:
        """With no cats registered a per-cat definition stays shared."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        definition = {**FOOD_MORNING, const.DATA_CARE_TASK_PER_CAT: True}
        instances = CareEngine.expand_instances([definition], now, 4, [])
        assert [i.cat_id for i in instances] == [None]

    def test_per_cat_unknown_targets_warn(self, caplog) -> None:
        """Targets that match no registered cat fall back to shared and warn."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        cats = [{const.DATA_ID: "c1", const.DATA_CAT_NAME: "Mochi"}]
        definition = {
            **FOOD_MORNING,
            const.DATA_CARE_TASK_PER_CAT: True,
            const.DATA_CARE_TASK_TARGET_CAT_IDS: ["gone"],
        }
        instances = CareEngine.expand_instances([definition], now, 4, cats)
        assert [i.cat_id for i in instances] == [None]
        assert "targets unknown cats" in caplog.text


# =============================================================================
# TEST: AGGREGATION
# =============================================================================


class TestAggregate:
    """Test expansion plus matching end to end."""

    def test_breakfast_outstanding(self) -> None:
        """08:00 with no logs: one morning instance, not done."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        summary = aggregate([FOOD_MORNING], [], SETTINGS, now)
        assert summary.total == 1
        assert summary.completed == 0
        assert summary.progress == 0.0
        assert summary.current_slot == const.SLOT_MORNING

    def test_breakfast_done(self) -> None:
        """A 07:30 morning log satisfies the morning instance."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        logs = [_log("care_food:morning", datetime(2025, 3, 3, 7, 30, tzinfo=UTC))]
        summary = aggregate([FOOD_MORNING], logs, SETTINGS, now)
        assert summary.total == 1
        assert summary.completed == 1
        assert summary.progress == 1.0
        assert summary.outstanding == []

    def test_legacy_log_matches(self) -> None:
        """Legacy underscore logs satisfy the same slot."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        logs = [_log("care_food_morning", datetime(2025, 3, 3, 7, 30, tzinfo=UTC))]
        assert aggregate([FOOD_MORNING], logs, SETTINGS, now).completed == 1

    def test_slotless_log_counts_for_its_hour(self) -> None:
        """A log without a slot counts for the bucket its time falls in."""
        now = datetime(2025, 3, 3, 12, 0, tzinfo=UTC)
        logs = [_log("care_food", datetime(2025, 3, 3, 11, 30, tzinfo=UTC))]
        summary = aggregate([FOOD_ALL_SLOTS], logs, SETTINGS, now)
        done = {i.slot: i.done for i in summary.instances}
        assert done == {const.SLOT_MORNING: False, const.SLOT_NOON: True}

    def test_yesterdays_log_does_not_count(self) -> None:
        """Slot matching is limited to the active business day."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        logs = [_log("care_food:morning", datetime(2025, 3, 2, 7, 30, tzinfo=UTC))]
        assert aggregate([FOOD_MORNING], logs, SETTINGS, now).completed == 0

    def test_deleted_log_ignored(self) -> None:
        """Soft-deleted logs never satisfy an instance."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        logs = [
            _log(
                "care_food:morning",
                datetime(2025, 3, 3, 7, 30, tzinfo=UTC),
                deleted_at="2025-03-03T07:45:00+00:00",
            )
        ]
        assert aggregate([FOOD_MORNING], logs, SETTINGS, now).completed == 0

    def test_duplicate_logs_do_not_inflate_slots(self) -> None:
        """Slot completion is existence based."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        done_at = datetime(2025, 3, 3, 7, 0, tzinfo=UTC)
        logs = [
            _log("care_food:morning", done_at),
            _log("care_food:morning", done_at + timedelta(minutes=5)),
        ]
        summary = aggregate([FOOD_MORNING], logs, SETTINGS, now)
        assert (summary.total, summary.completed) == (1, 1)

    def test_weekly_goal_partial(self) -> None:
        """Weekly count 3 with two logs this week: 3 total, 2 done."""
        # Wednesday; the week began Monday 2025-03-03 at 04:00
        now = datetime(2025, 3, 5, 10, 0, tzinfo=UTC)
        logs = [
            _log("care_water_change", datetime(2025, 3, 3, 9, 0, tzinfo=UTC)),
            _log("care_water_change", datetime(2025, 3, 4, 18, 0, tzinfo=UTC)),
            _log("care_water_change", datetime(2025, 3, 2, 18, 0, tzinfo=UTC)),
        ]
        summary = aggregate([WATER_WEEKLY], logs, SETTINGS, now)
        assert summary.total == 3
        assert summary.completed == 2
        assert [i.done for i in summary.instances] == [True, True, False]

    def test_goal_completion_capped(self) -> None:
        """Extra logs never push completed past frequency_count."""
        now = datetime(2025, 3, 5, 10, 0, tzinfo=UTC)
        logs = [
            _log("care_water_change", datetime(2025, 3, 4, hour, 0, tzinfo=UTC))
            for hour in range(8, 13)
        ]
        summary = aggregate([WATER_WEEKLY], logs, SETTINGS, now)
        assert (summary.total, summary.completed) == (3, 3)

    def test_before_day_start_is_previous_business_day(self) -> None:
        """04:00 with day start 6 still belongs to yesterday."""
        now = datetime(2025, 3, 3, 4, 0, tzinfo=UTC)
        summary = aggregate(
            [FOOD_MORNING], [], {const.CONF_DAY_START_HOUR: 6}, now
        )
        assert summary.business_date == "2025-03-02"

    def test_late_log_counts_for_previous_business_day(self) -> None:
        """A 01:00 night log belongs to the day that started the evening before."""
        definition = {
            const.DATA_ID: "care_food",
            const.DATA_CARE_TASK_MEAL_SLOTS: [const.SLOT_NIGHT],
        }
        now = datetime(2025, 3, 3, 2, 0, tzinfo=UTC)
        logs = [_log("care_food:night", datetime(2025, 3, 3, 1, 0, tzinfo=UTC))]
        summary = aggregate([definition], logs, {const.CONF_DAY_START_HOUR: 4}, now)
        assert summary.business_date == "2025-03-02"
        assert summary.completed == 1

    def test_per_cat_log_matching(self) -> None:
        """Per-cat instances accept their own cat or cat-less logs."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        cats = [
            {const.DATA_ID: "c1", const.DATA_CAT_NAME: "Mochi"},
            {const.DATA_ID: "c2", const.DATA_CAT_NAME: "Tofu"},
        ]
        definition = {**FOOD_MORNING, const.DATA_CARE_TASK_PER_CAT: True}
        logs = [
            _log(
                "care_food:morning",
                datetime(2025, 3, 3, 7, 0, tzinfo=UTC),
                cat_id="c2",
            )
        ]
        summary = aggregate([definition], logs, SETTINGS, now, cats)
        assert {i.cat_id: i.done for i in summary.instances} == {
            "c1": False,
            "c2": True,
        }

    def test_nothing_due_is_complete(self) -> None:
        """No instances → progress 1.0."""
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        summary = aggregate([], [], SETTINGS, now)
        assert summary.total == 0
        assert summary.progress == 1.0

    def test_invalid_day_start_hour_clamped(self) -> None:
        """Out of range day start hours are clamped instead of raising."""
        now = datetime(2025, 3, 3, 22, 0, tzinfo=UTC)
        summary = aggregate([FOOD_MORNING], [], {const.CONF_DAY_START_HOUR: 99}, now)
        assert summary.business_date == "2025-03-02"

    def test_breakfast_slotless_log(self) -> None:
        """A plain 'breakfast' log at 07:30 satisfies the morning slot."""
        breakfast = {
            const.DATA_ID: "breakfast",
            const.DATA_CARE_TASK_TITLE: "Breakfast",
            const.DATA_CARE_TASK_MEAL_SLOTS: [const.SLOT_MORNING],
        }
        now = datetime(2025, 3, 3, 8, 0, tzinfo=UTC)
        logs = [_log("breakfast", datetime(2025, 3, 3, 7, 30, tzinfo=UTC))]
        summary = aggregate([breakfast], logs, {const.CONF_DAY_START_HOUR: 0}, now)
        assert (summary.total, summary.completed) == (1, 1)
        assert summary.instances[0].instance_id == "breakfast:morning"

    def test_naive_now_is_accepted(self) -> None:
        """A naive `now` takes the default timezone instead of raising."""
        breakfast = {
            const.DATA_ID: "breakfast",
            const.DATA_CARE_TASK_MEAL_SLOTS: [const.SLOT_MORNING],
        }
        logs = [
            {
                const.DATA_CARE_LOG_TYPE: "breakfast",
                const.DATA_CARE_LOG_DONE_AT: "2025-03-03T07:30:00",
            }
        ]
        summary = aggregate(
            [breakfast],
            logs,
            {const.CONF_DAY_START_HOUR: 0},
            datetime(2025, 3, 3, 8, 0),
        )
        assert summary.business_date == "2025-03-03"
        assert summary.completed == 1

    def test_progress_never_decreases_as_logs_are_added(self) -> None:
        """Adding matching logs one by one only moves progress up."""
        now = datetime(2025, 3, 5, 16, 0, tzinfo=UTC)
        incoming = [
            _log("care_food:noon", datetime(2025, 3, 5, 12, 0, tzinfo=UTC)),
            _log("care_water_change", datetime(2025, 3, 3, 9, 0, tzinfo=UTC)),
            _log("care_food:noon", datetime(2025, 3, 5, 12, 30, tzinfo=UTC)),
            _log("care_food", datetime(2025, 3, 5, 7, 0, tzinfo=UTC)),
            _log("care_water_change", datetime(2025, 3, 4, 9, 0, tzinfo=UTC)),
            _log("care_food:evening", datetime(2025, 3, 5, 15, 30, tzinfo=UTC)),
            _log("care_water_change", datetime(2025, 3, 5, 9, 0, tzinfo=UTC)),
            _log("care_water_change", datetime(2025, 3, 5, 10, 0, tzinfo=UTC)),
        ]
        definitions = [FOOD_ALL_SLOTS, WATER_WEEKLY]
        logs: list[dict] = []
        progress = [aggregate(definitions, logs, SETTINGS, now).progress]
        for log in incoming:
            logs.append(log)
            progress.append(aggregate(definitions, logs, SETTINGS, now).progress)

        assert progress == sorted(progress)
        assert progress[0] == 0.0
        assert progress[-1] == 1.0
