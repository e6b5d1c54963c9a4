"""Care Engine - Pure logic for care task expansion and completion matching.

This engine provides stateless, pure Python functions for:
- Parsing care log type strings ("feed:morning", legacy "feed_morning")
- Normalizing raw care task definitions with defensive defaults
- Expanding definitions into slot or goal instances for the business day
- Matching completion logs against instances and counting progress

ARCHITECTURE: This is a pure logic engine with NO Home Assistant state.
All functions are static methods that operate on passed-in data, so the
aggregation can be recomputed on every refresh and tested without mocking.
State management belongs in CareManager and the coordinator.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    as_local,
    clamp_day_start_hour,
    dt_business_date_iso,
    dt_ensure_aware,
    dt_parse,
    dt_period_bounds,
)
from ..utils.math_utils import calculate_progress

if TYPE_CHECKING:
    from ..type_defs import CareLogData, CareTaskDefData, CatData


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class ParsedLogType:
    """A care log type split into its definition id and optional slot."""

    base_id: str
    slot: str | None = None


@dataclass(frozen=True)
class CareTaskDefinition:
    """Normalized care task definition.

    Slot presence takes precedence: a definition with meal slots is never
    treated as count based.
    """

    id: str
    title: str
    enabled: bool = True
    frequency: str = const.DEFAULT_FREQUENCY
    frequency_count: int = const.DEFAULT_FREQUENCY_COUNT
    meal_slots: tuple[str, ...] = ()
    icon: str | None = None
    per_cat: bool = False
    target_cat_ids: tuple[str, ...] = ()

    @property
    def is_slot_based(self) -> bool:
        """Return True when the definition is subdivided into meal slots."""
        return bool(self.meal_slots)


@dataclass(frozen=True)
class CareInstance:
    """One concrete occurrence of a care task for the active period.

    Attributes:
        instance_id: Stable id for this occurrence within the period
        def_id: Source definition id
        label: Display label ("Food (Morning)", "Brush (2/3)")
        action_type: Log type to write when completing this instance
        slot: Meal slot for slot-based instances
        cat_id: Cat for per-cat instances
        cat_name: Display name of that cat
        occurrence: 1-based occurrence number for goal instances
        icon: Icon from the definition
        done: Whether a matching log satisfies the instance
    """

    instance_id: str
    def_id: str
    label: str
    action_type: str
    slot: str | None = None
    cat_id: str | None = None
    cat_name: str | None = None
    occurrence: int | None = None
    icon: str | None = None
    done: bool = False

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation for sensor attributes."""
        return {
            "instance_id": self.instance_id,
            "def_id": self.def_id,
            "label": self.label,
            "action_type": self.action_type,
            "slot": self.slot,
            "cat_id": self.cat_id,
            "done": self.done,
        }


@dataclass
class CareSummary:
    """Result of one aggregation pass."""

    business_date: str
    current_slot: str
    instances: list[CareInstance] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Return the number of instances due so far."""
        return len(self.instances)

    @property
    def completed(self) -> int:
        """Return the number of satisfied instances."""
        return sum(1 for instance in self.instances if instance.done)

    @property
    def progress(self) -> float:
        """Return completed/total, 1.0 when nothing is due."""
        return calculate_progress(self.completed, self.total)

    @property
    def outstanding(self) -> list[CareInstance]:
        """Return instances still waiting for a log."""
        return [instance for instance in self.instances if not instance.done]


@dataclass
class _ActiveLog:
    """Care log reduced to the fields matching needs (engine-internal)."""

    parsed: ParsedLogType
    cat_id: str | None
    done_at: datetime


# =============================================================================
# CARE ENGINE
# =============================================================================


class CareEngine:
    """Pure logic engine for care task instances and completion state.

    All methods are static - no instance state.
    """

    # =========================================================================
    # PARSING AND NORMALIZATION
    # =========================================================================

    @staticmethod
    def parse_log_type(
        raw_type: str | None, known_def_ids: Iterable[str] | None = None
    ) -> ParsedLogType:
        """Parse a care log type into (base_id, slot).

        Accepts "{defId}:{slot}" and the legacy "{defId}_{slot}". A type equal
        to a known definition id is never split, so "care_night" stays intact
        when it is itself a definition.

        Examples:
            parse_log_type("feed:morning") → ParsedLogType("feed", "morning")
            parse_log_type("feed_night") → ParsedLogType("feed", "night")
            parse_log_type("water") → ParsedLogType("water", None)
        """
        if not raw_type or not isinstance(raw_type, str):
            return ParsedLogType(base_id="")

        if known_def_ids is not None and raw_type in known_def_ids:
            return ParsedLogType(base_id=raw_type)

        for separator in (const.LOG_TYPE_SEPARATOR, const.LOG_TYPE_LEGACY_SEPARATOR):
            base_id, found, suffix = raw_type.rpartition(separator)
            if found and base_id and suffix in const.SLOT_ORDER:
                return ParsedLogType(base_id=base_id, slot=suffix)

        return ParsedLogType(base_id=raw_type)

    @staticmethod
    def format_log_type(def_id: str, slot: str | None = None) -> str:
        """Build the log type written when an instance is completed."""
        if slot:
            return f"{def_id}{const.LOG_TYPE_SEPARATOR}{slot}"
        return def_id

    @staticmethod
    def normalize_definition(
        raw: Mapping[str, Any] | CareTaskDefinition,
    ) -> CareTaskDefinition:
        """Return a CareTaskDefinition with defensive defaults applied.

        - unknown or missing frequency → daily
        - missing, invalid or < 1 frequency_count → 1
        - unknown slots dropped, duplicates removed, fixed slot order
        """
        if isinstance(raw, CareTaskDefinition):
            return raw

        def_id = str(raw.get(const.DATA_ID) or "")

        frequency = raw.get(const.DATA_CARE_TASK_FREQUENCY)
        if frequency not in const.FREQUENCY_OPTIONS:
            if frequency is not None:
                const.LOGGER.warning(
                    "Care task '%s' has unknown frequency '%s', using daily",
                    def_id,
                    frequency,
                )
            frequency = const.DEFAULT_FREQUENCY

        try:
            frequency_count = int(
                raw.get(const.DATA_CARE_TASK_FREQUENCY_COUNT)
                or const.DEFAULT_FREQUENCY_COUNT
            )
        except (TypeError, ValueError):
            frequency_count = const.DEFAULT_FREQUENCY_COUNT
        frequency_count = max(frequency_count, const.DEFAULT_FREQUENCY_COUNT)

        raw_slots = raw.get(const.DATA_CARE_TASK_MEAL_SLOTS) or ()
        if isinstance(raw_slots, str):
            raw_slots = (raw_slots,)
        meal_slots = tuple(slot for slot in const.SLOT_ORDER if slot in raw_slots)

        return CareTaskDefinition(
            id=def_id,
            title=str(raw.get(const.DATA_CARE_TASK_TITLE) or def_id),
            enabled=bool(raw.get(const.DATA_CARE_TASK_ENABLED, True)),
            frequency=frequency,
            frequency_count=frequency_count,
            meal_slots=meal_slots,
            icon=raw.get(const.DATA_CARE_TASK_ICON),
            per_cat=bool(raw.get(const.DATA_CARE_TASK_PER_CAT, False)),
            target_cat_ids=tuple(raw.get(const.DATA_CARE_TASK_TARGET_CAT_IDS) or ()),
        )

    # =========================================================================
    # SLOTS
    # =========================================================================

    @staticmethod
    def current_slot(hour: int) -> str:
        """Return the meal slot bucket for an hour of the day.

        05-11 morning, 11-15 noon, 15-20 evening, anything else night.
        """
        if const.SLOT_START_HOURS[const.SLOT_MORNING] <= hour < (
            const.SLOT_START_HOURS[const.SLOT_NOON]
        ):
            return const.SLOT_MORNING
        if const.SLOT_START_HOURS[const.SLOT_NOON] <= hour < (
            const.SLOT_START_HOURS[const.SLOT_EVENING]
        ):
            return const.SLOT_NOON
        if const.SLOT_START_HOURS[const.SLOT_EVENING] <= hour < (
            const.SLOT_START_HOURS[const.SLOT_NIGHT]
        ):
            return const.SLOT_EVENING
        return const.SLOT_NIGHT

    @staticmethod
    def slots_due(meal_slots: Iterable[str], hour: int) -> list[str]:
        """Return the configured slots up to and including the current slot."""
        current_index = const.SLOT_ORDER.index(CareEngine.current_slot(hour))
        return [
            slot
            for slot in const.SLOT_ORDER
            if slot in meal_slots and const.SLOT_ORDER.index(slot) <= current_index
        ]

    # =========================================================================
    # EXPANSION
    # =========================================================================

    @staticmethod
    def expand_instances(
        definitions: Iterable[Mapping[str, Any] | CareTaskDefinition],
        now: datetime,
        day_start_hour: int,
        cats: Iterable[CatData | Mapping[str, Any]] | None = None,
    ) -> list[CareInstance]:
        """Expand enabled definitions into instances for the active period.

        Slot-based definitions emit one instance per slot whose bucket has
        begun; later slots stay invisible until their bucket starts.
        Goal-based definitions emit `frequency_count` instances for the
        current day/week/month regardless of time of day. Per-cat definitions
        emit their instances once per targeted cat.

        Args:
            definitions: Raw definition dicts or normalized definitions
            now: Current moment in household local time
            day_start_hour: Hour (0-23) at which a new business day begins
            cats: Optional cats ({id, name}) for per-cat expansion

        Returns:
            Instances in definition order, all with done=False.
        """
        cat_list = [
            (str(cat.get(const.DATA_ID)), cat.get(const.DATA_CAT_NAME))
            for cat in (cats or ())
            if cat.get(const.DATA_ID)
        ]
        instances: list[CareInstance] = []

        for raw in definitions:
            definition = CareEngine.normalize_definition(raw)
            if not definition.enabled or not definition.id:
                continue

            for cat_id, cat_name in CareEngine._target_cats(definition, cat_list):
                if definition.is_slot_based:
                    instances.extend(
                        CareEngine._expand_slots(definition, now, cat_id, cat_name)
                    )
                else:
                    instances.extend(
                        CareEngine._expand_goal(definition, cat_id, cat_name)
                    )

        const.LOGGER.debug(
            "Expanded %s care instances for business day %s",
            len(instances),
            dt_business_date_iso(now, day_start_hour),
        )
        return instances

    @staticmethod
    def _target_cats(
        definition: CareTaskDefinition, cats: list[tuple[str, Any]]
    ) -> list[tuple[str | None, str | None]]:
        """Return the (cat_id, cat_name) pairs a definition expands for."""
        if not definition.per_cat or not cats:
            return [(None, None)]
        targets = [
            (cat_id, cat_name)
            for cat_id, cat_name in cats
            if not definition.target_cat_ids or cat_id in definition.target_cat_ids
        ]
        if not targets:
            const.LOGGER.warning(
                "Care task '%s' targets unknown cats %s; expanding as shared",
                definition.id,
                definition.target_cat_ids,
            )
            return [(None, None)]
        return targets

    @staticmethod
    def _expand_slots(
        definition: CareTaskDefinition,
        now: datetime,
        cat_id: str | None,
        cat_name: str | None,
    ) -> list[CareInstance]:
        """Emit slot instances up to the current slot."""
        instances = []
        for slot in CareEngine.slots_due(definition.meal_slots, now.hour):
            action_type = CareEngine.format_log_type(definition.id, slot)
            instance_id = f"{action_type}:{cat_id}" if cat_id else action_type
            instances.append(
                CareInstance(
                    instance_id=instance_id,
                    def_id=definition.id,
                    label=f"{definition.title} ({const.SLOT_LABELS[slot]})",
                    action_type=action_type,
                    slot=slot,
                    cat_id=cat_id,
                    cat_name=cat_name,
                    icon=definition.icon,
                )
            )
        return instances

    @staticmethod
    def _expand_goal(
        definition: CareTaskDefinition,
        cat_id: str | None,
        cat_name: str | None,
    ) -> list[CareInstance]:
        """Emit frequency_count goal instances for the period."""
        count = definition.frequency_count
        instances = []
        for occurrence in range(1, count + 1):
            base_id = f"{definition.id}#{occurrence}"
            label = (
                f"{definition.title} ({occurrence}/{count})"
                if count > 1
                else definition.title
            )
            instances.append(
                CareInstance(
                    instance_id=f"{base_id}:{cat_id}" if cat_id else base_id,
                    def_id=definition.id,
                    label=label,
                    action_type=definition.id,
                    cat_id=cat_id,
                    cat_name=cat_name,
                    occurrence=occurrence,
                    icon=definition.icon,
                )
            )
        return instances

    # =========================================================================
    # MATCHING
    # =========================================================================

    @staticmethod
    def active_logs(
        logs: Iterable[CareLogData | Mapping[str, Any]],
        now: datetime,
        known_def_ids: Iterable[str] | None = None,
    ) -> list[_ActiveLog]:
        """Parse non-deleted logs once, dropping rows without a usable timestamp."""
        now = dt_ensure_aware(now)
        known = set(known_def_ids) if known_def_ids is not None else None
        active: list[_ActiveLog] = []
        for log in logs:
            if log.get(const.DATA_DELETED_AT):
                continue
            done_at = dt_parse(log.get(const.DATA_CARE_LOG_DONE_AT))
            if done_at is None:
                const.LOGGER.debug(
                    "Skipping care log '%s' without a valid done_at",
                    log.get(const.DATA_ID),
                )
                continue
            done_at = as_local(done_at, now.tzinfo)  # type: ignore[arg-type]
            active.append(
                _ActiveLog(
                    parsed=CareEngine.parse_log_type(
                        log.get(const.DATA_CARE_LOG_TYPE), known
                    ),
                    cat_id=log.get(const.DATA_CARE_LOG_CAT_ID) or None,
                    done_at=done_at,
                )
            )
        return active

    @staticmethod
    def match_completions(
        instances: Iterable[CareInstance],
        logs: Iterable[CareLogData | Mapping[str, Any]],
        now: datetime,
        day_start_hour: int,
        definitions: Iterable[Mapping[str, Any] | CareTaskDefinition] = (),
    ) -> CareSummary:
        """Mark instances done from completion logs.

        Slot instances are existence based within the business day: any
        matching log satisfies the slot. A log without a slot suffix counts
        for the slot its timestamp falls in. Goal instances are count based
        within their period window: each log satisfies one instance, up to
        `frequency_count`. Per-cat instances accept logs for that cat or logs
        with no cat.

        Args:
            instances: Output of expand_instances
            logs: Care logs (soft-deleted rows are ignored)
            now: Current moment in household local time
            day_start_hour: Hour (0-23) at which a new business day begins
            definitions: Definitions used for frequency windows and id parsing

        Returns:
            CareSummary with done flags set.
        """
        now = dt_ensure_aware(now)
        hour = clamp_day_start_hour(day_start_hour)
        normalized = {
            definition.id: definition
            for definition in map(CareEngine.normalize_definition, definitions)
        }
        instance_list = list(instances)
        known_ids = set(normalized) | {inst.def_id for inst in instance_list}
        active = CareEngine.active_logs(logs, now, known_ids)

        day_start, day_end = dt_period_bounds(const.FREQUENCY_DAILY, now, hour)
        goal_budget: dict[tuple[str, str | None], int] = {}
        matched: list[CareInstance] = []

        for instance in instance_list:
            if instance.slot is not None:
                done = any(
                    CareEngine._matches_slot(instance, log)
                    and day_start <= log.done_at < day_end
                    for log in active
                )
            else:
                key = (instance.def_id, instance.cat_id)
                if key not in goal_budget:
                    definition = normalized.get(instance.def_id)
                    frequency = (
                        definition.frequency if definition else const.DEFAULT_FREQUENCY
                    )
                    start, end = dt_period_bounds(frequency, now, hour)
                    goal_budget[key] = sum(
                        1
                        for log in active
                        if log.parsed.base_id == instance.def_id
                        and log.parsed.slot is None
                        and CareEngine._matches_cat(instance, log)
                        and start <= log.done_at < end
                    )
                done = goal_budget[key] > 0
                if done:
                    goal_budget[key] -= 1
            matched.append(replace(instance, done=done))

        summary = CareSummary(
            business_date=dt_business_date_iso(now, hour),
            current_slot=CareEngine.current_slot(now.hour),
            instances=matched,
        )
        const.LOGGER.debug(
            "Care completion for %s: %s/%s",
            summary.business_date,
            summary.completed,
            summary.total,
        )
        return summary

    @staticmethod
    def _matches_cat(instance: CareInstance, log: _ActiveLog) -> bool:
        """Per-cat instances accept their cat or cat-less legacy logs."""
        return instance.cat_id is None or log.cat_id in (None, instance.cat_id)

    @staticmethod
    def _matches_slot(instance: CareInstance, log: _ActiveLog) -> bool:
        """Return True when a log satisfies a slot instance."""
        if log.parsed.base_id != instance.def_id:
            return False
        if not CareEngine._matches_cat(instance, log):
            return False
        log_slot = log.parsed.slot or CareEngine.current_slot(log.done_at.hour)
        return log_slot == instance.slot

    # =========================================================================
    # AGGREGATION
    # =========================================================================

    @staticmethod
    def aggregate(
        definitions: Iterable[Mapping[str, Any] | CareTaskDefinition],
        logs: Iterable[CareLogData | Mapping[str, Any]],
        settings: Mapping[str, Any],
        now: datetime,
        cats: Iterable[CatData | Mapping[str, Any]] | None = None,
    ) -> CareSummary:
        """Expand definitions and match logs in one pass.

        Every collaborator is passed in explicitly; nothing is read from
        global state, so the same inputs always give the same summary.

        Args:
            definitions: Care task definitions (raw dicts or normalized)
            logs: Care logs for the household
            settings: Mapping providing `day_start_hour`
            now: Current moment in household local time
            cats: Optional cats for per-cat expansion

        Returns:
            CareSummary for the active business day.
        """
        now = dt_ensure_aware(now)
        definition_list = [
            CareEngine.normalize_definition(raw) for raw in definitions
        ]
        day_start_hour = clamp_day_start_hour(
            settings.get(const.CONF_DAY_START_HOUR, const.DEFAULT_DAY_START_HOUR)
        )
        instances = CareEngine.expand_instances(
            definition_list, now, day_start_hour, cats
        )
        return CareEngine.match_completions(
            instances, logs, now, day_start_hour, definition_list
        )


def aggregate(
    definitions: Iterable[Mapping[str, Any] | CareTaskDefinition],
    logs: Iterable[CareLogData | Mapping[str, Any]],
    settings: Mapping[str, Any],
    now: datetime,
    cats: Iterable[CatData | Mapping[str, Any]] | None = None,
) -> CareSummary:
    """Compute the care summary for the active business day."""
    return CareEngine.aggregate(definitions, logs, settings, now, cats)
