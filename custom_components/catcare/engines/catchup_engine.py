"""Catch-Up Engine - Severity-ranked merge of outstanding care and alerts.

Each source (care task instances, observations, inventory, incidents, unseen
photos) contributes items independently with a source-specific severity.
`merge` concatenates them and applies a descending stable sort so equal
severities keep source-insertion order. Nothing is deduplicated across
sources; the photo builder emits at most one item per cat.

ARCHITECTURE: Pure functions over passed-in records. No Home Assistant
state, no I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from itertools import chain
import math
from typing import Any

from .. import const
from ..utils.dt_utils import dt_ensure_aware, dt_parse
from .care_engine import CareInstance, CareSummary

# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class CatchUpItem:
    """Transient, computed catch-up entry. Never persisted."""

    id: str
    item_type: str
    title: str
    body: str
    severity: int
    status: str
    cat_id: str | None = None
    action_type: str | None = None
    meta: str | None = None
    icon: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation for sensor attributes."""
        return {
            "id": self.id,
            "item_type": self.item_type,
            "title": self.title,
            "body": self.body,
            "severity": self.severity,
            "status": self.status,
            "cat_id": self.cat_id,
            "action_type": self.action_type,
            "meta": self.meta,
            "icon": self.icon,
        }


@dataclass
class CatchUpResult:
    """Ranked catch-up list plus display helpers."""

    items: list[CatchUpItem] = field(default_factory=list)
    summary: str = const.LABEL_SUMMARY_ALL_CLEAR
    display_limit: int = const.CATCHUP_DISPLAY_LIMIT

    @property
    def display_items(self) -> list[CatchUpItem]:
        """Return the items shown in the compact panel."""
        return self.items[: self.display_limit]

    @property
    def remaining_count(self) -> int:
        """Return how many ranked items fall outside the display window."""
        return max(0, len(self.items) - self.display_limit)

    @property
    def tasks(self) -> list[CatchUpItem]:
        """Return only care task items, in rank order."""
        return [i for i in self.items if i.item_type == const.CATCHUP_TYPE_TASK]

    @property
    def alerts(self) -> list[CatchUpItem]:
        """Return only non-task items, in rank order."""
        return [i for i in self.items if i.item_type != const.CATCHUP_TYPE_TASK]


# =============================================================================
# CATCH-UP ENGINE
# =============================================================================


class CatchUpEngine:
    """Pure builders for each catch-up source plus merge/summary."""

    @staticmethod
    def cat_names(
        cats: Iterable[Mapping[str, Any]] | Mapping[str, Mapping[str, Any]] | None,
    ) -> dict[str, str]:
        """Return {cat_id: name} for a list of cats or an id-keyed bucket."""
        if not cats:
            return {}
        records = cats.values() if isinstance(cats, Mapping) else cats
        return {
            str(cat[const.DATA_ID]): str(cat.get(const.DATA_CAT_NAME) or "")
            for cat in records
            if cat.get(const.DATA_ID)
        }

    # =========================================================================
    # SOURCE BUILDERS
    # =========================================================================

    @staticmethod
    def task_items(summary: CareSummary) -> list[CatchUpItem]:
        """Build items for outstanding care instances.

        Current slot → 85 (warn), earlier slot → 75 (info), goal → 70 (info).
        """
        outstanding = summary.outstanding
        remaining: dict[tuple[str, str | None], int] = {}
        for instance in outstanding:
            if instance.slot is None:
                key = (instance.def_id, instance.cat_id)
                remaining[key] = remaining.get(key, 0) + 1

        items = []
        for instance in outstanding:
            items.append(
                CatchUpEngine._task_item(
                    instance,
                    summary.current_slot,
                    remaining.get((instance.def_id, instance.cat_id), 0),
                )
            )
        return items

    @staticmethod
    def _task_item(
        instance: CareInstance, current_slot: str, goal_remaining: int
    ) -> CatchUpItem:
        """Build one task item."""
        meta = (
            f"{instance.cat_name or const.LABEL_UNKNOWN_CAT}"
            f"{const.LABEL_SUMMARY_JOIN}{const.LABEL_CARE}"
            if instance.cat_id
            else const.LABEL_CARE
        )

        if instance.slot is None:
            severity = const.SEVERITY_TASK_GOAL
            status = const.CATCHUP_STATUS_INFO
            body = const.LABEL_TASK_GOAL_FMT.format(remaining=goal_remaining)
        elif instance.slot == current_slot:
            severity = const.SEVERITY_TASK_CURRENT_SLOT
            status = const.CATCHUP_STATUS_WARN
            slot_label = const.SLOT_LABELS[instance.slot]
            body = (
                const.LABEL_TASK_CURRENT_SLOT_CAT_FMT.format(
                    slot=slot_label,
                    cat=instance.cat_name or const.LABEL_UNKNOWN_CAT,
                )
                if instance.cat_id
                else const.LABEL_TASK_CURRENT_SLOT_FMT.format(slot=slot_label)
            )
        else:
            severity = const.SEVERITY_TASK_PAST_SLOT
            status = const.CATCHUP_STATUS_INFO
            body = const.LABEL_TASK_PAST_SLOT

        return CatchUpItem(
            id=instance.instance_id,
            item_type=const.CATCHUP_TYPE_TASK,
            title=instance.label,
            body=body,
            severity=severity,
            status=status,
            cat_id=instance.cat_id,
            action_type=instance.action_type,
            meta=meta,
            icon=instance.icon,
            payload={
                "def_id": instance.def_id,
                "slot": instance.slot,
                "occurrence": instance.occurrence,
            },
        )

    @staticmethod
    def observation_items(
        observations: Iterable[Mapping[str, Any]],
        notice_defs: Mapping[str, Mapping[str, Any]] | None,
        cats: Mapping[str, str],
    ) -> list[CatchUpItem]:
        """Build items for abnormal, unacknowledged observations.

        When notice definitions are known, only observations of enabled
        definitions count. A value is normal when it equals the definition's
        first choice or one of the common normal answers.
        """
        items = []
        for obs in observations:
            if obs.get(const.DATA_OBSERVATION_ACKNOWLEDGED_AT):
                continue

            obs_type = obs.get(const.DATA_OBSERVATION_TYPE)
            notice_def = (notice_defs or {}).get(obs_type) if obs_type else None
            if notice_defs and (
                notice_def is None
                or not notice_def.get(const.DATA_NOTICE_ENABLED, True)
            ):
                continue

            value = str(obs.get(const.DATA_OBSERVATION_VALUE) or "")
            if CatchUpEngine.is_normal_observation(value, notice_def):
                continue

            cat_id = obs.get(const.DATA_OBSERVATION_CAT_ID)
            cat_name = cats.get(cat_id, const.LABEL_UNKNOWN_CAT)
            body = f"{cat_name}: {value}"
            if obs.get(const.DATA_OBSERVATION_NOTES):
                body = (
                    f"{body}{const.LABEL_SUMMARY_JOIN}"
                    f"{const.LABEL_INVENTORY_MEMO_FMT.format(memo=obs[const.DATA_OBSERVATION_NOTES])}"
                )

            items.append(
                CatchUpItem(
                    id=str(obs.get(const.DATA_ID)),
                    item_type=const.CATCHUP_TYPE_NOTICE,
                    title=(notice_def or {}).get(const.DATA_NOTICE_TITLE)
                    or const.LABEL_NOTICE_FALLBACK_TITLE,
                    body=body,
                    severity=const.SEVERITY_OBSERVATION,
                    status=const.CATCHUP_STATUS_DANGER,
                    cat_id=cat_id,
                    meta=f"{cat_name}{const.LABEL_SUMMARY_JOIN}{const.LABEL_HEALTH}",
                    payload={
                        "observation_id": obs.get(const.DATA_ID),
                        "value": value,
                    },
                )
            )
        return items

    @staticmethod
    def is_normal_observation(
        value: str, notice_def: Mapping[str, Any] | None
    ) -> bool:
        """Return True when an observation value needs no attention."""
        choices = (notice_def or {}).get(const.DATA_NOTICE_CHOICES) or []
        if choices and value == choices[0]:
            return True
        return value.strip().lower() in const.OBSERVATION_NORMAL_VALUES

    @staticmethod
    def inventory_days_left(item: Mapping[str, Any], now: datetime) -> int:
        """Return estimated days of stock left, never negative."""
        try:
            range_max = int(
                item.get(const.DATA_INVENTORY_RANGE_MAX)
                or const.DEFAULT_INVENTORY_RANGE_MAX_DAYS
            )
        except (TypeError, ValueError):
            range_max = const.DEFAULT_INVENTORY_RANGE_MAX_DAYS

        last_bought = dt_parse(item.get(const.DATA_INVENTORY_LAST_BOUGHT))
        if last_bought is None:
            return range_max

        elapsed = dt_ensure_aware(now) - last_bought
        elapsed_days = math.floor(elapsed.total_seconds() / 86400)
        return max(0, range_max - elapsed_days)

    @staticmethod
    def inventory_items(
        inventory: Iterable[Mapping[str, Any]],
        now: datetime,
        urgent_days: int = const.DEFAULT_INVENTORY_URGENT_DAYS,
        critical_days: int = const.DEFAULT_INVENTORY_CRITICAL_DAYS,
    ) -> list[CatchUpItem]:
        """Build low-stock items.

        Explicit stock level wins: empty → 80 (danger), low → 70 (warn).
        Otherwise days left ≤ critical → 75 (danger), ≤ urgent → 65 (warn).
        """
        items = []
        for item in inventory:
            if item.get(const.DATA_DELETED_AT):
                continue
            if item.get(const.DATA_INVENTORY_ALERT_ENABLED) is False:
                continue

            days_left = CatchUpEngine.inventory_days_left(item, now)
            stock_level = item.get(const.DATA_INVENTORY_STOCK_LEVEL)

            if stock_level == const.STOCK_LEVEL_EMPTY:
                severity, status = (
                    const.SEVERITY_INVENTORY_EMPTY,
                    const.CATCHUP_STATUS_DANGER,
                )
            elif stock_level == const.STOCK_LEVEL_LOW:
                severity, status = (
                    const.SEVERITY_INVENTORY_LOW,
                    const.CATCHUP_STATUS_WARN,
                )
            elif days_left <= critical_days:
                severity, status = (
                    const.SEVERITY_INVENTORY_CRITICAL,
                    const.CATCHUP_STATUS_DANGER,
                )
            elif days_left <= urgent_days:
                severity, status = (
                    const.SEVERITY_INVENTORY_URGENT,
                    const.CATCHUP_STATUS_WARN,
                )
            else:
                continue

            body_parts = [const.LABEL_INVENTORY_BODY_FMT.format(days=days_left)]
            if item.get(const.DATA_INVENTORY_PURCHASE_MEMO):
                body_parts.append(
                    const.LABEL_INVENTORY_MEMO_FMT.format(
                        memo=item[const.DATA_INVENTORY_PURCHASE_MEMO]
                    )
                )

            label = item.get(const.DATA_INVENTORY_LABEL) or item.get(const.DATA_ID)
            items.append(
                CatchUpItem(
                    id=str(item.get(const.DATA_ID)),
                    item_type=const.CATCHUP_TYPE_INVENTORY,
                    title=const.LABEL_INVENTORY_TITLE_FMT.format(label=label),
                    body=const.LABEL_SUMMARY_JOIN.join(body_parts),
                    severity=severity,
                    status=status,
                    payload={"item_id": item.get(const.DATA_ID), "days_left": days_left},
                )
            )
        return items

    @staticmethod
    def incident_items(
        incidents: Iterable[Mapping[str, Any]], cats: Mapping[str, str]
    ) -> list[CatchUpItem]:
        """Build items for incidents that are not resolved (severity 100)."""
        items = []
        for incident in incidents:
            if incident.get(const.DATA_INCIDENT_STATUS) == const.INCIDENT_STATUS_RESOLVED:
                continue
            cat_id = incident.get(const.DATA_INCIDENT_CAT_ID)
            cat_name = cats.get(cat_id, const.LABEL_UNKNOWN_CAT)
            created_at = dt_parse(incident.get(const.DATA_CREATED_AT))
            items.append(
                CatchUpItem(
                    id=str(incident.get(const.DATA_ID)),
                    item_type=const.CATCHUP_TYPE_INCIDENT,
                    title=const.LABEL_INCIDENT_TITLE_FMT.format(
                        cat=cat_name,
                        incident_type=incident.get(const.DATA_INCIDENT_TYPE),
                    ),
                    body=created_at.date().isoformat() if created_at else "",
                    severity=const.SEVERITY_INCIDENT,
                    status=const.CATCHUP_STATUS_DANGER,
                    cat_id=cat_id,
                    meta=f"{cat_name}{const.LABEL_SUMMARY_JOIN}{const.LABEL_HEALTH}",
                    payload={
                        "incident_id": incident.get(const.DATA_ID),
                        "status": incident.get(const.DATA_INCIDENT_STATUS),
                    },
                )
            )
        return items

    @staticmethod
    def photo_items(
        cats: Iterable[Mapping[str, Any]], last_seen_photo_at: str | None
    ) -> list[CatchUpItem]:
        """Build one item per cat with photos newer than last_seen_photo_at."""
        last_seen = dt_parse(last_seen_photo_at or const.DEFAULT_LAST_SEEN_PHOTO_AT)
        items = []
        for cat in cats:
            cat_id = cat.get(const.DATA_ID)
            if not cat_id:
                continue
            unseen = []
            for image in cat.get(const.DATA_CAT_IMAGES) or []:
                created_at = dt_parse(image.get(const.DATA_CREATED_AT))
                if created_at is not None and last_seen is not None and (
                    created_at > last_seen
                ):
                    unseen.append(created_at)
            if not unseen:
                continue

            cat_name = cat.get(const.DATA_CAT_NAME) or const.LABEL_UNKNOWN_CAT
            items.append(
                CatchUpItem(
                    id=f"photo-{cat_id}",
                    item_type=const.CATCHUP_TYPE_NOTICE,
                    title=const.LABEL_PHOTOS_TITLE_FMT.format(cat=cat_name),
                    body=const.LABEL_PHOTOS_BODY_FMT.format(count=len(unseen)),
                    severity=const.SEVERITY_UNSEEN_PHOTOS,
                    status=const.CATCHUP_STATUS_INFO,
                    cat_id=cat_id,
                    payload={
                        "unseen_count": len(unseen),
                        "latest": max(unseen).isoformat(),
                    },
                )
            )
        return items

    # =========================================================================
    # MERGE AND SUMMARY
    # =========================================================================

    @staticmethod
    def merge(*sources: Iterable[CatchUpItem]) -> list[CatchUpItem]:
        """Concatenate sources and sort by descending severity.

        `sorted` is stable, so ties keep source-insertion order.
        """
        return sorted(chain.from_iterable(sources), key=lambda item: -item.severity)

    @staticmethod
    def summarize(items: Iterable[CatchUpItem]) -> str:
        """Return the one-line summary for a ranked list."""
        abnormal = urgent = 0
        for item in items:
            if item.severity >= const.SUMMARY_ABNORMAL_MIN_SEVERITY:
                abnormal += 1
            elif item.severity >= const.ALERT_SEVERITY_THRESHOLD:
                urgent += 1

        parts = []
        if abnormal:
            parts.append(const.LABEL_SUMMARY_ABNORMAL_FMT.format(count=abnormal))
        if urgent:
            parts.append(const.LABEL_SUMMARY_URGENT_FMT.format(count=urgent))
        return const.LABEL_SUMMARY_JOIN.join(parts) or const.LABEL_SUMMARY_ALL_CLEAR

    @staticmethod
    def build(
        care_summary: CareSummary,
        now: datetime,
        settings: Mapping[str, Any] | None = None,
        *,
        cats: Iterable[Mapping[str, Any]] = (),
        observations: Iterable[Mapping[str, Any]] = (),
        notice_defs: Mapping[str, Mapping[str, Any]] | None = None,
        inventory: Iterable[Mapping[str, Any]] = (),
        incidents: Iterable[Mapping[str, Any]] = (),
        last_seen_photo_at: str | None = None,
    ) -> CatchUpResult:
        """Build the ranked catch-up list from every source.

        Args:
            care_summary: Output of CareEngine.aggregate
            now: Current moment in household local time
            settings: Inventory thresholds and alert feature flags
            cats: Cats with their images
            observations: Recorded observations
            notice_defs: Notice definitions keyed by id
            inventory: Inventory items
            incidents: Incidents
            last_seen_photo_at: ISO timestamp photos were last reviewed

        Returns:
            CatchUpResult with every item ranked by severity.
        """
        now = dt_ensure_aware(now)
        settings = settings or {}
        cat_list = list(cats)
        names = CatchUpEngine.cat_names(cat_list)

        incident_source: list[CatchUpItem] = []
        if settings.get(
            const.CONF_ENABLE_INCIDENT_ALERTS, const.DEFAULT_ENABLE_INCIDENT_ALERTS
        ):
            incident_source = CatchUpEngine.incident_items(incidents, names)

        photo_source: list[CatchUpItem] = []
        if settings.get(
            const.CONF_ENABLE_PHOTO_ALERTS, const.DEFAULT_ENABLE_PHOTO_ALERTS
        ):
            photo_source = CatchUpEngine.photo_items(cat_list, last_seen_photo_at)

        alert_source = [
            item
            for item in chain(
                CatchUpEngine.observation_items(observations, notice_defs, names),
                CatchUpEngine.inventory_items(
                    inventory,
                    now,
                    settings.get(
                        const.CONF_INVENTORY_URGENT_DAYS,
                        const.DEFAULT_INVENTORY_URGENT_DAYS,
                    ),
                    settings.get(
                        const.CONF_INVENTORY_CRITICAL_DAYS,
                        const.DEFAULT_INVENTORY_CRITICAL_DAYS,
                    ),
                ),
            )
            if item.severity >= const.ALERT_SEVERITY_THRESHOLD
        ]

        ranked = CatchUpEngine.merge(
            incident_source,
            alert_source,
            photo_source,
            CatchUpEngine.task_items(care_summary),
        )
        result = CatchUpResult(items=ranked, summary=CatchUpEngine.summarize(ranked))
        const.LOGGER.debug(
            "Catch-up built: %s items (%s)", len(result.items), result.summary
        )
        return result
