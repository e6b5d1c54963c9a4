"""Type definitions for CatCare data structures.

TypedDicts describe the STATIC shape of stored records (keys fixed at design
time). Buckets keyed by record id stay `dict[str, Any]` where keys are only
known at runtime.

IMPORTANT: This file must NOT import from coordinator.py or any module that
imports the coordinator, to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Stored data written by older
versions or by hand may miss keys; engines read with `.get()` defaults.
"""

from typing import Any, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

CatId = str  # UUID string
CareTaskId = str  # UUID or slug ("care_food")
CareLogId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"


# =============================================================================
# Household Records
# =============================================================================


class CareTaskDefData(TypedDict):
    """Household-level recurring care task template."""

    id: CareTaskId
    title: str
    enabled: bool
    frequency: str  # daily | weekly | monthly
    frequency_count: NotRequired[int | None]
    meal_slots: NotRequired[list[str]]
    icon: NotRequired[str | None]
    per_cat: NotRequired[bool]
    target_cat_ids: NotRequired[list[CatId]]


class CareLogData(TypedDict):
    """Immutable completion record; soft-deleted via deleted_at."""

    id: CareLogId
    type: str  # "{defId}", "{defId}:{slot}" or legacy "{defId}_{slot}"
    cat_id: CatId | None
    done_at: ISODatetime
    notes: NotRequired[str | None]
    images: NotRequired[list[str] | None]
    done_by: NotRequired[str | None]
    deleted_at: NotRequired[ISODatetime | None]


class CatImageData(TypedDict):
    """Photo reference attached to a cat."""

    id: str
    storage_path: str
    created_at: ISODatetime


class CatData(TypedDict):
    """A cat in the household."""

    id: CatId
    name: str
    images: list[CatImageData]


class NoticeDefData(TypedDict):
    """Observation template; the first choice is the normal answer."""

    id: str
    title: str
    enabled: bool
    choices: list[str]


class ObservationData(TypedDict):
    """A recorded observation about a cat."""

    id: str
    cat_id: CatId
    type: str  # NoticeDefData id
    value: str
    notes: NotRequired[str | None]
    recorded_at: ISODatetime
    acknowledged_at: NotRequired[ISODatetime | None]


class InventoryItemData(TypedDict):
    """Consumable supply tracked for low-stock alerts."""

    id: str
    label: str
    range_max: int
    last_bought: NotRequired[ISODatetime | None]
    stock_level: str  # full | half | low | empty
    alert_enabled: bool
    purchase_memo: NotRequired[str | None]
    deleted_at: NotRequired[ISODatetime | None]


class IncidentData(TypedDict):
    """Health incident (vomiting, injury, ...) being watched."""

    id: str
    cat_id: CatId
    type: str
    status: str  # watching | hospital | resolved
    note: NotRequired[str | None]
    created_at: ISODatetime
    resolved_at: NotRequired[ISODatetime | None]


# =============================================================================
# Settings and Results
# =============================================================================


class HouseholdSettings(TypedDict):
    """Settings consumed by the aggregation engines."""

    day_start_hour: int
    inventory_urgent_days: int
    inventory_critical_days: int
    enable_incident_alerts: bool
    enable_photo_alerts: bool


class OperationResult(TypedDict, total=False):
    """Outcome of an asynchronous persistence operation.

    Exactly one of `data` or `error` is set. Reversible operations also
    return the overwritten fields in `previous`.
    """

    data: dict[str, Any]
    error: str
    previous: dict[str, Any]
