# File: const.py
"""Constants for the CatCare integration.

This file centralizes configuration keys, defaults, labels, storage keys,
severity scores, gesture thresholds and service names for consistency across
the integration.
"""

import logging

import homeassistant.util.dt as dt_util
from homeassistant.const import Platform

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration."""
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
CATCARE_TITLE = "CatCare"
CATCARE_MANUFACTURER = "CatCare"

# Integration Domain
DOMAIN = "catcare"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "catcare_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None

# Update Interval (minutes)
DEFAULT_UPDATE_INTERVAL = 5

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_HOUSEHOLD_NAME = "household_name"
CONF_DAY_START_HOUR = "day_start_hour"
CONF_INVENTORY_URGENT_DAYS = "inventory_urgent_days"
CONF_INVENTORY_CRITICAL_DAYS = "inventory_critical_days"
CONF_ENABLE_INCIDENT_ALERTS = "enable_incident_alerts"
CONF_ENABLE_PHOTO_ALERTS = "enable_photo_alerts"
CONF_NOTIFY_SERVICE = "notify_service"
CONF_UPDATE_INTERVAL = "update_interval"
CONF_ENABLE_CARE_REMINDER = "enable_care_reminder"
CONF_CARE_REMINDER_HOUR = "care_reminder_hour"

CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

# Defaults
DEFAULT_HOUSEHOLD_NAME = "Home"
DEFAULT_DAY_START_HOUR = 4
DEFAULT_INVENTORY_URGENT_DAYS = 3
DEFAULT_INVENTORY_CRITICAL_DAYS = 1
DEFAULT_ENABLE_INCIDENT_ALERTS = True
DEFAULT_ENABLE_PHOTO_ALERTS = True
DEFAULT_NOTIFY_SERVICE = ""
DEFAULT_ENABLE_CARE_REMINDER = True
DEFAULT_CARE_REMINDER_HOUR = 20
DEFAULT_INVENTORY_RANGE_MAX_DAYS = 30
DEFAULT_LAST_SEEN_PHOTO_AT = "1970-01-01T00:00:00+00:00"

MIN_DAY_START_HOUR = 0
MAX_DAY_START_HOUR = 23

# ------------------------------------------------------------------------------------------------
# Storage Data Keys
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_META_LAST_SEEN_PHOTO_AT = "last_seen_photo_at"

DATA_CATS = "cats"
DATA_CARE_TASK_DEFS = "care_task_defs"
DATA_CARE_LOGS = "care_logs"
DATA_NOTICE_DEFS = "notice_defs"
DATA_OBSERVATIONS = "observations"
DATA_INVENTORY = "inventory"
DATA_INCIDENTS = "incidents"

# Shared record fields
DATA_ID = "id"
DATA_CREATED_AT = "created_at"
DATA_DELETED_AT = "deleted_at"

# Care task definition fields
DATA_CARE_TASK_TITLE = "title"
DATA_CARE_TASK_ENABLED = "enabled"
DATA_CARE_TASK_FREQUENCY = "frequency"
DATA_CARE_TASK_FREQUENCY_COUNT = "frequency_count"
DATA_CARE_TASK_MEAL_SLOTS = "meal_slots"
DATA_CARE_TASK_ICON = "icon"
DATA_CARE_TASK_PER_CAT = "per_cat"
DATA_CARE_TASK_TARGET_CAT_IDS = "target_cat_ids"

# Care log fields
DATA_CARE_LOG_TYPE = "type"
DATA_CARE_LOG_CAT_ID = "cat_id"
DATA_CARE_LOG_DONE_AT = "done_at"
DATA_CARE_LOG_NOTES = "notes"
DATA_CARE_LOG_IMAGES = "images"
DATA_CARE_LOG_DONE_BY = "done_by"

# Cat fields
DATA_CAT_NAME = "name"
DATA_CAT_IMAGES = "images"
DATA_CAT_IMAGE_STORAGE_PATH = "storage_path"

# Notice definition fields
DATA_NOTICE_TITLE = "title"
DATA_NOTICE_ENABLED = "enabled"
DATA_NOTICE_CHOICES = "choices"

# Observation fields
DATA_OBSERVATION_CAT_ID = "cat_id"
DATA_OBSERVATION_TYPE = "type"
DATA_OBSERVATION_VALUE = "value"
DATA_OBSERVATION_NOTES = "notes"
DATA_OBSERVATION_RECORDED_AT = "recorded_at"
DATA_OBSERVATION_ACKNOWLEDGED_AT = "acknowledged_at"

# Inventory fields
DATA_INVENTORY_LABEL = "label"
DATA_INVENTORY_RANGE_MAX = "range_max"
DATA_INVENTORY_LAST_BOUGHT = "last_bought"
DATA_INVENTORY_STOCK_LEVEL = "stock_level"
DATA_INVENTORY_ALERT_ENABLED = "alert_enabled"
DATA_INVENTORY_PURCHASE_MEMO = "purchase_memo"

# Incident fields
DATA_INCIDENT_CAT_ID = "cat_id"
DATA_INCIDENT_TYPE = "type"
DATA_INCIDENT_STATUS = "status"
DATA_INCIDENT_NOTE = "note"
DATA_INCIDENT_RESOLVED_AT = "resolved_at"

# ------------------------------------------------------------------------------------------------
# Care Task Frequencies and Slots
# ------------------------------------------------------------------------------------------------
FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"
FREQUENCY_OPTIONS = [FREQUENCY_DAILY, FREQUENCY_WEEKLY, FREQUENCY_MONTHLY]
DEFAULT_FREQUENCY = FREQUENCY_DAILY
DEFAULT_FREQUENCY_COUNT = 1

SLOT_MORNING = "morning"
SLOT_NOON = "noon"
SLOT_EVENING = "evening"
SLOT_NIGHT = "night"

# Fixed slot order; prefix semantics depend on it
SLOT_ORDER: tuple[str, ...] = (SLOT_MORNING, SLOT_NOON, SLOT_EVENING, SLOT_NIGHT)

# Slot start hours (night wraps past midnight until morning begins)
SLOT_START_HOURS: dict[str, int] = {
    SLOT_MORNING: 5,
    SLOT_NOON: 11,
    SLOT_EVENING: 15,
    SLOT_NIGHT: 20,
}

SLOT_LABELS: dict[str, str] = {
    SLOT_MORNING: "Morning",
    SLOT_NOON: "Noon",
    SLOT_EVENING: "Evening",
    SLOT_NIGHT: "Night",
}

# Log type separators ("feed:morning" is current, "feed_morning" is legacy)
LOG_TYPE_SEPARATOR = ":"
LOG_TYPE_LEGACY_SEPARATOR = "_"

# ------------------------------------------------------------------------------------------------
# Catch-Up Items
# ------------------------------------------------------------------------------------------------
CATCHUP_TYPE_TASK = "task"
CATCHUP_TYPE_INVENTORY = "inventory"
CATCHUP_TYPE_NOTICE = "notice"
CATCHUP_TYPE_INCIDENT = "incident"

CATCHUP_STATUS_DANGER = "danger"
CATCHUP_STATUS_WARN = "warn"
CATCHUP_STATUS_INFO = "info"

SEVERITY_INCIDENT = 100
SEVERITY_OBSERVATION = 100
SEVERITY_UNSEEN_PHOTOS = 90
SEVERITY_TASK_CURRENT_SLOT = 85
SEVERITY_TASK_PAST_SLOT = 75
SEVERITY_TASK_GOAL = 70
SEVERITY_INVENTORY_EMPTY = 80
SEVERITY_INVENTORY_CRITICAL = 75
SEVERITY_INVENTORY_LOW = 70
SEVERITY_INVENTORY_URGENT = 65

# Non-task alerts below this score never reach the catch-up list
ALERT_SEVERITY_THRESHOLD = 60
SUMMARY_ABNORMAL_MIN_SEVERITY = 90
CATCHUP_DISPLAY_LIMIT = 6

INCIDENT_STATUS_WATCHING = "watching"
INCIDENT_STATUS_HOSPITAL = "hospital"
INCIDENT_STATUS_RESOLVED = "resolved"
INCIDENT_STATUS_OPTIONS = [
    INCIDENT_STATUS_WATCHING,
    INCIDENT_STATUS_HOSPITAL,
    INCIDENT_STATUS_RESOLVED,
]

STOCK_LEVEL_FULL = "full"
STOCK_LEVEL_HALF = "half"
STOCK_LEVEL_LOW = "low"
STOCK_LEVEL_EMPTY = "empty"
STOCK_LEVEL_OPTIONS = [
    STOCK_LEVEL_FULL,
    STOCK_LEVEL_HALF,
    STOCK_LEVEL_LOW,
    STOCK_LEVEL_EMPTY,
]

# Observation answers that never count as abnormal (case-insensitive)
OBSERVATION_NORMAL_VALUES: frozenset[str] = frozenset(
    {"as usual", "normal", "fine", "none", "recorded"}
)

# Catch-up text
LABEL_CARE = "Care"
LABEL_HEALTH = "Health"
LABEL_UNKNOWN_CAT = "Cat"
LABEL_NOTICE_FALLBACK_TITLE = "Something seems different"
LABEL_TASK_CURRENT_SLOT_FMT = "{slot} round"
LABEL_TASK_CURRENT_SLOT_CAT_FMT = "{slot} round for {cat}"
LABEL_TASK_PAST_SLOT = "An earlier round is still open"
LABEL_TASK_GOAL_FMT = "{remaining} left this period"
LABEL_INVENTORY_TITLE_FMT = "{label} is running low"
LABEL_INVENTORY_BODY_FMT = "About {days} days left"
LABEL_INVENTORY_MEMO_FMT = "Memo: {memo}"
LABEL_INCIDENT_TITLE_FMT = "{cat}: {incident_type}"
LABEL_PHOTOS_TITLE_FMT = "New photos of {cat}"
LABEL_PHOTOS_BODY_FMT = "Family shared {count} new photos"
LABEL_SUMMARY_ALL_CLEAR = "All caught up"
LABEL_SUMMARY_ABNORMAL_FMT = "{count} changes to check"
LABEL_SUMMARY_URGENT_FMT = "{count} open items"
LABEL_SUMMARY_JOIN = " · "

# ------------------------------------------------------------------------------------------------
# Swipe Triage
# ------------------------------------------------------------------------------------------------
TRIAGE_PHASE_IDLE = "idle"
TRIAGE_PHASE_PRESENTING = "presenting"
TRIAGE_PHASE_COMMITTING = "committing"
TRIAGE_PHASE_COMPLETED = "completed"

TRIAGE_DECISION_DONE = "done"
TRIAGE_DECISION_LATER = "later"
TRIAGE_DECISION_OPTIONS = [TRIAGE_DECISION_DONE, TRIAGE_DECISION_LATER]

TRIAGE_ACTION_START = "start"
TRIAGE_ACTION_COMMIT = "commit"
TRIAGE_ACTION_COMMIT_SUCCEEDED = "commit_succeeded"
TRIAGE_ACTION_COMMIT_FAILED = "commit_failed"
TRIAGE_ACTION_UNDO = "undo"

GESTURE_LEFT = "left"
GESTURE_RIGHT = "right"
GESTURE_UP = "up"
GESTURE_DOWN = "down"
GESTURE_NONE = "none"

# Horizontal swipe thresholds (px, px/s)
GESTURE_POSITION_THRESHOLD = 80
GESTURE_VELOCITY_THRESHOLD = 300
GESTURE_COMBINED_THRESHOLD = 100
GESTURE_COMBINED_VELOCITY_WEIGHT = 0.15
GESTURE_COMBINED_MIN_OFFSET = 30
# Vertical swipe thresholds (cat switching)
GESTURE_VERTICAL_POSITION_THRESHOLD = 60
GESTURE_VERTICAL_VELOCITY_THRESHOLD = 250
# Axis detection
GESTURE_AXIS_DOMINANCE_RATIO = 1.5
GESTURE_AXIS_LOCK_MIN_OFFSET = 40
GESTURE_AXIS_LOCK_MAX_CROSS_OFFSET = 30


# Undo token keys
UNDO_KIND = "kind"
UNDO_TARGET_ID = "target_id"
UNDO_PREVIOUS = "previous"
UNDO_KIND_CARE_LOG = "care_log"
UNDO_KIND_OBSERVATION = "observation"
UNDO_KIND_PHOTOS_SEEN = "photos_seen"
UNDO_KIND_INVENTORY = "inventory"
UNDO_KIND_INCIDENT = "incident"

# ------------------------------------------------------------------------------------------------
# Events
# ------------------------------------------------------------------------------------------------
EVENT_TRIAGE_CAT_SWITCH = "catcare_triage_cat_switch"
EVENT_CARE_LOG_ADDED = "catcare_care_log_added"

# Dispatcher signal suffixes (scoped per config entry)
SIGNAL_SUFFIX_RECORDS_CHANGED = "records_changed"
ATTR_DIRECTION = "direction"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_ADD_CARE_LOG = "add_care_log"
SERVICE_DELETE_CARE_LOG = "delete_care_log"
SERVICE_UPSERT_CARE_TASK = "upsert_care_task"
SERVICE_REMOVE_CARE_TASK = "remove_care_task"
SERVICE_UPSERT_CAT = "upsert_cat"
SERVICE_ADD_CAT_PHOTO = "add_cat_photo"
SERVICE_MARK_PHOTOS_SEEN = "mark_photos_seen"
SERVICE_RECORD_OBSERVATION = "record_observation"
SERVICE_ACKNOWLEDGE_OBSERVATION = "acknowledge_observation"
SERVICE_REPORT_INCIDENT = "report_incident"
SERVICE_RESOLVE_INCIDENT = "resolve_incident"
SERVICE_UPSERT_INVENTORY_ITEM = "upsert_inventory_item"
SERVICE_MARK_INVENTORY_BOUGHT = "mark_inventory_bought"
SERVICE_TRIAGE_START = "triage_start"
SERVICE_TRIAGE_SWIPE = "triage_swipe"
SERVICE_TRIAGE_DECIDE = "triage_decide"
SERVICE_TRIAGE_UNDO = "triage_undo"

SERVICES = [
    SERVICE_ADD_CARE_LOG,
    SERVICE_DELETE_CARE_LOG,
    SERVICE_UPSERT_CARE_TASK,
    SERVICE_REMOVE_CARE_TASK,
    SERVICE_UPSERT_CAT,
    SERVICE_ADD_CAT_PHOTO,
    SERVICE_MARK_PHOTOS_SEEN,
    SERVICE_RECORD_OBSERVATION,
    SERVICE_ACKNOWLEDGE_OBSERVATION,
    SERVICE_REPORT_INCIDENT,
    SERVICE_RESOLVE_INCIDENT,
    SERVICE_UPSERT_INVENTORY_ITEM,
    SERVICE_MARK_INVENTORY_BOUGHT,
    SERVICE_TRIAGE_START,
    SERVICE_TRIAGE_SWIPE,
    SERVICE_TRIAGE_DECIDE,
    SERVICE_TRIAGE_UNDO,
]

# Service fields
FIELD_TYPE = "type"
FIELD_CAT_ID = "cat_id"
FIELD_NOTES = "notes"
FIELD_IMAGES = "images"
FIELD_LOG_ID = "log_id"
FIELD_TASK_ID = "task_id"
FIELD_TITLE = "title"
FIELD_FREQUENCY = "frequency"
FIELD_FREQUENCY_COUNT = "frequency_count"
FIELD_MEAL_SLOTS = "meal_slots"
FIELD_ICON = "icon"
FIELD_PER_CAT = "per_cat"
FIELD_TARGET_CAT_IDS = "target_cat_ids"
FIELD_ENABLED = "enabled"
FIELD_NAME = "name"
FIELD_STORAGE_PATH = "storage_path"
FIELD_VALUE = "value"
FIELD_OBSERVATION_ID = "observation_id"
FIELD_INCIDENT_ID = "incident_id"
FIELD_NOTE = "note"
FIELD_ITEM_ID = "item_id"
FIELD_LABEL = "label"
FIELD_RANGE_MAX = "range_max"
FIELD_STOCK_LEVEL = "stock_level"
FIELD_ALERT_ENABLED = "alert_enabled"
FIELD_PURCHASE_MEMO = "purchase_memo"
FIELD_OFFSET_X = "offset_x"
FIELD_OFFSET_Y = "offset_y"
FIELD_VELOCITY_X = "velocity_x"
FIELD_VELOCITY_Y = "velocity_y"
FIELD_DECISION = "decision"
FIELD_MEMO = "memo"

# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_UID_SUFFIX_CARE_PROGRESS = "_care_progress"
SENSOR_UID_SUFFIX_CATCH_UP = "_catch_up"
SENSOR_UID_SUFFIX_TRIAGE = "_triage"

TRANS_KEY_SENSOR_CARE_PROGRESS = "care_progress"
TRANS_KEY_SENSOR_CATCH_UP = "catch_up"
TRANS_KEY_SENSOR_TRIAGE = "triage"

ATTR_BUSINESS_DATE = "business_date"
ATTR_TOTAL = "total"
ATTR_COMPLETED = "completed"
ATTR_OUTSTANDING = "outstanding"
ATTR_INSTANCES = "instances"
ATTR_SUMMARY = "summary"
ATTR_ITEMS = "items"
ATTR_REMAINING_COUNT = "remaining_count"
ATTR_INDEX = "index"
ATTR_ITEM_COUNT = "item_count"
ATTR_CURRENT_ITEM = "current_item"
ATTR_ERROR = "error"
ATTR_CAN_UNDO = "can_undo"
ATTR_STALE = "stale"
ATTR_LAST_DECISION = "last_decision"

# ------------------------------------------------------------------------------------------------
# Notifications
# ------------------------------------------------------------------------------------------------
NOTIFY_DOMAIN = "notify"
NOTIFY_TITLE = "title"
NOTIFY_MESSAGE = "message"
NOTIFY_DATA = "data"
NOTIFICATION_ID_TRIAGE_ERROR = "catcare_triage_error"
NOTIFICATION_TITLE_TRIAGE_ERROR = "CatCare: could not save"
NOTIFICATION_ID_CARE_REMINDER = "catcare_care_reminder"
NOTIFICATION_TITLE_CARE_REMINDER = "CatCare: care still open"
REMINDER_MAX_LABELS = 3
LABEL_REMINDER_BODY_FMT = "Still open: {labels}"
LABEL_REMINDER_MORE_FMT = "{labels} and {count} more"
DISPLAY_DOT = "."

# ------------------------------------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
ERROR_NO_ENTRY_FOUND = "No CatCare entry found"
ERROR_SAVE_FAILED = "Could not save CatCare data"
ERROR_INVALID_LOG_TYPE = "Care log type must not be empty"
ERROR_CARE_LOG_NOT_FOUND_FMT = "Care log '{}' not found"
ERROR_CARE_TASK_NOT_FOUND_FMT = "Care task '{}' not found"
ERROR_CAT_NOT_FOUND_FMT = "Cat '{}' not found"
ERROR_OBSERVATION_NOT_FOUND_FMT = "Observation '{}' not found"
ERROR_INCIDENT_NOT_FOUND_FMT = "Incident '{}' not found"
ERROR_INVENTORY_NOT_FOUND_FMT = "Inventory item '{}' not found"
ERROR_TRIAGE_NOT_PRESENTING = "No catch-up item is waiting for a decision"
ERROR_TRIAGE_NOTHING_TO_UNDO = "Nothing to undo"

# ------------------------------------------------------------------------------------------------
# Seed Data (fresh installations)
# ------------------------------------------------------------------------------------------------
DEFAULT_CARE_TASK_DEFS: list[dict] = [
    {
        DATA_ID: "care_food",
        DATA_CARE_TASK_TITLE: "Food",
        DATA_CARE_TASK_ICON: "mdi:food-drumstick",
        DATA_CARE_TASK_FREQUENCY: FREQUENCY_DAILY,
        DATA_CARE_TASK_MEAL_SLOTS: [SLOT_MORNING, SLOT_EVENING],
        DATA_CARE_TASK_PER_CAT: False,
        DATA_CARE_TASK_ENABLED: True,
    },
    {
        DATA_ID: "care_water",
        DATA_CARE_TASK_TITLE: "Water",
        DATA_CARE_TASK_ICON: "mdi:water",
        DATA_CARE_TASK_FREQUENCY: FREQUENCY_DAILY,
        DATA_CARE_TASK_MEAL_SLOTS: [SLOT_MORNING, SLOT_EVENING],
        DATA_CARE_TASK_PER_CAT: False,
        DATA_CARE_TASK_ENABLED: True,
    },
    {
        DATA_ID: "care_litter",
        DATA_CARE_TASK_TITLE: "Litter",
        DATA_CARE_TASK_ICON: "mdi:delete-empty",
        DATA_CARE_TASK_FREQUENCY: FREQUENCY_DAILY,
        DATA_CARE_TASK_MEAL_SLOTS: [SLOT_EVENING],
        DATA_CARE_TASK_PER_CAT: False,
        DATA_CARE_TASK_ENABLED: True,
    },
    # Long-haired cats brush daily; off until the household opts in
    {
        DATA_ID: "care_brush",
        DATA_CARE_TASK_TITLE: "Brushing",
        DATA_CARE_TASK_ICON: "mdi:content-cut",
        DATA_CARE_TASK_FREQUENCY: FREQUENCY_WEEKLY,
        DATA_CARE_TASK_MEAL_SLOTS: [],
        DATA_CARE_TASK_PER_CAT: True,
        DATA_CARE_TASK_ENABLED: False,
    },
    {
        DATA_ID: "care_play",
        DATA_CARE_TASK_TITLE: "Play",
        DATA_CARE_TASK_ICON: "mdi:star-four-points",
        DATA_CARE_TASK_FREQUENCY: FREQUENCY_DAILY,
        DATA_CARE_TASK_MEAL_SLOTS: [SLOT_EVENING],
        DATA_CARE_TASK_PER_CAT: False,
        DATA_CARE_TASK_ENABLED: False,
    },
]

# First choice is the normal answer
DEFAULT_NOTICE_DEFS: list[dict] = [
    {
        DATA_ID: "n_appetite",
        DATA_NOTICE_TITLE: "Appetite as usual?",
        DATA_NOTICE_CHOICES: ["As usual", "Less", "Not eating"],
        DATA_NOTICE_ENABLED: True,
    },
    {
        DATA_ID: "n_water",
        DATA_NOTICE_TITLE: "Drinking water?",
        DATA_NOTICE_CHOICES: ["Normal", "More", "Less", "Not drinking"],
        DATA_NOTICE_ENABLED: False,
    },
    {
        DATA_ID: "n_toilet",
        DATA_NOTICE_TITLE: "Toilet as usual?",
        DATA_NOTICE_CHOICES: ["As usual", "Concerning"],
        DATA_NOTICE_ENABLED: True,
    },
    {
        DATA_ID: "n_vomit",
        DATA_NOTICE_TITLE: "Vomited?",
        DATA_NOTICE_CHOICES: ["None", "Once", "Twice or more"],
        DATA_NOTICE_ENABLED: True,
    },
    {
        DATA_ID: "n_energy",
        DATA_NOTICE_TITLE: "Energy as usual?",
        DATA_NOTICE_CHOICES: ["Fine", "Normal", "Quiet", "Lethargic"],
        DATA_NOTICE_ENABLED: True,
    },
]
