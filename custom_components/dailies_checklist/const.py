"""Constants for the Dailies Checklist integration.

This file centralizes storage keys, reset schedules, task categories,
signal suffixes and service names used across the integration.
"""

import logging
from datetime import timedelta

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
DAILIES_CHECKLIST_TITLE = "Dailies Checklist"

DOMAIN = "dailies_checklist"

LOGGER = logging.getLogger(__package__)

COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# ------------------------------------------------------------------------------------------------
# Storage and Versioning
# ------------------------------------------------------------------------------------------------
# One file per config entry: <config>/.storage/dailies_checklist.<entry_id>
STORAGE_DIRECTORY = ".storage"
STORAGE_KEY_PREFIX = DOMAIN

# Schema history:
#   1 - initial layout (daily, weekly and grand company stamps)
#   2 - adds last_jumbo_cactpot_reset
SCHEMA_VERSION_INITIAL = 1
SCHEMA_VERSION_JUMBO_CACTPOT = 2
SCHEMA_VERSION_CURRENT = SCHEMA_VERSION_JUMBO_CACTPOT

DEFAULT_SAVE_DELAY_SECONDS = 2.0
MAX_TASKS = 100

# ------------------------------------------------------------------------------------------------
# Configuration (config flow / options flow)
# ------------------------------------------------------------------------------------------------
CONF_OWNER_NAME = "owner_name"
CONF_OWNER_ID = "owner_id"
CONF_RESET_CHECK_INTERVAL = "reset_check_interval"
CONF_SAVE_DELAY = "save_delay"

DEFAULT_RESET_CHECK_INTERVAL = 1  # minutes
DEFAULT_STARTUP_TICK_DELAY = timedelta(seconds=10)

CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

# ------------------------------------------------------------------------------------------------
# State Document Keys
# ------------------------------------------------------------------------------------------------
DATA_VERSION = "version"
DATA_TASKS = "tasks"
DATA_LAST_DAILY_RESET = "last_daily_reset"
DATA_LAST_GC_RESET = "last_gc_reset"
DATA_LAST_WEEKLY_RESET = "last_weekly_reset"
DATA_LAST_JUMBO_CACTPOT_RESET = "last_jumbo_cactpot_reset"
DATA_LAST_SAVE_TIME = "last_save_time"
DATA_OWNER = "owner"

DATA_OWNER_ID = "id"
DATA_OWNER_NAME = "name"

DATA_TASK_KEY = "key"
DATA_TASK_CATEGORY = "category"
DATA_TASK_DETECTION = "detection"
DATA_TASK_ENABLED = "enabled"
DATA_TASK_COMPLETED = "completed"
DATA_TASK_COMPLETED_AT = "completed_at"
DATA_TASK_MANUAL_OVERRIDE = "manual_override"
DATA_TASK_CURRENT_COUNT = "current_count"
DATA_TASK_MAX_COUNT = "max_count"

DEFAULT_TASK_MAX_COUNT = 1

# ------------------------------------------------------------------------------------------------
# Task Categories and Detection Modes
# ------------------------------------------------------------------------------------------------
CATEGORY_DAILY = "daily"
CATEGORY_GRAND_COMPANY = "grand_company"
CATEGORY_WEEKLY = "weekly"

TASK_CATEGORIES = (CATEGORY_DAILY, CATEGORY_GRAND_COMPANY, CATEGORY_WEEKLY)

DETECTION_MANUAL = "manual"
DETECTION_AUTO = "auto"
DETECTION_HYBRID = "hybrid"

DETECTION_MODES = (DETECTION_MANUAL, DETECTION_AUTO, DETECTION_HYBRID)

# ------------------------------------------------------------------------------------------------
# Reset Schedules (all UTC)
# ------------------------------------------------------------------------------------------------
RESET_TYPE_DAILY = "daily"
RESET_TYPE_GRAND_COMPANY = "grand_company"
RESET_TYPE_WEEKLY = "weekly"
RESET_TYPE_JUMBO_CACTPOT = "jumbo_cactpot"
RESET_TYPE_FASHION_REPORT = "fashion_report"

RESET_TYPES = (
    RESET_TYPE_DAILY,
    RESET_TYPE_GRAND_COMPANY,
    RESET_TYPE_WEEKLY,
    RESET_TYPE_JUMBO_CACTPOT,
    RESET_TYPE_FASHION_REPORT,
)

WEEKDAY_TUESDAY = 1
WEEKDAY_FRIDAY = 4
WEEKDAY_SATURDAY = 5

RESET_PERIOD_DAY = timedelta(days=1)
RESET_PERIOD_WEEK = timedelta(days=7)

# reset_type -> (weekday or None for every day, hour, minute, period)
RESET_SCHEDULES: dict[str, tuple[int | None, int, int, timedelta]] = {
    RESET_TYPE_DAILY: (None, 15, 0, RESET_PERIOD_DAY),
    RESET_TYPE_GRAND_COMPANY: (None, 20, 0, RESET_PERIOD_DAY),
    RESET_TYPE_WEEKLY: (WEEKDAY_TUESDAY, 8, 0, RESET_PERIOD_WEEK),
    RESET_TYPE_JUMBO_CACTPOT: (WEEKDAY_SATURDAY, 8, 0, RESET_PERIOD_WEEK),
    RESET_TYPE_FASHION_REPORT: (WEEKDAY_FRIDAY, 8, 0, RESET_PERIOD_WEEK),
}

# Cadences that carry a persisted stamp, in reconciliation order
TRACKED_RESET_STAMPS: dict[str, str] = {
    RESET_TYPE_DAILY: DATA_LAST_DAILY_RESET,
    RESET_TYPE_GRAND_COMPANY: DATA_LAST_GC_RESET,
    RESET_TYPE_WEEKLY: DATA_LAST_WEEKLY_RESET,
    RESET_TYPE_JUMBO_CACTPOT: DATA_LAST_JUMBO_CACTPOT_RESET,
}

CATEGORY_RESET_TYPES: dict[str, str] = {
    CATEGORY_DAILY: RESET_TYPE_DAILY,
    CATEGORY_GRAND_COMPANY: RESET_TYPE_GRAND_COMPANY,
    CATEGORY_WEEKLY: RESET_TYPE_WEEKLY,
}

# Tasks governed by a cadence other than their category's
TASK_RESET_OVERRIDES: dict[str, str] = {
    "jumbo_cactpot": RESET_TYPE_JUMBO_CACTPOT,
}

# ------------------------------------------------------------------------------------------------
# Detection Limitation Kinds
# ------------------------------------------------------------------------------------------------
LIMITATION_POST_START_ONLY = "post_start_only"
LIMITATION_PARTIAL_COVERAGE = "partial_coverage"
LIMITATION_STUB = "stub"
LIMITATION_REQUIRES_INTERACTION = "requires_interaction"

# ------------------------------------------------------------------------------------------------
# Signals (instance scoped via get_event_signal)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_TASK_STATE_CHANGED = "task_state_changed"
SIGNAL_SUFFIX_SAVE_COMPLETED = "save_completed"
SIGNAL_SUFFIX_LOAD_COMPLETED = "load_completed"
SIGNAL_SUFFIX_CONFIG_MIGRATED = "config_migrated"
SIGNAL_SUFFIX_RESETS_APPLIED = "resets_applied"
SIGNAL_SUFFIX_DETECTOR_ERROR = "detector_error"

ORIGIN_MANUAL = "manual"
ORIGIN_DETECTOR = "detector"
ORIGIN_RESET = "reset"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_SET_TASK_COMPLETED = "set_task_completed"
SERVICE_ADJUST_TASK_COUNT = "adjust_task_count"
SERVICE_SET_TASK_ENABLED = "set_task_enabled"
SERVICE_RESET_CATEGORY = "reset_category"
SERVICE_RESET_CHECKLIST = "reset_checklist"
SERVICE_CHECK_RESETS = "check_resets"

FIELD_CONFIG_ENTRY_ID = "config_entry_id"
FIELD_TASK_KEY = "task_key"
FIELD_COMPLETED = "completed"
FIELD_DELTA = "delta"
FIELD_ENABLED = "enabled"
FIELD_CATEGORY = "category"

# ------------------------------------------------------------------------------------------------
# Translation Keys / Messages
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_ALREADY_CONFIGURED = "already_configured"
TRANS_KEY_ERROR_INVALID_OWNER_NAME = "invalid_owner_name"
TRANS_KEY_ERROR_TASK_NOT_FOUND = "task_not_found"
TRANS_KEY_ERROR_ENTRY_NOT_FOUND = "entry_not_found"

ERROR_TASK_NOT_FOUND_FMT = "Task '{}' not found"
ERROR_ENTRY_NOT_FOUND_FMT = "No loaded Dailies Checklist entry found for '{}'"
