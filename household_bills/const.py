# File: const.py
"""Constants for the household bills core.

This file centralizes raw storage keys, status values, defaults, error
messages and event names so every engine and manager agrees on them.
"""

import logging

# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Raw Bill Document Keys (as delivered by the external store)
# ------------------------------------------------------------------------------------------------
DATA_BILL_ID = "id"
DATA_BILL_NAME = "name"
DATA_BILL_AMOUNT = "amount"
DATA_BILL_RECURRENCE = "recurrence"
DATA_BILL_DUE_DATE = "dueDate"
DATA_BILL_STATUS = "status"
DATA_BILL_DAY_OF_MONTH = "dayOfMonth"
DATA_BILL_PAID_FOR_MONTH = "paidForMonth"
DATA_BILL_AUTOPAY = "autopay"
DATA_BILL_CATEGORY = "category"
DATA_BILL_ACCOUNT_LAST4 = "accountLast4"

# ------------------------------------------------------------------------------------------------
# Bill Input Fields (create form / programmatic create)
# ------------------------------------------------------------------------------------------------
FIELD_NAME = "name"
FIELD_AMOUNT = "amount"
FIELD_RECURRENCE = "recurrence"
FIELD_DUE_DATE = "due_date"
FIELD_DAY_OF_MONTH = "day_of_month"
FIELD_AUTOPAY = "autopay"
FIELD_CATEGORY = "category"
FIELD_ACCOUNT_LAST4 = "account_last4"
FIELD_PERIOD = "period"

# ------------------------------------------------------------------------------------------------
# Recurrence
# ------------------------------------------------------------------------------------------------
RECURRENCE_ONE_TIME = "one_time"
RECURRENCE_MONTHLY = "monthly"

# Raw store value for monthly bills (one-time bills store null)
RAW_RECURRENCE_MONTHLY = "monthly"

RECURRENCE_OPTIONS = [RECURRENCE_ONE_TIME, RECURRENCE_MONTHLY]

# ------------------------------------------------------------------------------------------------
# Status / Badges
# ------------------------------------------------------------------------------------------------
BILL_STATUS_PAID = "paid"
BILL_STATUS_UNPAID = "unpaid"

BADGE_PAID = "paid"
BADGE_OVERDUE = "overdue"
BADGE_UNPAID = "unpaid"

# ------------------------------------------------------------------------------------------------
# Day of Month Bounds
# ------------------------------------------------------------------------------------------------
DAY_OF_MONTH_MIN = 1
DAY_OF_MONTH_MAX = 31

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_CALENDAR_MAX_VISIBLE_EVENTS = 3
DEFAULT_CURRENCY_SYMBOL = "$"
DEFAULT_AUTOPAY = False
DEFAULT_DAY_OF_MONTH = 1

# Separator used in calendar event labels ("Rent • $1200.00")
CALENDAR_LABEL_SEPARATOR = " • "

# Calendar week starts on Sunday (0 = Sunday ... 6 = Saturday)
CALENDAR_WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# ------------------------------------------------------------------------------------------------
# Display
# ------------------------------------------------------------------------------------------------
DUE_TEXT_MONTHLY_FMT = "Due day {day} of each month"
DUE_TEXT_ONE_TIME_FMT = "Due: {due_date}"
DUE_TEXT_NO_DUE_DATE = "No due date"
DUE_TEXT_UNKNOWN_DAY = "?"

# ------------------------------------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------------------------------------
ERROR_NAME_REQUIRED = "Bill name is required"
ERROR_AMOUNT_INVALID = "Amount must be a valid number"
ERROR_DAY_OF_MONTH_INVALID = "Day of month must be between 1 and 31"
ERROR_DUE_DATE_INVALID = "Due date must be a valid YYYY-MM-DD date"
ERROR_ACCOUNT_LAST4_INVALID = "Account last 4 must be exactly 4 digits"
ERROR_RECURRENCE_INVALID = "Recurrence must be one of: one_time, monthly"
ERROR_CATEGORY_INVALID = "Category must be text"
ERROR_BILL_NOT_FOUND_FMT = "Bill '{}' not found"
ERROR_NO_ACTIVE_CONTEXT = "No household is active"
ERROR_PERIOD_INVALID_FMT = "Period '{}' must be YYYY-MM"

# ------------------------------------------------------------------------------------------------
# Events (BaseManager.emit)
# ------------------------------------------------------------------------------------------------
EVENT_BILLS_UPDATED = "bills_updated"
EVENT_AUTOPAY_ATTEMPTED = "autopay_attempted"
EVENT_CONTEXT_CHANGED = "context_changed"

# Autopay outcome values (EVENT_AUTOPAY_ATTEMPTED payload)
AUTOPAY_OUTCOME_SUCCESS = "success"
AUTOPAY_OUTCOME_FAILED = "failed"
