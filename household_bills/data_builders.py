"""Bill record normalization, input validation and mutation building.

This module is the SINGLE SOURCE OF TRUTH for:
- Turning raw store documents into typed Bill snapshots
- Create-input validation (voluptuous schema + business rules)
- Building create payloads and paid-state mutations for the store

### Normalization
`normalize_bill()` never raises. Fields with the wrong type fall back to
neutral values, so a corrupt document still renders (and simply has no
resolvable due date) instead of breaking the whole feed.

### Validation
`validate_bill_input()` returns a dict of {field: message}; empty means
valid. `build_bill_input()` runs the same checks and raises
BillValidationError, so nothing reaches the store unless it is valid.

Consumers:
- managers/bill_manager.py (feed handling, create, toggle)
- managers/autopay_manager.py (settlement mutations)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import voluptuous as vol

from . import const
from .models import Bill, MonthlyBill, OneTimeBill
from .type_defs import (
    CreateBillPayload,
    MonthlyPaidStateMutation,
    OneTimePaidStateMutation,
    PaidStateMutation,
    PeriodKey,
)
from .utils.dt_utils import parse_calendar_date
from .utils.math_utils import is_finite_amount

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class BillValidationError(Exception):
    """User-facing validation error raised before any store call.

    Attributes:
        field: The FIELD_* constant identifying the failing input
        message: Human readable message for the form
        errors: Every failing field found in the same pass

    Example:
        raise BillValidationError(
            field=const.FIELD_NAME,
            message=const.ERROR_NAME_REQUIRED,
        )
    """

    def __init__(
        self,
        field: str,
        message: str,
        errors: dict[str, str] | None = None,
    ) -> None:
        """Initialize BillValidationError.

        Args:
            field: The FIELD_* constant for the field that failed validation
            message: Error message shown to the user
            errors: Optional full {field: message} map
        """
        self.field = field
        self.message = message
        self.errors = errors or {field: message}
        super().__init__(message)


# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def _optional_str(value: Any) -> str | None:
    """Keep strings, drop everything else."""
    return value if isinstance(value, str) else None


def _normalize_day_of_month(value: Any) -> int | None:
    """Keep integer days in [1, 31]; bools and floats are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if const.DAY_OF_MONTH_MIN <= value <= const.DAY_OF_MONTH_MAX:
        return value
    return None


def _normalize_amount(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


# ==============================================================================
# SNAPSHOT NORMALIZATION
# ==============================================================================


def normalize_bill(raw: Mapping[str, Any], bill_id: str | None = None) -> Bill:
    """Build a typed Bill from a raw store document.

    Args:
        raw: Document dict with const.DATA_BILL_* keys
        bill_id: Document id when the store keeps it outside the body

    Returns:
        OneTimeBill or MonthlyBill depending on the raw recurrence.
    """
    resolved_id = bill_id if bill_id is not None else raw.get(const.DATA_BILL_ID)
    name = raw.get(const.DATA_BILL_NAME)

    common: dict[str, Any] = {
        "id": str(resolved_id) if resolved_id is not None else "",
        "name": name if isinstance(name, str) else "",
        "amount": _normalize_amount(raw.get(const.DATA_BILL_AMOUNT)),
        "autopay": raw.get(const.DATA_BILL_AUTOPAY) is True,
        "category": _optional_str(raw.get(const.DATA_BILL_CATEGORY)),
        "account_last4": _optional_str(raw.get(const.DATA_BILL_ACCOUNT_LAST4)),
    }

    if raw.get(const.DATA_BILL_RECURRENCE) == const.RAW_RECURRENCE_MONTHLY:
        return MonthlyBill(
            **common,
            day_of_month=_normalize_day_of_month(
                raw.get(const.DATA_BILL_DAY_OF_MONTH)
            ),
            paid_for_month=_optional_str(raw.get(const.DATA_BILL_PAID_FOR_MONTH)),
        )

    status = (
        const.BILL_STATUS_PAID
        if raw.get(const.DATA_BILL_STATUS) == const.BILL_STATUS_PAID
        else const.BILL_STATUS_UNPAID
    )
    return OneTimeBill(
        **common,
        due_date=_optional_str(raw.get(const.DATA_BILL_DUE_DATE)),
        status=status,
    )


def normalize_bills(raw_bills: Iterable[Mapping[str, Any]]) -> list[Bill]:
    """Normalize a full feed snapshot, preserving feed order."""
    return [normalize_bill(raw) for raw in raw_bills]


# ==============================================================================
# CREATE INPUT VALIDATION
# ==============================================================================


def _parse_day_of_month(value: Any) -> int | None:
    """Accept ints and digit strings ("15") in [1, 31]; bools and fractions fail."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        return None
    if const.DAY_OF_MONTH_MIN <= value <= const.DAY_OF_MONTH_MAX:
        return value
    return None


def _reject_bool(value: Any) -> Any:
    """Reject bools before float coercion."""
    if isinstance(value, bool):
        raise vol.Invalid(const.ERROR_AMOUNT_INVALID)
    return value


def _blank_to_none(value: Any) -> Any:
    """Treat empty/whitespace strings as an absent optional field."""
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


CREATE_BILL_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): vol.All(str, vol.Strip),
        vol.Required(const.FIELD_AMOUNT): vol.All(
            _reject_bool, vol.Coerce(float, msg=const.ERROR_AMOUNT_INVALID)
        ),
        vol.Optional(
            const.FIELD_RECURRENCE, default=const.RECURRENCE_ONE_TIME
        ): vol.In(const.RECURRENCE_OPTIONS, msg=const.ERROR_RECURRENCE_INVALID),
        vol.Optional(const.FIELD_DUE_DATE, default=None): vol.All(
            _blank_to_none, vol.Any(None, str)
        ),
        # Checked in _check_bill_input, and only for monthly bills
        vol.Optional(
            const.FIELD_DAY_OF_MONTH, default=const.DEFAULT_DAY_OF_MONTH
        ): object,
        vol.Optional(const.FIELD_AUTOPAY, default=const.DEFAULT_AUTOPAY): vol.Boolean(),
        vol.Optional(const.FIELD_CATEGORY, default=None): vol.All(
            _blank_to_none, vol.Any(None, str, msg=const.ERROR_CATEGORY_INVALID)
        ),
        vol.Optional(const.FIELD_ACCOUNT_LAST4, default=None): vol.All(
            _blank_to_none,
            vol.Any(
                None,
                vol.Match(r"^[0-9]{4}$"),
                msg=const.ERROR_ACCOUNT_LAST4_INVALID,
            ),
        ),
    },
    extra=vol.REMOVE_EXTRA,
)

# Message shown per field when voluptuous reports a type/shape failure
_FIELD_ERROR_MESSAGES: dict[str, str] = {
    const.FIELD_NAME: const.ERROR_NAME_REQUIRED,
    const.FIELD_AMOUNT: const.ERROR_AMOUNT_INVALID,
    const.FIELD_RECURRENCE: const.ERROR_RECURRENCE_INVALID,
    const.FIELD_DUE_DATE: const.ERROR_DUE_DATE_INVALID,
    const.FIELD_CATEGORY: const.ERROR_CATEGORY_INVALID,
    const.FIELD_ACCOUNT_LAST4: const.ERROR_ACCOUNT_LAST4_INVALID,
}


def _schema_errors(err: vol.MultipleInvalid) -> dict[str, str]:
    """Flatten voluptuous errors into {field: message}."""
    errors: dict[str, str] = {}
    for error in err.errors:
        field = str(error.path[0]) if error.path else const.FIELD_NAME
        errors.setdefault(field, _FIELD_ERROR_MESSAGES.get(field, error.msg))
    return errors


def _check_bill_input(
    user_input: Mapping[str, Any],
) -> tuple[dict[str, Any] | None, dict[str, str]]:
    """Run schema and business rules; return (cleaned, errors)."""
    try:
        cleaned: dict[str, Any] = CREATE_BILL_SCHEMA(dict(user_input))
    except vol.MultipleInvalid as err:
        return None, _schema_errors(err)

    errors: dict[str, str] = {}

    # === 1. Name not empty ===
    if not cleaned[const.FIELD_NAME]:
        errors[const.FIELD_NAME] = const.ERROR_NAME_REQUIRED

    # === 2. Amount finite ===
    if not is_finite_amount(cleaned[const.FIELD_AMOUNT]):
        errors[const.FIELD_AMOUNT] = const.ERROR_AMOUNT_INVALID

    # === 3. Monthly: day of month is an integer in [1, 31] ===
    if cleaned[const.FIELD_RECURRENCE] == const.RECURRENCE_MONTHLY:
        day_of_month = _parse_day_of_month(cleaned[const.FIELD_DAY_OF_MONTH])
        if day_of_month is None:
            errors[const.FIELD_DAY_OF_MONTH] = const.ERROR_DAY_OF_MONTH_INVALID
        else:
            cleaned[const.FIELD_DAY_OF_MONTH] = day_of_month

    # === 4. One-time due date parses when given ===
    due_date = cleaned[const.FIELD_DUE_DATE]
    if (
        cleaned[const.FIELD_RECURRENCE] == const.RECURRENCE_ONE_TIME
        and due_date is not None
        and parse_calendar_date(due_date) is None
    ):
        errors[const.FIELD_DUE_DATE] = const.ERROR_DUE_DATE_INVALID

    return cleaned, errors


def validate_bill_input(user_input: Mapping[str, Any]) -> dict[str, str]:
    """Validate create input.

    Validation Rules:
        1. Name not empty after trimming
        2. Amount is a finite number (numeric strings accepted)
        3. Monthly: day of month is an integer in [1, 31]
        4. One-time: due date, when given, is a real YYYY-MM-DD date
        5. Account last 4, when given, is exactly four digits

    Returns:
        Dict of errors: {field: message}. Empty dict means validation passed.
    """
    _, errors = _check_bill_input(user_input)
    return errors


def build_bill_input(user_input: Mapping[str, Any]) -> CreateBillPayload:
    """Build the store payload for a new bill.

    Raises:
        BillValidationError: If any validation rule fails

    Examples:
        build_bill_input({"name": "Rent", "amount": 1200,
                          "recurrence": "monthly", "day_of_month": 1})
    """
    cleaned, errors = _check_bill_input(user_input)
    if cleaned is None or errors:
        field, message = next(iter(errors.items()))
        raise BillValidationError(field=field, message=message, errors=errors)

    is_monthly = cleaned[const.FIELD_RECURRENCE] == const.RECURRENCE_MONTHLY
    payload = CreateBillPayload(
        name=cleaned[const.FIELD_NAME],
        amount=float(cleaned[const.FIELD_AMOUNT]),
        status=const.BILL_STATUS_UNPAID,
        autopay=bool(cleaned[const.FIELD_AUTOPAY]),
        recurrence=const.RAW_RECURRENCE_MONTHLY if is_monthly else None,
        dueDate=None if is_monthly else cleaned[const.FIELD_DUE_DATE],
        dayOfMonth=cleaned[const.FIELD_DAY_OF_MONTH] if is_monthly else None,
        paidForMonth=None,
    )
    if cleaned[const.FIELD_CATEGORY] is not None:
        payload["category"] = cleaned[const.FIELD_CATEGORY]
    if cleaned[const.FIELD_ACCOUNT_LAST4] is not None:
        payload["accountLast4"] = cleaned[const.FIELD_ACCOUNT_LAST4]
    return payload


# ==============================================================================
# PAID-STATE MUTATIONS
# ==============================================================================


def build_paid_state_mutation(
    bill: Bill, *, paid: bool, period: PeriodKey
) -> PaidStateMutation:
    """Build the store mutation that marks a bill paid or unpaid.

    Monthly bills are settled for exactly one period (`paidForMonth`);
    one-time bills flip their stored `status`. The two shapes never mix.

    Args:
        bill: Bill being settled or reopened
        paid: Target state
        period: Period to settle (monthly only)
    """
    if isinstance(bill, MonthlyBill):
        return MonthlyPaidStateMutation(paidForMonth=period if paid else None)
    return OneTimePaidStateMutation(
        status=const.BILL_STATUS_PAID if paid else const.BILL_STATUS_UNPAID
    )
