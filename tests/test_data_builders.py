"""Tests for data_builders - normalization, validation and mutation shapes.

These cover the boundary between raw store documents / user input and the
typed models the engines work with.
"""

from __future__ import annotations

from typing import Any

import pytest

from household_bills import const
from household_bills.data_builders import (
    BillValidationError,
    build_bill_input,
    build_paid_state_mutation,
    normalize_bill,
    normalize_bills,
    validate_bill_input,
)
from household_bills.models import MonthlyBill, OneTimeBill
from tests.helpers import raw_monthly, raw_one_time

# =============================================================================
# TEST: SNAPSHOT NORMALIZATION
# =============================================================================


class TestNormalizeBill:
    """Test raw document → typed Bill conversion."""

    def test_monthly_document(self) -> None:
        """recurrence == "monthly" yields a MonthlyBill with its fields."""
        bill = normalize_bill(
            raw_monthly(
                "b1",
                "Rent",
                1200,
                15,
                paid_for_month="2024-03",
                autopay=True,
                category="Housing",
                accountLast4="1234",
            )
        )

        assert isinstance(bill, MonthlyBill)
        assert bill.id == "b1"
        assert bill.amount == 1200.0
        assert bill.day_of_month == 15
        assert bill.paid_for_month == "2024-03"
        assert bill.autopay is True
        assert bill.category == "Housing"
        assert bill.account_last4 == "1234"
        assert bill.is_monthly

    def test_one_time_document(self) -> None:
        """A null recurrence yields a OneTimeBill."""
        bill = normalize_bill(
            raw_one_time("b2", "Car repair", 300, "2024-03-05", status="paid")
        )

        assert isinstance(bill, OneTimeBill)
        assert bill.due_date == "2024-03-05"
        assert bill.status == const.BILL_STATUS_PAID
        assert not bill.is_monthly

    @pytest.mark.parametrize("recurrence", [None, "weekly", "Monthly", "", 1])
    def test_anything_but_monthly_is_one_time(self, recurrence: Any) -> None:
        """Unknown recurrence values fall back to one-time."""
        bill = normalize_bill(raw_one_time("b", "X", 1, recurrence=recurrence))
        assert isinstance(bill, OneTimeBill)

    @pytest.mark.parametrize("status", ["PAID", "done", None, True])
    def test_status_paid_only_when_exact(self, status: Any) -> None:
        """Only the exact string "paid" counts as paid."""
        bill = normalize_bill(raw_one_time("b", "X", 1, status=status))
        assert bill.status == const.BILL_STATUS_UNPAID

    @pytest.mark.parametrize("day", [0, 32, "15", 15.0, True, None])
    def test_corrupt_day_of_month_becomes_none(self, day: Any) -> None:
        """Non-integer or out-of-range days are dropped, not coerced."""
        bill = normalize_bill(raw_monthly("b", "X", 1, day))
        assert isinstance(bill, MonthlyBill)
        assert bill.day_of_month is None

    def test_wrong_types_fall_back(self) -> None:
        """Wrong field types never raise."""
        bill = normalize_bill(
            {
                const.DATA_BILL_NAME: 42,
                const.DATA_BILL_AMOUNT: "12.50",
                const.DATA_BILL_AUTOPAY: "true",
                const.DATA_BILL_DUE_DATE: 20240305,
                const.DATA_BILL_CATEGORY: ["Utilities"],
            },
            bill_id="doc-7",
        )

        assert isinstance(bill, OneTimeBill)
        assert bill.id == "doc-7"
        assert bill.name == ""
        assert bill.amount == 0.0
        assert bill.autopay is False
        assert bill.due_date is None
        assert bill.category is None

    def test_malformed_due_date_string_is_kept(self) -> None:
        """Strings are kept as-is; parsing happens in the engines."""
        bill = normalize_bill(raw_one_time("b", "X", 1, "2024-02-30"))
        assert bill.due_date == "2024-02-30"

    def test_normalize_bills_preserves_feed_order(self) -> None:
        """Snapshot order is kept."""
        bills = normalize_bills(
            [raw_one_time("z", "Z", 1), raw_monthly("a", "A", 1), raw_one_time("m", "M", 1)]
        )
        assert [bill.id for bill in bills] == ["z", "a", "m"]


# =============================================================================
# TEST: CREATE INPUT VALIDATION
# =============================================================================


class TestValidateBillInput:
    """Test validate_bill_input error reporting."""

    def test_valid_monthly_input(self) -> None:
        """A complete monthly input has no errors."""
        assert (
            validate_bill_input(
                {
                    const.FIELD_NAME: "Rent",
                    const.FIELD_AMOUNT: 1200,
                    const.FIELD_RECURRENCE: const.RECURRENCE_MONTHLY,
                    const.FIELD_DAY_OF_MONTH: 1,
                }
            )
            == {}
        )

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name(self, name: str) -> None:
        """Name must be non-empty after trimming."""
        errors = validate_bill_input({const.FIELD_NAME: name, const.FIELD_AMOUNT: 5})
        assert errors == {const.FIELD_NAME: const.ERROR_NAME_REQUIRED}

    def test_missing_name(self) -> None:
        """Name is required."""
        errors = validate_bill_input({const.FIELD_AMOUNT: 5})
        assert errors[const.FIELD_NAME] == const.ERROR_NAME_REQUIRED

    @pytest.mark.parametrize(
        "amount", ["abc", "", None, "nan", float("inf"), True, False]
    )
    def test_invalid_amount(self, amount: Any) -> None:
        """Amount must be a finite number."""
        errors = validate_bill_input({const.FIELD_NAME: "X", const.FIELD_AMOUNT: amount})
        assert errors == {const.FIELD_AMOUNT: const.ERROR_AMOUNT_INVALID}

    def test_numeric_string_amount_accepted(self) -> None:
        """Form input "12.50" is a valid amount."""
        assert validate_bill_input({const.FIELD_NAME: "X", const.FIELD_AMOUNT: "12.50"}) == {}

    @pytest.mark.parametrize("day", [0, 32, -1, 1.5, "abc", True])
    def test_invalid_day_of_month(self, day: Any) -> None:
        """Day of month must be an integer in [1, 31]."""
        errors = validate_bill_input(
            {
                const.FIELD_NAME: "X",
                const.FIELD_AMOUNT: 5,
                const.FIELD_RECURRENCE: const.RECURRENCE_MONTHLY,
                const.FIELD_DAY_OF_MONTH: day,
            }
        )
        assert errors == {const.FIELD_DAY_OF_MONTH: const.ERROR_DAY_OF_MONTH_INVALID}

    @pytest.mark.parametrize("day", ["abc", 0, 99, None])
    def test_day_of_month_ignored_for_one_time(self, day: Any) -> None:
        """One-time bills never fail on the monthly-only day field."""
        errors = validate_bill_input(
            {
                const.FIELD_NAME: "X",
                const.FIELD_AMOUNT: 5,
                const.FIELD_RECURRENCE: const.RECURRENCE_ONE_TIME,
                const.FIELD_DAY_OF_MONTH: day,
            }
        )
        assert errors == {}

    def test_impossible_due_date(self) -> None:
        """One-time due dates must be real calendar dates."""
        errors = validate_bill_input(
            {const.FIELD_NAME: "X", const.FIELD_AMOUNT: 5, const.FIELD_DUE_DATE: "2024-02-30"}
        )
        assert errors == {const.FIELD_DUE_DATE: const.ERROR_DUE_DATE_INVALID}

    @pytest.mark.parametrize("last4", ["123", "12345", "12a4", "１２３４"])
    def test_invalid_account_last4(self, last4: str) -> None:
        """Account last 4 must be exactly four ASCII digits."""
        errors = validate_bill_input(
            {const.FIELD_NAME: "X", const.FIELD_AMOUNT: 5, const.FIELD_ACCOUNT_LAST4: last4}
        )
        assert errors == {const.FIELD_ACCOUNT_LAST4: const.ERROR_ACCOUNT_LAST4_INVALID}

    def test_unknown_recurrence(self) -> None:
        """Only one_time and monthly are accepted."""
        errors = validate_bill_input(
            {const.FIELD_NAME: "X", const.FIELD_AMOUNT: 5, const.FIELD_RECURRENCE: "weekly"}
        )
        assert errors == {const.FIELD_RECURRENCE: const.ERROR_RECURRENCE_INVALID}

    def test_reports_every_failing_field(self) -> None:
        """Business-rule failures are collected in one pass."""
        errors = validate_bill_input(
            {const.FIELD_NAME: " ", const.FIELD_AMOUNT: "nan", const.FIELD_DUE_DATE: "soon"}
        )
        assert set(errors) == {
            const.FIELD_NAME,
            const.FIELD_AMOUNT,
            const.FIELD_DUE_DATE,
        }


# =============================================================================
# TEST: CREATE PAYLOAD
# =============================================================================


class TestBuildBillInput:
    """Test build_bill_input payload shapes."""

    def test_monthly_payload(self) -> None:
        """Monthly payload stores dayOfMonth and no dueDate."""
        payload = build_bill_input(
            {
                const.FIELD_NAME: "  Rent ",
                const.FIELD_AMOUNT: "1200",
                const.FIELD_RECURRENCE: const.RECURRENCE_MONTHLY,
                const.FIELD_DAY_OF_MONTH: "31",
                const.FIELD_DUE_DATE: "2024-03-05",
                const.FIELD_AUTOPAY: True,
            }
        )

        assert payload == {
            "name": "Rent",
            "amount": 1200.0,
            "status": const.BILL_STATUS_UNPAID,
            "autopay": True,
            "recurrence": const.RAW_RECURRENCE_MONTHLY,
            "dueDate": None,
            "dayOfMonth": 31,
            "paidForMonth": None,
        }

    def test_one_time_payload(self) -> None:
        """One-time payload stores dueDate and a null recurrence."""
        payload = build_bill_input(
            {
                const.FIELD_NAME: "Car repair",
                const.FIELD_AMOUNT: 300,
                const.FIELD_DUE_DATE: "2024-03-05",
                const.FIELD_CATEGORY: "Auto",
                const.FIELD_ACCOUNT_LAST4: "9876",
            }
        )

        assert payload["recurrence"] is None
        assert payload["dueDate"] == "2024-03-05"
        assert payload["dayOfMonth"] is None
        assert payload["paidForMonth"] is None
        assert payload["autopay"] is False
        assert payload["category"] == "Auto"
        assert payload["accountLast4"] == "9876"

    def test_blank_optionals_omitted(self) -> None:
        """Blank category/account and due date are left out or null."""
        payload = build_bill_input(
            {
                const.FIELD_NAME: "Gift",
                const.FIELD_AMOUNT: 25,
                const.FIELD_DUE_DATE: "",
                const.FIELD_CATEGORY: " ",
                const.FIELD_ACCOUNT_LAST4: "",
                "unexpected": "dropped",
            }
        )

        assert payload["dueDate"] is None
        assert "category" not in payload
        assert "accountLast4" not in payload
        assert "unexpected" not in payload

    def test_invalid_input_raises(self) -> None:
        """Invalid input raises with the failing field."""
        with pytest.raises(BillValidationError) as exc_info:
            build_bill_input({const.FIELD_NAME: "", const.FIELD_AMOUNT: 5})

        assert exc_info.value.field == const.FIELD_NAME
        assert exc_info.value.message == const.ERROR_NAME_REQUIRED
        assert exc_info.value.errors == {const.FIELD_NAME: const.ERROR_NAME_REQUIRED}


# =============================================================================
# TEST: PAID-STATE MUTATIONS
# =============================================================================


class TestBuildPaidStateMutation:
    """Test mutation shapes per bill variant."""

    def test_monthly_mark_paid_sets_period(self) -> None:
        """Monthly bills are settled for exactly the given period."""
        bill = MonthlyBill(id="b", name="Rent", amount=1, day_of_month=1)
        assert build_paid_state_mutation(bill, paid=True, period="2024-04") == {
            "paidForMonth": "2024-04"
        }

    def test_monthly_mark_unpaid_clears_period(self) -> None:
        """Reopening a monthly bill clears paidForMonth."""
        bill = MonthlyBill(id="b", name="Rent", amount=1, paid_for_month="2024-04")
        assert build_paid_state_mutation(bill, paid=False, period="2024-04") == {
            "paidForMonth": None
        }

    @pytest.mark.parametrize(
        ("paid", "expected"),
        [(True, const.BILL_STATUS_PAID), (False, const.BILL_STATUS_UNPAID)],
    )
    def test_one_time_flips_status(self, paid: bool, expected: str) -> None:
        """One-time bills only ever receive a status mutation."""
        bill = OneTimeBill(id="b", name="Gift", amount=1)
        assert build_paid_state_mutation(bill, paid=paid, period="2024-04") == {
            "status": expected
        }
