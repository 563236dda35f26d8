# ruff: noqa: E501
import textwrap
from datetime import date
from decimal import Decimal

from spend_analysis.models import UNKNOWN_MERCHANT
from spend_analysis.parser import MISSING_COLUMNS_MESSAGE, detect_delimiter, parse_statement


def _csv(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


def test_parses_basic_comma_file() -> None:
    outcome = parse_statement(
        _csv(
            """
            Date,Merchant,Description,Amount
            2024-01-15,Whole Foods,Grocery shopping,-87.50
            01/16/2024,Acme Corp,Payroll,"2,500.00"
            """
        )
    )

    assert outcome.success
    assert outcome.errors == []
    assert [(t.date, t.merchant, t.description, t.amount) for t in outcome.transactions] == [
        (date(2024, 1, 15), "Whole Foods", "Grocery shopping", Decimal("-87.50")),
        (date(2024, 1, 16), "Acme Corp", "Payroll", Decimal("2500.00")),
    ]
    first = outcome.transactions[0]
    assert first.raw_row.line_number == 2
    assert first.raw_row.values["merchant"] == "Whole Foods"


def test_semicolon_and_tab_delimiters_are_detected() -> None:
    semi = parse_statement("Date;Payee;Value\n15/01/2024;Cafe;-4,50\n2024-01-15;Cafe;-4.50\n")
    assert [t.amount for t in semi.transactions] == [Decimal("-4.50")]
    assert semi.errors == ["Row 2: Invalid date format: 15/01/2024"]

    tab = parse_statement("Date\tMerchant\tAmount\n2024-01-15\tShell\t(45.00)\n")
    assert tab.success
    assert tab.transactions[0].amount == Decimal("-45.00")
    assert tab.transactions[0].merchant == "Shell"


def test_detect_delimiter_falls_back_to_comma() -> None:
    assert detect_delimiter("Date;Merchant;Amount") == ";"
    assert detect_delimiter("Date\tMerchant\tAmount") == "\t"
    assert detect_delimiter("single") == ","


def test_missing_required_columns_fail_the_whole_file() -> None:
    outcome = parse_statement("Merchant,Notes\nWhole Foods,weekly shop\n")
    assert not outcome.success
    assert outcome.transactions == []
    assert outcome.errors == [MISSING_COLUMNS_MESSAGE]
    assert "required columns" in outcome.errors[0]


def test_missing_amount_column_alone_is_fatal() -> None:
    outcome = parse_statement("Date,Merchant\n2024-01-15,Whole Foods\n")
    assert not outcome.success
    assert outcome.transactions == []
    assert len(outcome.errors) == 1


def test_empty_content_is_a_structural_error() -> None:
    for text in ("", "   \n\n"):
        outcome = parse_statement(text)
        assert not outcome.success
        assert outcome.transactions == []
        assert len(outcome.errors) == 1
        assert outcome.errors[0].startswith("Failed to parse statement")


def test_invalid_date_row_is_reported_and_parsing_continues() -> None:
    outcome = parse_statement(
        _csv(
            """
            Date,Merchant,Amount
            invalid-date,Whole Foods,-10.00
            2024-01-15,Shell,-45.00
            """
        )
    )

    assert not outcome.success
    assert [t.merchant for t in outcome.transactions] == ["Shell"]
    assert len(outcome.errors) == 1
    assert "Invalid date format" in outcome.errors[0]
    assert outcome.row_errors[0].line_number == 2
    assert outcome.row_errors[0].reason == "Invalid date format: invalid-date"


def test_invalid_amount_row_is_reported() -> None:
    outcome = parse_statement("Date,Merchant,Amount\n2024-01-15,Shell,abc\n")
    assert outcome.transactions == []
    assert outcome.errors == ["Row 2: Invalid amount: abc"]


def test_rows_with_empty_required_cells_are_skipped_silently() -> None:
    outcome = parse_statement(
        _csv(
            """
            Date,Merchant,Amount
            2024-01-15,Shell,-45.00
            ,Ghost,-1.00
            2024-01-16,NoAmount,

            2024-01-17,Netflix,-15.99
            """
        )
    )

    assert outcome.success
    assert [t.merchant for t in outcome.transactions] == ["Shell", "Netflix"]
    assert outcome.transactions[1].raw_row.line_number == 6


def test_transactions_plus_errors_equal_rows_with_required_cells() -> None:
    text = _csv(
        """
        Date,Merchant,Amount
        2024-01-15,Shell,-45.00
        bad,Shell,-45.00
        2024-01-15,Shell,oops
        ,Shell,-1.00
        2024-01-18,Shell,
        2024-01-19,Shell,-2.00
        """
    )
    outcome = parse_statement(text)
    assert len(outcome.transactions) + len(outcome.errors) == 4


def test_missing_description_column_uses_merchant() -> None:
    outcome = parse_statement("date,merchant,amount\n2024-01-15,Whole Foods,-87.50\n2024-01-16,Shell,-45\n")
    assert outcome.success
    for tx in outcome.transactions:
        assert tx.description == tx.merchant


def test_description_only_file_fills_merchant_and_description() -> None:
    outcome = parse_statement("Date,Description,Amount\n2024-01-15,  Whole Foods  ,-87.50\n")
    tx = outcome.transactions[0]
    assert tx.merchant == "Whole Foods"
    assert tx.description == "Whole Foods"


def test_blank_merchant_defaults_to_unknown() -> None:
    outcome = parse_statement("Date,Merchant,Amount\n2024-01-15,   ,-5.00\n")
    assert outcome.success
    assert outcome.transactions[0].merchant == UNKNOWN_MERCHANT
    assert outcome.transactions[0].description == UNKNOWN_MERCHANT


def test_quoted_fields_with_delimiters_and_newlines() -> None:
    text = 'Date,Merchant,Description,Amount\n2024-01-15,"Joe\'s, Inc","line one\nline two",-3.00\n2024-01-16,Shell,Fuel,-4.00\n'
    outcome = parse_statement(text)
    assert outcome.success
    assert outcome.transactions[0].merchant == "Joe's, Inc"
    assert outcome.transactions[0].description == "line one\nline two"
    # The multi-line record ends on line 3, so the next one starts on line 4.
    assert outcome.transactions[1].raw_row.line_number == 4


def test_byte_order_mark_and_short_rows_are_tolerated() -> None:
    outcome = parse_statement("\ufeffDate,Merchant,Amount,Memo\n2024-01-15,Shell,-45.00\n")
    assert outcome.success
    tx = outcome.transactions[0]
    assert tx.raw_row.values == {"date": "2024-01-15", "merchant": "Shell", "amount": "-45.00", "memo": ""}
    assert tx.description == "Shell"


def test_parses_are_independent() -> None:
    a = parse_statement("Date,Merchant,Amount\nbad,Shell,-1\n")
    b = parse_statement("Date,Merchant,Amount\n2024-01-15,Shell,-1\n")
    assert len(a.errors) == 1
    assert b.errors == []
