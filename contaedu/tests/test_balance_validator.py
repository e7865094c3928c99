"""
Unit tests for the balance validator.
"""

from decimal import Decimal

import pytest

from contaedu.app.core.exceptions import InsufficientLinesError, UnbalancedEntryError
from contaedu.app.domain.ledger.validator import active_lines, validate_entry_lines
from contaedu.tests.factories import line


def test_single_line_is_insufficient():
    with pytest.raises(InsufficientLinesError) as exc_info:
        validate_entry_lines([line("430", "Clientes", debit="100")])

    assert exc_info.value.error_code == "ERR_LEDGER_001"
    assert exc_info.value.details == {"line_count": 1}


def test_unbalanced_entry_reports_delta():
    with pytest.raises(UnbalancedEntryError) as exc_info:
        validate_entry_lines([
            line("430", "Clientes", debit="100"),
            line("700", "Ventas", credit="90"),
        ])

    error = exc_info.value
    assert error.delta == Decimal("10")
    assert error.details["delta"] == "10.00"
    assert error.details["total_debit"] == "100.00"
    assert error.details["total_credit"] == "90.00"
    assert error.status_code == 400


def test_inert_lines_are_discarded_before_counting():
    lines = [
        line("430", "Clientes", debit="100"),
        line("700", "Ventas"),
        line("477", "IVA repercutido"),
    ]
    assert len(active_lines(lines)) == 1

    with pytest.raises(InsufficientLinesError):
        validate_entry_lines(lines)


def test_inert_lines_do_not_block_a_balanced_entry():
    validate_entry_lines([
        line("430", "Clientes", debit="121"),
        line("700", "Ventas", credit="100"),
        line("477", "IVA repercutido", credit="21"),
        line("999", "Línea vacía"),
    ])


def test_balanced_entry_with_many_lines_passes():
    validate_entry_lines([
        line("600", "Compras", debit="2000.00"),
        line("472", "IVA", debit="420.00"),
        line("572", "Bancos", credit="1210.00"),
        line("400", "Proveedores", credit="1210.00"),
    ])


def test_difference_within_one_cent_is_accepted():
    validate_entry_lines([
        line("430", "Clientes", debit="100.01"),
        line("700", "Ventas", credit="100.00"),
    ])


def test_difference_above_one_cent_is_rejected():
    with pytest.raises(UnbalancedEntryError):
        validate_entry_lines([
            line("430", "Clientes", debit="100.02"),
            line("700", "Ventas", credit="100.00"),
        ])


def test_custom_tolerance():
    lines = [line("430", "Clientes", debit="100.01"), line("700", "Ventas", credit="100.00")]

    with pytest.raises(UnbalancedEntryError):
        validate_entry_lines(lines, tolerance=Decimal("0"))


def test_empty_entry_is_insufficient():
    with pytest.raises(InsufficientLinesError) as exc_info:
        validate_entry_lines([])
    assert exc_info.value.details["line_count"] == 0


@pytest.mark.parametrize("debits,credits", [
    (["0.10", "0.20"], ["0.30"]),
    (["1000.00"], ["333.33", "333.33", "333.34"]),
    (["99999.99", "0.01"], ["100000.00"]),
])
def test_accepted_entries_balance_within_tolerance(debits, credits):
    lines = [line(f"6{i}", "Debe", debit=d) for i, d in enumerate(debits)]
    lines += [line(f"5{i}", "Haber", credit=c) for i, c in enumerate(credits)]

    validate_entry_lines(lines)

    total_debit = sum(Decimal(d) for d in debits)
    total_credit = sum(Decimal(c) for c in credits)
    assert abs(total_debit - total_credit) <= Decimal("0.01")
