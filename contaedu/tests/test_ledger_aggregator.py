"""
Unit tests for the ledger aggregator (libro mayor).
"""

from decimal import Decimal

from contaedu.app.domain.ledger.aggregator import aggregate_ledger
from contaedu.app.domain.ledger.trial_balance import reduce_trial_balance
from contaedu.tests.factories import entry, line


def purchase(entry_id, amount, exercise_id=None, day=1):
    return entry(entry_id, [
        line("600", "Compras de mercaderías", debit=amount),
        line("572", "Bancos", credit=amount),
    ], exercise_id=exercise_id, day=day)


def sale(entry_id, amount, exercise_id=None, day=2):
    return entry(entry_id, [
        line("572", "Bancos", debit=amount),
        line("700", "Ventas de mercaderías", credit=amount),
    ], exercise_id=exercise_id, day=day)


def test_empty_input_gives_empty_ledger():
    assert aggregate_ledger([]) == {}


def test_accounts_are_keyed_in_code_order():
    ledger = aggregate_ledger([sale(1, "50"), purchase(2, "30")])

    assert list(ledger) == ["572", "600", "700"]


def test_code_order_is_lexicographic():
    ledger = aggregate_ledger([entry(1, [
        line("5720", "Banco Santander", debit="10"),
        line("57", "Tesorería", credit="10"),
        line("100", "Capital", debit="5"),
        line("4300", "Clientes", credit="5"),
    ])])

    assert list(ledger) == ["100", "4300", "57", "5720"]


def test_postings_follow_input_order_within_an_account():
    first = purchase(1, "200", day=3)
    second = sale(2, "500", day=4)

    ledger = aggregate_ledger([first, second])
    bank = ledger["572"]

    assert [p.entry_number for p in bank.postings] == [1, 2]
    assert [p.description for p in bank.postings] == ["Entry 1", "Entry 2"]
    assert bank.total_debit == Decimal("500")
    assert bank.total_credit == Decimal("200")
    assert bank.balance == Decimal("300")


def test_two_entries_on_the_same_account():
    """Both entries post to 572: one bucket, two posting rows, summed debit."""
    first = entry(1, [line("572", "Bancos", debit="1000.00"), line("100", "Capital social", credit="1000.00")])
    second = entry(2, [line("572", "Bancos", debit="250.50"), line("430", "Clientes", credit="250.50")])

    bank = aggregate_ledger([first, second])["572"]

    assert len(bank.postings) == 2
    assert [p.debit for p in bank.postings] == [Decimal("1000.00"), Decimal("250.50")]
    assert bank.total_debit == Decimal("1250.50")
    assert bank.total_credit == Decimal("0")


def test_totals_do_not_depend_on_entry_order():
    entries = [purchase(1, "120.10"), sale(2, "300.05"), purchase(3, "80.35")]

    forward = aggregate_ledger(entries)
    backward = aggregate_ledger(list(reversed(entries)))

    assert list(forward) == list(backward)
    for code in forward:
        assert forward[code].total_debit == backward[code].total_debit
        assert forward[code].total_credit == backward[code].total_credit
        assert forward[code].balance == backward[code].balance


def test_last_line_wins_for_the_account_name():
    ledger = aggregate_ledger([
        entry(1, [line("572", "Bancos", debit="10"), line("100", "Capital", credit="10")]),
        entry(2, [line("572", "Bancos c/c", debit="5"), line("100", "Capital", credit="5")]),
    ])

    assert ledger["572"].account_name == "Bancos c/c"


def test_exercise_filter_scopes_aggregation():
    ledger = aggregate_ledger(
        [purchase(1, "100", exercise_id=7), sale(2, "40", exercise_id=8), purchase(3, "10", exercise_id=7)],
        exercise_id=7,
    )

    assert list(ledger) == ["572", "600"]
    assert ledger["600"].total_debit == Decimal("110")


def test_aggregation_does_not_mutate_input():
    entries = [purchase(1, "100"), sale(2, "40")]
    before = list(entries)

    aggregate_ledger(entries)

    assert entries == before
    assert entries[0].lines[0].debit == Decimal("100")


def test_derivation_is_repeatable():
    entries = [purchase(1, "100.10"), sale(2, "40.20"), purchase(3, "0.30")]

    first_ledger = aggregate_ledger(entries)
    second_ledger = aggregate_ledger(entries)

    assert first_ledger == second_ledger
    assert reduce_trial_balance(first_ledger) == reduce_trial_balance(second_ledger)
