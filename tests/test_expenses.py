import pytest

from splitledger.expenses import (
    add_custom_category,
    add_payment,
    add_transaction,
    delete_payment,
    delete_transaction,
    edit_transaction,
)
from splitledger.models import DEFAULT_CATEGORIES, Debt, SplitInput, SplitPolicy
from splitledger.settlement import settle_group
from splitledger.splitter import get_default_split_inputs


def test_add_transaction_resolves_splits(repo, stored_group):
    inputs = get_default_split_inputs(["A", "B", "C"], SplitPolicy.EQUAL)
    transaction = add_transaction(
        repo, stored_group.group_id, 90, "A", "equal", inputs, "2025-09-01", "Food & Dining", "  dinner "
    )

    assert transaction.amount == 90.0
    assert [s.amount for s in transaction.splits] == [30.0, 30.0, 30.0]
    assert transaction.notes == "dinner"

    group = repo.get_group(stored_group.group_id)
    assert len(group.transactions) == 1
    assert group.transactions[0].transaction_id == transaction.transaction_id

    balances, debts = settle_group(group)
    assert balances == {"A": 60.0, "B": -30.0, "C": -30.0}
    # The back pointer starts at C, so C settles first.
    assert debts == [Debt("C", "A", 30.0), Debt("B", "A", 30.0)]


def test_add_transaction_echoes_percentages(repo, stored_group):
    inputs = [SplitInput("A", 60), SplitInput("B", 40)]
    add_transaction(repo, stored_group.group_id, 100, "B", "percentage", inputs, "2025-09-01")

    stored = repo.get_group(stored_group.group_id).transactions[0]
    assert [s.percentage for s in stored.splits] == [60, 40]
    assert stored.category == "Other"


def test_add_transaction_rejects_invalid_split(repo, stored_group):
    inputs = [SplitInput("A", 50), SplitInput("B", 40)]

    with pytest.raises(ValueError, match="Percentages must total 100%"):
        add_transaction(repo, stored_group.group_id, 100, "A", "percentage", inputs, "2025-09-01")

    assert repo.get_group(stored_group.group_id).transactions == []


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"amount": 0}, "amount must be a positive number"),
        ({"amount": -5}, "amount must be a positive number"),
        ({"date": "01/09/2025"}, "YYYY-MM-DD"),
        ({"payer_id": "Z"}, "payer_id 'Z' does not exist"),
        ({"category": "Rent"}, "category must be one of"),
        ({"policy": "thirds"}, "policy must be one of"),
        ({"inputs": [SplitInput("A", 50), SplitInput("Z", 50)]}, "split member 'Z' does not exist"),
        ({"inputs": [SplitInput("A", 50), SplitInput("A", 50)]}, "appears more than once"),
    ],
)
def test_add_transaction_validation(repo, stored_group, kwargs, message):
    args = {
        "amount": 100,
        "payer_id": "A",
        "policy": "exact",
        "inputs": [SplitInput("A", 50), SplitInput("B", 50)],
        "date": "2025-09-01",
        "category": "Other",
    }
    args.update(kwargs)

    with pytest.raises(ValueError, match=message):
        add_transaction(repo, stored_group.group_id, **args)


def test_add_transaction_unknown_group(repo):
    with pytest.raises(ValueError, match="not found"):
        add_transaction(repo, "missing", 10, "A", "equal", [SplitInput("A")], "2025-09-01")


def test_edit_transaction_replaces_in_place(repo, stored_group):
    first = add_transaction(
        repo, stored_group.group_id, 90, "A", "equal",
        get_default_split_inputs(["A", "B", "C"], "equal"), "2025-09-01"
    )
    add_transaction(
        repo, stored_group.group_id, 10, "B", "exact",
        [SplitInput("B", 5), SplitInput("C", 5)], "2025-09-02"
    )

    edited = edit_transaction(
        repo, stored_group.group_id, first.transaction_id, 90, "A", "shares",
        [SplitInput("A", 2), SplitInput("B", 1)], "2025-09-03", "Travel"
    )

    group = repo.get_group(stored_group.group_id)
    assert edited.transaction_id == first.transaction_id
    assert group.transactions[0].transaction_id == first.transaction_id
    assert [s.amount for s in group.transactions[0].splits] == pytest.approx([60, 30])
    assert group.transactions[0].category == "Travel"
    assert len(group.transactions) == 2


def test_edit_missing_transaction(repo, stored_group):
    with pytest.raises(ValueError, match="Transaction nope not found"):
        edit_transaction(
            repo, stored_group.group_id, "nope", 10, "A", "equal", [SplitInput("A")], "2025-09-01"
        )


def test_delete_transaction(repo, stored_group):
    transaction = add_transaction(
        repo, stored_group.group_id, 20, "A", "equal", [SplitInput("A"), SplitInput("B")], "2025-09-01"
    )

    group = delete_transaction(repo, stored_group.group_id, transaction.transaction_id)

    assert group.transactions == []
    assert repo.get_group(stored_group.group_id).transactions == []
    with pytest.raises(ValueError):
        delete_transaction(repo, stored_group.group_id, transaction.transaction_id)


def test_payments(repo, stored_group):
    add_transaction(
        repo, stored_group.group_id, 90, "A", "equal",
        get_default_split_inputs(["A", "B", "C"], "equal"), "2025-09-01"
    )
    payment = add_payment(repo, stored_group.group_id, "B", "A", 30, "2025-09-02", "cash")

    balances, debts = settle_group(repo.get_group(stored_group.group_id))
    assert balances == {"A": 30.0, "B": 0.0, "C": -30.0}
    assert debts == [Debt("C", "A", 30.0)]

    delete_payment(repo, stored_group.group_id, payment.payment_id)
    assert repo.get_group(stored_group.group_id).payments == []


def test_payment_validation(repo, stored_group):
    with pytest.raises(ValueError, match="must be different"):
        add_payment(repo, stored_group.group_id, "A", "A", 10, "2025-09-01")
    with pytest.raises(ValueError, match="positive"):
        add_payment(repo, stored_group.group_id, "A", "B", 0, "2025-09-01")
    with pytest.raises(ValueError, match="to_id 'Z' does not exist"):
        add_payment(repo, stored_group.group_id, "A", "Z", 10, "2025-09-01")
    with pytest.raises(ValueError, match="Payment nope not found"):
        delete_payment(repo, stored_group.group_id, "nope")


def test_custom_categories(repo, stored_group):
    categories = add_custom_category(repo, stored_group.group_id, " Rent ")

    assert categories == list(DEFAULT_CATEGORIES) + ["Rent"]
    assert add_custom_category(repo, stored_group.group_id, "Rent") == categories

    transaction = add_transaction(
        repo, stored_group.group_id, 10, "A", "equal", [SplitInput("A")], "2025-09-01", "Rent"
    )
    assert transaction.category == "Rent"


def test_add_transaction_rejects_nan_split_value(repo, stored_group):
    inputs = [SplitInput("A", 5), SplitInput("B", float("nan"))]

    with pytest.raises(ValueError, match="split value for member 'B' must be a finite number"):
        add_transaction(repo, stored_group.group_id, 10, "A", "exact", inputs, "2025-09-01")

    assert repo.get_group(stored_group.group_id).transactions == []


@pytest.mark.parametrize("amount", ["inf", float("inf"), float("-inf"), float("nan")])
def test_non_finite_amounts_are_rejected(repo, stored_group, amount):
    with pytest.raises(ValueError, match="amount must be a positive number"):
        add_transaction(
            repo, stored_group.group_id, amount, "A", "equal", [SplitInput("A")], "2025-09-01"
        )
    with pytest.raises(ValueError, match="amount must be a positive number"):
        add_payment(repo, stored_group.group_id, "A", "B", amount, "2025-09-01")

    group = repo.get_group(stored_group.group_id)
    assert group.transactions == []
    assert group.payments == []
