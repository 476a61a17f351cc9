"""
Expenses Module

This module handles the write path for transactions and payments in a
stored group.

Features:
    - Add/edit/delete transactions, splitting the cost with a chosen policy
    - Record/delete direct payments between members
    - Categorize transactions (defaults plus per-group custom categories)

Data Model:
    Transactions and payments live inside the group document:
        groups/{group_id}.transactions
        groups/{group_id}.payments

    Splits are validated and resolved here, at create/edit time only.
    Stored splits are never re-validated afterwards.

Functions:
    add_transaction: Record a new expense.
    edit_transaction: Replace an existing expense, keeping its id.
    delete_transaction: Remove an expense.
    add_payment: Record a direct payment.
    delete_payment: Remove a payment.
    add_custom_category: Add a category to a group.
"""

import logging
import math
from typing import Union

from splitledger.firebase_store import GroupRepository, require_group
from splitledger.models import Group, Payment, SplitInput, SplitPolicy, Transaction
from splitledger.splitter import calculate_splits, validate_splits
from splitledger.utils import (
    generate_id,
    validate_amount,
    validate_date,
    validate_non_empty_string,
)


logger = logging.getLogger(__name__)


def _validate_member(group: Group, member_id: str, field_name: str) -> None:
    validate_non_empty_string(member_id, field_name)
    if group.get_member(member_id) is None:
        raise ValueError(f"{field_name} '{member_id}' does not exist in group {group.group_id}")


def _build_transaction(
    group: Group,
    transaction_id: str,
    amount: float,
    payer_id: str,
    policy: Union[SplitPolicy, str],
    inputs: list[SplitInput],
    date: str,
    category: str,
    notes: str
) -> Transaction:
    """
    Validate transaction input against the group and resolve its splits.

    Raises:
        ValueError: If any check fails. Split validation errors carry the
            same message validate_splits reports to the form.
    """
    if not validate_amount(amount):
        raise ValueError(f"amount must be a positive number, got: {amount}")

    validate_date(date, "date")
    _validate_member(group, payer_id, "payer_id")

    if category not in group.categories:
        raise ValueError(f"category must be one of {group.categories}, got: {category}")

    try:
        policy = SplitPolicy(policy)
    except ValueError:
        raise ValueError(f"policy must be one of {[p.value for p in SplitPolicy]}, got: {policy}")

    seen = set()
    for split_input in inputs:
        _validate_member(group, split_input.member_id, "split member")
        if split_input.value is not None and not math.isfinite(split_input.value):
            raise ValueError(
                f"split value for member '{split_input.member_id}' must be a finite number, got: {split_input.value}"
            )
        if split_input.member_id in seen:
            raise ValueError(f"member '{split_input.member_id}' appears more than once in the split")
        seen.add(split_input.member_id)

    result = validate_splits(float(amount), policy, inputs)
    if not result.valid:
        raise ValueError(result.error)

    return Transaction(
        transaction_id=transaction_id,
        amount=float(amount),
        payer_id=payer_id,
        splits=calculate_splits(float(amount), policy, inputs),
        date=date,
        category=category,
        notes=notes.strip() if notes else ""
    )


def _find_index(records: list, attribute: str, record_id: str) -> int:
    for index, record in enumerate(records):
        if getattr(record, attribute) == record_id:
            return index
    return -1


def add_transaction(
    repo: GroupRepository,
    group_id: str,
    amount: float,
    payer_id: str,
    policy: Union[SplitPolicy, str],
    inputs: list[SplitInput],
    date: str,
    category: str = "Other",
    notes: str = ""
) -> Transaction:
    """
    Add a new transaction to a group.

    Args:
        repo: Repository holding the group.
        group_id: The ID of the group.
        amount: Total amount paid (must be > 0).
        payer_id: Member ID of who paid.
        policy: Split policy used to turn inputs into splits.
        inputs: Per-member split inputs.
        date: Date of the expense (YYYY-MM-DD).
        category: One of the group's categories.
        notes: Optional free-form notes.

    Returns:
        Transaction: The created transaction with resolved splits.

    Raises:
        ValueError: If input validation fails.
        RuntimeError: If the store is not available.

    Notes:
        - Payer does NOT have to be part of the split
    """
    group = require_group(repo, group_id)

    transaction = _build_transaction(
        group, generate_id(), amount, payer_id, policy, inputs, date, category, notes
    )
    group.transactions.append(transaction)
    repo.save_group(group)

    logger.info("Added transaction %s (%.2f) to group %s", transaction.transaction_id, transaction.amount, group_id)
    return transaction


def edit_transaction(
    repo: GroupRepository,
    group_id: str,
    transaction_id: str,
    amount: float,
    payer_id: str,
    policy: Union[SplitPolicy, str],
    inputs: list[SplitInput],
    date: str,
    category: str = "Other",
    notes: str = ""
) -> Transaction:
    """
    Replace an existing transaction. The id and list position are kept;
    every other field is taken from the arguments and validated as in
    add_transaction.

    Raises:
        ValueError: If the transaction does not exist or validation fails.
        RuntimeError: If the store is not available.
    """
    validate_non_empty_string(transaction_id, "transaction_id")
    group = require_group(repo, group_id)

    index = _find_index(group.transactions, "transaction_id", transaction_id)
    if index < 0:
        raise ValueError(f"Transaction {transaction_id} not found in group {group_id}")

    transaction = _build_transaction(
        group, transaction_id, amount, payer_id, policy, inputs, date, category, notes
    )
    group.transactions[index] = transaction
    repo.save_group(group)

    logger.info("Edited transaction %s in group %s", transaction_id, group_id)
    return transaction


def delete_transaction(repo: GroupRepository, group_id: str, transaction_id: str) -> Group:
    validate_non_empty_string(transaction_id, "transaction_id")
    group = require_group(repo, group_id)

    if _find_index(group.transactions, "transaction_id", transaction_id) < 0:
        raise ValueError(f"Transaction {transaction_id} not found in group {group_id}")

    group.transactions = [t for t in group.transactions if t.transaction_id != transaction_id]
    repo.save_group(group)

    logger.info("Deleted transaction %s from group %s", transaction_id, group_id)
    return group


def add_payment(
    repo: GroupRepository,
    group_id: str,
    from_id: str,
    to_id: str,
    amount: float,
    date: str,
    notes: str = ""
) -> Payment:
    """
    Record a direct payment from one member to another.

    Args:
        repo: Repository holding the group.
        group_id: The ID of the group.
        from_id: Member ID of who paid.
        to_id: Member ID of who received the money.
        amount: Amount paid (must be > 0).
        date: Date of the payment (YYYY-MM-DD).
        notes: Optional free-form notes.

    Returns:
        Payment: The recorded payment.

    Raises:
        ValueError: If input validation fails or from_id equals to_id.
        RuntimeError: If the store is not available.
    """
    if not validate_amount(amount):
        raise ValueError(f"amount must be a positive number, got: {amount}")
    validate_date(date, "date")

    group = require_group(repo, group_id)
    _validate_member(group, from_id, "from_id")
    _validate_member(group, to_id, "to_id")

    if from_id == to_id:
        raise ValueError("from_id and to_id must be different members")

    payment = Payment(
        payment_id=generate_id(),
        from_id=from_id,
        to_id=to_id,
        amount=float(amount),
        date=date,
        notes=notes.strip() if notes else ""
    )
    group.payments.append(payment)
    repo.save_group(group)

    logger.info("Recorded payment %s (%.2f) in group %s", payment.payment_id, payment.amount, group_id)
    return payment


def delete_payment(repo: GroupRepository, group_id: str, payment_id: str) -> Group:
    validate_non_empty_string(payment_id, "payment_id")
    group = require_group(repo, group_id)

    if _find_index(group.payments, "payment_id", payment_id) < 0:
        raise ValueError(f"Payment {payment_id} not found in group {group_id}")

    group.payments = [p for p in group.payments if p.payment_id != payment_id]
    repo.save_group(group)
    return group


def add_custom_category(repo: GroupRepository, group_id: str, category: str) -> list[str]:
    """
    Add a custom category to a group.

    Returns:
        list[str]: All categories available to the group afterwards.
    """
    validate_non_empty_string(category, "category")
    category = category.strip()

    group = require_group(repo, group_id)
    if category not in group.categories:
        group.custom_categories.append(category)
        repo.save_group(group)

    return group.categories
