"""
Splitter Module

This module handles the split allocation logic for the shared-expense ledger:
turning a total amount, a split policy and raw per-member inputs into the
per-member cost shares stored on a transaction.

Features:
    - Equal, percentage, exact and shares policies
    - Pre-submission validation with user-facing error messages
    - Default inputs for a freshly opened split form
    - Rebuilding editable inputs from a stored transaction

Policies:
    equal      - value ignored; total / number of included members
    percentage - value is percentage points; value / 100 * total
    exact      - value is the amount itself
    shares     - value is share units; value / total_shares * total

Notes:
    - No rounding is applied beyond native float arithmetic
    - Allocation never raises for empty or zero inputs; it returns zeros and
      leaves rejection to validate_splits
    - Pure functions, nothing is written to Firestore

Functions:
    calculate_splits: Resolve inputs into Split records.
    validate_splits: Check inputs before a transaction is accepted.
    get_default_split_inputs: Seed inputs for a list of members.
    remaining_amount: Amount still to be assigned.
    remaining_percentage: Percentage points still to be assigned.
    split_inputs_from_transaction: Inputs for editing a stored transaction.
    infer_split_policy: Best guess of the policy behind stored splits.
"""

from typing import NamedTuple, Optional, Union

from splitledger.models import Split, SplitInput, SplitPolicy, Transaction
from splitledger.utils import EPSILON, amounts_match


NO_MEMBERS_ERROR = "At least one member must be included in the split"


class ValidationResult(NamedTuple):
    valid: bool
    error: Optional[str] = None


def _coerce_policy(policy: Union[SplitPolicy, str]) -> Optional[SplitPolicy]:
    try:
        return SplitPolicy(policy)
    except ValueError:
        return None


def _value(split_input: SplitInput) -> float:
    return split_input.value or 0


def _is_included(split_input: SplitInput) -> bool:
    # Only an explicit False excludes a member.
    return split_input.included is not False


def calculate_splits(
    total_amount: float,
    policy: Union[SplitPolicy, str],
    inputs: list[SplitInput]
) -> list[Split]:
    """
    Convert raw inputs into one Split per input, preserving input order.

    Args:
        total_amount: Total cost of the transaction.
        policy: SplitPolicy (or its string value).
        inputs: Per-member SplitInput records.

    Returns:
        list[Split]: Resolved splits. Percentage splits echo the percentage,
        shares splits echo the share count. An unknown policy yields [].
    """
    policy = _coerce_policy(policy)

    if policy is SplitPolicy.EQUAL:
        included_count = sum(1 for i in inputs if _is_included(i))
        equal_amount = total_amount / included_count if included_count > 0 else 0
        return [
            Split(member_id=i.member_id, amount=equal_amount if _is_included(i) else 0)
            for i in inputs
        ]

    if policy is SplitPolicy.PERCENTAGE:
        return [
            Split(
                member_id=i.member_id,
                amount=(_value(i) / 100) * total_amount,
                percentage=_value(i)
            )
            for i in inputs
        ]

    if policy is SplitPolicy.EXACT:
        return [Split(member_id=i.member_id, amount=_value(i)) for i in inputs]

    if policy is SplitPolicy.SHARES:
        total_shares = sum(_value(i) for i in inputs)
        return [
            Split(
                member_id=i.member_id,
                amount=(_value(i) / total_shares) * total_amount if total_shares > 0 else 0,
                shares=_value(i)
            )
            for i in inputs
        ]

    return []


def validate_splits(
    total_amount: float,
    policy: Union[SplitPolicy, str],
    inputs: list[SplitInput]
) -> ValidationResult:
    """
    Check whether inputs may be accepted for a transaction.

    Validation rules:
        - At least one input
        - equal: at least one member included
        - percentage: values total 100 within EPSILON
        - exact: values total total_amount within EPSILON
        - shares: total shares > 0 and no negative share

    Args:
        total_amount: Total cost of the transaction.
        policy: SplitPolicy (or its string value).
        inputs: Per-member SplitInput records.

    Returns:
        ValidationResult: valid flag and, when invalid, a message suitable
        for showing next to the form.
    """
    if len(inputs) == 0:
        return ValidationResult(False, NO_MEMBERS_ERROR)

    policy = _coerce_policy(policy)

    if policy is SplitPolicy.EQUAL:
        if not any(_is_included(i) for i in inputs):
            return ValidationResult(False, NO_MEMBERS_ERROR)
        return ValidationResult(True)

    if policy is SplitPolicy.PERCENTAGE:
        total_percent = sum(_value(i) for i in inputs)
        if abs(total_percent - 100) > EPSILON:
            return ValidationResult(
                False,
                f"Percentages must total 100% (currently {total_percent:.1f}%)"
            )
        return ValidationResult(True)

    if policy is SplitPolicy.EXACT:
        total_exact = sum(_value(i) for i in inputs)
        if abs(total_exact - total_amount) > EPSILON:
            return ValidationResult(
                False,
                f"Amounts must total ${total_amount:.2f} (currently ${total_exact:.2f})"
            )
        return ValidationResult(True)

    if policy is SplitPolicy.SHARES:
        total_shares = sum(_value(i) for i in inputs)
        if total_shares <= 0:
            return ValidationResult(False, "Total shares must be greater than 0")
        if any(_value(i) < 0 for i in inputs):
            return ValidationResult(False, "Shares cannot be negative")
        return ValidationResult(True)

    return ValidationResult(False, "Invalid split type")


def get_default_split_inputs(
    member_ids: list[str],
    policy: Union[SplitPolicy, str]
) -> list[SplitInput]:
    """
    Seed inputs for a new split form.

    equal: everyone included; percentage: 100 / count each (remainder is not
    rebalanced); exact: 0 each; shares: 1 each.
    """
    policy = _coerce_policy(policy)

    if policy is SplitPolicy.EQUAL:
        return [SplitInput(member_id=m, value=0, included=True) for m in member_ids]

    if policy is SplitPolicy.PERCENTAGE:
        equal_percent = 100 / len(member_ids) if member_ids else 0
        return [SplitInput(member_id=m, value=equal_percent) for m in member_ids]

    if policy is SplitPolicy.EXACT:
        return [SplitInput(member_id=m, value=0) for m in member_ids]

    if policy is SplitPolicy.SHARES:
        return [SplitInput(member_id=m, value=1) for m in member_ids]

    return []


def remaining_amount(total_amount: float, splits: list[Split]) -> float:
    """Amount of total_amount not yet assigned to any member."""
    return total_amount - sum(s.amount or 0 for s in splits)


def remaining_percentage(splits: list[Split]) -> float:
    """Percentage points out of 100 not yet assigned to any member."""
    return 100 - sum(s.percentage or 0 for s in splits)


def split_inputs_from_transaction(
    transaction: Transaction,
    policy: Union[SplitPolicy, str],
    member_ids: list[str]
) -> list[SplitInput]:
    """
    Rebuild editable inputs from a stored transaction.

    Members of the group without a split entry get a zero input (or are
    excluded for equal splits), so newly added members show up in the form.

    Args:
        transaction: The stored transaction being edited.
        policy: Policy the form is switching to.
        member_ids: Current group members in display order.

    Returns:
        list[SplitInput]: One input per member id.
    """
    policy = _coerce_policy(policy)
    by_member = {s.member_id: s for s in transaction.splits}

    inputs = []
    for member_id in member_ids:
        split = by_member.get(member_id)

        if policy is SplitPolicy.EQUAL:
            included = split is not None and abs(split.amount) > 0
            inputs.append(SplitInput(member_id=member_id, value=0, included=included))
        elif policy is SplitPolicy.PERCENTAGE:
            if split is None:
                value = 0
            elif split.percentage is not None:
                value = split.percentage
            else:
                value = split.amount / transaction.amount * 100 if transaction.amount else 0
            inputs.append(SplitInput(member_id=member_id, value=value))
        elif policy is SplitPolicy.EXACT:
            inputs.append(SplitInput(member_id=member_id, value=split.amount if split else 0))
        elif policy is SplitPolicy.SHARES:
            value = split.shares if split is not None and split.shares is not None else 0
            inputs.append(SplitInput(member_id=member_id, value=value))

    return inputs


def infer_split_policy(transaction: Transaction) -> SplitPolicy:
    """
    Guess which policy produced a transaction's stored splits.

    Splits that echo percentages or shares identify their policy directly.
    Otherwise the splits are equal when every non-zero amount matches within
    EPSILON, and exact in all remaining cases.
    """
    splits = transaction.splits

    if splits and all(s.percentage is not None for s in splits):
        return SplitPolicy.PERCENTAGE
    if splits and all(s.shares is not None for s in splits):
        return SplitPolicy.SHARES

    charged = [s.amount for s in splits if abs(s.amount) > 0]
    if charged and all(amounts_match(amount, charged[0]) for amount in charged):
        return SplitPolicy.EQUAL

    return SplitPolicy.EXACT
