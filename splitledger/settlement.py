"""
Settlement Module

This module computes net balances for a group and reduces them to a short
list of suggested transfers.

Features:
    - Net balance per member from transactions and payments
    - Greedy two-pointer debt simplification
    - Plan verification helper

Data Model:
    Input - Group with members, transactions (with resolved splits) and payments

    Output - balances (dict keyed by member_id):
        - positive = member is owed money (net creditor)
        - negative = member owes money (net debtor)

    Output - list of Debt:
        - from_id: member who pays
        - to_id: member who receives
        - amount: float

Notes:
    - Both computations are pure and can be repeated on every request
    - Balances within EPSILON of zero are treated as settled
    - Does NOT write to Firestore

Functions:
    compute_balances: Net balance per member for a group.
    compute_debts: Convert balances into settlement transfers.
    apply_debts: Apply a settlement plan to balances.
    settle_group: Balances and debts in one call.
"""

from splitledger.models import Debt, Group, Member
from splitledger.utils import EPSILON, is_settled


def compute_balances(group: Group) -> dict[str, float]:
    """
    Calculate each member's net balance.

    For each transaction:
        1. The payer gains amount minus their own split (only the part they
           fronted for others counts as credit)
        2. Every other member in the splits loses their split amount

    For each payment:
        1. from_id gains the amount (they paid off debt in cash)
        2. to_id loses the amount (they were paid back)

    Args:
        group: The group to compute balances for.

    Returns:
        dict: member_id -> signed balance. Every member starts at 0 in member
        order. Ids referenced by transactions or payments but missing from
        the member list are still accounted so the balances always sum to 0.
    """
    balances = {member.member_id: 0.0 for member in group.members}

    for transaction in group.transactions:
        payer_id = transaction.payer_id
        own_share = 0.0

        for split in transaction.splits:
            if split.member_id == payer_id:
                own_share += split.amount
            else:
                balances[split.member_id] = balances.get(split.member_id, 0.0) - split.amount

        balances[payer_id] = balances.get(payer_id, 0.0) + transaction.amount - own_share

    for payment in group.payments:
        balances[payment.from_id] = balances.get(payment.from_id, 0.0) + payment.amount
        balances[payment.to_id] = balances.get(payment.to_id, 0.0) - payment.amount

    return balances


def compute_debts(balances: dict[str, float], members: list[Member]) -> list[Debt]:
    """
    Convert net balances into a list of settlement transfers.

    Uses a greedy two-pointer algorithm:
        1. Sort members by balance, largest creditor first (stable, so ties
           keep member order)
        2. Point i at the front (creditors) and j at the back (debtors)
        3. While i < j and both are unsettled, the debtor at j pays the
           creditor at i the smaller of the two absolute balances
        4. Advance i and/or retreat j once their balance is settled

    Produces at most n - 1 transfers for n unsettled members.

    Args:
        balances: Output of compute_balances().
        members: Group members; only these take part in the plan.

    Returns:
        list[Debt]: Suggested transfers in the order they were found.

    Notes:
        - Does NOT modify the input balances
        - Members missing from balances are treated as settled
    """
    ordered = [[m.member_id, balances.get(m.member_id, 0.0)] for m in members]
    ordered.sort(key=lambda entry: entry[1], reverse=True)

    debts = []
    i = 0
    j = len(ordered) - 1

    while i < j:
        creditor = ordered[i]
        debtor = ordered[j]

        if creditor[1] > EPSILON and debtor[1] < -EPSILON:
            amount = min(creditor[1], abs(debtor[1]))
            debts.append(Debt(from_id=debtor[0], to_id=creditor[0], amount=amount))
            creditor[1] -= amount
            debtor[1] += amount
        elif not is_settled(creditor[1]) and not is_settled(debtor[1]):
            # Leftovers on the same side only happen when balances do not sum to 0.
            break

        if is_settled(creditor[1]):
            i += 1
        if is_settled(debtor[1]):
            j -= 1

    return debts


def apply_debts(balances: dict[str, float], debts: list[Debt]) -> dict[str, float]:
    """
    Apply a settlement plan to balances.

    Paying a debt raises the payer's balance and lowers the receiver's, the
    same way a recorded Payment does.

    Returns:
        dict: New balances; the input dict is left untouched.
    """
    result = dict(balances)
    for debt in debts:
        result[debt.from_id] = result.get(debt.from_id, 0.0) + debt.amount
        result[debt.to_id] = result.get(debt.to_id, 0.0) - debt.amount
    return result


def settle_group(group: Group) -> tuple[dict[str, float], list[Debt]]:
    balances = compute_balances(group)
    return balances, compute_debts(balances, group.members)
