"""
Analytics Module

This module provides analytics and reporting features for a group ledger.

Features:
    - Category-wise expense breakdown
    - Daily spending analysis
    - Highest spending day identification
    - Per-member payer totals
    - Per-member statistics (paid, share, payments, net balance)
    - Smart warnings for spending imbalances

Data Model:
    Input - Group with members, transactions and payments

    Output - dict containing:
        - analytics: dict with category_breakdown, daily_spending, etc.
        - warnings: list of warning strings

Functions:
    generate_analytics: Generate analytics and warnings from a group.
    member_stats: Totals for a single member.
"""

from collections import defaultdict
from decimal import Decimal

from splitledger.models import Group
from splitledger.settlement import compute_balances
from splitledger.utils import format_currency, round_money


def generate_analytics(group: Group) -> dict:
    """
    Generate analytics and smart warnings from a group's transactions.

    Analytics computed:
        - category_breakdown: Total amount spent per category
        - daily_spending: Total amount spent per date
        - highest_spending_day: Date and amount of maximum daily spend
        - payer_totals: Total amount paid by each member

    Warnings generated (rule-based):
        - If one member paid > 40% of total cost
        - If one category > 50% of total spend
        - If a day's spend > 2x average daily spend

    Args:
        group: The group to analyse. Payments are not expenses and are ignored.

    Returns:
        dict: Contains two keys:
            - analytics: dict with category_breakdown, daily_spending,
                         highest_spending_day, payer_totals
            - warnings: list of warning strings

    Notes:
        - All amounts rounded to 2 decimal places
    """
    category_totals = defaultdict(Decimal)  # category -> total amount
    daily_totals = defaultdict(Decimal)     # date -> total amount
    payer_totals = defaultdict(Decimal)     # payer_id -> total amount
    total_spent = Decimal("0")

    for transaction in group.transactions:
        amount = Decimal(str(transaction.amount))

        category_totals[transaction.category] += amount
        daily_totals[transaction.date] += amount
        payer_totals[transaction.payer_id] += amount
        total_spent += amount

    highest_spending_day = {"date": None, "amount": 0.0}
    if daily_totals:
        max_date = max(daily_totals, key=daily_totals.get)
        highest_spending_day = {
            "date": max_date,
            "amount": round_money(daily_totals[max_date])
        }

    analytics = {
        "category_breakdown": {c: round_money(a) for c, a in category_totals.items()},
        "daily_spending": {d: round_money(a) for d, a in daily_totals.items()},
        "highest_spending_day": highest_spending_day,
        "payer_totals": {p: round_money(a) for p, a in payer_totals.items()}
    }

    warnings = []
    total_spent_text = format_currency(round_money(total_spent))
    names = {m.member_id: m.name for m in group.members}

    if total_spent > 0:
        for payer_id, amount in payer_totals.items():
            percentage = (amount / total_spent) * 100
            if percentage > 40:
                warnings.append(
                    f"Warning: {names.get(payer_id, payer_id)} paid {round_money(percentage)}% of total expenses "
                    f"({format_currency(round_money(amount))} of {total_spent_text})"
                )

        for category, amount in category_totals.items():
            percentage = (amount / total_spent) * 100
            if percentage > 50:
                warnings.append(
                    f"Warning: '{category}' accounts for {round_money(percentage)}% of total spend "
                    f"({format_currency(round_money(amount))} of {total_spent_text})"
                )

    if len(daily_totals) > 1:
        avg_daily = total_spent / Decimal(len(daily_totals))
        threshold = avg_daily * 2

        for date, amount in daily_totals.items():
            if amount > threshold:
                warnings.append(
                    f"Warning: Spending on {date} ({format_currency(round_money(amount))}) "
                    f"exceeds 2x average daily spend ({format_currency(round_money(avg_daily))})"
                )

    return {
        "analytics": analytics,
        "warnings": warnings
    }


def member_stats(group: Group, member_id: str) -> dict:
    """
    Summarise one member's activity in a group.

    Returns:
        dict: with keys
            - total_paid: sum of transactions the member paid for
            - total_share: sum of the member's split amounts
            - payments_sent / payments_received: direct payment totals
            - net_balance: the member's entry from compute_balances()
    """
    total_paid = sum(
        (Decimal(str(t.amount)) for t in group.transactions if t.payer_id == member_id),
        Decimal("0")
    )
    total_share = sum(
        (Decimal(str(s.amount)) for t in group.transactions for s in t.splits if s.member_id == member_id),
        Decimal("0")
    )
    payments_sent = sum(
        (Decimal(str(p.amount)) for p in group.payments if p.from_id == member_id),
        Decimal("0")
    )
    payments_received = sum(
        (Decimal(str(p.amount)) for p in group.payments if p.to_id == member_id),
        Decimal("0")
    )

    return {
        "member_id": member_id,
        "total_paid": round_money(total_paid),
        "total_share": round_money(total_share),
        "payments_sent": round_money(payments_sent),
        "payments_received": round_money(payments_received),
        "net_balance": round_money(compute_balances(group).get(member_id, 0.0))
    }
