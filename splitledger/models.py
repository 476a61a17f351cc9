"""
Models Module

This module defines the records shared by the split allocator, the settlement
engine and the storage layer of the shared-expense ledger.

Data Model:
    Member:
        - member_id: string (opaque unique id)
        - name: string (display only)
        - status: placeholder | invited | active

    Transaction:
        - transaction_id: string
        - amount: float (must be > 0)
        - payer_id: member_id who advanced the full amount
        - splits: list of Split (how the cost is apportioned)
        - date: string (YYYY-MM-DD)
        - category: string
        - notes: string

    Payment:
        - payment_id: string
        - from_id: member_id who paid cash
        - to_id: member_id who received cash
        - amount: float (must be > 0)
        - date: string (YYYY-MM-DD)
        - notes: string

    Group:
        - group_id, name, owner_id
        - members, transactions, payments
        - custom_categories

Value records (immutable):
    SplitInput, Split, Debt
"""

from enum import Enum
from typing import NamedTuple, Optional


DEFAULT_CATEGORIES = (
    "Food & Dining",
    "Shopping",
    "Transportation",
    "Entertainment",
    "Utilities",
    "Travel",
    "Other",
)


class SplitPolicy(str, Enum):
    """How raw per-member input values map to monetary amounts."""

    EQUAL = "equal"
    PERCENTAGE = "percentage"
    EXACT = "exact"
    SHARES = "shares"


class MemberStatus(str, Enum):
    PLACEHOLDER = "placeholder"
    INVITED = "invited"
    ACTIVE = "active"


class SplitInput(NamedTuple):
    """
    Raw, form-level input for one member.

    value is a percentage, an exact amount or a share count depending on the
    policy, and is ignored for equal splits. included only matters for equal
    splits; None counts as included.
    """

    member_id: str
    value: float = 0.0
    included: Optional[bool] = None


class Split(NamedTuple):
    """Resolved share of a transaction's cost for one member."""

    member_id: str
    amount: float
    percentage: Optional[float] = None
    shares: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert split to dictionary, omitting unset optional fields."""
        return {key: value for key, value in self._asdict().items() if value is not None}

    @classmethod
    def from_dict(cls, data: dict) -> "Split":
        return cls(
            member_id=data.get("member_id"),
            amount=data.get("amount", 0.0),
            percentage=data.get("percentage"),
            shares=data.get("shares"),
        )


class Debt(NamedTuple):
    """A single suggested transfer: from_id pays to_id."""

    from_id: str
    to_id: str
    amount: float


class Member:
    """
    Represents a member of a group.

    Attributes:
        member_id (str): Unique identifier for the member.
        name (str): Display name; may change over time.
        status (MemberStatus): Link state to an external identity.
    """

    def __init__(
        self,
        member_id: str,
        name: str,
        status: MemberStatus = MemberStatus.PLACEHOLDER
    ):
        self.member_id = member_id
        self.name = name
        self.status = MemberStatus(status)

    def to_dict(self) -> dict:
        """Convert member to dictionary for Firestore storage."""
        return {
            "member_id": self.member_id,
            "name": self.name,
            "status": self.status.value
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Member":
        """Create a Member instance from a dictionary."""
        return cls(
            member_id=data.get("member_id"),
            name=data.get("name"),
            status=data.get("status", MemberStatus.PLACEHOLDER)
        )

    def __repr__(self) -> str:
        return f"Member(id='{self.member_id}', name='{self.name}', status='{self.status.value}')"


class Transaction:
    """
    Represents one expense paid by a single member.

    The payer advanced the full amount; splits describe how that cost is
    apportioned among members, not how much cash moved to the payer.

    Attributes:
        transaction_id (str): Unique identifier.
        amount (float): Total amount of the expense (> 0).
        payer_id (str): Member ID of who paid.
        splits (list[Split]): Per-member cost shares.
        date (str): Date of the expense (YYYY-MM-DD).
        category (str): Expense category.
        notes (str): Free-form notes.
    """

    def __init__(
        self,
        transaction_id: str,
        amount: float,
        payer_id: str,
        splits: list[Split],
        date: str,
        category: str = "Other",
        notes: str = ""
    ):
        self.transaction_id = transaction_id
        self.amount = amount
        self.payer_id = payer_id
        self.splits = list(splits)
        self.date = date
        self.category = category
        self.notes = notes

    def to_dict(self) -> dict:
        """Convert transaction to dictionary for Firestore storage."""
        return {
            "transaction_id": self.transaction_id,
            "amount": self.amount,
            "payer_id": self.payer_id,
            "splits": [split.to_dict() for split in self.splits],
            "date": self.date,
            "category": self.category,
            "notes": self.notes
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Create a Transaction instance from a dictionary."""
        return cls(
            transaction_id=data.get("transaction_id"),
            amount=data.get("amount"),
            payer_id=data.get("payer_id"),
            splits=[Split.from_dict(s) for s in data.get("splits", [])],
            date=data.get("date"),
            category=data.get("category", "Other"),
            notes=data.get("notes", "")
        )

    def __repr__(self) -> str:
        return (
            f"Transaction(id='{self.transaction_id}', payer='{self.payer_id}', "
            f"amount={self.amount}, category='{self.category}')"
        )


class Payment:
    """
    Represents a direct cash transfer between two members.

    Attributes:
        payment_id (str): Unique identifier.
        from_id (str): Member ID of who paid.
        to_id (str): Member ID of who received the money.
        amount (float): Amount transferred (> 0).
        date (str): Date of the payment (YYYY-MM-DD).
        notes (str): Free-form notes.
    """

    def __init__(
        self,
        payment_id: str,
        from_id: str,
        to_id: str,
        amount: float,
        date: str,
        notes: str = ""
    ):
        self.payment_id = payment_id
        self.from_id = from_id
        self.to_id = to_id
        self.amount = amount
        self.date = date
        self.notes = notes

    def to_dict(self) -> dict:
        """Convert payment to dictionary for Firestore storage."""
        return {
            "payment_id": self.payment_id,
            "from_id": self.from_id,
            "to_id": self.to_id,
            "amount": self.amount,
            "date": self.date,
            "notes": self.notes
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Payment":
        """Create a Payment instance from a dictionary."""
        return cls(
            payment_id=data.get("payment_id"),
            from_id=data.get("from_id"),
            to_id=data.get("to_id"),
            amount=data.get("amount"),
            date=data.get("date"),
            notes=data.get("notes", "")
        )

    def __repr__(self) -> str:
        return f"Payment(id='{self.payment_id}', from='{self.from_id}', to='{self.to_id}', amount={self.amount})"


class Group:
    """
    Aggregate root holding everything needed to compute balances.

    Attributes:
        group_id (str): Unique identifier.
        name (str): Display name of the group.
        owner_id (str | None): External identity of the owner.
        members (list[Member]): Members in display order.
        transactions (list[Transaction]): Recorded expenses.
        payments (list[Payment]): Direct payments between members.
        custom_categories (list[str]): Categories added on top of the defaults.
    """

    def __init__(
        self,
        group_id: str,
        name: str = "",
        owner_id: Optional[str] = None,
        members: Optional[list[Member]] = None,
        transactions: Optional[list[Transaction]] = None,
        payments: Optional[list[Payment]] = None,
        custom_categories: Optional[list[str]] = None
    ):
        self.group_id = group_id
        self.name = name
        self.owner_id = owner_id
        self.members = list(members or [])
        self.transactions = list(transactions or [])
        self.payments = list(payments or [])
        self.custom_categories = list(custom_categories or [])

    @property
    def categories(self) -> list[str]:
        """Default categories followed by the group's own, without duplicates."""
        result = list(DEFAULT_CATEGORIES)
        for category in self.custom_categories:
            if category not in result:
                result.append(category)
        return result

    def member_ids(self) -> list[str]:
        return [m.member_id for m in self.members]

    def get_member(self, member_id: str) -> Optional[Member]:
        for member in self.members:
            if member.member_id == member_id:
                return member
        return None

    def to_dict(self) -> dict:
        """Convert group to dictionary for Firestore storage."""
        return {
            "group_id": self.group_id,
            "name": self.name,
            "owner_id": self.owner_id,
            "members": [m.to_dict() for m in self.members],
            "transactions": [t.to_dict() for t in self.transactions],
            "payments": [p.to_dict() for p in self.payments],
            "custom_categories": list(self.custom_categories)
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Group":
        """Create a Group instance from a dictionary."""
        return cls(
            group_id=data.get("group_id"),
            name=data.get("name", ""),
            owner_id=data.get("owner_id"),
            members=[Member.from_dict(m) for m in data.get("members", [])],
            transactions=[Transaction.from_dict(t) for t in data.get("transactions", [])],
            payments=[Payment.from_dict(p) for p in data.get("payments", [])],
            custom_categories=data.get("custom_categories", [])
        )

    def __repr__(self) -> str:
        return (
            f"Group(id='{self.group_id}', name='{self.name}', members={len(self.members)}, "
            f"transactions={len(self.transactions)}, payments={len(self.payments)})"
        )
