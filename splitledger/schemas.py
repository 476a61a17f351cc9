"""
Schemas Module

Pydantic models describing the group document as it is stored in Firestore.
Every document read from storage is validated here before it is turned into
the domain records the settlement engine works on.

Document layout (groups/{group_id}):
    - group_id, name, owner_id
    - members: list of {member_id, name, status}
    - transactions: list of {transaction_id, amount, payer_id, splits, date,
      category, notes}
    - payments: list of {payment_id, from_id, to_id, amount, date, notes}
    - custom_categories: list of strings
    - created_at, updated_at: ISO timestamps (optional)

Notes:
    - Stored split totals are NOT re-validated against the transaction amount;
      that check happens only when a transaction is created or edited
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from splitledger.models import Group, MemberStatus


class _Document(BaseModel):
    # Firestore documents may carry fields written by other clients.
    model_config = ConfigDict(extra="ignore")


class MemberDocument(_Document):
    member_id: str = Field(..., min_length=1)
    name: str
    status: MemberStatus = MemberStatus.PLACEHOLDER


class SplitDocument(_Document):
    member_id: str = Field(..., min_length=1)
    amount: float
    percentage: Optional[float] = None
    shares: Optional[float] = None


class TransactionDocument(_Document):
    transaction_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    payer_id: str = Field(..., min_length=1)
    splits: list[SplitDocument] = Field(default_factory=list)
    date: str
    category: str = "Other"
    notes: str = ""


class PaymentDocument(_Document):
    payment_id: str = Field(..., min_length=1)
    from_id: str = Field(..., min_length=1)
    to_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    date: str
    notes: str = ""


class GroupDocument(_Document):
    group_id: str = Field(..., min_length=1)
    name: str = ""
    owner_id: Optional[str] = None
    members: list[MemberDocument] = Field(default_factory=list)
    transactions: list[TransactionDocument] = Field(default_factory=list)
    payments: list[PaymentDocument] = Field(default_factory=list)
    custom_categories: list[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def group_from_document(group_id: str, data: dict) -> Group:
    """
    Validate a raw stored document and convert it to a Group.

    The document id wins over any group_id stored in the body.

    Args:
        group_id: ID of the document the data was read from.
        data: Raw document contents.

    Returns:
        Group: Typed group ready for the settlement engine.

    Raises:
        ValueError: If the document does not match the schema.
    """
    try:
        document = GroupDocument.model_validate({**data, "group_id": group_id})
    except ValidationError as e:
        raise ValueError(f"Invalid group data for document {group_id}: {e}") from e

    return Group.from_dict(document.model_dump(mode="json", exclude_none=True))


def group_to_document(group: Group) -> dict:
    """Serialize a Group into the stored document layout (without timestamps)."""
    document = GroupDocument.model_validate(group.to_dict())
    return document.model_dump(mode="json", exclude={"created_at", "updated_at"})
