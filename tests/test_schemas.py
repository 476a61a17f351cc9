import pytest

from splitledger.models import Group, Member, MemberStatus, Payment, Split, Transaction
from splitledger.schemas import group_from_document, group_to_document


def test_document_id_wins():
    group = group_from_document("g2", {"group_id": "g1", "name": "Trip"})

    assert group.group_id == "g2"
    assert group.members == []


def test_extra_fields_and_defaults():
    group = group_from_document("g1", {
        "name": "Trip",
        "legacy_field": True,
        "members": [{"member_id": "A", "name": "Ana"}],
        "payments": [{"payment_id": "p1", "from_id": "A", "to_id": "B", "amount": 5, "date": "2025-09-01"}],
    })

    assert group.members[0].status is MemberStatus.PLACEHOLDER
    assert group.payments[0].amount == 5.0
    assert group.payments[0].notes == ""


def test_stored_splits_are_not_reconciled():
    # Split totals that no longer match the amount load unchanged.
    group = group_from_document("g1", {
        "members": [{"member_id": "A", "name": "Ana"}],
        "transactions": [{
            "transaction_id": "t1",
            "amount": 100,
            "payer_id": "A",
            "splits": [{"member_id": "A", "amount": 40}],
            "date": "2025-09-01",
        }],
    })

    assert group.transactions[0].splits == [Split("A", 40.0)]


@pytest.mark.parametrize(
    "data",
    [
        {"members": [{"member_id": "", "name": "x"}]},
        {"members": [{"member_id": "A", "name": "x", "status": "banned"}]},
        {"payments": [{"payment_id": "p", "from_id": "A", "to_id": "B", "amount": 0, "date": "2025-09-01"}]},
        {"transactions": [{"transaction_id": "t", "amount": 1, "payer_id": "A", "date": "2025-09-01",
                           "splits": [{"member_id": "A"}]}]},
    ],
)
def test_invalid_documents(data):
    with pytest.raises(ValueError, match="Invalid group data"):
        group_from_document("g1", data)


def test_to_document_layout():
    group = Group(
        group_id="g1",
        name="Trip",
        members=[Member("A", "Ana", MemberStatus.ACTIVE)],
        transactions=[Transaction("t1", 10.0, "A", [Split("A", 10.0, shares=1.0)], "2025-09-01", "Travel")],
        payments=[Payment("p1", "A", "B", 2.5, "2025-09-02", "cash")],
        custom_categories=["Rent"],
    )
    document = group_to_document(group)

    assert "created_at" not in document
    assert document["members"] == [{"member_id": "A", "name": "Ana", "status": "active"}]
    assert document["transactions"][0]["splits"][0]["shares"] == 1.0
    assert document["payments"][0]["notes"] == "cash"
    assert document["custom_categories"] == ["Rent"]
