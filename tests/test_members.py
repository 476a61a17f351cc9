import pytest

from splitledger.expenses import add_payment, add_transaction
from splitledger.members import (
    add_member,
    is_member_referenced,
    remove_member,
    rename_member,
    set_member_status,
)
from splitledger.models import MemberStatus, SplitInput


def test_add_member(repo, stored_group):
    member = add_member(repo, stored_group.group_id, "  Dee ")

    assert member.name == "Dee"
    assert member.status is MemberStatus.PLACEHOLDER
    assert repo.get_group(stored_group.group_id).member_ids() == ["A", "B", "C", member.member_id]


def test_add_member_validation(repo, stored_group):
    with pytest.raises(ValueError, match="name must be a non-empty string"):
        add_member(repo, stored_group.group_id, "  ")
    with pytest.raises(ValueError, match="status must be one of"):
        add_member(repo, stored_group.group_id, "Dee", status="banned")


def test_rename_and_status(repo, stored_group):
    rename_member(repo, stored_group.group_id, "B", "Benjamin")
    set_member_status(repo, stored_group.group_id, "B", "invited")

    member = repo.get_group(stored_group.group_id).get_member("B")
    assert member.name == "Benjamin"
    assert member.status is MemberStatus.INVITED

    with pytest.raises(ValueError, match="Member Z not found"):
        rename_member(repo, stored_group.group_id, "Z", "Zed")


def test_remove_unreferenced_member(repo, stored_group):
    group = remove_member(repo, stored_group.group_id, "C")

    assert group.member_ids() == ["A", "B"]
    assert repo.get_group(stored_group.group_id).member_ids() == ["A", "B"]


def test_cannot_remove_payer_or_split_member(repo, stored_group):
    add_transaction(
        repo, stored_group.group_id, 10, "A", "equal", [SplitInput("B")], "2025-09-01"
    )

    for member_id in ("A", "B"):
        with pytest.raises(ValueError, match="Cannot delete member who is involved in transactions"):
            remove_member(repo, stored_group.group_id, member_id)

    assert repo.get_group(stored_group.group_id).member_ids() == ["A", "B", "C"]


def test_payment_counts_as_reference(repo, stored_group):
    add_payment(repo, stored_group.group_id, "B", "C", 5, "2025-09-01")
    group = repo.get_group(stored_group.group_id)

    assert is_member_referenced(group, "B")
    assert is_member_referenced(group, "C")
    assert not is_member_referenced(group, "A")
    with pytest.raises(ValueError):
        remove_member(repo, stored_group.group_id, "C")
