"""
Members Module

This module handles member-related operations for a stored group.

Features:
    - Add members (placeholders until linked to an external identity)
    - Rename members and change their link status
    - Remove members that no transaction or payment refers to

Data Model:
    Members live inside the group document: groups/{group_id}.members
    Fields:
        - member_id: string (UUID4, generated here)
        - name: string
        - status: placeholder | invited | active

Functions:
    add_member: Add a new member to a group.
    rename_member: Change a member's display name.
    set_member_status: Change a member's link status.
    is_member_referenced: Check whether any record refers to a member.
    remove_member: Remove an unreferenced member from a group.
"""

import logging
from typing import Union

from splitledger.firebase_store import GroupRepository, require_group
from splitledger.models import Group, Member, MemberStatus
from splitledger.utils import generate_id, validate_non_empty_string


logger = logging.getLogger(__name__)


def _require_member(group: Group, member_id: str) -> Member:
    validate_non_empty_string(member_id, "member_id")

    member = group.get_member(member_id)
    if member is None:
        raise ValueError(f"Member {member_id} not found in group {group.group_id}")
    return member


def add_member(
    repo: GroupRepository,
    group_id: str,
    name: str,
    status: Union[MemberStatus, str] = MemberStatus.PLACEHOLDER
) -> Member:
    """
    Add a new member to a group.

    Args:
        repo: Repository holding the group.
        group_id: The ID of the group.
        name: Display name of the member.
        status: Initial link status (default: placeholder).

    Returns:
        Member: The created member.

    Raises:
        ValueError: If input validation fails or the group does not exist.
        RuntimeError: If the store is not available.
    """
    validate_non_empty_string(name, "name")
    try:
        status = MemberStatus(status)
    except ValueError:
        raise ValueError(f"status must be one of {[s.value for s in MemberStatus]}, got: {status}")

    group = require_group(repo, group_id)

    member = Member(member_id=generate_id(), name=name.strip(), status=status)
    group.members.append(member)
    repo.save_group(group)

    logger.info("Added member %s to group %s", member.member_id, group_id)
    return member


def rename_member(repo: GroupRepository, group_id: str, member_id: str, name: str) -> Member:
    """Change a member's display name. Identity (member_id) is unchanged."""
    validate_non_empty_string(name, "name")

    group = require_group(repo, group_id)
    member = _require_member(group, member_id)
    member.name = name.strip()
    repo.save_group(group)
    return member


def set_member_status(
    repo: GroupRepository,
    group_id: str,
    member_id: str,
    status: Union[MemberStatus, str]
) -> Member:
    try:
        status = MemberStatus(status)
    except ValueError:
        raise ValueError(f"status must be one of {[s.value for s in MemberStatus]}, got: {status}")

    group = require_group(repo, group_id)
    member = _require_member(group, member_id)
    member.status = status
    repo.save_group(group)
    return member


def is_member_referenced(group: Group, member_id: str) -> bool:
    """
    Check whether a member is the payer of a transaction, appears in any
    split, or is on either side of a payment.
    """
    for transaction in group.transactions:
        if transaction.payer_id == member_id:
            return True
        if any(split.member_id == member_id for split in transaction.splits):
            return True

    return any(
        payment.from_id == member_id or payment.to_id == member_id
        for payment in group.payments
    )


def remove_member(repo: GroupRepository, group_id: str, member_id: str) -> Group:
    """
    Remove a member from a group.

    Args:
        repo: Repository holding the group.
        group_id: The ID of the group.
        member_id: The ID of the member to remove.

    Returns:
        Group: The updated group.

    Raises:
        ValueError: If the member does not exist or is still referenced by a
            transaction or payment.
        RuntimeError: If the store is not available.
    """
    group = require_group(repo, group_id)
    _require_member(group, member_id)

    if is_member_referenced(group, member_id):
        raise ValueError("Cannot delete member who is involved in transactions")

    group.members = [m for m in group.members if m.member_id != member_id]
    repo.save_group(group)

    logger.info("Removed member %s from group %s", member_id, group_id)
    return group
