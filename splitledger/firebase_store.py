"""
Firebase Store Module

This module is the storage boundary of the ledger. The computation modules
never touch storage; they receive Group snapshots from a repository and hand
updated snapshots back to it.

Features:
    - GroupRepository protocol for dependency injection
    - Firestore-backed repository (one document per group)
    - In-memory repository with the same contract
    - Schema validation of every document on read
    - Whole-document writes (last write wins)

Firestore Structure:
    groups/{group_id}
        - group_id: string
        - name: string
        - owner_id: string or None
        - members: list of member maps
        - transactions: list of transaction maps (with splits)
        - payments: list of payment maps
        - custom_categories: list of strings
        - created_at: timestamp
        - updated_at: timestamp

Functions:
    require_group: Load a group or raise ValueError.
"""

import copy
import logging
from typing import Optional, Protocol

from google.cloud.firestore_v1.base_query import FieldFilter

from splitledger.config.firebase_config import get_db
from splitledger.config.settings import GROUPS_COLLECTION
from splitledger.models import Group, Member
from splitledger.schemas import group_from_document, group_to_document
from splitledger.utils import generate_id, get_timestamp, validate_non_empty_string


logger = logging.getLogger(__name__)


class GroupRepository(Protocol):
    """
    Contract for loading and storing Group aggregates.
    """

    def get_group(self, group_id: str) -> Optional[Group]:
        """
        Load a group by id.

        Returns:
        - Group if the document exists;
        - None otherwise.
        """
        ...

    def create_group(
        self,
        name: str,
        owner_id: Optional[str] = None,
        members: Optional[list[Member]] = None
    ) -> Group:
        ...

    def save_group(self, group: Group) -> Group:
        """
        Replace the stored group with the given snapshot.
        """
        ...

    def delete_group(self, group_id: str) -> None:
        ...

    def list_user_groups(self, owner_id: str) -> list[Group]:
        ...


class FirestoreGroupRepository:
    """
    Groups stored as single documents in a Firestore collection.

    Args:
        db: Firestore client; defaults to get_db() on first use.
        collection: Name of the groups collection.
    """

    def __init__(self, db=None, collection: str = GROUPS_COLLECTION):
        self._db = db
        self.collection = collection

    def _collection(self):
        db = self._db if self._db is not None else get_db()
        if db is None:
            raise RuntimeError("Firestore is not available")
        return db.collection(self.collection)

    def get_group(self, group_id: str) -> Optional[Group]:
        validate_non_empty_string(group_id, "group_id")

        snapshot = self._collection().document(group_id).get()
        if not snapshot.exists:
            return None
        return group_from_document(group_id, snapshot.to_dict())

    def create_group(
        self,
        name: str,
        owner_id: Optional[str] = None,
        members: Optional[list[Member]] = None
    ) -> Group:
        validate_non_empty_string(name, "name")

        group = Group(group_id=generate_id(), name=name.strip(), owner_id=owner_id, members=members)
        timestamp = get_timestamp()

        doc_data = group_to_document(group)
        doc_data["created_at"] = timestamp
        doc_data["updated_at"] = timestamp

        self._collection().document(group.group_id).set(doc_data)
        logger.info("Created group %s", group.group_id)
        return group

    def save_group(self, group: Group) -> Group:
        """
        Write the full group document.

        Top-level fields are merged so created_at survives; members,
        transactions and payments are replaced as a whole.
        """
        validate_non_empty_string(group.group_id, "group_id")

        doc_data = group_to_document(group)
        doc_data["updated_at"] = get_timestamp()

        self._collection().document(group.group_id).set(doc_data, merge=True)
        logger.debug("Saved group %s", group.group_id)
        return group

    def delete_group(self, group_id: str) -> None:
        validate_non_empty_string(group_id, "group_id")

        self._collection().document(group_id).delete()
        logger.info("Deleted group %s", group_id)

    def list_user_groups(self, owner_id: str) -> list[Group]:
        validate_non_empty_string(owner_id, "owner_id")

        docs = self._collection().where(filter=FieldFilter("owner_id", "==", owner_id)).stream()
        return [group_from_document(doc.id, doc.to_dict()) for doc in docs]


class InMemoryGroupRepository:
    """
    Dictionary-backed repository with the same contract as the Firestore one.

    Documents are stored in serialized form and validated on every read, so
    code exercised against it sees exactly what it would see from Firestore.
    """

    def __init__(self):
        self._documents: dict[str, dict] = {}

    def get_group(self, group_id: str) -> Optional[Group]:
        validate_non_empty_string(group_id, "group_id")

        data = self._documents.get(group_id)
        if data is None:
            return None
        return group_from_document(group_id, copy.deepcopy(data))

    def create_group(
        self,
        name: str,
        owner_id: Optional[str] = None,
        members: Optional[list[Member]] = None
    ) -> Group:
        validate_non_empty_string(name, "name")

        group = Group(group_id=generate_id(), name=name.strip(), owner_id=owner_id, members=members)
        timestamp = get_timestamp()

        doc_data = group_to_document(group)
        doc_data["created_at"] = timestamp
        doc_data["updated_at"] = timestamp
        self._documents[group.group_id] = doc_data
        return group

    def save_group(self, group: Group) -> Group:
        validate_non_empty_string(group.group_id, "group_id")

        created_at = self._documents.get(group.group_id, {}).get("created_at")
        doc_data = group_to_document(group)
        doc_data["created_at"] = created_at or get_timestamp()
        doc_data["updated_at"] = get_timestamp()
        self._documents[group.group_id] = doc_data
        return group

    def delete_group(self, group_id: str) -> None:
        self._documents.pop(group_id, None)

    def list_user_groups(self, owner_id: str) -> list[Group]:
        return [
            group_from_document(group_id, copy.deepcopy(data))
            for group_id, data in self._documents.items()
            if data.get("owner_id") == owner_id
        ]


def require_group(repo: GroupRepository, group_id: str) -> Group:
    """
    Load a group or fail.

    Raises:
        ValueError: If group_id is invalid or the group does not exist.
        RuntimeError: If the store is not available.
    """
    validate_non_empty_string(group_id, "group_id")

    group = repo.get_group(group_id)
    if group is None:
        raise ValueError(f"Group {group_id} not found")
    return group
