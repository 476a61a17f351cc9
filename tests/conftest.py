import copy

import pytest

from splitledger.firebase_store import InMemoryGroupRepository
from splitledger.models import Group, Member, Payment, Split, Transaction


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocument:
    def __init__(self, store, doc_id):
        self._store = store
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._store.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._store:
            merged = dict(self._store[self.id])
            merged.update(copy.deepcopy(data))
            self._store[self.id] = merged
        else:
            self._store[self.id] = copy.deepcopy(data)

    def delete(self):
        self._store.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, field_filter):
        self._store = store
        self._filter = field_filter

    def stream(self):
        for doc_id, data in self._store.items():
            if data.get(self._filter.field_path) == self._filter.value:
                yield FakeSnapshot(doc_id, data)


class FakeCollection:
    def __init__(self, store):
        self._store = store

    def document(self, doc_id):
        return FakeDocument(self._store, doc_id)

    def where(self, filter=None):
        return FakeQuery(self._store, filter)


class FakeFirestore:
    """Just enough of the Firestore client API for the group repository."""

    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def repo():
    return InMemoryGroupRepository()


@pytest.fixture
def abc_group():
    return Group(
        group_id="g1",
        name="Trip",
        members=[Member("A", "Ana"), Member("B", "Ben"), Member("C", "Cy")],
        transactions=[
            Transaction(
                transaction_id="t1",
                amount=90.0,
                payer_id="A",
                splits=[Split("A", 30.0), Split("B", 30.0), Split("C", 30.0)],
                date="2025-09-01",
                category="Food & Dining",
            )
        ],
    )


@pytest.fixture
def abc_group_with_payment(abc_group):
    abc_group.payments.append(
        Payment(payment_id="p1", from_id="B", to_id="A", amount=30.0, date="2025-09-02")
    )
    return abc_group


@pytest.fixture
def stored_group(repo):
    return repo.create_group(
        "Flat",
        owner_id="owner-1",
        members=[Member("A", "Ana"), Member("B", "Ben"), Member("C", "Cy")],
    )
