"""
Shared pytest fixtures.

The in-memory store implements the same collection-scoped interface as
`PostgresDocumentStore`, so services and routes run without a database.
"""

import copy
import itertools
import operator
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from auth.service import AuthService
from core.config import AuthSettings, Settings
from documents.repository import DocumentRepository
from main import create_app

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"

_MATCHERS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda actual, expected: actual in expected,
    "array-contains": lambda actual, expected: isinstance(actual, list) and expected in actual,
}


class InMemoryDocumentStore:
    def __init__(self):
        self.collections = {}
        self._ids = itertools.count(1)

    def _docs(self, collection):
        return self.collections.setdefault(collection, {})

    async def get_all(self, collection):
        return [(doc_id, copy.deepcopy(data)) for doc_id, data in self._docs(collection).items()]

    async def get(self, collection, document_id):
        docs = self._docs(collection)
        if document_id not in docs:
            return False, {}
        return True, copy.deepcopy(docs[document_id])

    async def add(self, collection, fields):
        doc_id = f"doc{next(self._ids)}"
        self._docs(collection)[doc_id] = copy.deepcopy(fields)
        return doc_id

    async def update(self, collection, document_id, fields):
        docs = self._docs(collection)
        if document_id not in docs:
            return False
        docs[document_id].update(copy.deepcopy(fields))
        return True

    async def delete(self, collection, document_id):
        return self._docs(collection).pop(document_id, None) is not None

    async def query(self, collection, predicates):
        def matches(data):
            return all(
                p.field in data and _MATCHERS[p.operator](data[p.field], p.value)
                for p in predicates
            )

        return [
            (doc_id, copy.deepcopy(data))
            for doc_id, data in self._docs(collection).items()
            if matches(data)
        ]


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def documents(store):
    return DocumentRepository(store)


@pytest.fixture
def auth_settings():
    # Lowest bcrypt cost keeps the suite fast.
    return AuthSettings(
        jwt_secret=TEST_SECRET,
        jwt_algorithm="HS256",
        token_expiry=timedelta(hours=1),
        bcrypt_rounds=4,
    )


@pytest.fixture
def auth_service(documents, auth_settings):
    return AuthService(documents, auth_settings)


@pytest.fixture
def app(store, auth_settings):
    settings = Settings(auth=auth_settings, app_env="test")
    return create_app(settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
