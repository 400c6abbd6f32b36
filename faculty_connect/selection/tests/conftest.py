"""
Shared fixtures for the selection tests.

The default catalog here is deliberately tiny so capacities run out fast:
f1 has 2 seats, f2 has 5, f3 has 1 (per subject).
"""
import pytest

from selection.catalog import Catalog
from selection.slots import SlotStore
from selection.submissions import SubmissionStore
from selection.workflow import DeletionWorkflow, SubmissionWorkflow

from .helpers import roll

TEST_CATALOG_CONFIG = {
    'FACULTIES': [
        {'id': 'f1', 'name': 'Dr. Eleanor Vance', 'capacity': 2},
        {'id': 'f2', 'name': 'Prof. Samuel Green', 'capacity': 5},
        {'id': 'f3', 'name': 'Dr. Olivia Chen', 'capacity': 1},
    ],
    'SUBJECTS': [
        {'id': 's1', 'name': 'Advanced Quantum Physics', 'faculty': ['f1', 'f2', 'f3']},
        {'id': 's2', 'name': 'Organic Chemistry Symphony', 'faculty': ['f1', 'f2']},
        {'id': 's3', 'name': 'Computational Linguistics', 'faculty': ['f2', 'f3']},
    ],
    'ROLL_NUMBER_PATTERN': r'^2[0-3]09[15]A05[0-9A-K][0-9]$',
    'STORE_RETRY_ATTEMPTS': 3,
    'STORE_RETRY_BACKOFF': 0,
}


@pytest.fixture(autouse=True)
def test_catalog_settings(settings):
    settings.FACULTY_CONNECT = dict(TEST_CATALOG_CONFIG)
    return settings.FACULTY_CONNECT


@pytest.fixture
def catalog():
    return Catalog.from_config(TEST_CATALOG_CONFIG)


@pytest.fixture
def slots(catalog):
    return SlotStore(catalog)


@pytest.fixture
def submissions():
    return SubmissionStore()


@pytest.fixture
def workflow(catalog, slots, submissions):
    return SubmissionWorkflow(catalog, slots, submissions)


@pytest.fixture
def deletion(catalog, slots, submissions):
    return DeletionWorkflow(catalog, slots, submissions)


@pytest.fixture
def make_payload():
    def _make(n=1, selections=None, **overrides):
        payload = {
            'rollNumber': roll(n),
            'name': 'Ananya Krishnan',
            'email': 'ananya@example.com',
            'whatsappNumber': '9876543210',
            'selections': selections if selections is not None else {'s1': 'f2', 's2': 'f2', 's3': 'f2'},
        }
        payload.update(overrides)
        return payload
    return _make
