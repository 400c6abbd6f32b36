"""
Unit Tests for the Admin Deletion Workflow
"""
from unittest.mock import patch

import pytest

from selection.catalog import Catalog
from selection.exceptions import StoreUnavailableError
from selection.models import Submission
from selection.slots import SlotStore
from selection.submissions import SubmissionRecord
from selection.workflow import DELETED, ERROR, PARTIAL, DeletionWorkflow

from .helpers import roll

pytestmark = pytest.mark.django_db


def store_record(submissions, n, selections):
    submissions.insert_if_absent(SubmissionRecord(
        roll_number=roll(n),
        name=f'Student {n}',
        email=f'student{n}@example.com',
        whatsapp_number='9123456789',
        selections=selections,
    ))


@pytest.fixture
def roomy_catalog():
    return Catalog.from_config({
        'FACULTIES': [
            {'id': 'f1', 'name': 'Dr. Eleanor Vance', 'capacity': 10},
            {'id': 'f2', 'name': 'Prof. Samuel Green', 'capacity': 10},
        ],
        'SUBJECTS': [
            {'id': 's1', 'name': 'Advanced Quantum Physics', 'faculty': ['f1', 'f2']},
            {'id': 's2', 'name': 'Organic Chemistry Symphony', 'faculty': ['f1', 'f2']},
        ],
    })


class TestDeletionRestoresSlots:

    def test_delete_increments_each_selected_slot(self, roomy_catalog, submissions):
        slots = SlotStore(roomy_catalog)
        for _ in range(5):
            slots.decrement_slot('f1', 's1')
            slots.decrement_slot('f2', 's2')
        store_record(submissions, 1, {'s1': 'f1', 's2': 'f2'})

        result = DeletionWorkflow(roomy_catalog, slots, submissions).delete(roll(1))

        assert result.status == DELETED
        assert result.success is True
        assert result.restored == [('s1', 'f1'), ('s2', 'f2')]
        snapshot = slots.get_all_slots()
        assert snapshot['f1_s1'] == 6
        assert snapshot['f2_s2'] == 6
        assert submissions.get_by_roll_number(roll(1)) is None

    def test_restore_is_capped_at_capacity(self, deletion, slots, submissions):
        store_record(submissions, 1, {'s1': 'f1', 's2': 'f1', 's3': 'f3'})

        result = deletion.delete(roll(1))

        assert result.status == DELETED
        snapshot = slots.get_all_slots()
        assert (snapshot['f1_s1'], snapshot['f1_s2'], snapshot['f3_s3']) == (2, 2, 1)

    def test_submit_then_delete_round_trip(self, workflow, deletion, slots, make_payload):
        before = slots.get_all_slots()
        assert workflow.submit(make_payload(3, selections={'s1': 'f3', 's2': 'f1', 's3': 'f3'})).success

        result = deletion.delete(roll(3))

        assert result.status == DELETED
        assert slots.get_all_slots() == before


class TestDeletionFailures:

    def test_unknown_roll_number_is_not_found(self, deletion):
        result = deletion.delete(roll(42))

        assert result.status == 'not_found'
        assert result.success is False
        assert roll(42) in result.message

    def test_partial_restore_still_deletes(self, deletion, slots, submissions):
        slots.decrement_slot('f1', 's1')
        slots.decrement_slot('f2', 's2')
        store_record(submissions, 1, {'s1': 'f1', 's2': 'f2'})
        real_increment = slots.increment_slot

        def fail_s2(faculty_id, subject_id):
            if subject_id == 's2':
                raise StoreUnavailableError()
            return real_increment(faculty_id, subject_id)

        with patch.object(slots, 'increment_slot', side_effect=fail_s2):
            result = deletion.delete(roll(1))

        assert result.status == PARTIAL
        assert result.success is True
        assert [(f.subject_id, f.faculty_id) for f in result.failed] == [('s2', 'f2')]
        assert result.restored == [('s1', 'f1')]
        assert '1 slot(s) restored' in result.message
        assert not Submission.objects.filter(pk=roll(1)).exists()
        assert slots.get_all_slots()['f1_s1'] == 2
        assert slots.get_all_slots()['f2_s2'] == 4

        data = result.as_dict()
        assert data['partialSuccess'] is True
        assert data['failed'] == [{'subjectId': 's2', 'facultyId': 'f2', 'reason': result.failed[0].reason}]

    def test_entries_missing_from_catalog_are_skipped(self, deletion, slots, submissions):
        slots.decrement_slot('f2', 's1')
        store_record(submissions, 1, {'s1': 'f2', 's2': 'f9', 's7': 'f1'})

        result = deletion.delete(roll(1))

        assert result.status == DELETED
        assert result.restored == [('s1', 'f2')]
        assert result.skipped == [('s2', 'f9'), ('s7', 'f1')]
        assert slots.get_all_slots()['f2_s1'] == 5

    def test_store_outage_on_delete(self, deletion, submissions):
        store_record(submissions, 1, {'s1': 'f1', 's2': 'f1', 's3': 'f2'})

        with patch.object(submissions, 'delete_and_return', side_effect=StoreUnavailableError()):
            result = deletion.delete(roll(1))

        assert result.status == ERROR
        assert result.success is False
        assert Submission.objects.filter(pk=roll(1)).exists()
