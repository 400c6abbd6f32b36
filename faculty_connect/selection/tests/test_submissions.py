"""
Unit Tests for the Submission Store
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from selection.models import Selection, Submission
from selection.submissions import DUPLICATE, NOT_FOUND, SubmissionRecord

from .helpers import roll

pytestmark = pytest.mark.django_db


def make_record(n, **overrides):
    data = {
        'roll_number': roll(n),
        'name': f'Student {n}',
        'email': f'student{n}@example.com',
        'whatsapp_number': '9123456789',
        'selections': {'s1': 'f1', 's2': 'f2', 's3': 'f3'},
    }
    data.update(overrides)
    return SubmissionRecord(**data)


class TestInsertIfAbsent:

    def test_insert_stores_record_and_selections(self, submissions):
        result = submissions.insert_if_absent(make_record(1))

        assert result.ok
        stored = Submission.objects.get(pk=roll(1))
        assert stored.selection_map() == {'s1': 'f1', 's2': 'f2', 's3': 'f3'}

    def test_second_insert_for_same_roll_number_is_duplicate(self, submissions):
        submissions.insert_if_absent(make_record(1))

        result = submissions.insert_if_absent(make_record(1, name='Someone Else'))

        assert not result.ok
        assert result.reason == DUPLICATE
        assert Submission.objects.get(pk=roll(1)).name == 'Student 1'
        assert Selection.objects.count() == 3


class TestLookups:

    def test_get_by_roll_number(self, submissions):
        submissions.insert_if_absent(make_record(7))

        record = submissions.get_by_roll_number(roll(7))

        assert record.name == 'Student 7'
        assert record.selections == {'s1': 'f1', 's2': 'f2', 's3': 'f3'}
        assert submissions.get_by_roll_number(roll(8)) is None

    def test_get_all_is_newest_first(self, submissions):
        now = timezone.now()
        submissions.insert_if_absent(make_record(1, submitted_at=now - timedelta(minutes=5)))
        submissions.insert_if_absent(make_record(2, submitted_at=now))
        submissions.insert_if_absent(make_record(3, submitted_at=now - timedelta(minutes=1)))

        assert [r.roll_number for r in submissions.get_all()] == [roll(2), roll(3), roll(1)]


class TestDeleteAndReturn:

    def test_delete_returns_the_deleted_record(self, submissions):
        submissions.insert_if_absent(make_record(4))

        result = submissions.delete_and_return(roll(4))

        assert result.ok
        assert result.deleted.roll_number == roll(4)
        assert result.deleted.selections == {'s1': 'f1', 's2': 'f2', 's3': 'f3'}
        assert not Submission.objects.exists()
        assert not Selection.objects.exists()

    def test_delete_twice_is_not_found(self, submissions):
        submissions.insert_if_absent(make_record(4))
        submissions.delete_and_return(roll(4))

        result = submissions.delete_and_return(roll(4))

        assert not result.ok
        assert result.reason == NOT_FOUND
        assert result.deleted is None
