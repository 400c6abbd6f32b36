"""
Submission Store: one record per roll number.

The roll number is the primary key, so "has this student submitted" is
decided by the INSERT itself, never by a separate existence check.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from .db import atomic_with_retry
from .models import Selection, Submission

DUPLICATE = 'duplicate'
NOT_FOUND = 'not_found'


@dataclass(frozen=True)
class SubmissionRecord:
    roll_number: str
    name: str
    email: str
    whatsapp_number: str
    selections: dict
    submitted_at: datetime = field(default_factory=timezone.now)

    @classmethod
    def from_model(cls, submission):
        return cls(
            roll_number=submission.roll_number,
            name=submission.name,
            email=submission.email,
            whatsapp_number=submission.whatsapp_number,
            selections=submission.selection_map(),
            submitted_at=submission.submitted_at,
        )


@dataclass(frozen=True)
class StoreResult:
    ok: bool
    reason: str = ''
    deleted: Optional[SubmissionRecord] = None


class SubmissionStore:

    def insert_if_absent(self, record):
        def _insert():
            try:
                with transaction.atomic():
                    submission = Submission.objects.create(
                        roll_number=record.roll_number,
                        name=record.name,
                        email=record.email,
                        whatsapp_number=record.whatsapp_number,
                        submitted_at=record.submitted_at,
                    )
            except IntegrityError:
                return StoreResult(ok=False, reason=DUPLICATE)
            Selection.objects.bulk_create([
                Selection(submission=submission, subject_id=subject_id, faculty_id=faculty_id)
                for subject_id, faculty_id in record.selections.items()
            ])
            return StoreResult(ok=True)

        return atomic_with_retry(_insert, f'insert {record.roll_number}')

    def get_by_roll_number(self, roll_number):
        def _get():
            submission = (
                Submission.objects
                .prefetch_related('selections')
                .filter(roll_number=roll_number)
                .first()
            )
            return SubmissionRecord.from_model(submission) if submission else None

        return atomic_with_retry(_get, f'get {roll_number}')

    def get_all(self):
        """All submissions, newest first."""
        def _all():
            return [
                SubmissionRecord.from_model(s)
                for s in Submission.objects.prefetch_related('selections').order_by('-submitted_at')
            ]

        return atomic_with_retry(_all, 'list')

    def delete_and_return(self, roll_number):
        """
        Delete the record and hand back what was deleted.
        Of two concurrent deletes for the same roll number, one gets NOT_FOUND.
        """
        def _delete():
            submission = (
                Submission.objects
                .select_for_update()
                .filter(roll_number=roll_number)
                .first()
            )
            if submission is None:
                return StoreResult(ok=False, reason=NOT_FOUND)
            record = SubmissionRecord.from_model(submission)
            _, per_model = Submission.objects.filter(roll_number=roll_number).delete()
            if not per_model.get(Submission._meta.label):
                return StoreResult(ok=False, reason=NOT_FOUND)
            return StoreResult(ok=True, deleted=record)

        return atomic_with_retry(_delete, f'delete {roll_number}')
