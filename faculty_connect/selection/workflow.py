"""
Submission and admin-deletion workflows.

Submitting walks

    Validating -> CheckingDuplicate -> ReservingSlots -> Persisting -> Done

and leaves the slot counters exactly as it found them whenever it stops
early. Reservations are taken in catalog subject order and given back in
the same order. If the record cannot be written after every slot was
reserved, all of them are released (Compensating) and the attempt is
reported as a failure.

Deleting removes the record first and then restores its slots. The
deletion is never undone; restore failures only downgrade the result to
a partial success.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from .catalog import get_catalog
from .exceptions import (
    CompensationPartialError,
    DuplicateSubmissionError,
    FacultyConnectError,
    PersistenceError,
    SlotExhaustedError,
    StoreUnavailableError,
    SubmissionValidationError,
)
from .forms import SubmissionForm
from .slots import SlotStore, compensate
from .submissions import NOT_FOUND, SubmissionRecord, SubmissionStore

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    success: bool
    message: str
    error: Optional[str] = None
    field_errors: Optional[dict] = None
    updated_slots: Optional[dict] = None

    def as_dict(self):
        data = {'success': self.success, 'message': self.message}
        if self.error:
            data['error'] = self.error
        if self.field_errors:
            data['fieldErrors'] = self.field_errors
        if self.updated_slots is not None:
            data['updatedSlots'] = self.updated_slots
        return data


class SubmissionWorkflow:

    def __init__(self, catalog=None, slots=None, submissions=None):
        self.catalog = catalog or get_catalog()
        self.slots = slots or SlotStore(self.catalog)
        self.submissions = submissions or SubmissionStore()

    def submit(self, payload):
        try:
            record = self._validate(payload)
            self._check_duplicate(record)
            reserved = self._reserve(record)
            self._persist(record, reserved)
        except SubmissionValidationError as exc:
            return SubmissionResult(False, exc.message, error=exc.code, field_errors=exc.field_errors)
        except FacultyConnectError as exc:
            return SubmissionResult(False, exc.message, error=exc.code, updated_slots=self._snapshot())

        logger.info('Submission saved for %s', record.roll_number)
        return SubmissionResult(
            True,
            f'Thank you, {record.name}! Your faculty selections have been submitted successfully.',
            updated_slots=self._snapshot(),
        )

    def _validate(self, payload):
        if not isinstance(payload, dict):
            raise SubmissionValidationError({'__all__': ['Expected a JSON object.']})
        form = SubmissionForm.from_payload(self.catalog, payload)
        if not form.is_valid():
            raise SubmissionValidationError(form.field_errors())
        data = form.cleaned_data
        return SubmissionRecord(
            roll_number=data['roll_number'],
            name=data['name'],
            email=data['email'],
            whatsapp_number=data['whatsapp_number'],
            selections=form.selections(),
        )

    def _check_duplicate(self, record):
        if self.submissions.get_by_roll_number(record.roll_number) is not None:
            logger.info('Rejected duplicate submission for %s', record.roll_number)
            raise DuplicateSubmissionError(record.roll_number)

    def _reserve(self, record):
        reserved = []
        for subject in self.catalog.subjects:
            faculty_id = record.selections[subject.id]
            try:
                result = self.slots.decrement_slot(faculty_id, subject.id)
            except StoreUnavailableError:
                self._release(reserved, record, 'store error while reserving')
                raise
            if not result.ok:
                logger.info('No seats for %s in %s (%s)', faculty_id, subject.id, record.roll_number)
                self._release(reserved, record, f'{subject.id} unavailable')
                raise SlotExhaustedError(subject, faculty_id, result.reason)
            reserved.append((subject.id, faculty_id))
        return reserved

    def _persist(self, record, reserved):
        try:
            outcome = self.submissions.insert_if_absent(record)
        except StoreUnavailableError as exc:
            logger.error('Could not persist submission for %s: %s', record.roll_number, exc)
            self._release(reserved, record, 'persist failed')
            raise PersistenceError() from exc
        if not outcome.ok:
            # lost the insert race to a concurrent submission for the same roll number
            self._release(reserved, record, 'duplicate on insert')
            raise DuplicateSubmissionError(record.roll_number)

    def _release(self, reserved, record, why):
        if not reserved:
            return
        logger.warning('Releasing %d reserved slot(s) for %s: %s', len(reserved), record.roll_number, why)
        report = compensate(self.slots, reserved)
        if not report.ok:
            logger.error(
                'Slot release for %s left %d slot(s) unrestored: %s',
                record.roll_number, len(report.failures), report.failures,
            )

    def _snapshot(self):
        try:
            return self.slots.get_all_slots()
        except StoreUnavailableError:
            logger.exception('Could not read slot snapshot')
            return None


DELETED = 'deleted'
PARTIAL = 'partial'
ERROR = 'error'


@dataclass
class DeletionResult:
    status: str
    message: str
    restored: list = field(default_factory=list)
    failed: list = field(default_factory=list)
    skipped: list = field(default_factory=list)

    @property
    def success(self):
        return self.status in (DELETED, PARTIAL)

    def as_dict(self):
        data = {'success': self.success, 'status': self.status, 'message': self.message}
        if self.status == PARTIAL:
            data['partialSuccess'] = True
        if self.failed:
            data['failed'] = [
                {'subjectId': f.subject_id, 'facultyId': f.faculty_id, 'reason': f.reason}
                for f in self.failed
            ]
        if self.skipped:
            data['skipped'] = [{'subjectId': s, 'facultyId': f} for s, f in self.skipped]
        return data


class DeletionWorkflow:

    def __init__(self, catalog=None, slots=None, submissions=None):
        self.catalog = catalog or get_catalog()
        self.slots = slots or SlotStore(self.catalog)
        self.submissions = submissions or SubmissionStore()

    def delete(self, roll_number):
        try:
            outcome = self.submissions.delete_and_return(roll_number)
        except StoreUnavailableError as exc:
            return DeletionResult(ERROR, exc.message)
        if not outcome.ok:
            return DeletionResult(NOT_FOUND, f'Submission not found for {roll_number}.')

        logger.info('Deleted submission %s; restoring its slots', roll_number)
        to_restore, skipped = self._resolve(outcome.deleted)
        try:
            report = self._restore(roll_number, to_restore)
        except CompensationPartialError as exc:
            logger.warning(exc.message)
            return DeletionResult(
                PARTIAL, exc.message,
                restored=exc.restored, failed=exc.failures, skipped=skipped,
            )
        return DeletionResult(
            DELETED,
            f'Successfully deleted submission for {roll_number} and restored {len(report.restored)} slot(s).',
            restored=report.restored,
            skipped=skipped,
        )

    def _resolve(self, record):
        to_restore, skipped = [], []
        for subject_id, faculty_id in sorted(record.selections.items(), key=self._subject_order):
            if self.catalog.resolve(faculty_id, subject_id) is None:
                logger.warning(
                    'Skipping slot restore for %s: %s/%s is no longer in the catalog',
                    record.roll_number, subject_id, faculty_id,
                )
                skipped.append((subject_id, faculty_id))
            else:
                to_restore.append((subject_id, faculty_id))
        return to_restore, skipped

    def _subject_order(self, item):
        order = [s.id for s in self.catalog.subjects]
        subject_id = item[0]
        return (order.index(subject_id), '') if subject_id in order else (len(order), subject_id)

    def _restore(self, roll_number, to_restore):
        report = compensate(self.slots, to_restore)
        if not report.ok:
            raise CompensationPartialError(roll_number, report.failures, report.restored)
        return report


def submit_faculty_selection(payload):
    return SubmissionWorkflow().submit(payload)


def delete_submission(roll_number):
    return DeletionWorkflow().delete(roll_number)
