"""
Slot Store: per-(faculty, subject) seat counters.

Every change is a single conditional UPDATE inside a transaction, so
concurrent requests (threads or processes) cannot lose updates:

    decrement:  UPDATE ... SET remaining = remaining - 1 WHERE key = ? AND remaining > 0
    increment:  UPDATE ... SET remaining = remaining + 1 WHERE key = ? AND remaining < capacity

Counters are created lazily at full capacity the first time a pair is
touched.
"""
import logging
from dataclasses import dataclass, field

from django.db.models import F

from .catalog import get_catalog, slot_key
from .db import atomic_with_retry
from .exceptions import StoreUnavailableError
from .models import SlotCounter

logger = logging.getLogger(__name__)

NO_SEATS = 'no seats available'
NOT_ASSIGNED = 'faculty not assigned to this subject'


@dataclass(frozen=True)
class SlotResult:
    ok: bool
    remaining: int
    reason: str = ''


class SlotStore:

    def __init__(self, catalog=None):
        self.catalog = catalog or get_catalog()

    def _ensure_counter(self, faculty, subject):
        SlotCounter.objects.get_or_create(
            key=slot_key(faculty.id, subject.id),
            defaults={
                'faculty_id': faculty.id,
                'subject_id': subject.id,
                'remaining': faculty.capacity,
            },
        )

    def _read(self, key):
        return SlotCounter.objects.values_list('remaining', flat=True).get(key=key)

    def decrement_slot(self, faculty_id, subject_id):
        """Take one seat if any is left."""
        pair = self.catalog.resolve(faculty_id, subject_id)
        if pair is None:
            return SlotResult(ok=False, remaining=0, reason=NOT_ASSIGNED)
        faculty, subject = pair
        key = slot_key(faculty.id, subject.id)

        def _decrement():
            self._ensure_counter(faculty, subject)
            updated = (
                SlotCounter.objects
                .filter(key=key, remaining__gt=0)
                .update(remaining=F('remaining') - 1)
            )
            if not updated:
                return SlotResult(ok=False, remaining=0, reason=NO_SEATS)
            return SlotResult(ok=True, remaining=self._read(key))

        return atomic_with_retry(_decrement, f'decrement {key}')

    def increment_slot(self, faculty_id, subject_id):
        """
        Give one seat back. Already at capacity is a no-op that still
        succeeds, so compensation never fails on a fully restored slot.
        """
        pair = self.catalog.resolve(faculty_id, subject_id)
        if pair is None:
            return SlotResult(ok=False, remaining=0, reason=NOT_ASSIGNED)
        faculty, subject = pair
        key = slot_key(faculty.id, subject.id)

        def _increment():
            self._ensure_counter(faculty, subject)
            (
                SlotCounter.objects
                .filter(key=key, remaining__lt=faculty.capacity)
                .update(remaining=F('remaining') + 1)
            )
            return SlotResult(ok=True, remaining=min(self._read(key), faculty.capacity))

        return atomic_with_retry(_increment, f'increment {key}')

    def get_all_slots(self):
        """Snapshot {"<faculty>_<subject>": remaining} for display only."""
        pairs = self.catalog.pairs()

        def _snapshot():
            keys = [slot_key(f.id, s.id) for f, s in pairs]
            current = dict(SlotCounter.objects.filter(key__in=keys).values_list('key', 'remaining'))
            missing = [
                SlotCounter(key=slot_key(f.id, s.id), faculty_id=f.id, subject_id=s.id, remaining=f.capacity)
                for f, s in pairs
                if slot_key(f.id, s.id) not in current
            ]
            if missing:
                SlotCounter.objects.bulk_create(missing, ignore_conflicts=True)
                current = dict(SlotCounter.objects.filter(key__in=keys).values_list('key', 'remaining'))
            return {key: current[key] for key in keys}

        return atomic_with_retry(_snapshot, 'snapshot')

    def reset_all(self):
        """
        Put every counter back to full capacity in one bulk write.

        Administrative only: reservations in flight while this runs are
        overwritten and their seats double-counted as free.
        """
        pairs = self.catalog.pairs()

        def _reset():
            SlotCounter.objects.bulk_create(
                [
                    SlotCounter(key=slot_key(f.id, s.id), faculty_id=f.id, subject_id=s.id, remaining=f.capacity)
                    for f, s in pairs
                ],
                update_conflicts=True,
                unique_fields=['key'],
                update_fields=['remaining'],
            )

        atomic_with_retry(_reset, 'reset')
        logger.warning('All %d slot counters reset to full capacity', len(pairs))


@dataclass(frozen=True)
class RestoreFailure:
    subject_id: str
    faculty_id: str
    reason: str


@dataclass
class CompensationReport:
    restored: list = field(default_factory=list)
    failures: list = field(default_factory=list)

    @property
    def ok(self):
        return not self.failures


def compensate(store, reservations):
    """
    Increment every (subject_id, faculty_id) in `reservations`, in order.

    A failed restore is logged and recorded; the loop always runs to the
    end.
    """
    report = CompensationReport()
    for subject_id, faculty_id in reservations:
        try:
            result = store.increment_slot(faculty_id, subject_id)
        except StoreUnavailableError as exc:
            logger.error('Could not restore slot %s: %s', slot_key(faculty_id, subject_id), exc)
            report.failures.append(RestoreFailure(subject_id, faculty_id, str(exc)))
            continue
        except Exception as exc:
            logger.exception('Unexpected error restoring slot %s', slot_key(faculty_id, subject_id))
            report.failures.append(RestoreFailure(subject_id, faculty_id, str(exc) or exc.__class__.__name__))
            continue
        if result.ok:
            report.restored.append((subject_id, faculty_id))
        else:
            logger.error('Could not restore slot %s: %s', slot_key(faculty_id, subject_id), result.reason)
            report.failures.append(RestoreFailure(subject_id, faculty_id, result.reason))
    return report
