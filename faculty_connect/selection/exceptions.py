"""
Error taxonomy for the selection workflows.

Every error carries a short `code` the HTTP layer maps to a status. None
of these escape the workflows: they are caught at the boundary and turned
into a SubmissionResult / DeletionResult.
"""


class FacultyConnectError(Exception):
    code = 'error'
    default_message = 'An unexpected error occurred. Please try again.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return self.args[0]


class SubmissionValidationError(FacultyConnectError):
    """Malformed input. Raised before any store is touched."""
    code = 'validation'
    default_message = 'Invalid submission. Please check the highlighted fields.'

    def __init__(self, field_errors, message=None):
        super().__init__(message)
        self.field_errors = field_errors


class DuplicateSubmissionError(FacultyConnectError):
    code = 'duplicate'

    def __init__(self, roll_number):
        super().__init__(
            f'Roll number {roll_number} has already submitted the form. '
            f'Please contact administration if you need to make changes.'
        )
        self.roll_number = roll_number


class SlotExhaustedError(FacultyConnectError):
    """A (faculty, subject) counter had no seats left at reservation time."""
    code = 'slot_exhausted'

    def __init__(self, subject, faculty_id, reason):
        super().__init__(f'Failed to secure a slot for {subject.name}: {reason}. Please pick again.')
        self.subject = subject
        self.faculty_id = faculty_id


class PersistenceError(FacultyConnectError):
    """Slots were reserved but the submission record could not be written."""
    code = 'persistence'
    default_message = (
        'Your seats were reserved but your submission could not be saved, '
        'so the reservations were released. Please contact administration.'
    )


class CompensationPartialError(FacultyConnectError):
    """Some slot restorations failed after a deletion. The deletion stands."""
    code = 'partial'

    def __init__(self, roll_number, failures, restored):
        failed = '; '.join(f'{f.subject_id}/{f.faculty_id}: {f.reason}' for f in failures)
        super().__init__(
            f'Submission deleted for {roll_number}. {len(restored)} slot(s) restored. '
            f'Could not restore {len(failures)} slot(s): {failed}'
        )
        self.roll_number = roll_number
        self.failures = failures
        self.restored = restored


class StoreUnavailableError(FacultyConnectError):
    """The database could not complete a transaction. Retryable by the caller."""
    code = 'store_unavailable'
    default_message = 'A server error occurred. Please try again later.'
