from django.db import models
from django.utils import timezone


class SlotCounter(models.Model):
    """
    Remaining seats for one faculty/subject pair.
    Keyed "<faculty_id>_<subject_id>"; only ever changed through SlotStore.
    """
    key = models.CharField(max_length=101, primary_key=True)
    faculty_id = models.CharField(max_length=50)
    subject_id = models.CharField(max_length=50)
    remaining = models.PositiveIntegerField()

    class Meta:
        ordering = ['subject_id', 'faculty_id']
        unique_together = ['faculty_id', 'subject_id']

    def __str__(self):
        return f"{self.key}: {self.remaining} left"


class Submission(models.Model):
    """One faculty-selection submission per roll number."""
    roll_number = models.CharField(max_length=20, primary_key=True)
    name = models.CharField(max_length=100)
    email = models.EmailField()
    whatsapp_number = models.CharField(max_length=10)
    submitted_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-submitted_at']

    def __str__(self):
        return f"{self.roll_number} - {self.name}"

    def selection_map(self):
        return {s.subject_id: s.faculty_id for s in self.selections.all()}


class Selection(models.Model):
    """The faculty a submission picked for one subject."""
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name='selections')
    subject_id = models.CharField(max_length=50)
    faculty_id = models.CharField(max_length=50)

    class Meta:
        ordering = ['submission', 'subject_id']
        unique_together = ['submission', 'subject_id']

    def __str__(self):
        return f"{self.submission_id} → {self.subject_id}: {self.faculty_id}"
