"""
Static faculty/subject catalog.

Loaded from settings.FACULTY_CONNECT on demand; nothing here touches the
database.
"""
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


@dataclass(frozen=True)
class Faculty:
    id: str
    name: str
    capacity: int


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    faculty_ids: tuple


def slot_key(faculty_id, subject_id):
    return f"{faculty_id}_{subject_id}"


class Catalog:
    """Faculties and the subjects they may teach, in configured order."""

    def __init__(self, faculties, subjects):
        self.faculties = list(faculties)
        self.subjects = list(subjects)
        self._faculty_by_id = {f.id: f for f in self.faculties}
        self._subject_by_id = {s.id: s for s in self.subjects}

        if len(self._faculty_by_id) != len(self.faculties):
            raise ImproperlyConfigured('Duplicate faculty id in catalog.')
        if len(self._subject_by_id) != len(self.subjects):
            raise ImproperlyConfigured('Duplicate subject id in catalog.')
        for faculty in self.faculties:
            if faculty.capacity < 0:
                raise ImproperlyConfigured(f'Faculty "{faculty.id}" has a negative capacity.')
        for subject in self.subjects:
            unknown = [fid for fid in subject.faculty_ids if fid not in self._faculty_by_id]
            if unknown:
                raise ImproperlyConfigured(
                    f'Subject "{subject.id}" lists unknown faculty: {", ".join(unknown)}'
                )

        # one counter row per eligible pair
        keys = [slot_key(f.id, s.id) for f, s in self.pairs()]
        clashing = sorted({key for key in keys if keys.count(key) > 1})
        if clashing:
            raise ImproperlyConfigured(f'Catalog pairs share slot keys: {", ".join(clashing)}')

    @classmethod
    def from_config(cls, config):
        faculties = [
            Faculty(id=str(f['id']), name=f['name'], capacity=int(f['capacity']))
            for f in config.get('FACULTIES', [])
        ]
        subjects = [
            Subject(id=str(s['id']), name=s['name'], faculty_ids=tuple(str(fid) for fid in s['faculty']))
            for s in config.get('SUBJECTS', [])
        ]
        return cls(faculties, subjects)

    def faculty(self, faculty_id) -> Optional[Faculty]:
        return self._faculty_by_id.get(faculty_id)

    def subject(self, subject_id) -> Optional[Subject]:
        return self._subject_by_id.get(subject_id)

    def resolve(self, faculty_id, subject_id):
        """Return (faculty, subject) if the pair has a slot counter, else None."""
        faculty = self.faculty(faculty_id)
        subject = self.subject(subject_id)
        if faculty is None or subject is None or faculty.id not in subject.faculty_ids:
            return None
        return faculty, subject

    def pairs(self):
        """Every (faculty, subject) pair with a counter, subject order first."""
        return [
            (self._faculty_by_id[fid], subject)
            for subject in self.subjects
            for fid in subject.faculty_ids
        ]


def get_catalog():
    return Catalog.from_config(getattr(settings, 'FACULTY_CONNECT', {}))
