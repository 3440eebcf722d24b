"""
Pytest Configuration and Fixtures

Provides common fixtures for all tests including:
- A fixed evaluation instant
- Submission / assignment / attendance factories
- A record source that can be told to fail
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from certificate_calculator import InMemoryRecordSource
from data_models import AssignmentRecord, AttendanceRecord, SubmissionRecord


@pytest.fixture
def now():
    """Fixed evaluation instant"""
    return datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def make_submission(now):
    """Factory for submissions handed in `days_ago` days before `now`"""
    counter = {"n": 0}

    def _make(days_ago=1, grade=95.0, status="graded", assignment_id=None, student_id="stu-1"):
        counter["n"] += 1
        return SubmissionRecord(
            id=f"sub-{counter['n']}",
            student_id=student_id,
            assignment_id=assignment_id,
            submitted_at=now - timedelta(days=days_ago),
            status=status,
            grade=grade,
        )

    return _make


@pytest.fixture
def attendance_days(now):
    """Factory for present records on the `count` most recent days"""

    def _make(count, present=True):
        today = now.date()
        return [
            AttendanceRecord(record_date=today - timedelta(days=i), present=present)
            for i in range(count)
        ]

    return _make


class FailingRecordSource(InMemoryRecordSource):
    """In-memory source whose chosen fetches raise"""

    def __init__(self, *args, fail_on=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_on = set(fail_on)

    def fetch_submissions(self, student_id):
        if "submissions" in self.fail_on:
            raise ConnectionError("submissions unavailable")
        return super().fetch_submissions(student_id)

    def fetch_assignments(self, assignment_ids):
        if "assignments" in self.fail_on:
            raise ConnectionError("assignments unavailable")
        return super().fetch_assignments(assignment_ids)

    def fetch_attendance(self, student_id):
        if "attendance" in self.fail_on:
            raise ConnectionError("attendance unavailable")
        return super().fetch_attendance(student_id)


@pytest.fixture
def failing_source():
    return FailingRecordSource


@pytest.fixture
def homework_set(now, make_submission):
    """Five on-time, accurate submissions with matching assignments"""
    assignments = []
    submissions = []
    for i in range(5):
        aid = f"hw-{i}"
        assignments.append(AssignmentRecord(id=aid, due_date=now - timedelta(days=i)))
        submissions.append(make_submission(days_ago=i + 1, grade=90.0, assignment_id=aid))
    return submissions, assignments
