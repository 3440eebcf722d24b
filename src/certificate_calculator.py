#!/usr/bin/env python3
"""
Certificate Eligibility Calculator
Decides Top Performer, Perfect Attendance and Homework Hero certificates

RULES (defaults, see CertificateCriteria):
- Top Performer: trailing 90 days, >= 5 graded submissions, rounded average >= 90
- Perfect Attendance: trailing 30 days, >= 25 distinct present days
- Homework Hero: trailing 60 days, >= 5 submissions for assignments with a due date,
  rounded rate of (graded AND on time AND grade >= 85) >= 90

Each rule fetches its own data and is evaluated on its own; a failure in one
rule is logged and yields no award for that rule only.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Protocol

from attendance_aggregator import count_active_days
from data_models import (
    AssignmentRecord,
    AttendanceRecord,
    CertificateAward,
    CertificateCriteria,
    CertificatePeriod,
    CertificateType,
    SubmissionRecord,
)
from grade_calculator import mean_rounded

logger = logging.getLogger(__name__)


class CertificateRecordSource(Protocol):
    """Where the evaluator gets its data from"""

    def fetch_submissions(self, student_id: str) -> List[SubmissionRecord]:
        ...

    def fetch_assignments(self, assignment_ids: List[str]) -> Dict[str, AssignmentRecord]:
        ...

    def fetch_attendance(self, student_id: str) -> List[AttendanceRecord]:
        ...


class InMemoryRecordSource:
    """Record source over already-loaded lists"""

    def __init__(
        self,
        submissions: Iterable[SubmissionRecord] = (),
        assignments: Iterable[AssignmentRecord] = (),
        attendance: Optional[Dict[str, List[AttendanceRecord]]] = None,
    ):
        self.submissions = list(submissions)
        self.assignments = {a.id: a for a in assignments}
        self.attendance = attendance or {}

    def fetch_submissions(self, student_id: str) -> List[SubmissionRecord]:
        return [s for s in self.submissions if s.student_id == student_id]

    def fetch_assignments(self, assignment_ids: List[str]) -> Dict[str, AssignmentRecord]:
        return {aid: self.assignments[aid] for aid in assignment_ids if aid in self.assignments}

    def fetch_attendance(self, student_id: str) -> List[AttendanceRecord]:
        return list(self.attendance.get(student_id, []))


def trailing_period(now: datetime, window_days: int) -> CertificatePeriod:
    """[now - window_days, now]"""
    return CertificatePeriod(start=now - timedelta(days=window_days), end=now)


def _in_period(moment: datetime, period: CertificatePeriod) -> bool:
    return period.start <= moment <= period.end


def evaluate_top_performer(
    student_id: str,
    submissions: List[SubmissionRecord],
    now: datetime,
    criteria: Optional[CertificateCriteria] = None,
) -> Optional[CertificateAward]:
    """
    Top Performer: enough graded work in the window with a high rounded average
    Missing grades on graded submissions count as 0.
    """
    criteria = criteria or CertificateCriteria()
    period = trailing_period(now, criteria.top_performer_window_days)

    graded = [s for s in submissions if s.is_graded and _in_period(s.submitted_at, period)]
    average = mean_rounded(sum(s.grade or 0 for s in graded), len(graded))

    if len(graded) >= criteria.top_performer_min_graded and average >= criteria.top_performer_min_average:
        return CertificateAward(
            student_id=student_id,
            type=CertificateType.TOP_PERFORMER,
            awarded_at=now,
            period=period,
            details={"averageGrade": average, "gradedCount": len(graded)},
        )
    return None


def evaluate_perfect_attendance(
    student_id: str,
    attendance: Iterable[AttendanceRecord],
    now: datetime,
    criteria: Optional[CertificateCriteria] = None,
) -> Optional[CertificateAward]:
    """Perfect Attendance: enough distinct present days in the window"""
    criteria = criteria or CertificateCriteria()
    window_days = criteria.perfect_attendance_window_days

    days_active = count_active_days(attendance, window_days, now)

    if days_active >= criteria.perfect_attendance_min_days:
        return CertificateAward(
            student_id=student_id,
            type=CertificateType.PERFECT_ATTENDANCE,
            awarded_at=now,
            period=trailing_period(now, window_days),
            details={"daysActive": days_active},
        )
    return None


def windowed_assignment_ids(
    submissions: List[SubmissionRecord],
    now: datetime,
    criteria: Optional[CertificateCriteria] = None,
) -> List[str]:
    """Distinct assignment ids referenced inside the Homework Hero window"""
    criteria = criteria or CertificateCriteria()
    period = trailing_period(now, criteria.homework_hero_window_days)
    return sorted({
        s.assignment_id
        for s in submissions
        if s.assignment_id and _in_period(s.submitted_at, period)
    })


def evaluate_homework_hero(
    student_id: str,
    submissions: List[SubmissionRecord],
    assignments: Dict[str, AssignmentRecord],
    now: datetime,
    criteria: Optional[CertificateCriteria] = None,
) -> Optional[CertificateAward]:
    """
    Homework Hero: consistently on time and accurate

    Only submissions whose assignment is known and has a due date are
    considered. A considered submission matches when it is graded, was
    handed in no later than the due date and scored at least the minimum.
    """
    criteria = criteria or CertificateCriteria()
    period = trailing_period(now, criteria.homework_hero_window_days)

    considered = []
    for submission in submissions:
        if not _in_period(submission.submitted_at, period):
            continue
        assignment = assignments.get(submission.assignment_id) if submission.assignment_id else None
        if assignment is None or assignment.due_date is None:
            continue
        considered.append((submission, assignment))

    matches = [
        s for s, a in considered
        if s.is_graded
        and s.submitted_at <= a.due_date
        and (s.grade or 0) >= criteria.homework_hero_min_grade
    ]
    on_time_rate = mean_rounded(len(matches) * 100, len(considered))

    if len(considered) >= criteria.homework_hero_min_considered and on_time_rate >= criteria.homework_hero_min_rate:
        return CertificateAward(
            student_id=student_id,
            type=CertificateType.HOMEWORK_HERO,
            awarded_at=now,
            period=period,
            details={"onTimeRate": on_time_rate, "considered": len(considered)},
        )
    return None


class CertificateEvaluator:
    """Evaluate every certificate rule for a student against a record source"""

    def __init__(
        self,
        record_source: CertificateRecordSource,
        criteria: Optional[CertificateCriteria] = None,
    ):
        """
        Initialize evaluator

        Args:
            record_source: Provides submissions, assignments and attendance
            criteria: Windows and thresholds, defaults to the standard rules
        """
        self.record_source = record_source
        self.criteria = criteria or CertificateCriteria()

    def evaluate(self, student_id: str, now: Optional[datetime] = None) -> List[CertificateAward]:
        """
        Evaluate all rules for one student

        Returns:
            Zero or more awards, in rule order. Never raises for a rule failure.
        """
        now = now or datetime.now()
        awards = []

        # Top Performer
        try:
            submissions = self.record_source.fetch_submissions(student_id)
            award = evaluate_top_performer(student_id, submissions, now, self.criteria)
            if award:
                awards.append(award)
        except Exception as e:
            logger.warning(f"Error evaluating Top Performer for {student_id}: {e}")

        # Perfect Attendance
        try:
            attendance = self.record_source.fetch_attendance(student_id)
            award = evaluate_perfect_attendance(student_id, attendance, now, self.criteria)
            if award:
                awards.append(award)
        except Exception as e:
            logger.warning(f"Error evaluating Perfect Attendance for {student_id}: {e}")

        # Homework Hero
        try:
            submissions = self.record_source.fetch_submissions(student_id)
            assignment_ids = windowed_assignment_ids(submissions, now, self.criteria)
            assignments = self.record_source.fetch_assignments(assignment_ids)
            award = evaluate_homework_hero(student_id, submissions, assignments, now, self.criteria)
            if award:
                awards.append(award)
        except Exception as e:
            logger.warning(f"Error evaluating Homework Hero for {student_id}: {e}")

        for award in awards:
            logger.info(f"🏅 {student_id}: {award.type.value} {award.details}")

        return awards


def evaluate_certificates(
    student_id: str,
    submissions: Iterable[SubmissionRecord],
    assignments: Iterable[AssignmentRecord],
    attendance: Iterable[AttendanceRecord],
    now: Optional[datetime] = None,
    criteria: Optional[CertificateCriteria] = None,
) -> List[CertificateAward]:
    """Evaluate all rules over plain in-memory data"""
    source = InMemoryRecordSource(
        submissions=submissions,
        assignments=assignments,
        attendance={student_id: list(attendance)},
    )
    return CertificateEvaluator(source, criteria).evaluate(student_id, now)
