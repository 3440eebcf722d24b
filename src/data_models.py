#!/usr/bin/env python3
"""
DATA MODELS - Pydantic schemas for calendar, attendance and certificate data
Type-safe data structures shared by the calculators and the CSV loader

COMPREHENSIVE DATA VALIDATION:
✅ Ethiopian Dates: Year, month (1-13), day (1-30, Pagume 5/6)
✅ Attendance: Dated present/absent records and monthly grids
✅ Submissions & Assignments: Read-only inputs from the grading system
✅ Certificates: Award records and the criteria that mint them

VALIDATION RULES:
- Ethiopian month must be 1-13; Pagume day limited by the leap rule
- Month keys must be "YYYY-MM"
- Grades must be non-negative
- Certificate periods must not end before they start

Dependencies: Pydantic for validation
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CertificateType(str, Enum):
    """Certificate kinds minted by the eligibility evaluator"""
    TOP_PERFORMER = "top-performer"
    PERFECT_ATTENDANCE = "perfect-attendance"
    HOMEWORK_HERO = "homework-hero"


class SubmissionStatus(str, Enum):
    """Lifecycle status of an assignment submission"""
    SUBMITTED = "submitted"
    GRADED = "graded"


class EthiopianDate(BaseModel):
    """A date in the Ethiopian (Ge'ez) calendar"""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., description="Ethiopian year (Amete Mihret)")
    month: int = Field(..., ge=1, le=13, description="Month 1-13, 13 is Pagume")
    day: int = Field(..., ge=1, le=30, description="Day of month")

    @model_validator(mode="after")
    def validate_pagume_day(self):
        """Pagume has 5 days, 6 in a leap year"""
        if self.month == 13:
            limit = 6 if self.year % 4 == 3 else 5
            if self.day > limit:
                raise ValueError(
                    f"Pagume {self.year} has {limit} days, got day {self.day}"
                )
        return self

    def as_tuple(self):
        return (self.year, self.month, self.day)


class AttendanceRecord(BaseModel):
    """A single dated present/absent mark"""

    model_config = ConfigDict(frozen=True)

    record_date: date = Field(..., description="Calendar date of the mark")
    present: bool = Field(..., description="True when the student was present")


class MonthlyAttendanceGrid(BaseModel):
    """One student's attendance in one course for one month"""

    course_id: str = Field(..., description="Course identifier")
    student_id: str = Field(..., description="Student identifier")
    month_key: str = Field(..., description="Month in 'YYYY-MM' format")
    present_days: List[int] = Field(default_factory=list, description="Days of month marked present")

    @field_validator("month_key")
    def validate_month_key(cls, v):
        """Validate month key format"""
        if not re.match(r"^\d{4}-(0[1-9]|1[0-2])$", v):
            raise ValueError(f'Month key must be in format "YYYY-MM", got: {v}')
        return v

    @field_validator("present_days")
    def validate_present_days(cls, v):
        """Keep days sorted and unique"""
        for day in v:
            if day < 1 or day > 31:
                raise ValueError(f"Day of month must be 1-31, got: {day}")
        return sorted(set(v))


class SubmissionRecord(BaseModel):
    """Assignment submission, owned by the grading system"""

    id: str = Field(..., description="Submission identifier")
    student_id: str = Field(..., description="Submitting student")
    assignment_id: Optional[str] = Field(None, description="Assignment the submission answers")
    submitted_at: datetime = Field(..., description="When the work was handed in")
    status: SubmissionStatus = Field(..., description="submitted or graded")
    grade: Optional[float] = Field(None, ge=0.0, description="Numeric grade once graded")

    @property
    def is_graded(self) -> bool:
        return self.status == SubmissionStatus.GRADED


class AssignmentRecord(BaseModel):
    """Assignment as far as certificate rules care"""

    id: str = Field(..., description="Assignment identifier")
    due_date: Optional[datetime] = Field(None, description="Submission deadline")


class CertificatePeriod(BaseModel):
    """Trailing window a certificate was evaluated over"""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_order(self):
        if self.end < self.start:
            raise ValueError("Certificate period ends before it starts")
        return self


class CertificateAward(BaseModel):
    """An award minted by the eligibility evaluator, persisted elsewhere"""

    model_config = ConfigDict(frozen=True)

    student_id: str = Field(..., description="Awarded student")
    type: CertificateType = Field(..., description="Certificate kind")
    awarded_at: datetime = Field(..., description="Evaluation instant")
    period: CertificatePeriod = Field(..., description="Window the rule looked at")
    details: Dict[str, Any] = Field(default_factory=dict, description="Rule-specific figures")


class CertificateCriteria(BaseModel):
    """Windows and thresholds for each certificate rule"""

    # Top performer
    top_performer_window_days: int = Field(90, ge=1)
    top_performer_min_graded: int = Field(5, ge=0)
    top_performer_min_average: int = Field(90, ge=0)

    # Perfect attendance
    perfect_attendance_window_days: int = Field(30, ge=1)
    perfect_attendance_min_days: int = Field(25, ge=0)

    # Homework hero
    homework_hero_window_days: int = Field(60, ge=1)
    homework_hero_min_considered: int = Field(5, ge=0)
    homework_hero_min_rate: int = Field(90, ge=0, le=100)
    homework_hero_min_grade: float = Field(85.0, ge=0.0)


class GradeRange(BaseModel):
    """Percentage band for a letter grade"""

    min: float = Field(..., ge=0.0, description="Lowest percentage in band")
    max: float = Field(..., ge=0.0, description="Highest percentage in band")
    points: float = Field(..., ge=0.0, le=4.0, description="Grade points for the band")

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.max < self.min:
            raise ValueError(f"Grade range max {self.max} below min {self.min}")
        return self


# Export all models
__all__ = [
    'CertificateType',
    'SubmissionStatus',
    'EthiopianDate',
    'AttendanceRecord',
    'MonthlyAttendanceGrid',
    'SubmissionRecord',
    'AssignmentRecord',
    'CertificatePeriod',
    'CertificateAward',
    'CertificateCriteria',
    'GradeRange',
]
