#!/usr/bin/env python3
"""
DATA PROCESSOR - CSV loading, validation, and record lookup for certificates
Load and validate the grading and attendance exports the evaluator reads

DATA SOURCES:
✅ Submissions CSV - Submission ID, Student ID, Assignment ID, Submitted At, Status, Grade
✅ Assignments CSV - Assignment ID, Due Date (optional file)
✅ Attendance CSV - Course ID, Student ID, Month (YYYY-MM), Present Days "1;2;5" (optional file)

VALIDATION STRATEGY:
1. Schema Validation: Ensure required columns exist
2. Data Quality Checks: Statuses, grades, timestamps, month keys, day numbers
3. Cross-Reference Validation: Submissions pointing at unknown assignments

Rows that fail a quality check are reported as warnings and left out, so a
bad row never reaches the evaluator.

Timestamps are held as naive UTC. Offsets are converted, naive values are
taken as UTC already.

Dependencies: pandas, pydantic models in data_models.py
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

import pandas as pd

from attendance_aggregator import (
    day_map_from_present_days,
    merge_present_days,
    records_from_day_map,
    records_from_grids,
)
from data_models import (
    AssignmentRecord,
    AttendanceRecord,
    MonthlyAttendanceGrid,
    SubmissionRecord,
    SubmissionStatus,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SUBMISSIONS_FILE = "Submissions.csv"
ASSIGNMENTS_FILE = "Assignments.csv"
ATTENDANCE_FILE = "Attendance.csv"

VALID_STATUSES = {s.value for s in SubmissionStatus}


def naive_utc(value: datetime) -> datetime:
    """Aware datetimes become naive UTC; naive ones are taken as UTC already"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _to_naive_datetimes(values: pd.Series) -> pd.Series:
    """Parse timestamps to naive UTC; offsets may differ row to row"""
    parsed = pd.to_datetime(values, errors="coerce", format="mixed", utc=True)
    return parsed.dt.tz_convert(None)


def _parse_present_days(value) -> List[int]:
    if pd.isna(value) or not str(value).strip():
        return []
    parts = str(value).replace(",", ";").split(";")
    return [int(p) for p in parts if p.strip()]


class CertificateDataProcessor:
    """Load certificate inputs from CSV and serve them by student"""

    def __init__(self, data_dir: Path = None):
        if data_dir is None:
            self.data_dir = Path(__file__).parent.parent / "data"
        else:
            self.data_dir = Path(data_dir)

        # Data storage
        self.submissions: pd.DataFrame = None
        self.assignments: pd.DataFrame = None
        self.attendance: pd.DataFrame = None
        self.attendance_grids: List[MonthlyAttendanceGrid] = []

        # Validation results
        self.validation_errors: List[str] = []
        self.validation_warnings: List[str] = []

        self._loaded = False

    def load_all_data(self) -> bool:
        """Load all CSV data sources with validation"""

        logger.info("🔍 LOADING CERTIFICATE DATA SOURCES")
        logger.info("=" * 60)

        self.validation_errors = []
        self.validation_warnings = []

        success = self._load_submissions()

        # Optional sources - a missing file means no data, not a failure
        self._load_assignments()
        self._load_attendance()

        if success and not self.validation_errors:
            logger.info("✅ All data sources loaded successfully")
            self._perform_cross_validation()
            self._loaded = True
        else:
            logger.error("❌ Data loading failed - check validation errors")
            success = False

        return success

    def _load_submissions(self) -> bool:
        """Load and validate submissions CSV"""

        file_path = self.data_dir / SUBMISSIONS_FILE

        try:
            logger.info(f"📊 Loading submissions from: {file_path}")

            df = pd.read_csv(file_path, encoding="utf-8-sig", dtype=str)

            required_columns = [
                "Submission ID",
                "Student ID",
                "Assignment ID",
                "Submitted At",
                "Status",
                "Grade",
            ]
            missing_columns = [col for col in required_columns if col not in df.columns]
            if missing_columns:
                self.validation_errors.append(
                    f"Submissions missing columns: {missing_columns}"
                )
                return False

            self.submissions = self._clean_submissions(df)

            logger.info(f"  ✅ Loaded {len(self.submissions)} submission records")
            return True

        except Exception as e:
            self.validation_errors.append(f"Failed to load submissions: {e}")
            logger.error(f"  ❌ Failed to load submissions: {e}")
            return False

    def _clean_submissions(self, df: pd.DataFrame) -> pd.DataFrame:
        """Normalize submission columns and drop rows that cannot be used"""

        df = df.copy()
        df["Status"] = df["Status"].fillna("").str.strip().str.lower()
        df["Grade"] = pd.to_numeric(df["Grade"], errors="coerce")
        df["Submitted At"] = _to_naive_datetimes(df["Submitted At"])

        # Duplicate submission ids
        duplicates = df["Submission ID"].duplicated()
        if duplicates.any():
            duplicate_ids = df[duplicates]["Submission ID"].tolist()
            self.validation_errors.append(
                f"Duplicate Submission IDs: {duplicate_ids}"
            )

        missing_student = df["Student ID"].isna()
        if missing_student.any():
            self.validation_warnings.append(
                f"Submissions without Student ID: {int(missing_student.sum())} rows skipped"
            )

        bad_status = ~df["Status"].isin(VALID_STATUSES)
        if bad_status.any():
            self.validation_warnings.append(
                f"Unusual status values found: {df.loc[bad_status, 'Status'].unique()}"
            )

        bad_time = df["Submitted At"].isna()
        if bad_time.any():
            self.validation_warnings.append(
                f"Unparseable Submitted At values: {int(bad_time.sum())} rows skipped"
            )

        negative_grade = df["Grade"] < 0
        if negative_grade.any():
            self.validation_warnings.append(
                f"Negative grades found: {int(negative_grade.sum())} rows skipped"
            )

        keep = ~(missing_student | bad_status | bad_time | negative_grade)
        return df[keep].reset_index(drop=True)

    def _load_assignments(self) -> bool:
        """Load assignments CSV if present"""

        file_path = self.data_dir / ASSIGNMENTS_FILE
        self.assignments = pd.DataFrame(columns=["Assignment ID", "Due Date"])

        if not file_path.exists():
            logger.info("  ℹ️  No Assignments file found")
            return False

        try:
            logger.info(f"📊 Loading assignments from: {file_path}")

            df = pd.read_csv(file_path, encoding="utf-8-sig", dtype=str)
            missing_columns = [
                col for col in ["Assignment ID", "Due Date"] if col not in df.columns
            ]
            if missing_columns:
                self.validation_errors.append(
                    f"Assignments missing columns: {missing_columns}"
                )
                return False

            df["Due Date"] = _to_naive_datetimes(df["Due Date"])
            no_due = df["Due Date"].isna().sum()
            if no_due:
                self.validation_warnings.append(
                    f"Assignments without a due date: {int(no_due)}"
                )

            self.assignments = df.drop_duplicates(subset="Assignment ID", keep="last")
            logger.info(f"  ✅ Loaded {len(self.assignments)} assignments")
            return True

        except Exception as e:
            self.validation_warnings.append(f"Failed to load assignments: {e}")
            logger.warning(f"  ⚠️  Failed to load assignments: {e}")
            return False

    def _load_attendance(self) -> bool:
        """Load attendance CSV if present and fold it into monthly grids"""

        file_path = self.data_dir / ATTENDANCE_FILE
        self.attendance_grids = []

        if not file_path.exists():
            logger.info("  ℹ️  No Attendance file found")
            return False

        try:
            logger.info(f"📊 Loading attendance from: {file_path}")

            df = pd.read_csv(file_path, encoding="utf-8-sig", dtype=str)
            required_columns = ["Course ID", "Student ID", "Month", "Present Days"]
            missing_columns = [col for col in required_columns if col not in df.columns]
            if missing_columns:
                self.validation_errors.append(
                    f"Attendance missing columns: {missing_columns}"
                )
                return False

            self.attendance = df
            self.attendance_grids = self._build_attendance_grids(df)

            logger.info(
                f"  ✅ Loaded {len(df)} attendance rows into {len(self.attendance_grids)} monthly grids"
            )
            return True

        except Exception as e:
            self.validation_warnings.append(f"Failed to load attendance: {e}")
            logger.warning(f"  ⚠️  Failed to load attendance: {e}")
            return False

    def _build_attendance_grids(self, df: pd.DataFrame) -> List[MonthlyAttendanceGrid]:
        """One grid per (course, student, month); repeated rows are merged"""

        grids: Dict[tuple, MonthlyAttendanceGrid] = {}

        for _, row in df.iterrows():
            key = (row["Course ID"], row["Student ID"], str(row["Month"]).strip())
            try:
                present_days = _parse_present_days(row["Present Days"])
                grid = MonthlyAttendanceGrid(
                    course_id=key[0],
                    student_id=key[1],
                    month_key=key[2],
                    present_days=present_days,
                )
                # Rejects days past the end of the month
                records_from_day_map(grid.month_key, day_map_from_present_days(grid.present_days))
            except ValueError as e:
                self.validation_warnings.append(
                    f"Skipped attendance row {key}: {e}"
                )
                continue

            if key in grids:
                existing = grids[key]
                grids[key] = existing.model_copy(update={
                    "present_days": merge_present_days(existing.present_days, grid.present_days)
                })
            else:
                grids[key] = grid

        return list(grids.values())

    def _perform_cross_validation(self):
        """Check that submissions point at known assignments"""

        if self.assignments is None or self.assignments.empty:
            return

        referenced = set(self.submissions["Assignment ID"].dropna())
        known = set(self.assignments["Assignment ID"].dropna())
        orphaned = referenced - known
        if orphaned:
            self.validation_warnings.append(
                f"Submissions for unknown assignments: {len(orphaned)} Assignment IDs"
            )

    def _require_loaded(self):
        if not self._loaded:
            raise RuntimeError("Certificate data not loaded - call load_all_data() first")

    # Record source interface used by CertificateEvaluator

    def fetch_submissions(self, student_id: str) -> List[SubmissionRecord]:
        """All usable submissions for one student"""
        self._require_loaded()

        rows = self.submissions[self.submissions["Student ID"] == str(student_id)]
        submissions = []
        for _, row in rows.iterrows():
            submissions.append(SubmissionRecord(
                id=row["Submission ID"],
                student_id=row["Student ID"],
                assignment_id=row["Assignment ID"] if pd.notna(row["Assignment ID"]) else None,
                submitted_at=row["Submitted At"].to_pydatetime(),
                status=row["Status"],
                grade=None if pd.isna(row["Grade"]) else float(row["Grade"]),
            ))
        return submissions

    def fetch_assignments(self, assignment_ids: List[str]) -> Dict[str, AssignmentRecord]:
        """Known assignments among the given ids"""
        self._require_loaded()

        rows = self.assignments[self.assignments["Assignment ID"].isin(list(assignment_ids))]
        assignments = {}
        for _, row in rows.iterrows():
            due = row["Due Date"]
            assignments[row["Assignment ID"]] = AssignmentRecord(
                id=row["Assignment ID"],
                due_date=None if pd.isna(due) else due.to_pydatetime(),
            )
        return assignments

    def fetch_attendance(self, student_id: str) -> List[AttendanceRecord]:
        """Dated attendance records across all of a student's courses"""
        self._require_loaded()

        grids = [g for g in self.attendance_grids if g.student_id == str(student_id)]
        return records_from_grids(grids)

    def student_ids(self) -> List[str]:
        """Every student seen in submissions or attendance"""
        self._require_loaded()

        ids = set(self.submissions["Student ID"].dropna())
        ids.update(g.student_id for g in self.attendance_grids)
        return sorted(ids)

    def generate_validation_report(self) -> str:
        """Generate comprehensive validation report"""

        report = ["🔍 DATA VALIDATION REPORT", "=" * 50, ""]

        if not self.validation_errors and not self.validation_warnings:
            report.append("✅ All validation checks passed!")
        else:
            if self.validation_errors:
                report.append("❌ ERRORS (Must be fixed):")
                for error in self.validation_errors:
                    report.append(f"  • {error}")
                report.append("")

            if self.validation_warnings:
                report.append("⚠️ WARNINGS (Review recommended):")
                for warning in self.validation_warnings:
                    report.append(f"  • {warning}")
                report.append("")

        if self.submissions is not None:
            report.append("📊 DATA SUMMARY:")
            report.append(f"  Submissions: {len(self.submissions)}")
            if self.assignments is not None:
                report.append(f"  Assignments: {len(self.assignments)}")
            report.append(f"  Attendance Grids: {len(self.attendance_grids)}")

        return "\n".join(report)
