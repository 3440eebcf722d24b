#!/usr/bin/env python3
"""
GRADE CALCULATOR - Percentage, letter grade and GPA helpers
One place for grade math so every report rounds the same way

DEFAULT GRADE RANGES:
A+ = 95-100 (4.0), A = 85-94.9 (4.0), A- = 80-84.9 (3.75)
B+ = 75-79.9 (3.5), B = 70-74.9 (3.0), B- = 60-69.9 (2.75)
C+ = 55-59.9 (2.0), C = 50-54.9 (1.5)
D = 40-49.9 (1.0), F = 0-39.9 (0.0)

ROUNDING:
Percentages, averages and rates round half up (89.5 -> 90), never to even.

Dependencies: data_models.py for GradeRange
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional, Union

from data_models import GradeRange


DEFAULT_GRADE_RANGES: Dict[str, GradeRange] = {
    "A+": GradeRange(min=95, max=100, points=4.0),
    "A": GradeRange(min=85, max=94.9, points=4.0),
    "A-": GradeRange(min=80, max=84.9, points=3.75),
    "B+": GradeRange(min=75, max=79.9, points=3.5),
    "B": GradeRange(min=70, max=74.9, points=3.0),
    "B-": GradeRange(min=60, max=69.9, points=2.75),
    "C+": GradeRange(min=55, max=59.9, points=2.0),
    "C": GradeRange(min=50, max=54.9, points=1.5),
    "D": GradeRange(min=40, max=49.9, points=1.0),
    "F": GradeRange(min=0, max=39.9, points=0.0),
}


@dataclass
class LetterGradeResult:
    """Letter grade with its grade points"""
    letter: str
    points: float


def round_half_up(value: Union[float, Decimal]) -> int:
    """Round to the nearest integer, halves away from zero"""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def mean_rounded(total: float, count: int) -> int:
    """total / count rounded half up; 0 when count is 0"""
    if count <= 0:
        return 0
    return round_half_up(Decimal(total) / Decimal(count))


def calculate_percentage(points: float, max_points: float) -> int:
    """Whole-number percentage of points over max_points"""
    if max_points <= 0:
        return 0
    return mean_rounded(points * 100, max_points)


def calculate_letter_grade(
    points: float,
    max_points: float,
    grade_ranges: Optional[Dict[str, GradeRange]] = None,
) -> LetterGradeResult:
    """
    Convert earned points to a letter grade

    Args:
        points: Points earned
        max_points: Maximum possible points; 100 means points is already a percentage
        grade_ranges: Letter -> GradeRange, defaults to DEFAULT_GRADE_RANGES

    Returns:
        LetterGradeResult, F/0.0 when nothing matches
    """
    if max_points <= 0:
        return LetterGradeResult(letter="F", points=0.0)

    # A raw percentage between bands (e.g. 94.95) matches no band and is an F
    percentage = points if max_points == 100 else calculate_percentage(points, max_points)

    ranges = grade_ranges or DEFAULT_GRADE_RANGES
    # Highest band first
    for letter, band in sorted(ranges.items(), key=lambda item: item[1].min, reverse=True):
        if band.min <= percentage <= band.max:
            return LetterGradeResult(letter=letter, points=band.points)

    return LetterGradeResult(letter="F", points=0.0)


def calculate_gpa(grade_points: Iterable[float]) -> float:
    """Average grade points on the 4.0 scale, ignoring NaN and negatives"""
    valid_points = [p for p in grade_points if not math.isnan(p) and p >= 0]
    if not valid_points:
        return 0.0

    average = sum(valid_points) / len(valid_points)
    rounded = float(Decimal(average).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    return min(4.0, max(0.0, rounded))


def format_gpa(gpa: float) -> str:
    """GPA with two decimals"""
    return f"{gpa:.2f}"
