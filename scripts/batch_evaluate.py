#!/usr/bin/env python3
"""
BATCH CERTIFICATE EVALUATOR
Evaluates every student in the data exports and writes the awards to CSV.

Usage: python3 scripts/batch_evaluate.py [data_dir] [output_csv]

Output columns: Student ID, Type, Awarded At, Period Start, Period End,
Ethiopian Awarded, Details
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import pandas as pd
from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from certificate_calculator import CertificateEvaluator
from data_models import CertificateAward
from data_processor import CertificateDataProcessor, naive_utc
from ethiopian_calendar import format_ethiopian_date, to_ethiopian


@dataclass
class EvaluationResult:
    student_id: str
    success: bool
    awards: List[CertificateAward] = field(default_factory=list)
    error: Optional[str] = None


def evaluate_all_students(
    evaluator: CertificateEvaluator,
    student_ids: List[str],
    now: datetime,
    progress: bool = True,
) -> List[EvaluationResult]:
    """Evaluate each student; one student's failure does not stop the batch."""
    results = []

    iterator = tqdm(student_ids, desc="Evaluating", unit="student") if progress else student_ids
    for student_id in iterator:
        try:
            awards = evaluator.evaluate(student_id, now)
            results.append(EvaluationResult(student_id=student_id, success=True, awards=awards))
        except Exception as e:
            results.append(EvaluationResult(student_id=student_id, success=False, error=str(e)))
            if progress:
                tqdm.write(f"  ❌ Failed {student_id}: {str(e)[:50]}")

    return results


def awards_to_frame(results: List[EvaluationResult]) -> pd.DataFrame:
    """Flatten awards into one row each."""
    rows = []
    for result in results:
        for award in result.awards:
            rows.append({
                "Student ID": award.student_id,
                "Type": award.type.value,
                "Awarded At": award.awarded_at.isoformat(),
                "Period Start": award.period.start.isoformat(),
                "Period End": award.period.end.isoformat(),
                "Ethiopian Awarded": format_ethiopian_date(to_ethiopian(award.awarded_at)),
                "Details": json.dumps(award.details, sort_keys=True),
            })
    return pd.DataFrame(rows, columns=[
        "Student ID", "Type", "Awarded At", "Period Start", "Period End",
        "Ethiopian Awarded", "Details",
    ])


def print_summary(results: List[EvaluationResult], output_path: Path):
    """Print evaluation summary."""
    success = [r for r in results if r.success]
    failed = [r for r in results if not r.success]
    awards = [a for r in success for a in r.awards]

    print("\n" + "=" * 70)
    print("BATCH EVALUATION SUMMARY")
    print("=" * 70)

    print(f"\n✅ Evaluated: {len(success)}")
    print(f"❌ Failed: {len(failed)}")

    print("\nBy Certificate:")
    by_type = pd.Series([a.type.value for a in awards], dtype=object).value_counts()
    for cert_type, count in by_type.items():
        print(f"  {cert_type}: {count}")

    if failed:
        print("\n❌ FAILED STUDENTS:")
        print("-" * 50)
        for r in failed:
            print(f"  [{r.student_id}] {r.error}")

    print(f"\n📁 Output: {output_path}")
    print("=" * 70)


def main():
    data_dir = Path(sys.argv[1]).expanduser() if len(sys.argv) > 1 else None
    output_path = (
        Path(sys.argv[2]).expanduser() if len(sys.argv) > 2 else Path.cwd() / "certificates.csv"
    )
    now = naive_utc(datetime.now(timezone.utc))

    print("=" * 70)
    print("BATCH CERTIFICATE EVALUATOR")
    print("=" * 70)

    print("\n📊 Loading all data...")
    processor = CertificateDataProcessor(data_dir)
    if not processor.load_all_data():
        print(processor.generate_validation_report())
        print("❌ Failed to load data!")
        return 1

    if processor.validation_warnings:
        print(f"   ⚠️  {len(processor.validation_warnings)} warnings - see validation report")

    evaluator = CertificateEvaluator(processor)
    student_ids = processor.student_ids()

    print(f"\n🚀 Evaluating {len(student_ids)} students...")
    results = evaluate_all_students(evaluator, student_ids, now, progress=True)

    awards_to_frame(results).to_csv(output_path, index=False)
    print_summary(results, output_path)

    return 1 if any(not r.success for r in results) else 0


if __name__ == "__main__":
    sys.exit(main())
