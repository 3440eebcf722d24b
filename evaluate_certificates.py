#!/usr/bin/env python3
"""
Simple wrapper to evaluate certificates for a given student ID
Usage: python3 evaluate_certificates.py <student_id> [data_dir] [--now YYYY-MM-DDTHH:MM]
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from certificate_calculator import CertificateEvaluator
from data_processor import CertificateDataProcessor, naive_utc
from ethiopian_calendar import format_ethiopian_date, to_ethiopian


def parse_args(argv):
    args = list(argv)
    now = None
    if "--now" in args:
        idx = args.index("--now")
        if idx + 1 >= len(args):
            raise ValueError("--now needs an ISO timestamp")
        # Loaded timestamps are naive UTC
        now = naive_utc(datetime.fromisoformat(args[idx + 1]))
        del args[idx:idx + 2]

    if not args:
        raise ValueError("Missing student ID")

    student_id = args[0]
    data_dir = Path(args[1]).expanduser() if len(args) > 1 else None
    return student_id, data_dir, now


def main(argv=None):
    try:
        student_id, data_dir, now = parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        print(f"ERROR: {e}")
        print("Usage: python3 evaluate_certificates.py <student_id> [data_dir] [--now YYYY-MM-DDTHH:MM]")
        return 1

    now = now or naive_utc(datetime.now(timezone.utc))

    print(f"Starting certificate evaluation...")
    print(f"  Student ID: {student_id}")
    print(f"  As of: {now.isoformat(timespec='minutes')} ({format_ethiopian_date(to_ethiopian(now))})")

    processor = CertificateDataProcessor(data_dir)
    if not processor.load_all_data():
        print(processor.generate_validation_report())
        return 1

    evaluator = CertificateEvaluator(processor)
    awards = evaluator.evaluate(student_id, now)

    if not awards:
        print("\nNo certificates earned in this period.")
        return 0

    print(f"\n✅ {len(awards)} certificate(s) earned:")
    for award in awards:
        start = format_ethiopian_date(to_ethiopian(award.period.start))
        end = format_ethiopian_date(to_ethiopian(award.period.end))
        print(f"  • {award.type.value}: {award.details} ({start} - {end})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
