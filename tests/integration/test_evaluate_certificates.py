"""
Integration Tests for the evaluate_certificates wrapper

Runs main() against CSV exports in a temp directory and checks the printed
awards.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pandas as pd
import pytest

# Root-level wrapper lives beside src/
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from evaluate_certificates import main, parse_args

NOW = datetime(2024, 6, 1, 0, 0)


@pytest.fixture
def data_dir(tmp_path):
    """Five graded submissions scoring 95 for s1"""
    rows = [
        [f"S{i}", "s1", f"A{i}", (NOW - timedelta(days=i + 1)).isoformat(), "graded", "95"]
        for i in range(5)
    ]
    pd.DataFrame(
        rows,
        columns=["Submission ID", "Student ID", "Assignment ID", "Submitted At", "Status", "Grade"],
    ).to_csv(tmp_path / "Submissions.csv", index=False)
    return tmp_path


class TestParseArgs:
    """Tests for parse_args"""

    def test_naive_now_kept(self):
        _, _, now = parse_args(["s1", "--now", "2024-06-01T00:00"])
        assert now == NOW

    def test_offset_now_becomes_naive_utc(self):
        student_id, data_dir, now = parse_args(["s1", "/tmp/x", "--now", "2024-06-01T03:00+03:00"])
        assert student_id == "s1"
        assert data_dir == Path("/tmp/x")
        assert now == NOW
        assert now.tzinfo is None

    def test_missing_student(self):
        with pytest.raises(ValueError):
            parse_args(["--now", "2024-06-01T00:00"])


class TestMain:
    """Tests for main"""

    @pytest.mark.parametrize("now_arg", ["2024-06-01T00:00", "2024-06-01T00:00+00:00", "2024-06-01T03:00+03:00"])
    def test_top_performer_printed(self, data_dir, capsys, now_arg):
        """The same instant with or without an offset awards the same certificate"""
        assert main(["s1", str(data_dir), "--now", now_arg]) == 0

        out = capsys.readouterr().out
        assert "top-performer" in out
        assert "'averageGrade': 95" in out
        assert "No certificates earned" not in out

    def test_usage_error(self, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().out
