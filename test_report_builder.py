# test_report_builder.py
import os
import tempfile
import unittest
from datetime import datetime, timezone

import report_builder
from commit_stats import compute_statistics
from config import GlobalConfig
from models import CommitRecord, RepoInfo


def _stats():
    commits = [
        CommitRecord("a" * 40, datetime(2024, 1, 3, hour, tzinfo=timezone.utc), "feat: x", "Dev", "d@x")
        for hour in (9, 9, 14)
    ]
    commits.append(
        CommitRecord("b" * 40, datetime(2024, 1, 5, 20, tzinfo=timezone.utc), "fix: y", "Dev", "d@x")
    )
    return compute_statistics(commits)


class TestTextReports(unittest.TestCase):
    def test_activity_chart_scales_bars(self):
        chart = report_builder.render_activity_chart(_stats())
        lines = chart.splitlines()

        wednesday = next(line for line in lines if "Wednesday" in line)
        friday = next(line for line in lines if "Friday" in line)
        self.assertIn("█" * 20 + " 3", wednesday)
        self.assertIn("█" * 7 + " 1", friday)
        self.assertNotIn("█" * 8, friday)
        self.assertIn("06-11", chart)
        self.assertIn("Busiest day: Wednesday", chart)

    def test_empty_chart_has_no_bars(self):
        chart = report_builder.render_activity_chart(compute_statistics([]))
        self.assertNotIn("█", chart)
        self.assertIn("Sunday", chart)

    def test_boxed(self):
        box = report_builder.boxed("Add login\n\nDetails here")
        lines = box.splitlines()

        self.assertTrue(lines[0].startswith("┌") and lines[0].endswith("┐"))
        self.assertTrue(lines[-1].startswith("└") and lines[-1].endswith("┘"))
        self.assertEqual(len({len(line) for line in lines}), 1)
        self.assertIn("│ Add login    │", box)

    def test_commit_command_escapes_quotes(self):
        self.assertEqual(
            report_builder.commit_command('Add "quoted" name'),
            'git commit -m "Add \\"quoted\\" name"',
        )

    def test_commit_command_keeps_body_paragraphs(self):
        message = "Add login form\n\n- Validate the $EMAIL field\n- Show errors inline\n\nCloses #12"
        self.assertEqual(
            report_builder.commit_command(message),
            'git commit -m "Add login form" '
            '-m "- Validate the \\$EMAIL field\n- Show errors inline" '
            '-m "Closes #12"',
        )

    def test_header_banner(self):
        banner = report_builder.header_banner("Title").splitlines()
        self.assertEqual(banner[0], "=" * 80)
        self.assertEqual(banner[1].strip(), "Title")


class TestHtmlReport(unittest.TestCase):
    def test_generate_and_save(self):
        config = GlobalConfig()
        repo = RepoInfo(name="demo<repo>", branch_count=2, path="/tmp/demo")
        html = report_builder.generate_html_report(
            repo, _stats(), "# Insights\n\n- **busy** mornings", config, days=30
        )

        self.assertIn("<h1>Insights</h1>", html)
        self.assertIn("<strong>busy</strong>", html)
        self.assertIn("demo&lt;repo&gt;", html)
        self.assertIn("Wednesday", html)

        with tempfile.TemporaryDirectory() as tmp:
            path = report_builder.save_html_report(html, os.path.join(tmp, "out", "report.html"))
            with open(path, encoding="utf-8") as f:
                self.assertEqual(f.read(), html)


if __name__ == "__main__":
    unittest.main()
