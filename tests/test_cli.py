"""Tests for the rmsa command-line front end."""

import contextlib
import io
import os
import tempfile
import unittest

from rmsa.cli import main


def run(*argv):
    stdout, stderr = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
        code = main(list(argv))
    return code, stdout.getvalue(), stderr.getvalue()


class TestCli(unittest.TestCase):

    def test_report(self):
        """Test the default report."""
        code, out, _ = run("(1,5,5),(1,7,7)")
        self.assertEqual(code, 0)
        self.assertIn("Tasks: 2", out)
        self.assertIn("Total utilization: 0.3429", out)
        self.assertIn("Hyperperiod:       35", out)
        self.assertIn("First free slot:   3", out)

    def test_schedule(self):
        """Test the printed schedule and occupancy rows."""
        code, out, _ = run("(1,2,2),(1,4,4)", "--schedule")
        self.assertEqual(code, 0)
        self.assertIn("Order: 1 2 1 -", out)
        self.assertIn("   1 #.#.", out)

    def test_slack_table(self):
        """Test the printed slack table."""
        code, out, _ = run("(1,2,2),(1,4,4)", "--slack-table")
        self.assertEqual(code, 0)
        self.assertIn("   1 1 2", out)

    def test_no_free_slot(self):
        """Test that a fully loaded system still gets a report."""
        code, out, _ = run("(3,5,5),(2,5,5)")
        self.assertEqual(code, 0)
        self.assertIn("First free slot:   none", out)

    def test_unbounded_response(self):
        """Test that a diverging response time is printed as unbounded."""
        code, out, _ = run("(5,5,5),(1,10,10)", "--schedule", "--horizon", "20")
        self.assertEqual(code, 0)
        self.assertIn("unbounded", out)
        self.assertIn("Deadline miss: task 2", out)

    def test_empty_system(self):
        """Test that an empty system only prints its size."""
        code, out, _ = run("")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "Tasks: 0")

    def test_malformed_system(self):
        """Test that malformed input exits with status 2."""
        code, out, err = run("(1,5),(2,7,7)")
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("rmsa: error:", err)

    def test_long_field(self):
        """Test that a 30-digit period is analysed."""
        code, out, _ = run("(1," + "9" * 30 + ",5)")
        self.assertEqual(code, 0)
        self.assertIn("Tasks: 1", out)

    def test_field_out_of_range(self):
        """Test that a field too large for a float is a usage error."""
        code, out, err = run("(1," + "9" * 400 + ",5)")
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("rmsa: error:", err)

    def test_config_file(self):
        """Test that the horizon is read from a YAML file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "rmsa.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("analysis:\n  horizon: 2\n")
            code, out, _ = run("(1,2,2),(1,4,4)", "--config", path, "--schedule")
        self.assertEqual(code, 0)
        self.assertIn("RM schedule over 2 time unit(s)", out)

    def test_bad_config_file(self):
        """Test that an invalid config value is reported."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "rmsa.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("seed_mode: sometimes\n")
            code, _, err = run("(1,2,2)", "--config", path)
        self.assertEqual(code, 2)
        self.assertIn("seed_mode", err)


if __name__ == "__main__":
    unittest.main()
