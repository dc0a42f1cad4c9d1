"""UUniFast-based random tests for the analysis engine."""

import unittest

from rmsa.analysis import UNSCHEDULABLE
from rmsa.generators import generate_system, generate_tasks, uunifast
from rmsa.models import Task
from rmsa.parser import format_tasks, parse_tasks
from rmsa.system import TaskSystem


class TestUUniFast(unittest.TestCase):
    """Test UUniFast utilization generation."""

    def test_uunifast_sum(self):
        """Test that UUniFast generates utilizations summing to target."""
        utilizations = uunifast(5, 0.7, seed=42)

        self.assertEqual(len(utilizations), 5)
        self.assertAlmostEqual(sum(utilizations), 0.7, places=6)

    def test_uunifast_all_positive(self):
        """Test that no share is negative."""
        for u in uunifast(10, 0.8, seed=123):
            self.assertGreaterEqual(u, 0.0)

    def test_uunifast_reproducibility(self):
        """Test that a fixed seed gives the same shares."""
        self.assertEqual(uunifast(5, 0.6, seed=999), uunifast(5, 0.6, seed=999))

    def test_uunifast_invalid_n(self):
        """Test that n must be positive."""
        with self.assertRaises(ValueError):
            uunifast(0, 0.5)

    def test_uunifast_invalid_utilization(self):
        """Test that the utilization must be positive."""
        with self.assertRaises(ValueError):
            uunifast(5, -0.1)


class TestGenerator(unittest.TestCase):
    """Test random task system generation."""

    def test_generate_count_and_ids(self):
        """Test the number and ids of generated tasks."""
        tasks = generate_tasks(7, 0.6, seed=42)
        self.assertEqual([t.id for t in tasks], list(range(1, 8)))

    def test_generated_in_rate_monotonic_order(self):
        """Test that shorter periods come first, since input order is priority."""
        periods = [t.T for t in generate_tasks(8, 0.7, seed=7)]
        self.assertEqual(periods, sorted(periods))

    def test_generated_tasks_valid(self):
        """Test that generated tasks run at least one unit with D = T in range."""
        for task in generate_tasks(8, 0.8, period_min=10, period_max=50, seed=789):
            self.assertGreaterEqual(task.C, 1)
            self.assertEqual(task.D, task.T)
            self.assertGreaterEqual(task.T, 10)
            self.assertLessEqual(task.T, 50)

    def test_invalid_period_range(self):
        """Test that an empty period range is rejected."""
        with self.assertRaises(ValueError):
            generate_tasks(3, 0.5, period_min=20, period_max=10)

    def test_generated_system_round_trips(self):
        """Test that a generated system parses back to the same tasks."""
        system = generate_system(6, 0.5, seed=11)
        reparsed = parse_tasks(format_tasks(system.tasks))
        self.assertEqual(reparsed, system.tasks)


class TestRandomProperties(unittest.TestCase):
    """Properties that must hold on any task system."""

    def test_total_utilization_is_sum_of_ratios(self):
        """Test total utilization against the raw sum of the ratios."""
        for i in range(20):
            system = generate_system(5, 0.6, seed=100 + i)
            expected = sum(t.C / t.T for t in system)
            self.assertAlmostEqual(system.total_utilization, expected, places=3)

    def test_liu_pass_implies_bini_pass(self):
        """Test that the hyperbolic bound never rejects a Liu-accepted system."""
        for i in range(50):
            system = generate_system(5, 0.3 + (i % 5) * 0.1, seed=200 + i)
            if system.is_schedulable_by_liu:
                self.assertTrue(system.is_schedulable_by_bini, system)

    def test_bounds_are_sufficient(self):
        """Test that anything accepted by a bound is accepted by exact analysis."""
        for i in range(50):
            system = generate_system(5, 0.3 + (i % 5) * 0.1, seed=300 + i)
            # strictly below 2 so that rounding to 2 decimals cannot hide an excess
            if system.is_schedulable_by_liu or system.bini_bound < 2:
                self.assertTrue(system.is_schedulable_by_rta, system)

    def test_response_time_at_least_wcet(self):
        """Test that bounded response times are at least C."""
        for i in range(20):
            system = generate_system(6, 0.7, seed=400 + i)
            for task, r in zip(system, system.response_times):
                if r != UNSCHEDULABLE:
                    self.assertGreaterEqual(r, task.C)

    def test_harmonic_periods_converge(self):
        """Test that harmonic systems below full utilization always settle."""
        periods = [10, 20, 40, 80]
        for i in range(20):
            utilizations = uunifast(len(periods), 0.95, seed=500 + i)
            tasks = [Task(id=j, C=int(u * T), T=T, D=T)
                     for j, (u, T) in enumerate(zip(utilizations, periods), start=1)]
            system = TaskSystem.from_tasks(tasks)
            self.assertNotIn(UNSCHEDULABLE, system.response_times)
            self.assertTrue(system.is_schedulable_by_rta)

    def test_seed_modes_agree(self):
        """Test that both seeds reach the same fixed points."""
        for i in range(20):
            system = generate_system(6, 0.8, seed=600 + i)
            chained = TaskSystem.from_tasks(system.tasks, system.config.replace(seed_mode="chained"))
            for r1, r2 in zip(system.response_times, chained.response_times):
                # the chained seed starts closer and may settle within the cap first
                if UNSCHEDULABLE not in (r1, r2):
                    self.assertEqual(r1, r2)

    def test_simulation_occupancy(self):
        """Test that each task gets C units per release over one hyperperiod."""
        for i in range(10):
            system = generate_system(3, 0.7, period_min=2, period_max=12, seed=700 + i)
            if not system.is_schedulable_by_rta:
                continue
            schedule = system.rm_schedule
            self.assertTrue(schedule.schedulable)
            for index, task in enumerate(system):
                self.assertEqual(schedule.busy_cells(index), task.C * system.hyperperiod / task.T)

    def test_slack_table_starts_with_slacks(self):
        """Test that the first instance of each row is the task slack."""
        for i in range(10):
            system = generate_system(3, 0.6, period_min=2, period_max=12, seed=800 + i)
            self.assertEqual([row[0] for row in system.slack_table], system.slacks)


class TestAcceptanceExperiment(unittest.TestCase):
    """Test the acceptance vs utilisation experiment."""

    def test_experiment_smoke(self):
        """Smoke test: verify the experiment runs without error."""
        try:
            from experiments.sched_util_plot import run_acceptance_experiment
        except ImportError:
            self.skipTest("experiments.sched_util_plot not available")

        utilisation_points = [0.3, 0.5, 0.7]
        results = run_acceptance_experiment(
            utilisation_points=utilisation_points,
            num_systems_per_point=10,
            num_tasks=3,
            seed=12345,
        )

        self.assertEqual(sorted(results), utilisation_points)
        for u, ratios in results.items():
            for name, ratio in ratios.items():
                self.assertGreaterEqual(ratio, 0.0, f"Invalid {name} ratio {ratio} for U={u}")
                self.assertLessEqual(ratio, 1.0, f"Invalid {name} ratio {ratio} for U={u}")
            # exact analysis accepts at least what the bounds accept
            self.assertGreaterEqual(ratios["rta"], ratios["liu"])
            self.assertGreaterEqual(ratios["bini"], ratios["liu"])


if __name__ == "__main__":
    unittest.main()
