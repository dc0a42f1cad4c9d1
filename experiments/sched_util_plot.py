"""Acceptance ratio vs utilisation experiment.

Generates random task systems at various utilisation levels using UUniFast,
applies the Liu & Layland test, the hyperbolic (Bini) test and response-time
analysis to each, and plots the ratio of accepted systems per test.
"""

from pathlib import Path

try:
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

from rmsa.generators import generate_system

TESTS = ("liu", "bini", "rta")


def run_acceptance_experiment(
    utilisation_points: list,
    num_systems_per_point: int = 100,
    num_tasks: int = 5,
    min_period: int = 10,
    max_period: int = 100,
    seed: int = 42,
) -> dict:
    """Run the acceptance experiment across utilisation levels.

    Args:
        utilisation_points: Utilisation values to test (e.g. [0.1, 0.2, ..., 0.9]).
        num_systems_per_point: Number of random systems per utilisation.
        num_tasks: Number of tasks per system.
        min_period: Minimum task period.
        max_period: Maximum task period.
        seed: Base random seed (varied per system).

    Returns:
        Dictionary mapping utilisation -> {test name: acceptance ratio}.
    """
    results = {}

    for u_total in utilisation_points:
        accepted = dict.fromkeys(TESTS, 0)

        for i in range(num_systems_per_point):
            system = generate_system(
                n=num_tasks,
                target_utilization=u_total,
                period_min=min_period,
                period_max=max_period,
                seed=seed + int(u_total * 1000) + i,
            )
            accepted["liu"] += system.is_schedulable_by_liu
            accepted["bini"] += system.is_schedulable_by_bini
            accepted["rta"] += system.is_schedulable_by_rta

        results[u_total] = {name: count / num_systems_per_point for name, count in accepted.items()}

    return results


def plot_acceptance_vs_utilisation(
    results: dict,
    output_path: str = "results/acceptance_vs_utilisation.png",
) -> None:
    """Plot acceptance ratio of each test vs utilisation.

    Args:
        results: Output of run_acceptance_experiment.
        output_path: Path to save the plot.
    """
    if not MATPLOTLIB_AVAILABLE:
        raise ImportError("matplotlib is required for plotting")

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    utilisations = sorted(results.keys())

    plt.figure(figsize=(10, 6))
    for name, style in zip(TESTS, ('rs--', 'gd-.', 'bo-')):
        plt.plot(utilisations, [results[u][name] for u in utilisations], style,
                 linewidth=2, markersize=8, label=name.upper())
    plt.xlabel('Total Utilisation', fontsize=12)
    plt.ylabel('Acceptance Ratio', fontsize=12)
    plt.title('RM Schedulability Tests vs Utilisation', fontsize=14)
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.xlim(0, 1.0)
    plt.ylim(0, 1.05)

    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()

    print(f"Plot saved to {output_path}")


def main():
    """Run the full acceptance vs utilisation experiment."""
    print("Running acceptance vs utilisation experiment...")

    utilisation_points = [u / 10.0 for u in range(1, 10)]  # 0.1, 0.2, ..., 0.9

    results = run_acceptance_experiment(
        utilisation_points=utilisation_points,
        num_systems_per_point=150,
        num_tasks=5,
        seed=42,
    )

    print("\nResults:")
    for u, ratios in sorted(results.items()):
        row = "  ".join(f"{name.upper()}={ratios[name]:.3f}" for name in TESTS)
        print(f"  U = {u:.1f}: {row}")

    plot_acceptance_vs_utilisation(results)

    print("\nExperiment complete!")


if __name__ == "__main__":
    main()
