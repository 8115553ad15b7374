"""
Command-line interface for NESTPROG.

Runs a synthetic nested workload so reporters and emission settings can be
tried out from a terminal.
"""
import sys
import time
from pathlib import Path

import click

from . import __version__
from .core.config import get_config
from .core.exceptions import NestprogError
from .logging import setup_logging, get_logger
from .progress import ProgressTracker, create_reporter
from .progress.reporter import REPORTERS


def run_workload(tracker: ProgressTracker, phases: int, steps: int, delay: float = 0.0) -> bool:
    """
    Drive a tracker through phases, each made of steps with a nested sub-step.

    Every phase gets an equal share of the root total. Sub-steps leave their
    label empty and inherit the phase label.

    Returns:
        True if the workload ran to the end, False if it was asked to stop
    """
    root = tracker.root_portion
    share = root.total_size // phases if root is not None else 0

    for phase in range(phases):
        with tracker.portion(share, f"Phase {phase + 1}/{phases}", total_size=steps):
            for _ in range(steps):
                with tracker.portion(1, total_size=10):
                    for _ in range(10):
                        if delay:
                            time.sleep(delay)
                        if not tracker.step():
                            return False
    return tracker.emit_signal()


def _print_suggestions(error: NestprogError):
    if error.suggestions:
        click.echo("\nSuggestions:")
        for i, tip in enumerate(error.suggestions, 1):
            click.echo(f"  {i}. {tip}")


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(path_type=Path), help="Also write logs to this file")
@click.option("--json-logs", is_flag=True, help="Write the log file as JSON lines")
@click.pass_context
def cli(ctx, debug, log_file, json_logs):
    """NESTPROG - Nested Progress Reporting"""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug

    try:
        setup_logging(
            level="DEBUG" if debug else None,
            enable_file_logging=True if log_file is not None else None,
            log_file=log_file,
            json_format=True if json_logs else None,
        )
    except NestprogError as e:
        click.echo(f"Error: {e}", err=True)
        _print_suggestions(e)
        sys.exit(1)


@cli.command()
@click.option("--total", "-t", type=int, default=None, help="Root total size")
@click.option("--phases", "-p", type=click.IntRange(min=1), default=3, help="Number of phases")
@click.option("--steps", "-s", type=click.IntRange(min=1), default=20, help="Steps per phase")
@click.option("--cutoff", type=int, default=None, help="Deepest level that emits signals")
@click.option("--granularity", "-g", type=int, default=None,
              help="Minimum overall advance between signals")
@click.option("--reporter", "-r", default="rich",
              type=click.Choice(sorted(REPORTERS)), help="How to display progress")
@click.option("--delay", type=float, default=0.01, help="Seconds to sleep per sub-step")
def demo(total, phases, steps, cutoff, granularity, reporter, delay):
    """Run a synthetic nested workload."""
    logger = get_logger("cli")

    try:
        config = get_config()
        if total is None:
            total = config.tracker.default_total

        tracker = ProgressTracker.from_config(config)
        if cutoff is not None:
            tracker.cutoff_depth = cutoff
        if granularity is not None:
            tracker.granularity = granularity

        if not tracker.init("Demo", total):
            logger.error(f"Total size must be positive, got {total}")
            sys.exit(1)

        with create_reporter(tracker, reporter) as rep:
            completed = run_workload(tracker, phases, steps, delay)
            rep.print_summary()

        if completed:
            logger.info(f"Workload finished after {rep.signals} signals")
        else:
            logger.warning("Workload stopped early")
            sys.exit(1)

    except NestprogError as e:
        logger.error(str(e))
        _print_suggestions(e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
