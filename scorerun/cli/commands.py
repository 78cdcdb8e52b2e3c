# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the scorerun CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. Diagnostics go through the structured logger; the only plain stdout
output is the final total and report location of a run.
"""

import argparse
import logging
import sys
from pathlib import Path

from scorerun.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, VALIDATION_ERROR
from scorerun.config.exceptions import ConfigError
from scorerun.config.loader import load_config
from scorerun.config.schema import ScorerunConfig
from scorerun.logging.logger import get_logger
from scorerun.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, ScorerunConfig | None, logging.Logger]:
    """
    The shared setup that every pipeline command needs: load config, run bootstrap.

    Returns a tuple of (exit_code, config, logger). If exit_code is not SUCCESS,
    the caller should return it immediately, something went wrong during setup.
    """
    logger = get_logger(f"scorerun.cli.{command_name}", log_level=args.log_level or "INFO")

    try:
        config = load_config(Path(args.config))
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None, logger

    try:
        bootstrap(config.global_config, log_level_override=args.log_level)
    except (RuntimeError, ValueError, OSError) as err:
        logger.error(
            "Bootstrap failed",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None, logger

    return SUCCESS, config, logger


def _summary_json_path(report_path: Path) -> Path:
    json_path = report_path.with_suffix(".json")
    if json_path == report_path:
        json_path = report_path.with_name(report_path.name + ".summary.json")
    return json_path


def handle_run(args: argparse.Namespace) -> int:
    """
    Run the full pipeline: enumerate, score, visualize, aggregate, report.

    Only setup problems fail the command (bad config, missing input
    directory). Per-case failures show up as zero scores in the report.
    """
    exit_code, config, logger = _load_and_bootstrap(args, "run")
    if exit_code != SUCCESS:
        return exit_code
    if config is None:
        return CONFIG_ERROR

    from scorerun.evaluation.reporting.export import export_outputs
    from scorerun.evaluation.reporting.writer import write_html_report, write_summary_json
    from scorerun.evaluation.runner.pipeline import run_pipeline
    from scorerun.evaluation.runner.pool import resolve_num_workers
    from scorerun.evaluation.scoring.scorer import ScorerSettings
    from scorerun.evaluation.tasks.enumerator import InputDirectoryError, enumerate_tasks
    from scorerun.evaluation.visualizer.runner import VisualizerSettings

    paths = config.paths

    configured_threads = args.num_threads
    if configured_threads is None:
        configured_threads = config.parallel.num_threads
    try:
        num_workers = resolve_num_workers(configured_threads)
    except ValueError as err:
        logger.error("Invalid worker count", extra={"error": str(err)})
        return VALIDATION_ERROR

    try:
        tasks = enumerate_tasks(Path(paths.input_dir), paths.input_extension)
    except InputDirectoryError as err:
        logger.error(
            "Error reading input files",
            extra={"input_dir": paths.input_dir, "error": str(err)},
        )
        return VALIDATION_ERROR

    scorer_settings = ScorerSettings.from_config(config)
    visualizer_settings = VisualizerSettings.from_config(config)

    if args.dry_run:
        logger.info(
            "Dry run: would score and visualize input cases",
            extra={
                "total_tasks": len(tasks),
                "num_workers": num_workers,
                "tester_command": list(scorer_settings.command),
                "visualizer_command": list(visualizer_settings.command),
                "visualizer_enabled": visualizer_settings.enabled,
                "html_output": paths.html_output,
            },
        )
        return SUCCESS

    try:
        summary = run_pipeline(
            tasks,
            scorer_settings,
            visualizer_settings,
            num_workers=num_workers,
            progress_enabled=not args.no_progress,
        )
    except Exception as err:
        logger.error(
            "Runtime error",
            extra={"command": "run", "error": str(err)},
            exc_info=True,
        )
        return RUNTIME_ERROR

    report_path = Path(paths.html_output)
    report_written = True
    try:
        write_html_report(summary, report_path)
        write_summary_json(summary, _summary_json_path(report_path))
    except OSError as err:
        report_written = False
        logger.error(
            "Error writing report",
            extra={"path": str(report_path), "error": str(err)},
        )

    if paths.answers_dir is not None:
        export_outputs(Path(paths.output_dir), Path(paths.answers_dir))

    sys.stdout.write(f"Total Score: {summary.total_score}\n")
    if report_written:
        sys.stdout.write(f"Results saved to {report_path}\n")
    sys.stdout.flush()

    return SUCCESS if report_written else RUNTIME_ERROR


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and version information."""
    logger = get_logger("scorerun.cli.info", log_level=args.log_level or "INFO")

    from scorerun import __version__
    from scorerun.runtime.environment import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "scorerun_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "cpu_count": system_info.cpu_count,
            "config": args.config,
        },
    )
    return SUCCESS
