"""Logging utilities for genoimpute.

This module provides loguru-based logging configuration and the plain-text
run log written next to each set of results.
"""

import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

import genoimpute
from genoimpute.core.config import OutputConfig


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure loguru for genoimpute.

    Sets up console logging with INFO level (or DEBUG if verbose), and
    optional file logging with JSON serialization.

    Args:
        verbose: If True, set console logging to DEBUG level.
        log_file: Optional path to log file. If provided, DEBUG-level
            logs are written with JSON serialization.
    """
    logger.remove()

    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stdout,
        level=level,
        format="{time:HH:mm:ss} | <level>{level: <8}</level> | {message}",
        colorize=True,
    )

    if log_file:
        logger.add(
            log_file,
            serialize=True,
            level="DEBUG",
        )


def write_run_log(
    output_config: OutputConfig,
    params: dict,
    timing: dict,
    command_line: str,
) -> Path:
    """Write the run log file.

    Produces a .log.txt file with ## prefixes for section headers.

    Args:
        output_config: Output configuration specifying directory and prefix.
        params: Parameters and summary counts to record.
        timing: Timing information in seconds (e.g. 'total', 'impute').
        command_line: The command line or API call that started the run.

    Returns:
        Path to the written log file.

    Example output format:
        ##
        ## genoimpute Version = 0.1.0
        ## Date = 2026-01-31T10:30:00
        ##
        ## Command Line Input = genoimpute impute -geno dogs.txt -k 3
        ##
        ## Summary Statistics:
        ## n_samples = 48
        ## n_imputed = 112
        ##
        ## Computation Time:
        ## total time = 0.42 seconds
        ##
    """
    output_config.ensure_outdir()

    log_path = output_config.log_path

    with open(log_path, "w") as f:
        f.write("##\n")
        f.write(f"## genoimpute Version = {genoimpute.__version__}\n")
        f.write(f"## Date = {datetime.now().isoformat()}\n")
        f.write("##\n")

        f.write(f"## Command Line Input = {command_line}\n")
        f.write("##\n")

        f.write("## Summary Statistics:\n")
        for key, value in params.items():
            f.write(f"## {key} = {value}\n")
        f.write("##\n")

        f.write("## Computation Time:\n")
        for key, value in timing.items():
            if isinstance(value, float):
                f.write(f"## {key} time = {value:.2f} seconds\n")
            else:
                f.write(f"## {key} time = {value} seconds\n")
        f.write("##\n")

    return log_path
