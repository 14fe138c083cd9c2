"""
Logging Configuration
Sets up the package logger for scripts and standalone runs.
"""
import logging
import sys
from typing import Dict, Optional

# Per-step traces stay quiet unless asked for explicitly
DEFAULT_LEVELS: Dict[str, int] = {
    "actuator_wing.core.forces": logging.INFO,
    "actuator_wing.core.fllc": logging.INFO,
}


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    levels: Optional[Dict[str, int]] = None,
) -> None:
    """
    Configures the logger for the 'actuator_wing' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        levels: Per-module overrides, merged over DEFAULT_LEVELS. Pass
            {"actuator_wing.core.forces": logging.DEBUG} with level=logging.DEBUG
            to trace the scheduled pitch every step.
    """
    logger = logging.getLogger("actuator_wing")
    logger.setLevel(level)

    # Avoid duplicate handlers on repeated setup
    if logger.hasHandlers():
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    sub_levels = dict(DEFAULT_LEVELS)
    sub_levels.update(levels or {})
    for name, sub_level in sub_levels.items():
        # Never more verbose than the package level
        logging.getLogger(name).setLevel(max(sub_level, level))

    logger.info("Logging initialized.")
