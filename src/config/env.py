"""Environment file loading for test runs."""

import logging
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def load_env_files(*env_files: str) -> list[str]:
    """
    Load environment variables from dotenv files, in order.

    The first file does not override variables already set in the process;
    every later file does, so later files take precedence. Empty paths are
    skipped and unreadable files are logged as warnings.

    Returns:
        The files that were loaded
    """
    loaded = []
    for index, env_file in enumerate(env_files):
        if not env_file:
            continue

        if not Path(env_file).is_file():
            logger.warning("Failed to load env file %s: file not found", env_file)
            continue

        try:
            load_dotenv(env_file, override=index > 0)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to load env file %s: %s", env_file, e)
            continue

        loaded.append(env_file)
    return loaded
