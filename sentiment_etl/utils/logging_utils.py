import logging
import logging.config
from pathlib import Path
from typing import Optional, Union

import yaml

from sentiment_etl.config.settings import settings

DEFAULT_LOGGING_CONFIG_PATH = Path(settings.LOGGING_CONFIG_PATH)


def setup_logging(
    config_path: Union[str, Path] = DEFAULT_LOGGING_CONFIG_PATH,
    level: Optional[str] = None,
) -> None:
    """
    Set up logging configuration from a YAML file.

    Args:
        config_path: Path to the logging configuration YAML file.
        level: Optional level name that overrides the root and package loggers.
    """
    config_path = Path(config_path)
    if config_path.exists():
        try:
            with open(config_path, "rt") as f:
                log_config = yaml.safe_load(f.read())
            logging.config.dictConfig(log_config)
            logging.getLogger(__name__).debug(f"Logging configured from {config_path}")
        except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
            logging.basicConfig(level=logging.INFO)
            logging.error(f"Error loading logging configuration from {config_path}: {e}. Using basicConfig.")
    else:
        logging.basicConfig(level=logging.INFO)
        logging.warning(f"Logging configuration file not found at {config_path}. Using basicConfig.")

    if level:
        numeric = getattr(logging, level.upper(), None)
        if not isinstance(numeric, int):
            raise ValueError(f"Invalid log level: {level}")
        logging.getLogger().setLevel(numeric)
        logging.getLogger("sentiment_etl").setLevel(numeric)
        for handler in logging.getLogger().handlers + logging.getLogger("sentiment_etl").handlers:
            handler.setLevel(numeric)
