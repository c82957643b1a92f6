import logging
import logging.config
import os

import yaml

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(default_path="logging.yaml", default_level=logging.INFO, env_key="RADAR_CARD_LOG_CFG"):
    """
    Setup logging for radarcard entry points.

    A YAML file with a `logging` section is passed to dictConfig; anything
    else falls back to basicConfig.
    """
    path = os.getenv(env_key, None) or default_path
    if not os.path.exists(path):
        logging.basicConfig(level=default_level, format=_FORMAT)
        return
    with open(path, "rt", encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f.read()) or {}
            if isinstance(config, dict) and "logging" in config:
                logging.config.dictConfig(config["logging"])
            else:
                logging.basicConfig(level=default_level, format=_FORMAT)
        except (yaml.YAMLError, ValueError, TypeError) as e:
            logging.basicConfig(level=default_level, format=_FORMAT)
            logging.getLogger("radarcard").warning("Error in logging configuration %s: %s; using defaults", path, e)


logger = logging.getLogger("radarcard")
