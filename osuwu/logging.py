from __future__ import annotations

import logging.config
from typing import Optional

import yaml


def configure_logging(path: str = "logging.yaml", *, level: Optional[int] = None) -> None:
    with open(path) as f:
        config = yaml.safe_load(f.read())
        logging.config.dictConfig(config)

    if level is not None:
        logging.getLogger().setLevel(level)
