from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional


def setup_logging(log_dir: Optional[str] = None, name: str = "fix_pipeline", verbose: bool = False) -> logging.Logger:
    """Configure console logging, plus a log file when ``log_dir`` is given.

    The console handler writes to stderr so stdout carries only the report.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(Path(log_dir) / f"{name}.log")
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    logger.addHandler(sh)
    return logger


def save_json(obj: Dict[str, Any], path: str) -> None:
    """Save dictionary as JSON file."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)
