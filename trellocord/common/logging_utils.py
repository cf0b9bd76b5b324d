"""Logging utilities for consistent logging across modules."""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


def _log_path(log_dir: Optional[str] = None) -> Path:
    log_path = Path(log_dir or os.getenv("TRELLOCORD_LOG_DIR", "logs"))
    log_path.mkdir(parents=True, exist_ok=True)
    return log_path


def setup_logging(log_dir: Optional[str] = None) -> None:
    """Setup logging configuration."""
    log_path = _log_path(log_dir)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_path / "trellocord.log"),
            logging.StreamHandler()
        ]
    )


def log_server_message(message: str) -> None:
    """Log server-related messages."""
    logging.info(f"[SERVER] {message}")


def log_webhook_request(webhook_data: Dict[str, Any], action_key: Optional[str] = None) -> None:
    """Write an accepted webhook payload to its own timestamped file."""
    try:
        log_path = _log_path()

        timestamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
        webhook_file = log_path / f"webhook-{timestamp}.log"

        with open(webhook_file, "w", encoding="utf-8") as f:
            f.write(f"Webhook received at: {datetime.now().isoformat()}\n")
            if action_key:
                f.write(f"Action: {action_key}\n")
            f.write(f"Webhook payload:\n{json.dumps(webhook_data, indent=2)}\n")

        logging.debug(f"Webhook logged to: {webhook_file}")

    except Exception as e:
        logging.error(f"Failed to log webhook request: {e}")


def log_error(error_message: str, error_data: str = "") -> None:
    """Log error messages with optional error data."""
    try:
        log_path = _log_path()

        timestamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
        error_file = log_path / f"error-{timestamp}.log"

        with open(error_file, "w", encoding="utf-8") as f:
            f.write(f"Error occurred at: {datetime.now().isoformat()}\n")
            f.write(f"Error message: {error_message}\n")
            if error_data:
                f.write(f"Error data:\n{error_data}\n")

        logging.error(f"{error_message} (details in {error_file})")

    except Exception as e:
        logging.error(f"Failed to log error: {e}")
