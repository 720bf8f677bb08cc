"""
PipelineLogger: Structured JSON logging for background removal runs
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union


class PipelineLogger:
    """Logger with per-image JSON records and debug modes"""

    def __init__(
        self,
        log_file: Optional[Path] = None,
        debug_mode: bool = False,
        verbose: bool = False,
    ):
        self.log_file = log_file or Path.home() / ".local/share/iconmatte/debug.log"
        self.debug_mode = debug_mode
        self.verbose = verbose
        self.current_image: Optional[Dict[str, Any]] = None
        self.logs: list[Dict[str, Any]] = []

        # Ensure log directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        # Setup Python logger
        self.logger = logging.getLogger("iconmatte.pipeline")
        self.logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    def start_image(self, source: Union[str, Path]):
        """Start logging for a new image"""
        self.current_image = {
            "image": str(source),
            "timestamp": datetime.now().isoformat(),
            "stages": [],
        }

    def log_stage(self, stage_name: str, **data: Any):
        """Record one stage (usually one algorithm) of the current image"""
        if self.current_image is None:
            raise RuntimeError("Must call start_image() before logging stages")

        stage_log = {
            "stage": stage_name,
            "timestamp": datetime.now().isoformat(),
            **data,
        }
        self.current_image["stages"].append(stage_log)

        if self.debug_mode:
            print(f"[{stage_name}] {json.dumps(data, indent=2, default=str)}")

    def log_debug(self, message: str):
        self.logger.debug(message)
        if self.debug_mode:
            print(f"DEBUG: {message}")

    def log_info(self, message: str):
        """Log info message"""
        self.logger.info(message)
        if self.verbose:
            print(f"INFO: {message}")

    def log_warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)
        print(f"WARNING: {message}")

    def log_error(self, message: str, exc_info: bool = False):
        """Log error message"""
        self.logger.error(message, exc_info=exc_info)
        print(f"ERROR: {message}")

    def summarize_image(self, **summary: Any):
        """Attach run-level results (status, counts) to the current image"""
        if self.current_image is None:
            return
        self.current_image["summary"] = summary

    def save_image_log(self):
        """Append the current image record to the log file as one JSON line"""
        if self.current_image is None:
            return

        self.logs.append(self.current_image)

        with open(self.log_file, "a") as f:
            json.dump(self.current_image, f, default=str)
            f.write("\n")

        self.current_image = None
