from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ..utils.logging_setup import LogFiles, setup_logging


def utc_stamp(fmt: str = "%Y-%m-%dT%H:%M:%SZ") -> str:
    return datetime.now(timezone.utc).strftime(fmt)


@dataclass(frozen=True)
class RunContext:
    run_dir: Path
    logger: logging.Logger
    log_files: LogFiles
    started_at: str

    def artifact(self, name: str) -> Path:
        return self.run_dir / name


def start_run(out_dir: Path, base_logger_name: str = "chartprep", level: str = "INFO") -> RunContext:
    started_at = utc_stamp()
    run_dir = out_dir / utc_stamp("%Y%m%dT%H%M%S%fZ")
    log_files = setup_logging(run_dir, level=level)
    logger = logging.getLogger(base_logger_name)
    logger.info("Run started", extra={"run_dir": str(run_dir)})
    return RunContext(run_dir=run_dir, logger=logger, log_files=log_files, started_at=started_at)
