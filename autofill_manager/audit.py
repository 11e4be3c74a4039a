"""
Audit log of destructive actions.
"""

import os
import logging
import datetime
import threading
from typing import Optional

from . import config

logger = logging.getLogger(__name__)


class AuditLog:
    """Appends 'timestamp | ACTION | details' lines to a log file."""

    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath or config.audit_log_path()
        self._lock = threading.Lock()

    def record(self, action: str, details: str) -> bool:
        """
        Write one audit line.

        Returns:
            True if the line was written. Write failures are logged, not raised.
        """
        timestamp = datetime.datetime.now().isoformat()
        line = f"{timestamp} | {action} | {details}\n"
        with self._lock:
            try:
                directory = os.path.dirname(self.filepath)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                with open(self.filepath, 'a', encoding='utf-8') as f:
                    f.write(line)
            except OSError as e:
                logger.warning(f"Could not write audit log {self.filepath}: {e}")
                return False
        return True
