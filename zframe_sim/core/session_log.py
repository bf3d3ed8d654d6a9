# -*- coding: utf-8 -*-
"""JSON-lines debug log for control sessions."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class SessionDebugLogger:
    """Appends one JSON object per event when enabled.

    A write failure disables the logger; it never raises into the caller.
    """

    def __init__(self, enabled: bool = False, log_path: Optional[str] = None) -> None:
        self.enabled = bool(enabled)
        self.log_path = log_path
        self._handle = None
        if not self.enabled:
            return
        if not self.log_path:
            self.log_path = os.path.join(os.getcwd(), "logs", "zframe_debug.log")
        log_dir = os.path.dirname(self.log_path)
        try:
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            self._handle = open(self.log_path, "a", encoding="utf-8")
        except OSError:
            self.enabled = False
            self._handle = None

    def log(self, event: str, **payload: Any) -> None:
        if not self._handle:
            return
        record: Dict[str, Any] = {"utc": _utc_now(), "event": event}
        record.update(payload)
        try:
            self._handle.write(json.dumps(record, ensure_ascii=False) + "\n")
            self._handle.flush()
        except (OSError, TypeError, ValueError):
            self.enabled = False
            self.close()

    def close(self) -> None:
        if self._handle:
            try:
                self._handle.close()
            except OSError:
                pass
            self._handle = None
