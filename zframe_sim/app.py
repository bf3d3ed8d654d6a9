# -*- coding: utf-8 -*-
"""Application entry point.

``zframe-sim [SETTINGS_JSON]``: the optional argument overrides the default
settings file (``~/.zframe_sim/settings.json``).
"""

from __future__ import annotations

import sys
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from .ui.main_window import MainWindow


def main(argv: Optional[List[str]] = None):
    argv = list(sys.argv if argv is None else argv)
    app = QApplication(argv)
    app.setApplicationName("zframe-sim")
    settings_path = argv[1] if len(argv) > 1 else None
    w = MainWindow(settings_path=settings_path)
    w.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
