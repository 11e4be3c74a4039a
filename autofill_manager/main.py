"""
Main entry point for the Autofill Manager.

LEGAL NOTICE:
This tool is for personal use only. It reads and deletes form data stored by
the browser on this device. Use it only on devices you own or administer.
"""

import sys
import signal
import logging
from PyQt5.QtWidgets import QApplication
from PyQt5.QtCore import Qt

from autofill_manager.audit import AuditLog
from autofill_manager.commands import CommandHandler
from autofill_manager.connection import ConnectionGuard
from autofill_manager.ui import MainWindow
from autofill_manager import config

logger = logging.getLogger(__name__)


class AutofillManagerApp:
    """Main application class. Builds the single guard and hands it out."""

    def __init__(self):
        """Initialize the application."""
        self.app = QApplication(sys.argv)
        self.app.setApplicationName(config.APP_NAME)
        self.app.setOrganizationName(config.APP_NAME)
        self.app.setStyle(config.APP_STYLE)

        self.guard = ConnectionGuard()
        self.handler = CommandHandler(self.guard, config.TARGET_PATH, AuditLog())
        self.main_window = None

        # Handle Ctrl+C gracefully
        signal.signal(signal.SIGINT, signal.SIG_DFL)

    def run(self) -> int:
        """Run the application."""
        logger.info(f"Using database {self.handler.target_path or '<unknown platform>'}")
        self.main_window = MainWindow(self.handler)
        self.main_window.show()
        return self.app.exec_()


def main():
    """Main entry point."""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')
    # Enable high DPI scaling
    if hasattr(Qt, 'AA_EnableHighDpiScaling'):
        QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
    if hasattr(Qt, 'AA_UseHighDpiPixmaps'):
        QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)

    app = AutofillManagerApp()
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
