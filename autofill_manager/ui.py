"""
User interface for the Autofill Manager.

LEGAL NOTICE:
This tool is for personal use only. It reads and deletes form data stored by
the browser on this device. Use it only on devices you own or administer.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QTableWidget, QTableWidgetItem, QMessageBox, QComboBox, QAbstractItemView
)
from PyQt5.QtCore import pyqtSignal, QThread

from .commands import CommandHandler
from . import config

logger = logging.getLogger(__name__)


class CommandWorker(QThread):
    """Worker thread running one command through the command handler."""

    finished = pyqtSignal(object)
    error = pyqtSignal(str)

    def __init__(self, handler: CommandHandler, command: str, args: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.handler = handler
        self.command = command
        self.args = args or {}

    def run(self):
        """Run the command and report the outcome."""
        try:
            envelope = self.handler.invoke(self.command, self.args)
            if envelope["ok"]:
                self.finished.emit(envelope["result"])
            else:
                self.error.emit(envelope["error"])
        except Exception as e:
            logger.error(f"Command {self.command} crashed: {e}", exc_info=True)
            self.error.emit(str(e))


class DeleteRecordsWorker(QThread):
    """
    Worker thread deleting several name/value pairs from one table.

    Duplicate pairs are dropped, so finished reports how many distinct pairs
    matched at least one row.
    """

    finished = pyqtSignal(object)
    error = pyqtSignal(str)

    def __init__(self, handler: CommandHandler, table: str, pairs: List[Tuple[str, str]]):
        super().__init__()
        self.handler = handler
        self.table = table
        self.pairs = list(dict.fromkeys(pairs))

    def run(self):
        """Delete each pair, stopping at the first failure."""
        try:
            matched = 0
            for name, value in self.pairs:
                envelope = self.handler.invoke(
                    "delete_record", {"table_name": self.table, "name": name, "value": value}
                )
                if not envelope["ok"]:
                    self.error.emit(envelope["error"])
                    return
                if envelope["result"]:
                    matched += 1
            self.finished.emit(matched)
        except Exception as e:
            logger.error(f"Deleting from {self.table} crashed: {e}", exc_info=True)
            self.error.emit(str(e))


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, handler: CommandHandler):
        super().__init__()
        self.handler = handler
        self.columns: List[str] = []
        self.rows: List[Dict[str, Any]] = []
        self._workers: List[QThread] = []
        self.init_ui()
        self.load_tables()

    def init_ui(self):
        """Initialize the user interface."""
        self.setWindowTitle(f"{config.APP_TITLE_PREFIX} - {self.handler.target_path}")
        self.setGeometry(*config.WINDOW_GEOMETRY)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout()
        central_widget.setLayout(layout)

        # Toolbar
        toolbar_layout = QHBoxLayout()
        toolbar_layout.addWidget(QLabel("Table:"))

        self.table_selector = QComboBox()
        self.table_selector.setMinimumWidth(200)
        self.table_selector.currentTextChanged.connect(self.load_table)
        toolbar_layout.addWidget(self.table_selector)

        self.refresh_button = QPushButton("Refresh")
        self.refresh_button.clicked.connect(lambda: self.load_table(self.table_selector.currentText()))
        toolbar_layout.addWidget(self.refresh_button)

        toolbar_layout.addStretch()

        self.delete_selected_button = QPushButton("Delete Selected")
        self.delete_selected_button.clicked.connect(self.delete_selected_records)
        self.delete_selected_button.setEnabled(False)
        toolbar_layout.addWidget(self.delete_selected_button)

        layout.addLayout(toolbar_layout)

        disclaimer_label = QLabel(config.APP_DISCLAIMER.strip())
        disclaimer_label.setWordWrap(True)
        disclaimer_label.setStyleSheet("color: gray;")
        layout.addWidget(disclaimer_label)

        # Record table
        self.table = QTableWidget()
        self.table.setAlternatingRowColors(True)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.itemSelectionChanged.connect(self.update_delete_selected_button_state)
        layout.addWidget(self.table)

        self.count_label = QLabel("Rows: 0")
        self.count_label.setStyleSheet("padding-right: 10px;")
        self.statusBar().addPermanentWidget(self.count_label)

    def _start_worker(self, worker: QThread, on_finished, on_error):
        worker.finished.connect(on_finished)
        worker.error.connect(on_error)
        # keep references until the threads have stopped
        self._workers = [w for w in self._workers if not w.isFinished()]
        self._workers.append(worker)
        worker.start()

    def load_tables(self):
        """Fetch the table names and fill the selector."""
        self.statusBar().showMessage("Opening database...")
        worker = CommandWorker(self.handler, "list_tables")
        self._start_worker(worker, self._handle_tables_loaded, self._handle_error)

    def _handle_tables_loaded(self, names: List[str]):
        self.statusBar().clearMessage()
        self.table_selector.blockSignals(True)
        self.table_selector.clear()
        self.table_selector.addItems(names)
        self.table_selector.blockSignals(False)

        if config.DEFAULT_TABLE in names:
            self.table_selector.setCurrentText(config.DEFAULT_TABLE)
        if self.table_selector.currentText():
            self.load_table(self.table_selector.currentText())

    def load_table(self, name: str):
        """Load all rows of a table into the view."""
        if not name:
            return
        self.statusBar().showMessage(f"Loading {name}...")
        worker = CommandWorker(self.handler, "get_table_view", {"table_name": name})
        self._start_worker(worker, self._handle_table_loaded, self._handle_error)

    def _handle_table_loaded(self, view: Dict[str, Any]):
        self.statusBar().clearMessage()
        rows = view["rows"]
        self.rows = rows
        self.columns = view["columns"]

        self.table.clear()
        self.table.setColumnCount(len(self.columns))
        self.table.setHorizontalHeaderLabels(self.columns)
        self.table.setRowCount(len(rows))
        for row_index, row in enumerate(rows):
            for column_index, column in enumerate(self.columns):
                item = QTableWidgetItem(self._display(row[column]))
                self.table.setItem(row_index, column_index, item)

        self.count_label.setText(f"Rows: {len(rows)}")
        self.update_delete_selected_button_state()

    @staticmethod
    def _display(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, list):
            return f"<{len(value)} bytes>"
        return str(value)

    def _supports_delete(self) -> bool:
        return all(column in self.columns for column in config.DELETE_KEY_COLUMNS)

    def update_delete_selected_button_state(self):
        """Enable delete only for tables keyed by name/value with a selection."""
        has_selection = bool(self.table.selectionModel().selectedRows())
        self.delete_selected_button.setEnabled(has_selection and self._supports_delete())

    def _selected_pairs(self) -> List[Tuple[str, str]]:
        name_column, value_column = config.DELETE_KEY_COLUMNS
        pairs = []
        for index in self.table.selectionModel().selectedRows():
            row = self.rows[index.row()]
            name, value = row[name_column], row[value_column]
            if not isinstance(name, str) or not isinstance(value, str):
                logger.warning(f"Skipping row {index.row()}: name/value are not text")
                continue
            pairs.append((name, value))
        return pairs

    def delete_selected_records(self):
        """Delete the selected rows after confirmation."""
        pairs = self._selected_pairs()
        if not pairs:
            QMessageBox.information(self, "No Selection", "No deletable rows selected.")
            return

        table = self.table_selector.currentText()
        reply = QMessageBox.question(
            self, "Confirm Deletion",
            f"Are you sure you want to delete {len(pairs)} selected records from {table}?",
            QMessageBox.Yes | QMessageBox.No
        )
        if reply != QMessageBox.Yes:
            return

        self.delete_selected_button.setEnabled(False)
        worker = DeleteRecordsWorker(self.handler, table, pairs)
        self._start_worker(worker, self._handle_delete_finished, self._handle_error)

    def _handle_delete_finished(self, matched: int):
        self.statusBar().showMessage(f"Deleted entries for {matched} name/value pairs", config.STATUS_MESSAGE_TIMEOUT_MS)
        self.load_table(self.table_selector.currentText())

    def _handle_error(self, error: str):
        """Show a failed command to the user."""
        self.statusBar().clearMessage()
        self.update_delete_selected_button_state()
        QMessageBox.critical(self, "Error", error)

    def closeEvent(self, event):
        """Wait for running commands before closing."""
        for worker in list(self._workers):
            worker.wait()
        event.accept()
