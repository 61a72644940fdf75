"""
Main window for QBoss.

This module provides the interactive mode: a window list with actions,
the saved applications, and a live window monitor.
"""

from typing import List, Optional

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel,
    QStatusBar, QMessageBox, QTabWidget, QTableWidget, QTableWidgetItem,
    QHeaderView, QAbstractItemView, QComboBox, QLineEdit, QPlainTextEdit,
    QInputDialog
)
from PyQt5.QtCore import QTimer

from qboss.core.debug import get_logger
from qboss.core.errors import QBossError
from qboss.core.monitor import ChangeMonitor, EventKind, WindowEvent
from qboss.core.services import Services
from qboss.core.toggle_manager import ToggleAction
from qboss.core.windows import SearchField, WindowRecord

logger = get_logger(__name__)

TABS = ("windows", "apps", "monitor")


def _text(value) -> str:
    if value is None:
        return "N/A"
    return str(value)


class MainWindow(QMainWindow):
    """Main window for the QBoss application."""

    def __init__(self, services: Services, initial_tab: str = "windows"):
        """Initialize the main window.

        Args:
            services: The core components
            initial_tab: Which tab to show first (windows, apps or monitor)
        """
        super().__init__()

        self.services = services
        self.records = []  # type: List[WindowRecord]
        self.monitor = None  # type: Optional[ChangeMonitor]
        self.monitor_timer = QTimer(self)
        self.monitor_timer.timeout.connect(self._on_monitor_tick)

        self._setup_ui()
        self._load_windows()
        self._load_apps()

        if initial_tab in TABS:
            self.tabs.setCurrentIndex(TABS.index(initial_tab))

        logger.info("Main window initialized")

    def _setup_ui(self):
        """Set up the main window UI."""
        self.setWindowTitle("QBoss")
        self.resize(900, 600)

        self.tabs = QTabWidget()
        self.tabs.addTab(self._create_windows_tab(), "Windows")
        self.tabs.addTab(self._create_apps_tab(), "Apps")
        self.tabs.addTab(self._create_monitor_tab(), "Monitor")
        self.setCentralWidget(self.tabs)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

    def _create_table(self, headers: List[str]) -> QTableWidget:
        table = QTableWidget(0, len(headers))
        table.setHorizontalHeaderLabels(headers)
        table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        table.horizontalHeader().setStretchLastSection(True)
        table.setSelectionBehavior(QAbstractItemView.SelectRows)
        table.setSelectionMode(QAbstractItemView.SingleSelection)
        table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        table.setAlternatingRowColors(True)
        return table

    def _create_windows_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)

        search_layout = QHBoxLayout()
        self.search_field = QComboBox()
        self.search_field.addItem("Search by both", SearchField.BOTH)
        self.search_field.addItem("Search by class", SearchField.CLASS)
        self.search_field.addItem("Search by title", SearchField.TITLE)
        search_layout.addWidget(self.search_field)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search term")
        self.search_input.returnPressed.connect(self._load_windows)
        search_layout.addWidget(self.search_input)

        refresh_button = QPushButton("Refresh")
        refresh_button.clicked.connect(self._load_windows)
        search_layout.addWidget(refresh_button)
        layout.addLayout(search_layout)

        self.windows_table = self._create_table(["ID", "Class", "Title", "Desktop", "State"])
        self.windows_table.doubleClicked.connect(lambda _: self._on_window_action("activate"))
        layout.addWidget(self.windows_table)

        action_layout = QHBoxLayout()
        for label, action in (("Activate", "activate"), ("Minimize", "minimize"),
                              ("Maximize", "maximize"), ("Close", "close")):
            button = QPushButton(label)
            button.clicked.connect(lambda checked, a=action: self._on_window_action(a))
            action_layout.addWidget(button)

        fullscreen_button = QPushButton("Toggle Fullscreen")
        fullscreen_button.clicked.connect(self._on_toggle_fullscreen)
        action_layout.addWidget(fullscreen_button)

        save_button = QPushButton("Save as App")
        save_button.clicked.connect(self._on_save_app)
        action_layout.addWidget(save_button)

        script_button = QPushButton("Generate Script")
        script_button.clicked.connect(self._on_generate_script)
        action_layout.addWidget(script_button)

        layout.addLayout(action_layout)
        return widget

    def _create_apps_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)

        self.apps_table = self._create_table(["Name", "Class", "Desktop File"])
        self.apps_table.doubleClicked.connect(lambda _: self._on_toggle_app())
        layout.addWidget(self.apps_table)

        action_layout = QHBoxLayout()
        toggle_button = QPushButton("Launch / Toggle")
        toggle_button.clicked.connect(self._on_toggle_app)
        action_layout.addWidget(toggle_button)

        delete_button = QPushButton("Delete App")
        delete_button.clicked.connect(self._on_delete_app)
        action_layout.addWidget(delete_button)

        refresh_button = QPushButton("Refresh")
        refresh_button.clicked.connect(self._load_apps)
        action_layout.addWidget(refresh_button)

        layout.addLayout(action_layout)
        return widget

    def _create_monitor_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)

        self.monitor_label = QLabel("Monitor stopped")
        layout.addWidget(self.monitor_label)

        self.monitor_log = QPlainTextEdit()
        self.monitor_log.setReadOnly(True)
        layout.addWidget(self.monitor_log)

        button_layout = QHBoxLayout()
        self.monitor_button = QPushButton("Start Monitoring")
        self.monitor_button.clicked.connect(self._on_toggle_monitor)
        button_layout.addWidget(self.monitor_button)

        clear_button = QPushButton("Clear")
        clear_button.clicked.connect(self.monitor_log.clear)
        button_layout.addWidget(clear_button)

        layout.addLayout(button_layout)
        return widget

    def _load_windows(self):
        """Reload the window table, applying the current search."""
        term = self.search_input.text()
        directory = self.services.directory

        if term:
            self.records = directory.find(term, self.search_field.currentData())
        else:
            self.records = directory.windows()

        self.windows_table.setRowCount(0)
        for row, record in enumerate(self.records):
            self.windows_table.insertRow(row)
            values = [record.id, _text(record.window_class), _text(record.title),
                      _text(record.desktop), record.state]
            for column, value in enumerate(values):
                self.windows_table.setItem(row, column, QTableWidgetItem(value))

        self.status_bar.showMessage(f"{len(self.records)} windows found")

    def _load_apps(self):
        """Reload the saved applications table."""
        try:
            apps = self.services.registry.list()
        except QBossError as e:
            QMessageBox.critical(self, "Error", str(e))
            return

        self.apps_table.setRowCount(0)
        for row, app in enumerate(apps):
            self.apps_table.insertRow(row)
            for column, value in enumerate([app.name, app.window_class, app.desktop_file]):
                self.apps_table.setItem(row, column, QTableWidgetItem(value))

    def _get_selected_window(self) -> Optional[WindowRecord]:
        selected_rows = self.windows_table.selectionModel().selectedRows()
        if not selected_rows:
            QMessageBox.warning(self, "No Selection", "Please select a window first.")
            return None
        return self.records[selected_rows[0].row()]

    def _get_selected_app(self) -> Optional[str]:
        selected_rows = self.apps_table.selectionModel().selectedRows()
        if not selected_rows:
            QMessageBox.warning(self, "No Selection", "Please select an application first.")
            return None
        return self.apps_table.item(selected_rows[0].row(), 0).text()

    def _on_window_action(self, action: str):
        record = self._get_selected_window()
        if record is None:
            return

        try:
            success = getattr(self.services.executor, action)(record.id)
        except QBossError as e:
            QMessageBox.critical(self, "Error", str(e))
            self._load_windows()
            return

        if success:
            self.status_bar.showMessage(f"Window {action}d: {_text(record.title)}")
        else:
            QMessageBox.critical(self, "Error", f"Failed to {action} window.")

        QTimer.singleShot(500, self._load_windows)

    def _on_toggle_fullscreen(self):
        record = self._get_selected_window()
        if record is None:
            return

        try:
            current = self.services.directory.get(record.id)
            if current is None:
                QMessageBox.critical(self, "Error", f"Window ID {record.id} does not exist.")
                return
            success = self.services.executor.set_fullscreen(record.id, not current.fullscreen)
        except QBossError as e:
            QMessageBox.critical(self, "Error", str(e))
            return

        if not success:
            QMessageBox.critical(self, "Error", "Failed to change fullscreen state.")
        QTimer.singleShot(500, self._load_windows)

    def _on_save_app(self):
        record = self._get_selected_window()
        if record is None:
            return

        name, ok = QInputDialog.getText(self, "Save as App", "Enter a name for this application:",
                                        text=record.window_class or "")
        if not ok or not name:
            return

        try:
            app = self.services.registry.create_from_window(name, record)
            updated = self.services.registry.save(app)
        except (QBossError, ValueError) as e:
            QMessageBox.critical(self, "Error", str(e))
            return

        self.status_bar.showMessage(f"{'Updated' if updated else 'Saved'} app: {app.name}")
        self._load_apps()

    def _on_generate_script(self):
        record = self._get_selected_window()
        if record is None:
            return

        try:
            script_path = self.services.script_generator.generate(record)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Failed to generate script: {e}")
            return

        self.status_bar.showMessage(f"Script created: {script_path}")

    def _on_toggle_app(self):
        name = self._get_selected_app()
        if name is None:
            return

        try:
            result = self.services.toggle_manager.launch_or_toggle(name)
        except QBossError as e:
            QMessageBox.critical(self, "Error", str(e))
            return

        if not result.success:
            QMessageBox.critical(self, "Error", f"Failed to toggle app: {name}")
        elif result.action is ToggleAction.LAUNCHED:
            self.status_bar.showMessage(f"App launched: {name}")
        else:
            self.status_bar.showMessage(f"App {result.action.value}: {name}")

    def _on_delete_app(self):
        name = self._get_selected_app()
        if name is None:
            return

        confirm = QMessageBox.question(
            self,
            "Confirm Deletion",
            f"Are you sure you want to delete app '{name}'?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No
        )
        if confirm != QMessageBox.Yes:
            return

        try:
            deleted = self.services.registry.delete(name)
        except QBossError as e:
            QMessageBox.critical(self, "Error", str(e))
            return

        if deleted:
            self.status_bar.showMessage(f"Deleted app: {name}")
        else:
            QMessageBox.warning(self, "Not Found", f"App not found: {name}")
        self._load_apps()

    def _on_toggle_monitor(self):
        if self.monitor_timer.isActive():
            self.monitor_timer.stop()
            self.monitor.stop()
            self.monitor_button.setText("Start Monitoring")
            self.monitor_label.setText("Monitor stopped")
            return

        self.monitor = self.services.create_monitor()
        self.monitor_log.appendPlainText("Initial windows:")
        for record in self.monitor.start():
            self._append_event(WindowEvent(EventKind.INITIAL, record.id, record))

        self.monitor_timer.start(int(self.monitor.interval * 1000))
        self.monitor_button.setText("Stop Monitoring")
        self.monitor_label.setText("Monitoring window creation/destruction...")

    def _on_monitor_tick(self):
        for event in self.monitor.poll():
            self._append_event(event)

    def _append_event(self, event: WindowEvent):
        if event.kind is EventKind.DISAPPEARED:
            self.monitor_log.appendPlainText(f"Closed window: ID: {event.window_id}")
            return

        prefix = "New window: " if event.kind is EventKind.APPEARED else ""
        self.monitor_log.appendPlainText(
            f"{prefix}ID: {event.window_id}, Class: {_text(event.record.window_class)}, "
            f"Title: {_text(event.record.title)}"
        )

    def closeEvent(self, event):
        """Stop the monitor before closing."""
        self.monitor_timer.stop()
        if self.monitor:
            self.monitor.stop()
        event.accept()
