from __future__ import annotations

import logging

import httpx
from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from tasklist.client import ApiError, TaskApiClient
from tasklist.domain.entities import TITLE_MAX_LENGTH, TaskEntity
from tasklist.domain.enums import TaskFilter
from tasklist.domain.filters import count_tasks, filter_tasks

from .widgets import TaskItemWidget, TaskListWidget

logger = logging.getLogger(__name__)

FILTERS = [
    ("All", TaskFilter.ALL),
    ("Active", TaskFilter.ACTIVE),
    ("Completed", TaskFilter.COMPLETED),
]

REQUEST_ERRORS = (ApiError, httpx.HTTPError)


class MainWindow(QWidget):
    def __init__(self, client: TaskApiClient):
        super().__init__()
        self.setWindowTitle("Task List")
        self.resize(960, 640)

        self.client = client
        self.tasks: list[TaskEntity] = []
        self.current_filter = TaskFilter.ALL

        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)

        splitter = QSplitter(Qt.Horizontal)
        main_layout.addWidget(splitter)

        splitter.addWidget(self._build_sidebar())
        splitter.addWidget(self._build_center())
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([200, 760])

        QShortcut(QKeySequence("Ctrl+N"), self, self.title_input.setFocus)
        QShortcut(QKeySequence("F5"), self, self.refresh_tasks)

        self.refresh_tasks()

    def _build_sidebar(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("Sidebar")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        title = QLabel("Filters")
        title.setProperty("class", "sidebar-title")
        layout.addWidget(title)

        self.filter_list = QListWidget()
        self.filter_list.setObjectName("FilterList")
        self.filter_list.setSpacing(6)
        for label, key in FILTERS:
            item = QListWidgetItem(label)
            item.setData(Qt.UserRole, key.value)
            self.filter_list.addItem(item)
        self.filter_list.setCurrentRow(0)
        self.filter_list.currentItemChanged.connect(self.on_filter_change)

        layout.addWidget(self.filter_list)
        layout.addStretch()
        return frame

    def _build_center(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("CenterPanel")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        header = QHBoxLayout()
        header_title = QLabel("My tasks")
        header_title.setProperty("class", "panel-title")
        self.status_label = QLabel("")
        self.status_label.setProperty("class", "stats-badge")
        header.addWidget(header_title)
        header.addStretch()
        header.addWidget(self.status_label)

        input_row = QHBoxLayout()
        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("Add a new task...")
        self.title_input.setMaxLength(TITLE_MAX_LENGTH)
        self.title_input.returnPressed.connect(self.add_task)

        self.add_button = QPushButton("Add task")
        self.add_button.clicked.connect(self.add_task)

        input_row.addWidget(self.title_input, 1)
        input_row.addWidget(self.add_button)

        self.task_list = TaskListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(6)

        self.counts_label = QLabel("")
        self.counts_label.setProperty("class", "stats")

        layout.addLayout(header)
        layout.addLayout(input_row)
        layout.addWidget(self.task_list, 1)
        layout.addWidget(self.counts_label)
        return frame

    def refresh_tasks(self) -> None:
        try:
            self.tasks = self.client.list_tasks()
        except REQUEST_ERRORS as exc:
            self._show_error("Could not load tasks.", exc)
            self.status_label.setText("Offline")
            return
        self.status_label.setText("Connected")
        self.render_tasks()

    def render_tasks(self) -> None:
        self.task_list.clear()
        for task in filter_tasks(self.tasks, self.current_filter):
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            widget = TaskItemWidget(
                task,
                on_toggle=self.on_task_toggle,
                on_rename=self.on_task_rename,
                on_delete=self.on_task_delete,
            )
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())
        self.task_list.sync_item_sizes()

        counts = count_tasks(self.tasks)
        self.counts_label.setText(
            f"{counts.active} active, {counts.completed} completed, {counts.total} total"
        )

    def on_filter_change(self, current: QListWidgetItem) -> None:
        if not current:
            return
        self.current_filter = TaskFilter(current.data(Qt.UserRole))
        self.render_tasks()

    def add_task(self) -> None:
        title = self.title_input.text()
        if not title.strip():
            return
        self._set_busy(True)
        try:
            task = self.client.create_task(title)
        except REQUEST_ERRORS as exc:
            self._show_error("Failed to add task.", exc)
            return
        finally:
            self._set_busy(False)
        self.tasks.insert(0, task)
        self.title_input.clear()
        self.render_tasks()

    def on_task_toggle(self, task_id: int, completed: bool) -> None:
        self._apply_update(task_id, completed=completed)

    def on_task_rename(self, task_id: int, title: str) -> bool:
        if not title.strip():
            QMessageBox.warning(self, "Title required", "Task title cannot be empty.")
            return False
        return self._apply_update(task_id, title=title)

    def on_task_delete(self, task_id: int) -> None:
        confirm = QMessageBox.question(self, "Confirm", "Delete this task?")
        if confirm != QMessageBox.Yes:
            return
        try:
            deleted = self.client.delete_task(task_id)
        except REQUEST_ERRORS as exc:
            self._show_error("Failed to delete task.", exc)
            return
        if deleted is None:
            logger.info("Task %s was already gone", task_id)
        self.tasks = [task for task in self.tasks if task.id != task_id]
        self.render_tasks()

    def _apply_update(self, task_id: int, **fields) -> bool:
        try:
            updated = self.client.update_task(task_id, **fields)
        except REQUEST_ERRORS as exc:
            self._show_error("Failed to update task.", exc)
            self.render_tasks()
            return False
        if updated is None:
            self.tasks = [task for task in self.tasks if task.id != task_id]
        else:
            self.tasks = [updated if task.id == task_id else task for task in self.tasks]
        self.render_tasks()
        return updated is not None

    def _set_busy(self, busy: bool) -> None:
        self.add_button.setEnabled(not busy)
        self.title_input.setEnabled(not busy)
        self.status_label.setText("Saving changes..." if busy else "Connected")

    def _show_error(self, title: str, exc: Exception) -> None:
        logger.warning("%s %s", title, exc)
        QMessageBox.warning(self, "Error", f"{title}\n{exc}")
