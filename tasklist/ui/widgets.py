from __future__ import annotations

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QPushButton,
    QSizePolicy,
    QWidget,
)

from tasklist.domain.entities import TITLE_MAX_LENGTH, TaskEntity


class TaskItemWidget(QWidget):
    def __init__(self, task: TaskEntity, on_toggle, on_rename, on_delete, parent=None):
        super().__init__(parent)
        self.task = task
        self._on_toggle = on_toggle
        self._on_rename = on_rename
        self._on_delete = on_delete

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setMinimumHeight(48)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 6, 12, 6)
        layout.setSpacing(8)

        self.done_check = QCheckBox()
        self.done_check.setChecked(task.completed)
        self.done_check.setToolTip(f"Mark {task.title} as complete")
        self.done_check.toggled.connect(self._handle_toggle)

        self.title_label = QLabel(task.title)
        self.title_label.setProperty("class", "task-title")
        self.title_label.setWordWrap(True)
        self.title_label.setMinimumWidth(0)
        self.title_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        font = self.title_label.font()
        font.setStrikeOut(task.completed)
        self.title_label.setFont(font)

        self.title_input = QLineEdit(task.title)
        self.title_input.setMaxLength(TITLE_MAX_LENGTH)
        self.title_input.returnPressed.connect(self._handle_save)
        self.title_input.hide()
        cancel = QShortcut(QKeySequence("Escape"), self.title_input, self.cancel_edit)
        cancel.setContext(Qt.WidgetShortcut)

        self.edit_button = QPushButton("Edit")
        self.edit_button.setProperty("variant", "ghost")
        self.edit_button.clicked.connect(self._handle_edit_clicked)

        self.delete_button = QPushButton("Delete")
        self.delete_button.setProperty("variant", "danger")
        self.delete_button.clicked.connect(self._handle_delete)

        layout.addWidget(self.done_check)
        layout.addWidget(self.title_label, 1)
        layout.addWidget(self.title_input, 1)
        layout.addWidget(self.edit_button)
        layout.addWidget(self.delete_button)

    @property
    def editing(self) -> bool:
        return self.title_input.isVisible()

    def begin_edit(self) -> None:
        self.title_input.setText(self.task.title)
        self.title_label.hide()
        self.title_input.show()
        self.title_input.setFocus()
        self.title_input.selectAll()
        self.edit_button.setText("Save")

    def cancel_edit(self) -> None:
        self.title_input.hide()
        self.title_label.show()
        self.edit_button.setText("Edit")

    def _handle_edit_clicked(self) -> None:
        if self.editing:
            self._handle_save()
        else:
            self.begin_edit()

    def _handle_save(self) -> None:
        title = self.title_input.text()
        if title.strip() == self.task.title:
            self.cancel_edit()
            return
        if self._on_rename(self.task.id, title):
            self.cancel_edit()

    def _handle_toggle(self, checked: bool) -> None:
        self._on_toggle(self.task.id, checked)

    def _handle_delete(self) -> None:
        self._on_delete(self.task.id)


class TaskListWidget(QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._h_margin = 12
        self._v_margin = 8
        self.setSelectionMode(QAbstractItemView.NoSelection)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._update_viewport_margins()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.sync_item_sizes()

    def _update_viewport_margins(self) -> None:
        scrollbar_width = self.verticalScrollBar().width() or self.verticalScrollBar().sizeHint().width()
        right_margin = self._h_margin + (scrollbar_width if self.verticalScrollBar().isVisible() else 0)
        self.setViewportMargins(self._h_margin, self._v_margin, right_margin, self._v_margin)

    def sync_item_sizes(self) -> None:
        self._update_viewport_margins()
        viewport_width = self.viewport().width()
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                widget.setMinimumWidth(viewport_width)
                widget.setMaximumWidth(viewport_width)
                widget.adjustSize()
                hint = widget.sizeHint()
                item.setSizeHint(QSize(viewport_width, hint.height()))
                widget.resize(viewport_width, hint.height())
