"""Table view and delegate for the items grid."""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import QEvent, QModelIndex, Qt, pyqtSignal
from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QAction,
    QHeaderView,
    QLineEdit,
    QMenu,
    QStyledItemDelegate,
    QTableView,
)

from wolfcafe.controllers.grid_navigation_controller import (
    GridKey,
    GridNavigationController,
    KeyPress,
)
from wolfcafe.domain.item_models import COL_DESCRIPTION, COL_NAME
from wolfcafe.ui.models.items_table_model import ItemsTableModel
from wolfcafe.ui.view_models.cell_editor import CellEditor

_QT_KEYS = {
    Qt.Key_Up: GridKey.UP,
    Qt.Key_Down: GridKey.DOWN,
    Qt.Key_Left: GridKey.LEFT,
    Qt.Key_Right: GridKey.RIGHT,
    Qt.Key_Home: GridKey.HOME,
    Qt.Key_End: GridKey.END,
    Qt.Key_Tab: GridKey.TAB,
    Qt.Key_Backtab: GridKey.TAB,
    Qt.Key_Return: GridKey.ENTER,
    Qt.Key_Enter: GridKey.ENTER,
    Qt.Key_F2: GridKey.F2,
    Qt.Key_Escape: GridKey.ESCAPE,
}

_MOVEMENT_KEYS = frozenset(
    {GridKey.UP, GridKey.DOWN, GridKey.LEFT, GridKey.RIGHT, GridKey.HOME, GridKey.END}
)


def key_press_from_event(event) -> KeyPress:
    """Translate a ``QKeyEvent`` into the toolkit-neutral ``KeyPress``."""
    modifiers = event.modifiers()
    qt_key = event.key()
    return KeyPress(
        key=_QT_KEYS.get(qt_key, GridKey.OTHER),
        shift=bool(modifiers & Qt.ShiftModifier) or qt_key == Qt.Key_Backtab,
        ctrl=bool(modifiers & Qt.ControlModifier),
        meta=bool(modifiers & Qt.MetaModifier),
    )


class ItemCellDelegate(QStyledItemDelegate):
    """Creates the line editors and routes keys typed inside them to the grid."""

    def __init__(self, view: "ItemsTableView", cell_editor: CellEditor):
        super().__init__(view)
        self._view = view
        self._cell_editor = cell_editor

    def createEditor(self, parent, option, index):
        editor = QLineEdit(parent)
        editor.setFrame(False)
        if index.column() in (COL_NAME, COL_DESCRIPTION):
            editor.setMaxLength(255)
        editor.textChanged.connect(self._cell_editor.update_buffer)
        return editor

    def setEditorData(self, editor, index):
        if self._cell_editor.is_editing_cell(index.row(), index.column()):
            text = self._cell_editor.editing.buffer
        else:
            text = index.data(Qt.EditRole) or ""
        editor.setText(text)
        editor.end(False)

    def setModelData(self, editor, model, index):
        # Reached when the editor loses focus; keys are handled in eventFilter.
        if not self._cell_editor.is_editing_cell(index.row(), index.column()):
            return
        self._cell_editor.update_buffer(editor.text())
        self._cell_editor.commit(refocus=False)

    def eventFilter(self, obj, event):
        if event.type() == QEvent.KeyPress and isinstance(obj, QLineEdit):
            press = key_press_from_event(event)
            routed = press.key in (GridKey.TAB, GridKey.ENTER, GridKey.ESCAPE) or (
                press.key in _MOVEMENT_KEYS and press.command
            )
            if routed:
                if not self._view.handle_grid_key(press) and press.key is GridKey.TAB:
                    self._view.leave_grid(forward=not press.shift)
                return True
        return super().eventFilter(obj, event)


class ItemsTableView(QTableView):
    """Table view for the items grid.

    Rendering host for the cell editor and navigation controller: it gives
    focus to cells, scrolls them into view and shows one persistent line
    editor while a cell is being edited.
    """

    undo_requested = pyqtSignal(int)  # row

    def __init__(self, model: ItemsTableModel, parent=None, logger: Optional[logging.Logger] = None):
        super().__init__(parent)
        self._table_model = model
        self._logger = logger or logging.getLogger(__name__)
        self._navigation: Optional[GridNavigationController] = None
        self._cell_editor: Optional[CellEditor] = None
        self._setup_ui()

    def _setup_ui(self) -> None:
        self.setModel(self._table_model)

        self.setSelectionBehavior(QAbstractItemView.SelectItems)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setTabKeyNavigation(False)
        self.setShowGrid(True)
        self.setCornerButtonEnabled(False)
        self.setSortingEnabled(False)

        horizontal_header = self.horizontalHeader()
        horizontal_header.setSectionResizeMode(QHeaderView.Interactive)
        horizontal_header.setStretchLastSection(True)
        horizontal_header.setDefaultAlignment(Qt.AlignLeft)
        self.setColumnWidth(COL_NAME, 200)
        self.setColumnWidth(COL_DESCRIPTION, 320)

        vertical_header = self.verticalHeader()
        vertical_header.setVisible(True)
        vertical_header.setDefaultSectionSize(30)

        self.setContextMenuPolicy(Qt.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

        self.undo_action = QAction("Undo Changes to Row", self)
        self.undo_action.setShortcut(QKeySequence.Undo)
        self.undo_action.setShortcutContext(Qt.WidgetShortcut)
        self.undo_action.triggered.connect(self._undo_current_row)
        self.addAction(self.undo_action)

        self.clicked.connect(self._on_cell_clicked)

    def bind(self, navigation: GridNavigationController, cell_editor: CellEditor) -> None:
        """Attach the controllers this view renders for."""
        self._navigation = navigation
        self._cell_editor = cell_editor
        self.setItemDelegate(ItemCellDelegate(self, cell_editor))
        navigation.attach(self)
        cell_editor.attach(focus_target=self, editor_host=self)

    # ------------------------------------------------------------------ #
    # FocusTarget / EditorHost
    # ------------------------------------------------------------------ #
    def focus(self, row: int, col: int) -> None:
        index = self._table_model.index(row, col)
        if not index.isValid():
            return
        self.setCurrentIndex(index)
        self.setFocus(Qt.OtherFocusReason)

    def scroll_into_view(self, row: int, col: int) -> None:
        index = self._table_model.index(row, col)
        if index.isValid():
            self.scrollTo(index)

    def open_editor(self, row: int, col: int, buffer: str) -> None:
        index = self._table_model.index(row, col)
        if not index.isValid():
            return
        self.setCurrentIndex(index)
        self.scrollTo(index)
        self.openPersistentEditor(index)
        editor = self.indexWidget(index)
        if editor is not None:
            editor.setFocus(Qt.OtherFocusReason)

    def close_editor(self, row: int, col: int) -> None:
        index = self._table_model.index(row, col)
        if not index.isValid():
            return
        editor = self.indexWidget(index)
        if editor is not None and editor.hasFocus():
            # A focused widget that is hidden hands focus down the tab chain.
            self.setFocus(Qt.OtherFocusReason)
        self.closePersistentEditor(index)

    # ------------------------------------------------------------------ #
    # Keyboard
    # ------------------------------------------------------------------ #
    def handle_grid_key(self, press: KeyPress) -> bool:
        if self._navigation is None:
            return False
        return self._navigation.handle_key(press)

    def leave_grid(self, forward: bool = True) -> bool:
        """Move keyboard focus to the widget before or after the grid."""
        self.setFocus(Qt.TabFocusReason if forward else Qt.BacktabFocusReason)
        return super().focusNextPrevChild(forward)

    def focusNextPrevChild(self, next: bool) -> bool:  # noqa: A002 - Qt signature
        if self._navigation is not None and self.hasFocus():
            if self._navigation.handle_key(KeyPress(GridKey.TAB, shift=not next)):
                return True
        return super().focusNextPrevChild(next)

    def keyPressEvent(self, event) -> None:
        press = key_press_from_event(event)
        if press.key is not GridKey.OTHER and self.handle_grid_key(press):
            event.accept()
            return
        super().keyPressEvent(event)

    # ------------------------------------------------------------------ #
    # Pointer and context menu
    # ------------------------------------------------------------------ #
    def _on_cell_clicked(self, index: QModelIndex) -> None:
        if index.isValid() and self._navigation is not None:
            self._navigation.click_cell(index.row(), index.column())

    def _show_context_menu(self, position) -> None:
        index = self.indexAt(position)
        if not index.isValid():
            return
        row = index.row()
        menu = QMenu(self)
        undo_action = QAction("Undo Changes to Row", self)
        undo_action.setEnabled(self._table_model.is_row_modified(row))
        undo_action.triggered.connect(lambda: self.undo_requested.emit(row))
        menu.addAction(undo_action)
        menu.exec_(self.viewport().mapToGlobal(position))

    def _undo_current_row(self) -> None:
        index = self.currentIndex()
        if index.isValid() and self._table_model.is_row_modified(index.row()):
            self.undo_requested.emit(index.row())
