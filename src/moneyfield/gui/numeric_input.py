"""
PyQt6 numeric money input widget.

Render surface for the synchronization controller: an editable QLineEdit and a
read-only QLabel, of which exactly one is visible. The label is created the first
time the widget switches to read-only mode; the configured read-only class is then
set as its "class" dynamic property so that style sheets can select it with
QLabel[class="..."].
"""

import logging
from typing import Any, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QFocusEvent
from PyQt6.QtWidgets import QLabel, QLineEdit, QStackedLayout, QWidget

from moneyfield.core.sync_controller import Scheduler, SyncController
from moneyfield.utils.config import NumericFieldConfig
from moneyfield.utils.logging import LogCategory

logger = logging.getLogger(__name__)


class FocusLineEdit(QLineEdit):
    """QLineEdit reporting focus changes as signals."""

    focus_in = pyqtSignal(object)
    focus_out = pyqtSignal(object)

    def focusInEvent(self, event: QFocusEvent) -> None:
        super().focusInEvent(event)
        self.focus_in.emit(event)

    def focusOutEvent(self, event: QFocusEvent) -> None:
        super().focusOutEvent(event)
        self.focus_out.emit(event)


class NumericInput(QWidget):
    """
    Money input bound to a canonical value.

    Signals:
        valueChanged(object): committed canonical value
        blurred(object): focus-out event of the editor
        focused(object): focus-in event of the editor
    """

    valueChanged = pyqtSignal(object)
    blurred = pyqtSignal(object)
    focused = pyqtSignal(object)

    def __init__(self, config: Optional[NumericFieldConfig] = None, value: Any = "",
                 read_only: bool = False, scheduler: Optional[Scheduler] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._layout = QStackedLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)

        self.editor = FocusLineEdit(self)
        self._layout.addWidget(self.editor)
        self.read_only_label: Optional[QLabel] = None

        self.controller = SyncController(
            config=config,
            value=value,
            read_only=read_only,
            surface=self,
            scheduler=scheduler,
            parent=self,
        )
        self._apply_placeholder()

        self.editor.textEdited.connect(self.controller.edit)
        self.editor.focus_in.connect(self.controller.focus)
        self.editor.focus_out.connect(self.controller.blur)
        self.controller.display_changed.connect(self._on_display_changed)
        self.controller.value_committed.connect(self.valueChanged)
        self.controller.blurred.connect(self.blurred)
        self.controller.focused.connect(self.focused)

        if read_only:
            self._show_read_only_label()
        self.controller.mount()

    # Owner API -----------------------------------------------------------

    def value(self) -> Any:
        return self.controller.value

    def setValue(self, value: Any) -> None:
        self.controller.set_value(value)

    def text(self) -> str:
        return self.controller.display

    def config(self) -> NumericFieldConfig:
        return self.controller.config

    def updateConfig(self, config: Optional[NumericFieldConfig] = None, **changes: Any) -> None:
        self.controller.update_config(config, **changes)
        self._apply_placeholder()

    def isReadOnly(self) -> bool:
        return self.controller.read_only

    def setReadOnly(self, read_only: bool) -> None:
        if read_only:
            self._show_read_only_label()
        else:
            self._layout.setCurrentWidget(self.editor)
        self.controller.set_read_only(read_only)

    # Render surface ------------------------------------------------------

    def apply_read_only_class(self, class_name: str) -> None:
        """Set the read-only class on the label and re-polish its style."""
        label = self.read_only_label
        if label is None:
            return
        label.setProperty("class", class_name)
        style = label.style()
        style.unpolish(label)
        style.polish(label)
        logger.debug(f"Applied read-only class {class_name!r}",
                     extra={"category": LogCategory.GUI.value})

    # Internals -----------------------------------------------------------

    def _show_read_only_label(self) -> None:
        if self.read_only_label is None:
            self.read_only_label = QLabel(self.controller.display, self)
            self._layout.addWidget(self.read_only_label)
        self._layout.setCurrentWidget(self.read_only_label)

    def _on_display_changed(self, text: str) -> None:
        if self.editor.text() != text:
            self.editor.setText(text)
        if self.read_only_label is not None:
            self.read_only_label.setText(text)

    def _apply_placeholder(self) -> None:
        self.editor.setPlaceholderText(self.controller.config.placeholder or "")
