#!/usr/bin/env python3
"""
Synchronization Controller for Numeric Money Inputs

This module keeps the canonical value owned by a form/model synchronized with the
display string of an input. External value and configuration changes always
re-derive the display from the canonical value; the user's text is only written
back on blur, which is the sole commit trigger.

The controller is a QObject and talks to its owner through Qt signals:
- value_committed: canonical value proposed on every commit
- blurred / focused: pass-through of the originating input events
- display_changed: new display string to show

Author: Moneyfield Development Team
Version: 1.0.0
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from moneyfield.core.value_engine import ValueEngine
from moneyfield.utils.config import NumericFieldConfig
from moneyfield.utils.logging import LogCategory, correlation_context

logger = logging.getLogger(__name__)

# Props whose change re-derives the display from the canonical value
RESYNC_FIELDS = frozenset({
    "separator",
    "decimal_separator",
    "thousand_separator",
    "currency_symbol",
    "symbol_position",
    "precision",
})

Scheduler = Callable[[Callable[[], None]], None]


class DisplayState(Enum):
    """States of the display string."""
    IDLE_DISPLAY = "idle_display"  # display reflects the canonical value
    EDITING = "editing"            # display is raw user text


class ReadOnlySurface(Protocol):
    """Render surface owning the read-only text node."""

    def apply_read_only_class(self, class_name: str) -> None:
        ...


def post_render(callback: Callable[[], None]) -> None:
    """Run callback once the event loop has processed the pending render pass."""
    QTimer.singleShot(0, callback)


class SyncController(QObject):
    """
    Two-way binding between a canonical value and a display string.

    The controller never mutates the canonical value itself: set_value() is the
    owner's notification of a new value, and value_committed is the proposal of
    a new value back to the owner.
    """

    value_committed = pyqtSignal(object)
    blurred = pyqtSignal(object)
    focused = pyqtSignal(object)
    display_changed = pyqtSignal(str)

    def __init__(self, config: Optional[NumericFieldConfig] = None, value: Any = "",
                 read_only: bool = False, surface: Optional[ReadOnlySurface] = None,
                 scheduler: Optional[Scheduler] = None, parent: Optional[QObject] = None):
        """
        Initialize the synchronization controller.

        Args:
            config: Field configuration
            value: Initial canonical value owned by the caller
            read_only: Whether the input starts in read-only mode
            surface: Render surface receiving the read-only class
            scheduler: Post-render queue, QTimer.singleShot(0, ...) by default
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self.engine = ValueEngine(config)
        self._value = value
        self._display = ""
        self._state = DisplayState.IDLE_DISPLAY
        self._read_only = bool(read_only)
        self._surface = surface
        self._scheduler = scheduler or post_render
        self._mounted = False

    # Properties ----------------------------------------------------------

    @property
    def config(self) -> NumericFieldConfig:
        return self.engine.config

    @property
    def value(self) -> Any:
        """Last canonical value received from the owner."""
        return self._value

    @property
    def display(self) -> str:
        return self._display

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def read_only(self) -> bool:
        return self._read_only

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def attach_surface(self, surface: ReadOnlySurface) -> None:
        self._surface = surface

    # Owner-driven transitions -------------------------------------------

    def mount(self) -> None:
        """Initialize the display from the canonical value."""
        self._mounted = True
        self._state = DisplayState.IDLE_DISPLAY
        self._set_display(self.engine.process(self._value))
        if self._read_only:
            self._schedule_read_only_class()
        logger.debug(f"Mounted with display {self._display!r}",
                     extra={"category": LogCategory.SYNC_CONTROLLER.value})

    def set_value(self, value: Any) -> None:
        """
        Receive a new canonical value from the owner.

        The display is re-derived from the new value whenever its number differs
        from the number shown, discarding any text still being typed.

        Args:
            value: New canonical value
        """
        self._value = value
        if not self._mounted:
            return

        if self.engine.unformat(value) != self.engine.unformat(self._display):
            self._state = DisplayState.IDLE_DISPLAY
            self._set_display(self.engine.process(value))

    def update_config(self, config: Optional[NumericFieldConfig] = None,
                      **changes: Any) -> NumericFieldConfig:
        """
        Replace the configuration, or some of its props.

        A change to the separators, currency symbol, symbol position or precision
        re-derives the display from the canonical value. Other props take effect
        on the next recomputation.

        Args:
            config: Complete replacement configuration
            **changes: Props to replace, by field name or camelCase alias

        Returns:
            NumericFieldConfig: The configuration now in effect

        Raises:
            ValidationError: If the changed props are invalid
        """
        previous = self.engine.config
        current = config if config is not None else previous.with_changes(**changes)
        self.engine.config = current

        changed = sorted(name for name in RESYNC_FIELDS
                         if getattr(previous, name) != getattr(current, name))
        if changed and self._mounted:
            logger.debug(f"Display re-derived after change of {', '.join(changed)}",
                         extra={"category": LogCategory.SYNC_CONTROLLER.value})
            self._state = DisplayState.IDLE_DISPLAY
            self._set_display(self.engine.process(self._value))
        return current

    def set_read_only(self, read_only: bool) -> None:
        """
        Switch between the editable and the read-only node.

        On a switch into read-only mode the read-only class is applied once,
        after the next render pass has created the read-only node.
        """
        was_read_only = self._read_only
        self._read_only = bool(read_only)
        if not was_read_only and self._read_only and self._mounted:
            self._schedule_read_only_class()

    # User-driven transitions --------------------------------------------

    def edit(self, text: str) -> None:
        """Record a keystroke; the text is not validated until blur."""
        self._state = DisplayState.EDITING
        self._display = text

    def focus(self, event: Any = None) -> None:
        self._state = DisplayState.EDITING
        self.focused.emit(event)

    def blur(self, event: Any = None) -> None:
        """
        Commit the display text back to the owner.

        Non-empty text that parses to zero commits 0, empty text commits the
        empty value, anything else is clamped, reformatted and committed in the
        configured output type.

        Args:
            event: Originating input event, passed through to blurred
        """
        text = self._display or ""
        with correlation_context(LogCategory.SYNC_CONTROLLER):
            number = self.engine.unformat(text)

            if text != "" and not number:
                self._set_display(self.engine.format(0))
                self._commit(0)
            elif text == "":
                self._set_display("")
                self._commit(self.engine.config.empty_value)
            else:
                clamped = self.engine.clamp(number)
                self._set_display(self.engine.render(clamped))
                self._commit(self.engine.to_output(clamped))

        self._state = DisplayState.IDLE_DISPLAY
        self.blurred.emit(event)

    # Internals -----------------------------------------------------------

    def _set_display(self, text: Optional[str]) -> None:
        self._display = text or ""
        self.display_changed.emit(self._display)

    def _commit(self, value: Any) -> None:
        logger.info(f"Committed value {value!r}",
                    extra={"category": LogCategory.SYNC_CONTROLLER.value,
                           "context": {"display": self._display}})
        self.value_committed.emit(value)

    def _schedule_read_only_class(self) -> None:
        def apply_class():
            if self._surface is not None and self._read_only:
                self._surface.apply_read_only_class(self.engine.config.read_only_class)

        self._scheduler(apply_class)
