#!/usr/bin/env python3
"""
Moneyfield Demo - Application Entry Point

This module provides a small PyQt6 desktop window hosting several numeric money
inputs, each bound two-way to a plain in-memory model. It is used to try out
configurations and preset files interactively.

The application provides:
- One input per configuration preset (built-in or loaded from a JSON file)
- A read-only toggle switching every input to its static text node
- A live view of the canonical values committed by each input

Author: Moneyfield Development Team
Version: 1.0.0
"""

import sys
import signal
import logging
import argparse
from typing import Dict, Any, Optional, List

from PyQt6.QtWidgets import (
    QApplication, QCheckBox, QFormLayout, QLabel, QMainWindow, QVBoxLayout, QWidget
)
from PyQt6.QtCore import QCoreApplication, QObject

from moneyfield.gui.numeric_input import NumericInput
from moneyfield.utils.config import ConfigurationError, NumericFieldConfig, load_field_configs
from moneyfield.utils.logging import LogCategory, configure_logging

READ_ONLY_STYLE = 'QLabel[class="read-only"] { color: #555; font-style: italic; }'

DEFAULT_PRESETS: Dict[str, Dict[str, Any]] = {
    "Price (USD)": {"currency": "$", "precision": 2, "min": 0, "max": 1000000},
    "Betrag (EUR)": {"currency": "EUR", "currencySymbolPosition": "suffix",
                     "separator": ".", "precision": 2, "readOnlyClass": "read-only"},
    "Quantity": {"separator": "space", "min": 1, "max": 10000, "emptyValue": 1},
    "Adjustment": {"precision": 2, "minus": True, "outputType": "String",
                   "readOnlyClass": "read-only"},
}


class DemoApp(QObject):
    """Demo window controller holding the bound model values."""

    def __init__(self, app: QApplication, presets: Dict[str, NumericFieldConfig]):
        super().__init__()
        self.app = app
        self.presets = presets
        self.model: Dict[str, Any] = {name: "" for name in presets}
        self.inputs: Dict[str, NumericInput] = {}
        self.logger = logging.getLogger(__name__)

        self._setup_application_metadata()
        self.window = self._build_window()
        self.logger.info("Demo application initialized",
                         extra={"category": LogCategory.APPLICATION.value})

    def _setup_application_metadata(self) -> None:
        QCoreApplication.setOrganizationName("Moneyfield")
        QCoreApplication.setApplicationName("Moneyfield Demo")
        QCoreApplication.setApplicationVersion("1.0.0")

    def _build_window(self) -> QMainWindow:
        window = QMainWindow()
        window.setWindowTitle("Moneyfield Demo")
        window.setStyleSheet(READ_ONLY_STYLE)

        central = QWidget(window)
        layout = QVBoxLayout(central)
        form = QFormLayout()
        self.model_view = QLabel(central)

        for name, config in self.presets.items():
            numeric_input = NumericInput(config=config, value=self.model[name], parent=central)
            numeric_input.valueChanged.connect(
                lambda value, key=name: self._on_value_committed(key, value)
            )
            self.inputs[name] = numeric_input
            form.addRow(name, numeric_input)

        read_only_toggle = QCheckBox("Read-only", central)
        read_only_toggle.toggled.connect(self._set_read_only)

        layout.addLayout(form)
        layout.addWidget(read_only_toggle)
        layout.addWidget(self.model_view)
        window.setCentralWidget(central)
        self._refresh_model_view()
        return window

    def _on_value_committed(self, key: str, value: Any) -> None:
        # Two-way binding: the model takes the proposal and notifies the input back
        self.model[key] = value
        self.inputs[key].setValue(value)
        self._refresh_model_view()

    def _set_read_only(self, read_only: bool) -> None:
        for numeric_input in self.inputs.values():
            numeric_input.setReadOnly(read_only)

    def _refresh_model_view(self) -> None:
        self.model_view.setText("\n".join(f"{k}: {v!r}" for k, v in self.model.items()))

    def run(self) -> None:
        self.window.show()
        self.logger.info("Demo window shown", extra={"category": LogCategory.APPLICATION.value})


def load_presets(path: Optional[str]) -> Dict[str, NumericFieldConfig]:
    """Load presets from a JSON file, or build the built-in ones."""
    if path:
        return load_field_configs(path)
    return {name: NumericFieldConfig.model_validate(props) for name, props in DEFAULT_PRESETS.items()}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the demo application.

    Args:
        argv: Command line arguments, sys.argv[1:] by default

    Returns:
        int: Process exit code
    """
    parser = argparse.ArgumentParser(description="Numeric money input demo")
    parser.add_argument("--presets", help="JSON file with named input configurations")
    args = parser.parse_args(argv)

    configure_logging()
    logger = logging.getLogger(__name__)

    try:
        presets = load_presets(args.presets)
    except ConfigurationError as e:
        logger.error(f"Failed to load presets: {e}")
        return 1

    app = QApplication(sys.argv[:1])
    signal.signal(signal.SIGINT, lambda signum, frame: app.quit())

    demo = DemoApp(app, presets)
    demo.run()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
