"""Message-box dialogs for confirmations and request notices."""

from __future__ import annotations

from typing import Optional

from PySide6.QtGui import QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QWidget

from gridnet.application.interfaces import IPrompter


def _apply_theme(box: QMessageBox, parent: Optional[QWidget]) -> None:
    """Apply the active theme colors to the message box."""
    if parent:
        palette = parent.palette()
    else:
        palette = QApplication.palette()

    bg_color = palette.color(QPalette.ColorRole.Window).name()
    text_color = palette.color(QPalette.ColorRole.WindowText).name()
    box.setStyleSheet(
        f"QMessageBox {{ background-color: {bg_color}; color: {text_color}; }}"
        f"QLabel {{ color: {text_color}; }}"
    )


def show_error(parent: Optional[QWidget], message: str, *, title: str = "Grid") -> None:
    box = QMessageBox(QMessageBox.Icon.Critical, title, message, QMessageBox.StandardButton.Ok, parent)
    _apply_theme(box, parent)
    box.exec()


def show_information(parent: Optional[QWidget], message: str, *, title: str = "Grid") -> None:
    box = QMessageBox(QMessageBox.Icon.Information, title, message, QMessageBox.StandardButton.Ok, parent)
    _apply_theme(box, parent)
    box.exec()


def confirm_action(
    parent: Optional[QWidget],
    message: str,
    *,
    title: str = "Confirmation",
    yes_label: str = "Yes",
    no_label: str = "No",
) -> bool:
    """Ask the user to confirm an action.

    Returns:
        True if the user selected the affirmative option, False otherwise.
    """
    box = QMessageBox(QMessageBox.Icon.Question, title, message, QMessageBox.StandardButton.NoButton, parent)
    yes_btn = box.addButton(yes_label, QMessageBox.ButtonRole.YesRole)
    box.addButton(no_label, QMessageBox.ButtonRole.NoRole)

    _apply_theme(box, parent)
    box.exec()

    clicked = box.clickedButton()
    return clicked == yes_btn if clicked is not None else False


class QtPrompter(IPrompter):
    """Blocking message boxes parented to the grid widget."""

    def __init__(self, parent: Optional[QWidget] = None, *, title: str = "Grid") -> None:
        self._parent = parent
        self._title = title

    def ask(self, message: str) -> bool:
        return confirm_action(self._parent, message, title=self._title)

    def inform(self, message: str) -> None:
        show_information(self._parent, message, title=self._title)

    def alert(self, message: str) -> None:
        show_error(self._parent, message, title=self._title)
