"""
Interaction Contracts

Responsibility:
Device selection as a toggle. Clicking the selected device clears the
selection; clicking any other device replaces it.
"""

from __future__ import annotations
from typing import Callable, Optional


def toggle_selection(current: Optional[str], device_id: str) -> Optional[str]:
    """Return the selection that results from clicking ``device_id``."""
    return None if current == device_id else device_id


class SelectionController:
    """
    Holds the current selection and reports every change.

    The renderer wires node clicks to ``click``; the callback receives the
    new selection (a device id, or None when cleared).
    """

    def __init__(
        self,
        on_select: Optional[Callable[[Optional[str]], None]] = None,
        selected: Optional[str] = None,
    ):
        self._on_select = on_select
        self._selected = selected

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    def click(self, device_id: str) -> Optional[str]:
        self._selected = toggle_selection(self._selected, device_id)
        if self._on_select is not None:
            self._on_select(self._selected)
        return self._selected

    def clear(self) -> None:
        self._selected = None
