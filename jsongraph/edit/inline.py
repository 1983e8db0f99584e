"""
Inline value editor for a single row.

Holds the temporary text of a quick edit (pencil icon next to a value):
start() opens it with the current value, save() hands the edited text to
the callback, cancel() throws the edit away.
"""

from typing import Callable, Optional


class InlineEdit:
    """Temporary edit state for one displayed value."""

    def __init__(self, value: str, on_save: Callable[[str], Optional[bool]]):
        self.value = value
        self.temp_value = value
        self.is_editing = False
        self._on_save = on_save

    def start(self) -> None:
        self.temp_value = self.value
        self.is_editing = True

    def update(self, text: Optional[str]) -> None:
        self.temp_value = text or ""

    def save(self) -> bool:
        """
        Hand the edited text to the callback.

        A callback returning False keeps the editor open with the text intact.
        """
        if not self.is_editing:
            return False
        if self._on_save(self.temp_value) is False:
            return False
        self.value = self.temp_value
        self.is_editing = False
        return True

    def cancel(self) -> None:
        self.temp_value = self.value
        self.is_editing = False
