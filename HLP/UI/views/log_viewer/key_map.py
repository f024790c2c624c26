"""
Key Map Module - translate key presses into view state messages

Pure functions of (key, character, input mode, filter count) so they can be tested
without a running terminal.
"""
from typing import Optional

from HLP.log_analysis.messages import (
    Message, InputMode, ViewMode, ScrollUp, ScrollDown, ScrollToTop, ScrollToBottom,
    PageUp, PageDown, TogglePause, CopyToClipboard, ExportToFile, Quit, EnterSearch,
    ToggleFilterMode, ClearFilters, RemoveFilter, SetViewMode, ExitSearch, SearchBackspace,
    SearchInput,
)

NORMAL_KEYS = {
    # Navigation
    "j": ScrollDown(),
    "down": ScrollDown(),
    "k": ScrollUp(),
    "up": ScrollUp(),
    "pagedown": PageDown(),
    "pageup": PageUp(),
    "home": ScrollToTop(),
    "g": ScrollToTop(),
    "end": ScrollToBottom(),
    "G": ScrollToBottom(),
    "shift+g": ScrollToBottom(),

    # Actions
    "p": TogglePause(),
    "space": TogglePause(),
    "y": CopyToClipboard(),
    "ctrl+y": CopyToClipboard(),
    "ctrl+s": ExportToFile(),
    "q": Quit(),
    "escape": Quit(),

    # Filter controls
    "slash": EnterSearch(),
    "f": ToggleFilterMode(),
    "c": ClearFilters(),

    # View mode controls
    "1": SetViewMode(ViewMode.LIST),
    "2": SetViewMode(ViewMode.DETAIL),
    "3": SetViewMode(ViewMode.SPLIT),
}


def key_to_message(
    key: str, character: Optional[str], input_mode: InputMode, filter_count: int = 0
) -> Optional[Message]:
    """
    Map a key press to a message

    Args:
        key: Textual key name (e.g. "j", "pageup", "ctrl+s")
        character: Printable character for the key, if any
        input_mode: Current input mode of the view state
        filter_count: Number of active filters, for dropping the newest one

    Returns:
        The message to dispatch, or None if the key is not bound
    """
    if input_mode == InputMode.SEARCH:
        return _search_mode(key, character)
    return _normal_mode(key, character, filter_count)


def _normal_mode(key: str, character: Optional[str], filter_count: int) -> Optional[Message]:
    if key in NORMAL_KEYS:
        return NORMAL_KEYS[key]
    if key in ("backspace", "d"):
        return RemoveFilter(filter_count - 1) if filter_count else None
    if character == "/":
        return EnterSearch()
    return None


def _search_mode(key: str, character: Optional[str]) -> Optional[Message]:
    # Escape confirms too; there is no cancel
    if key in ("enter", "escape"):
        return ExitSearch()
    if key == "backspace":
        return SearchBackspace()
    if character and len(character) == 1 and character.isprintable():
        return SearchInput(character)
    return None
