"""Logical UI targets and the page capability the save flow is written against.

The state machine in ``sequencer``, ``session`` and ``lists`` only talks about
*what* it needs on screen (a login link, the save button, the entry for a
named list). How a target is found in the DOM lives in ``selectors`` and the
Selenium adapter in ``browser``.
"""
from dataclasses import dataclass
from typing import Callable, Optional, Set


@dataclass(frozen=True)
class Target:
    name: str
    # List display name for targets that depend on it.
    label: Optional[str] = None

    def __str__(self):
        return f'{self.name}({self.label})' if self.label else self.name


LOGIN_LINK = Target('login_link')
EMAIL_INPUT = Target('email_input')
PASSWORD_INPUT = Target('password_input')
PLACE_READY = Target('place_ready')
SAVE_BUTTON = Target('save_button')
NEW_LIST_ITEM = Target('new_list_item')
LIST_NAME_INPUT = Target('list_name_input')
LIST_CREATE_BUTTON = Target('list_create_button')
MEMO_TEXTAREA = Target('memo_textarea')
MEMO_DONE_BUTTON = Target('memo_done_button')


def saved_marker(list_name: str) -> Target:
    """Confirmation shown once the place is in ``list_name``."""
    return Target('saved_marker', list_name)


def list_entry(list_name: str) -> Target:
    """Entry for ``list_name`` in the open save menu."""
    return Target('list_entry', list_name)


def memo_edit_button(list_name: str) -> Target:
    """Only rendered when the place already carries a memo in ``list_name``."""
    return Target('memo_edit_button', list_name)


def memo_add_button(list_name: str) -> Target:
    return Target('memo_add_button', list_name)


class PlacePage:
    """One browser tab showing a Google Maps place page.

    Waits take a timeout in seconds; ``None`` means wait without bound. A
    wait that runs out raises ``UiTimeoutError``. Losing the browser itself
    raises ``SessionLostError``.
    """

    def open(self, url: str) -> Optional[int]:
        """Navigate to ``url`` and return the document's HTTP status, if known."""
        raise NotImplementedError

    def reload(self) -> None:
        raise NotImplementedError

    def cookie_names(self) -> Set[str]:
        raise NotImplementedError

    def is_present(self, target: Target) -> bool:
        raise NotImplementedError

    def wait_for(self, target: Target, timeout: Optional[float], visible: bool = False) -> None:
        raise NotImplementedError

    def click(self, target: Target, timeout: Optional[float]) -> None:
        raise NotImplementedError

    def type_text(self, target: Target, text: str) -> None:
        raise NotImplementedError

    def submit(self, target: Target, timeout: Optional[float]) -> None:
        """Press Enter in ``target`` and wait until the URL changes."""
        raise NotImplementedError

    def wait_for_url(self, predicate: Callable[[str], bool], timeout: Optional[float]) -> None:
        raise NotImplementedError

    def snap(self, name: str, html: bool = False) -> None:
        """Save debug artifacts; a no-op unless debugging is enabled."""
