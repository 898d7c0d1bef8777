"""Save targets and custom list resolution.

A freshly created custom list is not offered in the save menu of later page
loads right away. ``ListResolver`` creates the list once per run and, for
every later record, reloads the place page until the entry shows up.
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .errors import ConfigError, ListStalledError
from .page import (LIST_CREATE_BUTTON, LIST_NAME_INPUT, NEW_LIST_ITEM, PLACE_READY, SAVE_BUTTON,
                   PlacePage, list_entry)
from .selectors import UiLabels

LOGGER = logging.getLogger('gmaps_import')

MAX_LIST_NAME_LENGTH = 40


class ListKind(str, Enum):
    FAVORITE = 'favorite'
    WANT_TO_GO = 'want-to-go'
    TRAVEL_PLANS = 'travel-plans'
    STARRED = 'starred'
    CUSTOM = 'custom'

    @property
    def is_custom(self) -> bool:
        return self is ListKind.CUSTOM

    @property
    def supports_memo(self) -> bool:
        # Starred places carry no per-list note.
        return self is not ListKind.STARRED


@dataclass(frozen=True)
class ListTarget:
    kind: ListKind
    display_name: str

    @property
    def supports_memo(self) -> bool:
        return self.kind.supports_memo


def resolve_list_target(kind: str, list_name: Optional[str], labels: UiLabels) -> ListTarget:
    """Turn the ``--type``/``--list-name`` pair into a ``ListTarget``.

    Raises ``ConfigError`` for an unknown kind, a missing or superfluous list
    name, or a name longer than 40 characters.
    """
    try:
        list_kind = ListKind(kind)
    except ValueError:
        choices = ', '.join(k.value for k in ListKind)
        raise ConfigError(f'--type must be one of: {choices}')

    if list_kind.is_custom:
        if not list_name:
            raise ConfigError('--list-name is required when --type is custom')
        if len(list_name) > MAX_LIST_NAME_LENGTH:
            raise ConfigError(f'--list-name must be {MAX_LIST_NAME_LENGTH} characters or less')
        return ListTarget(list_kind, list_name)

    if list_name is not None:
        raise ConfigError('--list-name can only be used with --type custom')
    fixed_names = {
        ListKind.FAVORITE: labels.favorite,
        ListKind.WANT_TO_GO: labels.want_to_go,
        ListKind.TRAVEL_PLANS: labels.travel_plans,
        ListKind.STARRED: labels.starred,
    }
    return ListTarget(list_kind, fixed_names[list_kind])


class ListCreationState(str, Enum):
    NOT_ATTEMPTED = 'not_attempted'
    CREATED_THIS_RUN = 'created_this_run'
    CONFIRMED_VISIBLE = 'confirmed_visible'


class CustomListTracker:
    """Run-wide creation state of the custom list.

    Records are processed one at a time, so plain attribute updates are safe.
    """

    def __init__(self):
        self.state = ListCreationState.NOT_ATTEMPTED
        self.creations = 0

    @property
    def may_create(self) -> bool:
        return self.state is ListCreationState.NOT_ATTEMPTED

    def mark_created(self) -> None:
        self.state = ListCreationState.CREATED_THIS_RUN
        self.creations += 1

    def mark_visible(self) -> None:
        self.state = ListCreationState.CONFIRMED_VISIBLE


@dataclass
class ListResolution:
    created: bool = False
    retries: int = 0


def open_save_menu(page: PlacePage, timeout: Optional[float]) -> None:
    LOGGER.debug('Click save button')
    page.click(SAVE_BUTTON, timeout)
    # "New list" is always the last menu entry, so the menu has rendered once it shows.
    page.wait_for(NEW_LIST_ITEM, timeout)


class ListResolver:
    """Puts the current place into a custom list through the open save menu."""

    def __init__(self, page: PlacePage, tracker: CustomListTracker, *,
                 element_timeout: Optional[float],
                 page_ready_timeout: Optional[float],
                 retry_interval: float,
                 retry_limit: Optional[int] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.page = page
        self.tracker = tracker
        self.element_timeout = element_timeout
        self.page_ready_timeout = page_ready_timeout
        self.retry_interval = retry_interval
        self.retry_limit = retry_limit
        self.sleep = sleep

    def select(self, target: ListTarget) -> ListResolution:
        """Expects the save menu to be open. Leaves the place saved into ``target``
        (or about to show the saved marker)."""
        entry = list_entry(target.display_name)
        if self.page.is_present(entry):
            LOGGER.debug('List "%s" found in save menu', target.display_name)
            self.page.click(entry, self.element_timeout)
            self.tracker.mark_visible()
            return ListResolution()

        if self.tracker.may_create:
            self._create(target)
            return ListResolution(created=True)

        retries = self._wait_until_listed(target)
        self.page.click(entry, self.element_timeout)
        self.tracker.mark_visible()
        return ListResolution(retries=retries)

    def _create(self, target: ListTarget) -> None:
        LOGGER.info('Create list "%s"', target.display_name)
        self.page.click(NEW_LIST_ITEM, self.element_timeout)
        self.page.wait_for(LIST_NAME_INPUT, self.element_timeout, visible=True)
        self.page.type_text(LIST_NAME_INPUT, target.display_name)
        self.page.click(LIST_CREATE_BUTTON, self.element_timeout)
        self.tracker.mark_created()
        self.page.snap(f'list_created_{target.display_name}')

    def _wait_until_listed(self, target: ListTarget) -> int:
        entry = list_entry(target.display_name)
        attempts = 0
        while True:
            if self.retry_limit is not None and attempts >= self.retry_limit:
                raise ListStalledError(target.display_name, attempts)
            attempts += 1
            LOGGER.debug('List "%s" not in save menu yet; reload in %gs (attempt %d)',
                         target.display_name, self.retry_interval, attempts)
            self.sleep(self.retry_interval)
            self.page.reload()
            self.page.wait_for(PLACE_READY, self.page_ready_timeout)
            open_save_menu(self.page, self.element_timeout)
            if self.page.is_present(entry):
                LOGGER.debug('List "%s" visible after %d reload(s)', target.display_name, attempts)
                return attempts
