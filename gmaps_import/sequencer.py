"""Per-place save flow.

Each record walks through::

    PAGE_LOADING -> ENSURE_SIGNED_IN -> PAGE_READY -> ENSURE_SAVED_TO_LIST -> ENSURE_MEMO -> DONE

Every step checks the page before acting, so re-running a record that is
already saved (or already has a memo) issues no further writes.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import ErrorCode, HttpResponseError, InvalidUrlError, SessionLostError, error_code_for
from .lists import ListResolver, ListTarget, open_save_menu
from .page import (MEMO_DONE_BUTTON, MEMO_TEXTAREA, PLACE_READY, PlacePage, list_entry,
                   memo_add_button, memo_edit_button, saved_marker)
from .records import PlaceRecord, is_place_url
from .session import SessionController

LOGGER = logging.getLogger('gmaps_import')


class SaveState(str, Enum):
    PAGE_LOADING = 'page_loading'
    ENSURE_SIGNED_IN = 'ensure_signed_in'
    PAGE_READY = 'page_ready'
    ENSURE_SAVED_TO_LIST = 'ensure_saved_to_list'
    ENSURE_MEMO = 'ensure_memo'
    DONE = 'done'


@dataclass
class SaveOutcome:
    record: PlaceRecord
    succeeded: bool = False
    state: SaveState = SaveState.PAGE_LOADING
    error_code: Optional[str] = None
    failure_reason: Optional[str] = None
    already_saved: bool = False
    list_created: bool = False
    list_retries: int = 0
    memo_written: bool = False
    # Soft failure code when the memo could not be written.
    memo_conflict: Optional[str] = None


def _is_success_status(status: Optional[int]) -> bool:
    # Unknown status (no network log entry) is treated as success.
    return status is None or 200 <= status < 300


class SaveSequencer:
    def __init__(self, page: PlacePage, session: SessionController, resolver: ListResolver,
                 target: ListTarget, *, page_ready_timeout: Optional[float],
                 element_timeout: Optional[float]):
        self.page = page
        self.session = session
        self.resolver = resolver
        self.target = target
        self.page_ready_timeout = page_ready_timeout
        self.element_timeout = element_timeout

    def save(self, record: PlaceRecord) -> SaveOutcome:
        """Run the full flow for one record. Only ``SessionLostError`` escapes."""
        LOGGER.info('Save a place named "%s"', record.title)
        outcome = SaveOutcome(record=record)
        try:
            self._run(record, outcome)
        except SessionLostError:
            raise
        except Exception as e:
            outcome.succeeded = False
            outcome.error_code = error_code_for(e)
            outcome.failure_reason = str(e) or e.__class__.__name__
            self.page.snap(f'error_{outcome.state.value}_{record.title}', html=True)
            return outcome
        outcome.state = SaveState.DONE
        outcome.succeeded = True
        LOGGER.debug('Saving finished')
        return outcome

    def _run(self, record: PlaceRecord, outcome: SaveOutcome) -> None:
        outcome.state = SaveState.PAGE_LOADING
        self.load_page(record)

        outcome.state = SaveState.ENSURE_SIGNED_IN
        self.session.ensure_signed_in()

        outcome.state = SaveState.PAGE_READY
        LOGGER.debug('Wait for page rendering')
        self.page.wait_for(PLACE_READY, self.page_ready_timeout)

        outcome.state = SaveState.ENSURE_SAVED_TO_LIST
        self.ensure_saved_to_list(outcome)

        outcome.state = SaveState.ENSURE_MEMO
        self.ensure_memo(record, outcome)

    def load_page(self, record: PlaceRecord) -> None:
        if not is_place_url(record.url):
            raise InvalidUrlError(record.url)
        LOGGER.debug('Open page: %s', record.url)
        status = self.page.open(record.url)
        if not _is_success_status(status):
            raise HttpResponseError(record.url, status)

    def ensure_saved_to_list(self, outcome: SaveOutcome) -> None:
        marker = saved_marker(self.target.display_name)
        if self.page.is_present(marker):
            LOGGER.debug('Already saved in "%s"', self.target.display_name)
            outcome.already_saved = True
            return

        open_save_menu(self.page, self.element_timeout)
        if self.target.kind.is_custom:
            resolution = self.resolver.select(self.target)
            outcome.list_created = resolution.created
            outcome.list_retries = resolution.retries
        else:
            LOGGER.debug('Click "%s" in save menu', self.target.display_name)
            self.page.click(list_entry(self.target.display_name), self.element_timeout)

        LOGGER.debug('Wait until saving finish')
        self.page.wait_for(marker, self.element_timeout)

    def ensure_memo(self, record: PlaceRecord, outcome: SaveOutcome) -> None:
        if not record.memo:
            return
        if not self.target.supports_memo:
            outcome.memo_conflict = ErrorCode.MEMO_UNSUPPORTED
            LOGGER.error('List "%s" does not support memos. Please manually record memo. %s',
                         self.target.display_name, record.describe())
            return
        if self.page.is_present(memo_edit_button(self.target.display_name)):
            outcome.memo_conflict = ErrorCode.MEMO_EXISTS
            LOGGER.error('Memo already exists. Please manually append memo. %s', record.describe())
            return

        LOGGER.debug('Add memo: "%s"', record.memo)
        self.page.click(memo_add_button(self.target.display_name), self.element_timeout)
        self.page.wait_for(MEMO_TEXTAREA, self.element_timeout)
        self.page.type_text(MEMO_TEXTAREA, record.memo)
        self.page.click(MEMO_DONE_BUTTON, self.element_timeout)
        outcome.memo_written = True
