import pytest

from gmaps_import.config import Credentials
from gmaps_import.errors import SessionLostError, UiTimeoutError
from gmaps_import.lists import CustomListTracker, ListKind, ListResolver, ListTarget
from gmaps_import.log import LOGGER
from gmaps_import.page import PlacePage
from gmaps_import.sequencer import SaveSequencer
from gmaps_import.session import SessionController

FIXED_LISTS = ('お気に入り', '行ってみたい', '旅行プラン', 'スター付き')


class FakeMapsPage(PlacePage):
    """In-memory stand-in for a Google Maps tab.

    Keeps which places are saved in which list, memos per (list, place), and
    which lists the save menu offers. A list created through the menu only
    shows up in the menu after ``list_visible_after`` reloads.
    """

    def __init__(self, signed_in=True, statuses=None, lists=FIXED_LISTS, list_visible_after=0,
                 needs_mfa=False, missing=(), lose_session_on=None):
        self.signed_in = signed_in
        self.statuses = dict(statuses or {})
        self.menu_lists = list(lists)
        self.pending_lists = {}
        self.list_visible_after = list_visible_after
        self.needs_mfa = needs_mfa
        self.missing = set(missing)
        self.lose_session_on = lose_session_on

        self.saved = {}
        self.memos = {}
        self.url = ''
        self.place = None
        self.menu_open = False
        self.dialog = None
        self.memo_list = None
        self.auth_step = None
        self.typed = {}

        self.actions = []
        self.visits = []
        self.reloads = 0
        self.created_lists = []
        self.memo_writes = 0
        self.snaps = []

    # --- helpers for tests ---

    def mark_saved(self, list_name, url, memo=None):
        self.saved.setdefault(list_name, set()).add(url)
        if memo is not None:
            self.memos[(list_name, url)] = memo

    def clicks(self, name=None):
        return [t for verb, t in self.actions if verb == 'click' and (name is None or t.name == name)]

    # --- PlacePage ---

    def _present(self, target):
        if target.name in self.missing:
            return False
        place = self.place
        in_list = place is not None and place in self.saved.get(target.label, set())
        return {
            'place_ready': place is not None,
            'login_link': place is not None and not self.signed_in and self.auth_step is None,
            'email_input': self.auth_step == 'email',
            'password_input': self.auth_step == 'password',
            'save_button': place is not None,
            'saved_marker': in_list,
            'new_list_item': self.menu_open,
            'list_entry': self.menu_open and target.label in self.menu_lists,
            'list_name_input': self.dialog == 'new_list',
            'list_create_button': self.dialog == 'new_list',
            'memo_edit_button': in_list and (target.label, place) in self.memos,
            'memo_add_button': in_list and (target.label, place) not in self.memos,
            'memo_textarea': self.dialog == 'memo',
            'memo_done_button': self.dialog == 'memo',
        }[target.name]

    def open(self, url):
        self.visits.append(url)
        if self.lose_session_on is not None and len(self.visits) == self.lose_session_on:
            raise SessionLostError('invalid session id')
        self.actions.append(('open', url))
        status = self.statuses.get(url, 200)
        self.url = url
        self.place = url if 200 <= status < 300 else None
        self.menu_open = False
        self.dialog = None
        return status

    def reload(self):
        self.actions.append(('reload', self.url))
        self.reloads += 1
        self.menu_open = False
        self.dialog = None
        for name in list(self.pending_lists):
            self.pending_lists[name] -= 1
            if self.pending_lists[name] <= 0:
                del self.pending_lists[name]
                self.menu_lists.append(name)

    def cookie_names(self):
        return {'SID', 'HSID'} if self.signed_in else {'NID'}

    def is_present(self, target):
        return self._present(target)

    def wait_for(self, target, timeout, visible=False):
        self.actions.append(('wait', target))
        if not self._present(target):
            raise UiTimeoutError(target, timeout)

    def click(self, target, timeout):
        self.wait_for(target, timeout)
        self.actions.append(('click', target))
        name = target.name
        if name == 'login_link':
            self.auth_step = 'email'
            self.url = 'https://accounts.google.com/signin/identifier'
        elif name == 'save_button':
            self.menu_open = True
        elif name == 'list_entry':
            self.mark_saved(target.label, self.place)
            self.menu_open = False
        elif name == 'new_list_item':
            self.menu_open = False
            self.dialog = 'new_list'
        elif name == 'list_create_button':
            list_name = self.typed['list_name_input']
            self.created_lists.append(list_name)
            self.mark_saved(list_name, self.place)
            if self.list_visible_after > 0:
                self.pending_lists[list_name] = self.list_visible_after
            else:
                self.menu_lists.append(list_name)
            self.dialog = None
        elif name == 'memo_add_button':
            self.dialog = 'memo'
            self.memo_list = target.label
        elif name == 'memo_done_button':
            self.memos[(self.memo_list, self.place)] = self.typed['memo_textarea']
            self.memo_writes += 1
            self.dialog = None

    def type_text(self, target, text):
        if not self._present(target):
            raise UiTimeoutError(target, 5)
        self.actions.append(('type', target))
        self.typed[target.name] = text

    def submit(self, target, timeout):
        self.actions.append(('submit', target))
        if target.name == 'email_input':
            self.auth_step = 'password'
            self.url = 'https://accounts.google.com/signin/challenge/pwd'
        elif target.name == 'password_input':
            if self.needs_mfa:
                self.auth_step = 'mfa'
                self.url = 'https://accounts.google.com/signin/challenge/totp'
            else:
                self._finish_sign_in()

    def _finish_sign_in(self):
        self.auth_step = None
        self.signed_in = True
        self.url = self.place or 'https://www.google.com/maps'

    def wait_for_url(self, predicate, timeout):
        self.actions.append(('wait_url', timeout))
        if self.auth_step == 'mfa':
            # The second factor is completed by hand in the real browser.
            self._finish_sign_in()
        if not predicate(self.url):
            raise UiTimeoutError('navigation', timeout)

    def snap(self, name, html=False):
        self.snaps.append(name)


@pytest.fixture
def credentials():
    return Credentials('user@example.com', 'secret')


@pytest.fixture
def make_page():
    return FakeMapsPage


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_sequencer(credentials, sleeps):
    """Build a sequencer wired to ``page`` the same way the CLI does."""

    def _make(page, target=None, tracker=None, retry_limit=None):
        target = target or ListTarget(ListKind.FAVORITE, 'お気に入り')
        session = SessionController(page, credentials, element_timeout=30,
                                    navigation_timeout=30, mfa_timeout=None)
        resolver = ListResolver(page, tracker or CustomListTracker(), element_timeout=30,
                                page_ready_timeout=10, retry_interval=3,
                                retry_limit=retry_limit, sleep=sleeps.append)
        return SaveSequencer(page, session, resolver, target,
                             page_ready_timeout=10, element_timeout=30)

    return _make


@pytest.fixture(autouse=True)
def _propagating_logger():
    # setup_logging() detaches the package logger from root, which hides records from caplog.
    yield
    for handler in list(LOGGER.handlers):
        LOGGER.removeHandler(handler)
    LOGGER.propagate = True
    LOGGER.setLevel(0)
