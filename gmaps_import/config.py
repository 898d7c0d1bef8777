"""Defaults and the per-run configuration object."""
import os
from dataclasses import dataclass
from typing import Optional

from .lists import ListTarget


def _env_float(name: str, default: float) -> float:
    try:
        value = float(os.getenv(name, str(default)))
    except ValueError:
        return default
    return value if value > 0 else default


# --- Defaults (overridable through the environment) ---

SIGN_IN_HOST = 'accounts.google.com'
# Cookie Google sets once the account is signed in.
AUTH_COOKIE = 'SID'

UI_LANG = os.getenv('GMAPS_IMPORT_LANG', 'ja')

PAGE_READY_TIMEOUT = _env_float('GMAPS_IMPORT_PAGE_READY_TIMEOUT', 10.0)
ELEMENT_TIMEOUT = _env_float('GMAPS_IMPORT_ELEMENT_TIMEOUT', 30.0)
NAVIGATION_TIMEOUT = _env_float('GMAPS_IMPORT_NAVIGATION_TIMEOUT', 30.0)
LIST_RETRY_INTERVAL = _env_float('GMAPS_IMPORT_LIST_RETRY_INTERVAL', 3.0)

DEFAULT_FROM_ROW = 2


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str

    def __repr__(self):
        return f'Credentials(email={self.email!r}, password=***)'


@dataclass(frozen=True)
class ImportConfig:
    """Everything one run needs, resolved from the command line."""

    csv_path: str
    credentials: Credentials
    list_target: ListTarget
    row_from: int = DEFAULT_FROM_ROW
    row_to: Optional[int] = None
    verbose: bool = False
    debug_dir: Optional[str] = None
    profile_dir: Optional[str] = None
    headless: bool = False
    lang: str = UI_LANG
    page_ready_timeout: float = PAGE_READY_TIMEOUT
    element_timeout: float = ELEMENT_TIMEOUT
    navigation_timeout: float = NAVIGATION_TIMEOUT
    list_retry_interval: float = LIST_RETRY_INTERVAL
    # None keeps waiting until the second factor is completed by hand.
    mfa_timeout: Optional[float] = None
    # None keeps reloading until a new custom list shows up.
    list_retry_limit: Optional[int] = None
