"""Logger setup and debug artifacts (screenshots, page source)."""
import logging
import os
import re
import sys
from datetime import datetime
from typing import Optional

LOGGER = logging.getLogger('gmaps_import')


def setup_logging(verbose: bool = False) -> None:
    for handler in list(LOGGER.handlers):
        LOGGER.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt='[%(asctime)s] %(levelname)s %(message)s',
        datefmt='%H:%M:%S',
    ))
    LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)
    LOGGER.propagate = False


def sanitize_filename(name: str) -> str:
    name = name.strip() or 'untitled'
    name = re.sub(r'[\\/:*?"<>|\s]+', '_', name)
    return name[:80]


class DebugArtifacts:
    """Writes screenshots (and optionally page source) into ``debug_dir``.

    Disabled when ``debug_dir`` is None. Failures are logged at DEBUG and
    never propagate, since artifacts are collected while handling other errors.
    """

    def __init__(self, debug_dir: Optional[str]):
        self.debug_dir = debug_dir
        if debug_dir:
            os.makedirs(debug_dir, exist_ok=True)

    @property
    def enabled(self) -> bool:
        return bool(self.debug_dir)

    def _base_path(self, name: str) -> str:
        ts = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        return os.path.join(self.debug_dir, f'{ts}_{sanitize_filename(name)}')

    def snap(self, driver, name: str, html: bool = False) -> None:
        if not self.enabled or driver is None:
            return
        base = self._base_path(name)
        try:
            # Skip if window already closed
            if not getattr(driver, 'window_handles', []):
                return
            driver.save_screenshot(base + '.png')
            LOGGER.debug('Saved screenshot: %s.png', base)
        except Exception as e:
            LOGGER.debug('Failed to save screenshot: %s', e)
            return
        if html:
            try:
                with open(base + '.html', 'w', encoding='utf-8') as f:
                    f.write(driver.page_source)
                LOGGER.debug('Saved page source: %s.html', base)
            except Exception as e:
                LOGGER.debug('Failed to save page source: %s', e)
