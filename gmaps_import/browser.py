"""Selenium implementation of ``PlacePage`` on undetected-chromedriver."""
import json
import logging
import os
import random
import time
from contextlib import contextmanager
from typing import Callable, Optional, Set

import undetected_chromedriver as uc
from selenium.common.exceptions import (InvalidSessionIdException, NoSuchWindowException,
                                        TimeoutException, WebDriverException)
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.support.ui import WebDriverWait

from . import config
from .errors import SessionLostError, UiTimeoutError
from .log import DebugArtifacts
from .page import PlacePage, Target
from .selectors import UiLabels, locators

LOGGER = logging.getLogger('gmaps_import')

# Messages chromedriver uses once Chrome itself is gone.
_DEAD_BROWSER_HINTS = ('chrome not reachable', 'disconnected', 'target window already closed')


def short_sleep(a=0.2, b=0.6):
    time.sleep(random.uniform(a, b))


def create_driver(lang: str, profile_dir: Optional[str] = None, headless: bool = False):
    chrome_options = uc.ChromeOptions()
    if profile_dir:
        os.makedirs(profile_dir, exist_ok=True)
        chrome_options.add_argument(f'--user-data-dir={profile_dir}')
    chrome_options.add_argument(f'--lang={lang}')
    chrome_options.add_argument('--no-first-run')
    chrome_options.add_argument('--disable-features=Translate')
    # Network events let us read the HTTP status of each page load.
    chrome_options.set_capability('goog:loggingPrefs', {'performance': 'ALL'})
    return uc.Chrome(options=chrome_options, headless=headless)


def _timeout_value(timeout: Optional[float]) -> float:
    return float('inf') if timeout is None else timeout


@contextmanager
def _session_guard():
    try:
        yield
    except (InvalidSessionIdException, NoSuchWindowException) as e:
        raise SessionLostError(str(e).strip() or e.__class__.__name__) from e
    except TimeoutException:
        raise
    except WebDriverException as e:
        message = (e.msg or '').lower()
        if any(hint in message for hint in _DEAD_BROWSER_HINTS):
            raise SessionLostError(e.msg) from e
        raise


class SeleniumPlacePage(PlacePage):
    def __init__(self, driver, labels: UiLabels, artifacts: Optional[DebugArtifacts] = None, *,
                 element_timeout: float = config.ELEMENT_TIMEOUT,
                 navigation_timeout: float = config.NAVIGATION_TIMEOUT):
        self.driver = driver
        self.labels = labels
        self.artifacts = artifacts or DebugArtifacts(None)
        self.element_timeout = element_timeout
        self.navigation_timeout = navigation_timeout

    # --- navigation ---

    def open(self, url: str) -> Optional[int]:
        with _session_guard():
            self._drain_network_log()
            self.driver.get(url)
            self._wait_document_complete()
            return self._document_status()

    def reload(self) -> None:
        with _session_guard():
            self.driver.refresh()
            self._wait_document_complete()

    def cookie_names(self) -> Set[str]:
        with _session_guard():
            return {c['name'] for c in self.driver.get_cookies()}

    def wait_for_url(self, predicate: Callable[[str], bool], timeout: Optional[float]) -> None:
        with _session_guard():
            try:
                WebDriverWait(self.driver, _timeout_value(timeout), poll_frequency=1).until(
                    lambda d: isinstance(getattr(d, 'current_url', ''), str) and predicate(d.current_url)
                )
            except TimeoutException:
                raise UiTimeoutError('navigation', timeout)

    def _wait_document_complete(self):
        timeout = self.navigation_timeout
        try:
            WebDriverWait(self.driver, timeout).until(
                lambda d: d.execute_script('return document.readyState') == 'complete'
            )
        except TimeoutException:
            LOGGER.debug('document.readyState not complete after %ss', timeout)

    def _drain_network_log(self):
        try:
            self.driver.get_log('performance')
        except WebDriverException:
            pass

    def _document_status(self) -> Optional[int]:
        """Status of the first document response since the last drain (the top frame)."""
        try:
            entries = self.driver.get_log('performance')
        except WebDriverException as e:
            LOGGER.debug('Performance log unavailable: %s', e)
            return None
        for entry in entries:
            try:
                message = json.loads(entry['message'])['message']
            except (KeyError, TypeError, ValueError):
                continue
            if message.get('method') != 'Network.responseReceived':
                continue
            params = message.get('params', {})
            if params.get('type') != 'Document':
                continue
            status = params.get('response', {}).get('status')
            return int(status) if status is not None else None
        return None

    # --- elements ---

    def _find(self, target: Target, visible: bool = False):
        for by, value in locators(target, self.labels):
            for el in self.driver.find_elements(by, value):
                if not visible:
                    return el
                try:
                    if el.is_displayed():
                        return el
                except WebDriverException:
                    continue
        return None

    def _wait_element(self, target: Target, timeout: Optional[float], visible: bool = False):
        try:
            return WebDriverWait(self.driver, _timeout_value(timeout)).until(
                lambda d: self._find(target, visible) or False
            )
        except TimeoutException:
            self.snap(f'timeout_{target}', html=True)
            raise UiTimeoutError(target, timeout)

    def is_present(self, target: Target) -> bool:
        with _session_guard():
            return self._find(target) is not None

    def wait_for(self, target: Target, timeout: Optional[float], visible: bool = False) -> None:
        with _session_guard():
            self._wait_element(target, timeout, visible)

    def click(self, target: Target, timeout: Optional[float]) -> None:
        with _session_guard():
            el = self._wait_element(target, timeout, visible=True)
            try:
                el.click()
            except WebDriverException:
                self.driver.execute_script('arguments[0].click();', el)
            short_sleep()

    def type_text(self, target: Target, text: str) -> None:
        with _session_guard():
            el = self._wait_element(target, self.element_timeout, visible=True)
            el.click()
            short_sleep(0.05, 0.15)
            # Type text in chunks to avoid flakiness on long strings
            for chunk_start in range(0, len(text), 200):
                el.send_keys(text[chunk_start:chunk_start + 200])
                short_sleep(0.01, 0.03)

    def submit(self, target: Target, timeout: Optional[float]) -> None:
        with _session_guard():
            before = self.driver.current_url
            el = self._wait_element(target, self.element_timeout)
            el.send_keys(Keys.ENTER)
        self.wait_for_url(lambda url: url != before, timeout)

    def snap(self, name: str, html: bool = False) -> None:
        self.artifacts.snap(self.driver, name, html=html)
