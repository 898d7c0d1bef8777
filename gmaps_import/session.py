"""Google account sign-in for the shared browser session."""
import logging
from typing import Optional

from . import config
from .config import Credentials
from .page import EMAIL_INPUT, LOGIN_LINK, PASSWORD_INPUT, PlacePage

LOGGER = logging.getLogger('gmaps_import')


class SessionController:
    def __init__(self, page: PlacePage, credentials: Credentials, *,
                 element_timeout: Optional[float],
                 navigation_timeout: Optional[float],
                 mfa_timeout: Optional[float] = None):
        self.page = page
        self.credentials = credentials
        self.element_timeout = element_timeout
        self.navigation_timeout = navigation_timeout
        self.mfa_timeout = mfa_timeout

    def is_signed_in(self) -> bool:
        return config.AUTH_COOKIE in self.page.cookie_names()

    def ensure_signed_in(self) -> bool:
        """Sign in unless the auth cookie is already set.

        Returns True when a sign-in was performed. After the password step
        this blocks until the browser leaves the Google sign-in pages, which
        is where a second factor has to be completed by hand.
        """
        if self.is_signed_in():
            return False

        LOGGER.debug('Sign in with Google')
        page = self.page
        page.click(LOGIN_LINK, self.element_timeout)

        page.wait_for(EMAIL_INPUT, self.element_timeout)
        page.type_text(EMAIL_INPUT, self.credentials.email)
        page.submit(EMAIL_INPUT, self.navigation_timeout)

        page.wait_for(PASSWORD_INPUT, self.element_timeout, visible=True)
        page.type_text(PASSWORD_INPUT, self.credentials.password)
        page.submit(PASSWORD_INPUT, self.navigation_timeout)

        LOGGER.info('Waiting for sign-in to complete (finish any 2-step verification in the browser)')
        page.wait_for_url(lambda url: config.SIGN_IN_HOST not in url, self.mfa_timeout)
        LOGGER.debug('Signed in')
        return True
