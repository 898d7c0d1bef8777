"""Error taxonomy for the importer.

Record-scoped errors end one record and are reported through its
``SaveOutcome``. ``ConfigError``, ``RecordSourceError`` and
``SessionLostError`` end the whole run.
"""
from typing import Optional


class ErrorCode:
    CONFIG = 'config_error'
    RECORD_SOURCE = 'record_source_error'
    HTTP_RESPONSE = 'http_response'
    INVALID_URL = 'invalid_url'
    UI_TIMEOUT = 'ui_timeout'
    LIST_STALLED = 'list_stalled'
    SESSION_LOST = 'session_lost'
    INTERNAL = 'internal_error'
    # Soft: the place is saved but the memo was not written.
    MEMO_EXISTS = 'memo_exists'
    MEMO_UNSUPPORTED = 'memo_unsupported'


class GMapsImportError(Exception):
    code = ErrorCode.INTERNAL


class ConfigError(GMapsImportError):
    code = ErrorCode.CONFIG


class RecordSourceError(GMapsImportError):
    code = ErrorCode.RECORD_SOURCE


class HttpResponseError(GMapsImportError):
    code = ErrorCode.HTTP_RESPONSE

    def __init__(self, url: str, status: int):
        super().__init__(f'Got error response code {status} from page {url}')
        self.url = url
        self.status = status


class InvalidUrlError(GMapsImportError):
    code = ErrorCode.INVALID_URL

    def __init__(self, url: str):
        super().__init__(f'Not a place URL: "{url}"')
        self.url = url


class UiTimeoutError(GMapsImportError):
    code = ErrorCode.UI_TIMEOUT

    def __init__(self, target, timeout: Optional[float]):
        bound = f'{timeout:g}s' if timeout is not None else 'no bound'
        super().__init__(f'Element {target} did not appear ({bound})')
        self.target = target
        self.timeout = timeout


class ListStalledError(GMapsImportError):
    code = ErrorCode.LIST_STALLED

    def __init__(self, list_name: str, attempts: int):
        super().__init__(f'List "{list_name}" still not visible after {attempts} reload(s)')
        self.list_name = list_name
        self.attempts = attempts


class SessionLostError(GMapsImportError):
    code = ErrorCode.SESSION_LOST


def error_code_for(exc: BaseException) -> str:
    return getattr(exc, 'code', ErrorCode.INTERNAL)
