"""Reads place records from a Google Takeout saved-list CSV."""
import csv
import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlparse

from .errors import ConfigError, RecordSourceError

LOGGER = logging.getLogger('gmaps_import')

# Takeout column order: Title, Note, URL, Comment. The last one is not imported.
COLUMNS = ('title', 'memo', 'url')


@dataclass(frozen=True)
class PlaceRecord:
    title: str
    url: str
    memo: Optional[str] = None
    row: Optional[int] = None

    def describe(self) -> str:
        return f'Name: "{self.title}". Memo: "{self.memo or ""}". URL: "{self.url}"'


def validate_window(row_from: int, row_to: Optional[int]) -> None:
    if row_from is None or row_from < 1:
        raise ConfigError('--from option requires a number 1 or more')
    if row_to is not None:
        if row_to < 1:
            raise ConfigError('--to option requires a number 1 or more')
        if row_to < row_from:
            raise ConfigError('--to option must not be smaller than --from')


def is_place_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def parse_rows(rows, row_from: int = 2, row_to: Optional[int] = None) -> List[PlaceRecord]:
    """Build records from CSV rows, keeping rows ``row_from``..``row_to`` (1-based, inclusive)."""
    validate_window(row_from, row_to)
    records: List[PlaceRecord] = []
    for row_number, row in enumerate(rows, start=1):
        if row_to is not None and row_number > row_to:
            break
        if row_number < row_from:
            continue
        if not any(cell.strip() for cell in row):
            LOGGER.debug('Row %d is empty; skipped', row_number)
            continue
        title, memo, url = (list(row) + ['', '', ''])[:len(COLUMNS)]
        title, memo, url = title.strip(), memo.strip(), url.strip()
        records.append(PlaceRecord(title=title, url=url, memo=memo or None, row=row_number))
    return records


def read_records(path: str, row_from: int = 2, row_to: Optional[int] = None) -> List[PlaceRecord]:
    try:
        with open(path, 'r', encoding='utf-8-sig', newline='') as f:
            records = parse_rows(csv.reader(f), row_from, row_to)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise RecordSourceError(f'Failed to read {path}: {e}') from e
    LOGGER.debug('input: %r', records)
    return records
