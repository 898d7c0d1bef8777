"""Command line entry point: ``gmaps-import CSV_FILE --email ... --pass ...``."""
import argparse
import logging
import sys
import time
from typing import List, Optional

from selenium.common.exceptions import WebDriverException

from . import config
from .browser import SeleniumPlacePage, create_driver
from .config import Credentials, ImportConfig
from .errors import ConfigError, GMapsImportError
from .importer import ImportSummary, PlaceImporter
from .lists import CustomListTracker, ListKind, ListResolver, resolve_list_target
from .log import DebugArtifacts, setup_logging
from .records import read_records, validate_window
from .selectors import labels_for
from .sequencer import SaveSequencer
from .session import SessionController

LOGGER = logging.getLogger('gmaps_import')


class _ArgumentParser(argparse.ArgumentParser):
    """argparse exits with status 2 on bad input; we report a ConfigError instead."""

    def error(self, message):
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='gmaps-import',
        description='Imports a Google Maps saved list located at CSV_FILE',
        epilog='example: gmaps-import /tmp/example.csv --email example@gmail.com --pass password',
    )
    parser.add_argument('csv_file', metavar='CSV_FILE', nargs='*',
                        help='CSV exported from Google Takeout (title, note, URL, comment)')
    parser.add_argument('--email', required=True, help='Email address of Google account to import to')
    parser.add_argument('--pass', dest='password', required=True,
                        help='Password of Google account to import to')
    parser.add_argument('--type', dest='list_type', default=ListKind.FAVORITE.value,
                        choices=[k.value for k in ListKind], help='List to save places into')
    parser.add_argument('--list-name', default=None,
                        help='Name of the custom list (required with --type custom, up to 40 characters)')
    parser.add_argument('--from', dest='row_from', type=int, default=config.DEFAULT_FROM_ROW,
                        help='Handle records starting from a requested number of records. The count is 1-based.')
    parser.add_argument('--to', dest='row_to', type=int, default=None,
                        help='Handle records until a requested number of records. The count is 1-based.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show debug log')
    parser.add_argument('--debug-dir', default=None,
                        help='Write screenshots and page source on failures into this directory')
    parser.add_argument('--profile-dir', default=None,
                        help='Chrome user data directory to reuse between runs')
    parser.add_argument('--headless', action='store_true', help='Run Chrome without a window')
    parser.add_argument('--lang', default=config.UI_LANG, help='UI language of Google Maps (ja or en)')
    parser.add_argument('--mfa-timeout', type=float, default=None,
                        help='Seconds to wait for 2-step verification (default: wait forever)')
    parser.add_argument('--list-retry-limit', type=int, default=None,
                        help='Reloads to wait for a new custom list to appear (default: no limit)')
    return parser


def parse_config(argv: Optional[List[str]] = None) -> ImportConfig:
    """Parse and validate arguments. Raises ``ConfigError`` on any invalid combination."""
    args = build_parser().parse_args(argv)

    if len(args.csv_file) != 1:
        raise ConfigError('Please specify CSV_FILE')
    if not args.email:
        raise ConfigError('--email option requires a non-empty string')
    if not args.password:
        raise ConfigError('--pass option requires a non-empty string')
    validate_window(args.row_from, args.row_to)
    if args.mfa_timeout is not None and args.mfa_timeout <= 0:
        raise ConfigError('--mfa-timeout must be greater than zero')
    if args.list_retry_limit is not None and args.list_retry_limit < 1:
        raise ConfigError('--list-retry-limit requires a number 1 or more')
    try:
        labels = labels_for(args.lang)
    except ValueError as e:
        raise ConfigError(str(e))

    return ImportConfig(
        csv_path=args.csv_file[0],
        credentials=Credentials(args.email, args.password),
        list_target=resolve_list_target(args.list_type, args.list_name, labels),
        row_from=args.row_from,
        row_to=args.row_to,
        verbose=args.verbose,
        debug_dir=args.debug_dir,
        profile_dir=args.profile_dir,
        headless=args.headless,
        lang=args.lang,
        mfa_timeout=args.mfa_timeout,
        list_retry_limit=args.list_retry_limit,
    )


def build_importer(page, cfg: ImportConfig, sleep=time.sleep) -> PlaceImporter:
    session = SessionController(
        page, cfg.credentials,
        element_timeout=cfg.element_timeout,
        navigation_timeout=cfg.navigation_timeout,
        mfa_timeout=cfg.mfa_timeout,
    )
    resolver = ListResolver(
        page, CustomListTracker(),
        element_timeout=cfg.element_timeout,
        page_ready_timeout=cfg.page_ready_timeout,
        retry_interval=cfg.list_retry_interval,
        retry_limit=cfg.list_retry_limit,
        sleep=sleep,
    )
    sequencer = SaveSequencer(
        page, session, resolver, cfg.list_target,
        page_ready_timeout=cfg.page_ready_timeout,
        element_timeout=cfg.element_timeout,
    )
    return PlaceImporter(sequencer)


def run_import(cfg: ImportConfig, records) -> ImportSummary:
    driver = None
    try:
        LOGGER.debug('Launch Chrome')
        driver = create_driver(cfg.lang, profile_dir=cfg.profile_dir, headless=cfg.headless)
        page = SeleniumPlacePage(driver, labels_for(cfg.lang), DebugArtifacts(cfg.debug_dir),
                                 element_timeout=cfg.element_timeout,
                                 navigation_timeout=cfg.navigation_timeout)
        return build_importer(page, cfg).run(records)
    finally:
        if driver:
            try:
                driver.quit()
            except WebDriverException as e:
                LOGGER.debug('Failed to quit Chrome: %s', e)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        cfg = parse_config(argv)
    except ConfigError as e:
        setup_logging()
        LOGGER.error('[ERROR] %s', e)
        return 1

    setup_logging(cfg.verbose)
    try:
        records = read_records(cfg.csv_path, cfg.row_from, cfg.row_to)
        LOGGER.info('Importing %d place(s) into "%s"', len(records), cfg.list_target.display_name)
        run_import(cfg, records)
    except GMapsImportError as e:
        LOGGER.error('Failed to run script: %s', e)
        return 1
    except Exception:
        LOGGER.exception('Failed to run script')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
