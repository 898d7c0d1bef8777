import pytest
from selenium.common.exceptions import WebDriverException

from gmaps_import import cli
from gmaps_import.errors import ConfigError
from gmaps_import.lists import ListKind

CREDS = ['--email', 'user@example.com', '--pass', 'secret']


class DummyDriver:
    def __init__(self):
        self.quit_called = False

    def quit(self):
        self.quit_called = True


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / 'saved.csv'
    path.write_text(
        'Title,Note,URL,Comment\n'
        'A,,https://maps.example/a,\n'
        'B,,https://maps.example/b,\n'
        'C,,https://maps.example/c,\n',
        encoding='utf-8',
    )
    return str(path)


@pytest.fixture
def browser(monkeypatch, make_page):
    """Replace Chrome with a fake page and record whether it was started."""
    state = {'drivers': [], 'page': make_page()}

    def fake_create_driver(lang, profile_dir=None, headless=False):
        driver = DummyDriver()
        state['drivers'].append(driver)
        return driver

    monkeypatch.setattr(cli, 'create_driver', fake_create_driver)
    monkeypatch.setattr(cli, 'SeleniumPlacePage', lambda driver, labels, artifacts, **kwargs: state['page'])
    return state


def test_parse_config_defaults(csv_file):
    cfg = cli.parse_config([csv_file] + CREDS)

    assert cfg.csv_path == csv_file
    assert cfg.credentials.email == 'user@example.com'
    assert cfg.credentials.password == 'secret'
    assert cfg.list_target.kind is ListKind.FAVORITE
    assert cfg.list_target.display_name == 'お気に入り'
    assert cfg.row_from == 2
    assert cfg.row_to is None
    assert cfg.mfa_timeout is None
    assert cfg.list_retry_limit is None
    assert 'secret' not in repr(cfg.credentials)


def test_parse_config_custom_list(csv_file):
    cfg = cli.parse_config([csv_file] + CREDS + ['--type', 'custom', '--list-name', 'Trip',
                                                 '--from', '3', '--to', '4', '-v'])

    assert cfg.list_target.kind is ListKind.CUSTOM
    assert cfg.list_target.display_name == 'Trip'
    assert (cfg.row_from, cfg.row_to) == (3, 4)
    assert cfg.verbose


@pytest.mark.parametrize('extra', [
    ['--type', 'custom'],
    ['--type', 'custom', '--list-name', 'x' * 41],
    ['--list-name', 'Trip'],
    ['--type', 'visited'],
    ['--from', '0'],
    ['--to', '0'],
    ['--from', '5', '--to', '3'],
    ['--mfa-timeout', '0'],
    ['--list-retry-limit', '0'],
    ['--lang', 'fr'],
])
def test_invalid_arguments_raise_config_error(csv_file, extra):
    with pytest.raises(ConfigError):
        cli.parse_config([csv_file] + CREDS + extra)


def test_csv_file_is_required():
    with pytest.raises(ConfigError, match='CSV_FILE'):
        cli.parse_config(CREDS)


def test_missing_credentials_raise_config_error(csv_file):
    with pytest.raises(ConfigError):
        cli.parse_config([csv_file, '--email', 'user@example.com'])


def test_empty_email_is_rejected(csv_file):
    with pytest.raises(ConfigError, match='--email'):
        cli.parse_config([csv_file, '--email', '', '--pass', 'secret'])


def test_long_list_name_exits_before_browser_starts(csv_file, browser):
    code = cli.main([csv_file] + CREDS + ['--type', 'custom', '--list-name', 'x' * 41])

    assert code == 1
    assert browser['drivers'] == []


def test_unreadable_csv_exits_before_browser_starts(tmp_path, browser):
    code = cli.main([str(tmp_path / 'missing.csv')] + CREDS)

    assert code == 1
    assert browser['drivers'] == []


def test_main_imports_window_and_quits_browser(csv_file, browser):
    code = cli.main([csv_file] + CREDS + ['--from', '3'])

    assert code == 0
    assert browser['page'].visits == ['https://maps.example/b', 'https://maps.example/c']
    assert browser['drivers'][0].quit_called


def test_record_failures_still_exit_zero(csv_file, browser):
    browser['page'].statuses['https://maps.example/a'] = 404

    code = cli.main([csv_file] + CREDS)

    assert code == 0
    assert len(browser['page'].visits) == 3


def test_session_loss_exits_one_and_quits_browser(csv_file, browser, make_page):
    browser['page'] = make_page(lose_session_on=1)

    code = cli.main([csv_file] + CREDS)

    assert code == 1
    assert browser['page'].visits == ['https://maps.example/a']
    assert browser['drivers'][0].quit_called


def test_failed_browser_shutdown_keeps_session_loss_error(csv_file, browser, make_page, monkeypatch, capsys):
    class BrokenQuitDriver(DummyDriver):
        def quit(self):
            super().quit()
            raise WebDriverException('chrome not reachable')

    drivers = []

    def create_broken_driver(lang, profile_dir=None, headless=False):
        drivers.append(BrokenQuitDriver())
        return drivers[-1]

    monkeypatch.setattr(cli, 'create_driver', create_broken_driver)
    browser['page'] = make_page(lose_session_on=1)

    code = cli.main([csv_file] + CREDS)

    err = capsys.readouterr().err
    assert code == 1
    assert drivers[0].quit_called
    assert 'Failed to run script: invalid session id' in err
    assert 'Traceback' not in err
