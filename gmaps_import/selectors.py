"""DOM locators for the Google Maps place page, keyed by UI language."""
from dataclasses import dataclass
from typing import Dict, List, Tuple

from selenium.webdriver.common.by import By

from .page import Target

Locator = Tuple[str, str]


@dataclass(frozen=True)
class UiLabels:
    """Visible texts and aria-labels the place page renders in one locale.

    Templates take the list's display name as ``{name}``.
    """

    login: str
    address: str
    save: str
    saved_in: str
    memo_edit: str
    memo_add: str
    memo_done: str
    new_list: str
    list_name: str
    create: str
    favorite: str
    want_to_go: str
    travel_plans: str
    starred: str


LABELS: Dict[str, UiLabels] = {
    'ja': UiLabels(
        login='ログイン',
        address='住所',
        save='保存',
        saved_in='「{name}」に保存しました',
        memo_edit='「{name}」のメモを編集します',
        memo_add='「{name}」にメモを追加します',
        memo_done='完了',
        new_list='新しいリスト',
        list_name='リスト名',
        create='作成',
        favorite='お気に入り',
        want_to_go='行ってみたい',
        travel_plans='旅行プラン',
        starred='スター付き',
    ),
    'en': UiLabels(
        login='Sign in',
        address='Address',
        save='Save',
        saved_in='Saved in {name}',
        memo_edit='Edit note in {name}',
        memo_add='Add note in {name}',
        memo_done='Done',
        new_list='New list',
        list_name='List name',
        create='Create',
        favorite='Favorites',
        want_to_go='Want to go',
        travel_plans='Travel plans',
        starred='Starred places',
    ),
}


def labels_for(lang: str) -> UiLabels:
    try:
        return LABELS[lang]
    except KeyError:
        raise ValueError(f'Unsupported UI language: {lang!r} (known: {", ".join(sorted(LABELS))})')


def xpath_literal(s: str) -> str:
    if "'" not in s:
        return f"'{s}'"
    if '"' not in s:
        return '"' + s + '"'
    # contains both quotes, use concat
    parts = s.split("'")
    tokens = ["'" + parts[0] + "'"]
    for p in parts[1:]:
        tokens.append("\"'\"")  # a double-quoted single-quote character
        tokens.append("'" + p + "'")
    return 'concat(' + ', '.join(tokens) + ')'


def locators(target: Target, labels: UiLabels) -> List[Locator]:
    """Candidate locators for ``target``, tried in order."""
    name = target.name
    lit = xpath_literal
    if name == 'login_link':
        return [
            (By.XPATH, f'//a[normalize-space()={lit(labels.login)}]'),
            (By.XPATH, f'//a[@aria-label={lit(labels.login)}]'),
        ]
    if name == 'email_input':
        return [(By.CSS_SELECTOR, 'input[type="email"]')]
    if name == 'password_input':
        return [(By.CSS_SELECTOR, 'input[type="password"]')]
    if name == 'place_ready':
        return [
            (By.XPATH, f'//button[contains(@aria-label, {lit(labels.address)})]'),
            (By.CSS_SELECTOR, 'button[data-item-id="address"]'),
        ]
    if name == 'save_button':
        return [
            (By.XPATH, f'//button[@data-value={lit(labels.save)}]'),
            (By.XPATH, f'//button[starts-with(@aria-label, {lit(labels.save)})]'),
        ]
    if name == 'saved_marker':
        text = labels.saved_in.format(name=target.label)
        return [
            (By.XPATH, f'//div[@aria-label={lit(text)}]'),
            (By.XPATH, f'//div[normalize-space(text())={lit(text)}]'),
        ]
    if name == 'list_entry':
        return [
            (By.XPATH, f'//*[@role="menuitemcheckbox"][.//*[normalize-space(text())={lit(target.label)}]]'),
        ]
    if name == 'new_list_item':
        return [
            (By.XPATH, f'//*[@role="menuitem" or @role="menuitemcheckbox"][.//*[normalize-space(text())={lit(labels.new_list)}]]'),
        ]
    if name == 'list_name_input':
        return [
            (By.XPATH, f'//input[@aria-label={lit(labels.list_name)}]'),
            (By.CSS_SELECTOR, 'div[role="dialog"] input[type="text"]'),
        ]
    if name == 'list_create_button':
        return [(By.XPATH, f'//button[normalize-space()={lit(labels.create)}]')]
    if name == 'memo_edit_button':
        return [(By.XPATH, f'//button[@aria-label={lit(labels.memo_edit.format(name=target.label))}]')]
    if name == 'memo_add_button':
        return [(By.XPATH, f'//button[@aria-label={lit(labels.memo_add.format(name=target.label))}]')]
    if name == 'memo_textarea':
        return [(By.CSS_SELECTOR, 'textarea[aria-label]')]
    if name == 'memo_done_button':
        return [(By.XPATH, f'//button[normalize-space()={lit(labels.memo_done)}]')]
    raise KeyError(f'No locator for target {target}')
