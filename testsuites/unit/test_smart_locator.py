import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from testsuites.ui_testing.framework.errors import LocatorNotFound
from testsuites.ui_testing.framework.smart_locator import SmartLocator


class FakeLocator:
    def __init__(self, page, selector):
        self.page = page
        self.selector = selector

    @property
    def first(self):
        return self

    async def wait_for(self, state="visible", timeout=None):
        self.page.waited.append((self.selector, state, timeout))
        if self.selector not in self.page.present:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.\nwaiting for {self.selector}")

    async def click(self, **kwargs):
        self.page.clicked.append(self.selector)

    async def fill(self, value, **kwargs):
        self.page.filled[self.selector] = value

    async def is_visible(self):
        return True

    async def text_content(self):
        return f"text of {self.selector}"


class FakePage:
    def __init__(self, *present):
        self.present = set(present)
        self.waited = []
        self.clicked = []
        self.filled = {}

    def locator(self, selector):
        return FakeLocator(self, selector)


async def test_primary_selector_wins():
    page = FakePage("#lastName", "input[name='lastName']")
    smart = SmartLocator(page)

    await smart.fill("owner_last_name_input", "Davis", timeout=50)

    assert page.filled == {"#lastName": "Davis"}
    assert not smart.used_fallbacks
    assert "No maintenance needed" in smart.get_health_report()


async def test_fallback_is_used_and_reported():
    page = FakePage("input[name='lastName']")
    smart = SmartLocator(page)

    locator = await smart.locate("owner_last_name_input", timeout=50)

    assert locator.selector == "input[name='lastName']"
    assert smart.used_fallbacks
    report = smart.get_health_report()
    assert "[owner_last_name_input]" in report
    assert "Failed primary: #lastName" in report
    assert "fallback_1 -> input[name='lastName']" in report


async def test_all_strategies_fail():
    page = FakePage()
    smart = SmartLocator(page)

    with pytest.raises(LocatorNotFound) as exc_info:
        await smart.click("language_button", timeout=10)

    message = str(exc_info.value)
    assert "primary: #languageDropdown" in message
    assert "fallback_1: [aria-label='Language selector']" in message
    assert page.clicked == []
    assert await smart.is_visible("language_button", timeout=10) is False


async def test_unknown_element_name():
    with pytest.raises(LocatorNotFound, match="No locators defined"):
        await SmartLocator(FakePage()).locate("no_such_element")


async def test_custom_locator_map():
    page = FakePage(".card-title")
    smart = SmartLocator(page, element_name="card_title", locators={"primary": "#title", "by_class": ".card-title"})

    locator = await smart.locate(timeout=10)
    text = await locator.text_content()

    assert text == "text of .card-title"
    assert "[card_title]" in smart.get_health_report()
    assert page.waited[-1] == (".card-title", "visible", 10)
