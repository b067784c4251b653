"""
In-memory stand-ins for Playwright pages, frames, elements and launchers.

They implement only the calls the engine makes, and record every call so
tests can assert on search order, budgets and mouse input.
"""

from pathlib import Path
from typing import Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


class FakeElement:
    def __init__(self, name: str, box: Optional[dict] = None, visible: bool = True,
                 checked: bool = False, text: str = ""):
        self.name = name
        self.box = box or {"x": 0, "y": 0, "width": 10, "height": 10}
        self.visible = visible
        self.checked = checked
        self.text = text
        self.calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def click(self, **kwargs):
        self._record("click", kwargs)
        if "button" not in kwargs:
            self.checked = not self.checked

    def dblclick(self, **kwargs):
        self._record("dblclick", kwargs)

    def fill(self, value, **kwargs):
        self._record("fill", value)

    def hover(self, **kwargs):
        self._record("hover")

    def select_option(self, **kwargs):
        self._record("select_option", kwargs)
        return [str(value) for value in kwargs.values()]

    def set_input_files(self, files, **kwargs):
        self._record("set_input_files", files)

    def text_content(self):
        self._record("text_content")
        return self.text

    def get_attribute(self, name):
        self._record("get_attribute", name)
        return f"{self.name}-{name}"

    def is_visible(self):
        return self.visible

    def is_checked(self):
        return self.checked

    def scroll_into_view_if_needed(self, **kwargs):
        self._record("scroll_into_view_if_needed")

    def bounding_box(self):
        return self.box

    def wait_for_element_state(self, state, **kwargs):
        self._record("wait_for_element_state", state)

    def content_frame(self):
        return None


class FakeFrame:
    """Frame holding elements by locator, with ordered children."""

    def __init__(self, name: str, elements: Optional[Dict[str, List[FakeElement]]] = None,
                 children: Optional[List["FakeFrame"]] = None):
        self.name = name
        self.url = f"about:{name}"
        self.elements = elements or {}
        self.child_frames = children or []
        self.lookups: List[tuple] = []
        self.query_error: Optional[Exception] = None

    def wait_for_selector(self, locator, timeout=None, state=None):
        self.lookups.append((locator, timeout, state))
        matches = self.elements.get(locator)
        if not matches:
            raise PlaywrightTimeoutError(
                f"Timeout {timeout}ms exceeded waiting for {locator} in {self.name}"
            )
        return matches[0]

    def query_selector_all(self, locator):
        self.lookups.append((locator, None, "all"))
        if self.query_error is not None:
            raise self.query_error
        return list(self.elements.get(locator, []))


class FakeMouse:
    def __init__(self):
        self.calls: List[tuple] = []

    def move(self, x, y, **kwargs):
        self.calls.append(("move", x, y))

    def down(self, **kwargs):
        self.calls.append(("down",))

    def up(self, **kwargs):
        self.calls.append(("up",))


class FakePage:
    def __init__(self, main_frame: FakeFrame, screenshot_error: Optional[Exception] = None):
        self.main_frame = main_frame
        self.mouse = FakeMouse()
        self.screenshot_error = screenshot_error
        self.screenshots: List[str] = []
        self.handlers: List[tuple] = []
        self.closed = False
        self.timeouts: Dict[str, float] = {}

    def screenshot(self, path=None, full_page=False):
        if self.screenshot_error is not None:
            raise self.screenshot_error
        self.screenshots.append(path)
        Path(path).write_bytes(b"\x89PNG fake")
        return b"\x89PNG fake"

    def once(self, event, handler):
        self.handlers.append((event, handler))

    def evaluate(self, script, arg=None):
        return {"script": script, "arg": arg}

    def set_default_timeout(self, timeout):
        self.timeouts["element"] = timeout

    def set_default_navigation_timeout(self, timeout):
        self.timeouts["navigation"] = timeout

    def is_closed(self):
        return self.closed

    def close(self):
        self.closed = True


def frame_chain(depth: int, locator: str, element: FakeElement) -> FakeFrame:
    """Root frame whose only descendant chain holds element at the given depth."""
    frames = [FakeFrame(f"frame-{level}") for level in range(depth + 1)]
    for parent, child in zip(frames, frames[1:]):
        parent.child_frames = [child]
    frames[depth].elements[locator] = [element]
    return frames[0]


# -----------------------------------------------------------------------------
# Launch side
# -----------------------------------------------------------------------------

class FakeTracing:
    def __init__(self, log):
        self.log = log

    def start(self, **kwargs):
        self.log.append(("tracing.start", kwargs))

    def stop(self, path=None):
        self.log.append(("tracing.stop", path))


class FakeContext:
    def __init__(self, log, options, fail_new_page=False):
        self.log = log
        self.options = options
        self.tracing = FakeTracing(log)
        self.pages: List[FakePage] = []
        self.fail_new_page = fail_new_page
        self.cookies_store: List[dict] = []

    def new_page(self):
        if self.fail_new_page:
            raise PlaywrightError("Target page, context or browser has been closed")
        page = FakePage(FakeFrame(f"main-{len(self.pages)}"))
        page.close = self._closer(page)
        self.pages.append(page)
        return page

    def _closer(self, page):
        def _close():
            page.closed = True
            self.log.append(("page.close", page.main_frame.name))
        return _close

    def cookies(self):
        return list(self.cookies_store)

    def add_cookies(self, cookies):
        self.cookies_store.extend(cookies)

    def close(self):
        self.log.append(("context.close",))


class FakeBrowser:
    def __init__(self, log, fail_context=False):
        self.log = log
        self.connected = True
        self.fail_context = fail_context
        self.contexts: List[FakeContext] = []

    def new_context(self, **options):
        if self.fail_context:
            raise PlaywrightError("Browser has been closed")
        context = FakeContext(self.log, options)
        self.contexts.append(context)
        return context

    def is_connected(self):
        return self.connected

    def close(self):
        self.connected = False
        self.log.append(("browser.close",))


class FakeBrowserType:
    def __init__(self, name, log, fail_launch=None, fail_context=False):
        self.name = name
        self.log = log
        self.fail_launch = fail_launch
        self.fail_context = fail_context

    def launch(self, **options):
        self.log.append(("launch", self.name, options))
        if self.fail_launch is not None:
            raise self.fail_launch
        return FakeBrowser(self.log, fail_context=self.fail_context)


class FakePlaywright:
    def __init__(self, log, **failures):
        self.log = log
        self.chromium = FakeBrowserType("chromium", log, **failures)
        self.firefox = FakeBrowserType("firefox", log, **failures)
        self.webkit = FakeBrowserType("webkit", log, **failures)

    def stop(self):
        self.log.append(("playwright.stop",))


class FakePlaywrightFactory:
    """Callable standing in for sync_playwright; counts driver starts."""

    def __init__(self, **failures):
        self.log: List[tuple] = []
        self.failures = failures
        self.starts = 0

    def __call__(self):
        return self

    def start(self):
        self.starts += 1
        return FakePlaywright(self.log, **self.failures)
