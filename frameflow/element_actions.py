# ================================================================================
# Element Actions Module
# ================================================================================
#
# Frame-aware UI element interactions for the active page of the calling
# worker's session.
#
# Key Features:
#   - Elements located in any frame via ElementResolver
#   - Resolve once, act once; no built-in retries
#   - Screenshot on failure, original exception re-raised unchanged
#   - Visibility/existence probes that answer False instead of raising
#   - Same-frame drag and drop through page-level mouse input
#   - Allure step integration
#
# ================================================================================

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import allure
from loguru import logger
from playwright.sync_api import (
    Dialog,
    ElementHandle,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from .browser_manager import SessionStore
from .bulk_query import BulkQuery
from .config_loader import EngineConfig
from .element_resolver import ElementResolver, SearchResult
from .errors import ElementGeometryError, ElementNotFoundError, UnsupportedOperationError
from .screenshot import ScreenshotCapture


class WebActions:
    """
    Locate-then-act wrapper over the calling worker's active page.

    Every single-element action resolves its locator once across all frames,
    performs exactly one operation on the element, and on any failure takes
    a tagged screenshot before re-raising the original exception.

    Example:
        store = SessionStore(config)
        store.initialize("chromium")
        actions = WebActions(store)
        actions.navigate_to("https://example.com/login")
        actions.type("#username", "demo_user")
        actions.click("text=Sign in")
    """

    def __init__(
        self,
        store: SessionStore,
        config: Optional[EngineConfig] = None,
        resolver: Optional[ElementResolver] = None,
        bulk: Optional[BulkQuery] = None,
        screenshots: Optional[ScreenshotCapture] = None,
    ):
        """
        Args:
            store: Session store owning the worker's browser/context/page
            config: Engine settings; defaults to the store's
            resolver: Element resolver; built from config if omitted
            bulk: Bulk query; built from config if omitted
            screenshots: Screenshot capture; keyed by the store's worker id if omitted
        """
        self.store = store
        self.config = config or store.config
        self.screenshots = screenshots or ScreenshotCapture(
            self.config.screenshots_dir,
            worker_id=lambda: store.worker,
        )
        self.resolver = resolver or ElementResolver(self.config, self.screenshots)
        self.bulk = bulk or BulkQuery(self.config)

    @property
    def page(self) -> Page:
        """Active page of the calling worker's session."""
        session = self.store.current()
        if session is None or session.page is None:
            raise RuntimeError("No active session for this worker. Call initialize() first.")
        return session.page

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    @allure.step("Navigate to: {url}")
    def navigate_to(self, url: str) -> None:
        page = self.page
        logger.info(f"Navigating to URL: {url}")
        try:
            page.goto(url, timeout=self.config.page_timeout)
            self.wait_for_page_load()
        except Exception as e:
            logger.error(f"Failed to navigate to URL: {url}: {e}")
            self.capture_screenshot("navigation_error")
            raise

    def wait_for_page_load(self, state: str = "networkidle") -> None:
        """Wait for 'load', 'domcontentloaded' or 'networkidle'."""
        self.page.wait_for_load_state(state, timeout=self.config.page_timeout)

    # -------------------------------------------------------------------------
    # Single-element actions
    # -------------------------------------------------------------------------

    def _perform(
        self,
        locator: str,
        action: Callable[[ElementHandle], Any],
        action_name: str,
        timeout: Optional[float] = None,
    ) -> Any:
        page = self.page
        logger.info(f"{action_name} element: {locator}")
        try:
            result = self.resolver.resolve(page, locator, timeout)
            return action(result.element)
        except Exception as e:
            logger.error(f"Failed {action_name.lower()} element: {locator}: {e}")
            self.capture_screenshot(action_name.lower().replace(" ", "_") + "_error")
            raise

    @allure.step("Click: {locator}")
    def click(self, locator: str, timeout: Optional[float] = None) -> None:
        timeout = timeout or self.config.element_timeout
        self._perform(
            locator,
            lambda element: element.click(timeout=timeout),
            "Clicking",
            timeout,
        )

    @allure.step("Type into: {locator}")
    def type(self, locator: str, text: str, timeout: Optional[float] = None) -> None:
        """Click the element to focus it, then replace its value with text."""
        timeout = timeout or self.config.element_timeout

        def _type(element: ElementHandle) -> None:
            element.click(timeout=timeout)
            element.fill(text, timeout=timeout)

        self._perform(locator, _type, "Typing text into", timeout)

    @allure.step("Clear: {locator}")
    def clear(self, locator: str) -> None:
        self._perform(locator, lambda element: element.fill(""), "Clearing")

    @allure.step("Select value '{value}' in: {locator}")
    def select_by_value(self, locator: str, value: str) -> List[str]:
        return self._perform(
            locator,
            lambda element: element.select_option(value=value),
            "Selecting value from dropdown",
        )

    @allure.step("Select text '{text}' in: {locator}")
    def select_by_text(self, locator: str, text: str) -> List[str]:
        return self._perform(
            locator,
            lambda element: element.select_option(label=text),
            "Selecting text from dropdown",
        )

    @allure.step("Select index {index} in: {locator}")
    def select_by_index(self, locator: str, index: int) -> List[str]:
        return self._perform(
            locator,
            lambda element: element.select_option(index=index),
            "Selecting index from dropdown",
        )

    @allure.step("Get text: {locator}")
    def get_text(self, locator: str) -> Optional[str]:
        return self._perform(
            locator,
            lambda element: element.text_content(),
            "Getting text from",
        )

    @allure.step("Get attribute {attribute_name} from: {locator}")
    def get_attribute(self, locator: str, attribute_name: str) -> Optional[str]:
        return self._perform(
            locator,
            lambda element: element.get_attribute(attribute_name),
            f"Getting attribute {attribute_name} from",
        )

    @allure.step("Upload file to: {locator}")
    def upload_file(
        self,
        locator: str,
        file_path: Union[str, Path, Sequence[Union[str, Path]]],
    ) -> None:
        self._perform(
            locator,
            lambda element: element.set_input_files(file_path),
            "Uploading file to",
        )

    @allure.step("Hover: {locator}")
    def hover(self, locator: str) -> None:
        self._perform(locator, lambda element: element.hover(), "Hovering over")

    @allure.step("Double-click: {locator}")
    def double_click(self, locator: str) -> None:
        self._perform(locator, lambda element: element.dblclick(), "Double-clicking on")

    @allure.step("Right-click: {locator}")
    def right_click(self, locator: str) -> None:
        self._perform(
            locator,
            lambda element: element.click(button="right"),
            "Right-clicking on",
        )

    @allure.step("Set checkbox {locator} to {check}")
    def set_checkbox(self, locator: str, check: bool = True) -> None:
        """Click the checkbox only if its checked state differs from check."""

        def _toggle(element: ElementHandle) -> None:
            if element.is_checked() != check:
                element.click()

        self._perform(locator, _toggle, "Checking" if check else "Unchecking")

    @allure.step("Scroll to: {locator}")
    def scroll_to_element(self, locator: str) -> None:
        self._perform(
            locator,
            lambda element: element.scroll_into_view_if_needed(),
            "Scrolling to",
        )

    @allure.step("Wait for visible: {locator}")
    def wait_for_element_visible(self, locator: str, timeout: Optional[float] = None) -> None:
        timeout = timeout or self.config.element_timeout
        self._perform(
            locator,
            lambda element: element.wait_for_element_state("visible", timeout=timeout),
            "Waiting for visibility of",
            timeout,
        )

    @allure.step("Wait for invisible: {locator}")
    def wait_for_element_invisible(self, locator: str, timeout: Optional[float] = None) -> None:
        """Wait in the root frame until locator is hidden or detached."""
        page = self.page
        timeout = timeout or self.config.element_timeout
        logger.info(f"Waiting for element to be invisible: {locator}")
        try:
            page.wait_for_selector(locator, state="hidden", timeout=timeout)
        except Exception as e:
            logger.error(f"Element did not become invisible: {locator}: {e}")
            self.capture_screenshot("wait_invisibility_error")
            raise

    # -------------------------------------------------------------------------
    # Probes
    # -------------------------------------------------------------------------

    def _probe(self, locator: str, timeout: Optional[float]) -> Optional[SearchResult]:
        try:
            return self.resolver.resolve(self.page, locator, timeout)
        except (ElementNotFoundError, PlaywrightTimeoutError):
            return None

    @allure.step("Check element visible: {locator}")
    def is_visible(self, locator: str, timeout: Optional[float] = None) -> bool:
        logger.info(f"Checking if element is visible: {locator}")
        result = self._probe(locator, timeout)
        if result is None:
            logger.debug(f"Element not visible: {locator}")
            return False
        return result.element.is_visible()

    @allure.step("Check element exists: {locator}")
    def is_existing(self, locator: str, timeout: Optional[float] = None) -> bool:
        logger.info(f"Checking if element exists: {locator}")
        if self._probe(locator, timeout) is None:
            logger.debug(f"Element does not exist: {locator}")
            return False
        return True

    # -------------------------------------------------------------------------
    # Two-element and page-level actions
    # -------------------------------------------------------------------------

    @allure.step("Drag and drop: {source_locator} -> {target_locator}")
    def drag_and_drop(self, source_locator: str, target_locator: str) -> None:
        """
        Drag source onto target using page-level mouse input.

        Both elements must resolve to the same frame.

        Raises:
            UnsupportedOperationError: If source and target live in different frames
            ElementGeometryError: If either element has no bounding box
        """
        page = self.page
        logger.info(f"Performing drag and drop from {source_locator} to {target_locator}")
        try:
            source = self.resolver.resolve(page, source_locator)
            target = self.resolver.resolve(page, target_locator)

            if source.frame is not target.frame:
                logger.error("Drag and drop across different frames is not supported")
                raise UnsupportedOperationError(
                    "Drag and drop across different frames is not supported"
                )

            source.element.scroll_into_view_if_needed()
            target.element.scroll_into_view_if_needed()
            source_box = source.element.bounding_box()
            target_box = target.element.bounding_box()
            if source_box is None or target_box is None:
                raise ElementGeometryError("Unable to get bounding box for elements")

            source_x, source_y = _center(source_box)
            target_x, target_y = _center(target_box)

            page.mouse.move(source_x, source_y)
            page.mouse.down()
            page.mouse.move(target_x, target_y, steps=5)
            page.mouse.up()
        except Exception as e:
            logger.error(f"Failed to perform drag and drop: {e}")
            self.capture_screenshot("drag_drop_error")
            raise

    def handle_alert(self, accept: bool = True, prompt_text: Optional[str] = None) -> None:
        """
        Answer the next dialog the page raises.

        A prompt text always accepts the dialog with that text; otherwise
        the dialog is accepted or dismissed according to accept.
        """
        logger.info("Accepting alert" if accept or prompt_text is not None else "Dismissing alert")

        def _on_dialog(dialog: Dialog) -> None:
            logger.debug(f"Handling {dialog.type} dialog: {dialog.message}")
            if prompt_text is not None:
                dialog.accept(prompt_text)
            elif accept:
                dialog.accept()
            else:
                dialog.dismiss()

        self.page.once("dialog", _on_dialog)

    def capture_screenshot(self, name: str) -> Optional[Path]:
        """Best-effort screenshot of the active page; None if nothing was saved."""
        session = self.store.current()
        return self.screenshots.capture(session.page if session else None, name)

    def get_cookies(self) -> List[Dict[str, Any]]:
        return self._context().cookies()

    def set_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        self._context().add_cookies(cookies)

    def _context(self):
        session = self.store.current()
        if session is None or session.context is None:
            raise RuntimeError("No active session for this worker. Call initialize() first.")
        return session.context

    def execute_script(self, script: str, arg: Any = None) -> Any:
        """Evaluate a JavaScript expression or function in the root frame."""
        return self.page.evaluate(script, arg)

    @allure.step("Execute script in frame: {frame_locator}")
    def execute_script_in_frame(self, frame_locator: str, script: str, arg: Any = None) -> Any:
        """
        Evaluate script inside the document of an iframe element.

        The iframe element itself is located across frames like any other
        element, so nested iframes work too.
        """
        page = self.page
        logger.info(f"Executing script in frame: {frame_locator}")
        try:
            result = self.resolver.resolve(page, frame_locator)
            frame = result.element.content_frame()
            if frame is None:
                raise UnsupportedOperationError(
                    f"Element is not a frame or its document is not accessible: {frame_locator}"
                )
            return frame.evaluate(script, arg)
        except Exception as e:
            logger.error(f"Failed to execute script in frame: {frame_locator}: {e}")
            self.capture_screenshot("frame_script_error")
            raise

    # -------------------------------------------------------------------------
    # Multi-element queries
    # -------------------------------------------------------------------------

    def get_all_elements(self, locator: str) -> List[SearchResult]:
        logger.info(f"Getting all elements matching: {locator}")
        return self.bulk.find_all(self.page, locator)

    def get_element_count(self, locator: str) -> int:
        return len(self.get_all_elements(locator))

    # -------------------------------------------------------------------------
    # Named-operation dispatch
    # -------------------------------------------------------------------------

    def perform(self, operation: str, locator: str, value: Any = None) -> Any:
        """
        Run one named operation, e.g. perform("type", "#username", "demo").

        Args:
            operation: One of OPERATIONS
            locator: Element locator
            value: Operation argument where one is required

        Raises:
            ValueError: Unknown operation, or a required value is missing
        """
        handler = OPERATIONS.get(operation)
        if handler is None:
            raise ValueError(
                f"Unknown operation: {operation}. "
                f"Expected one of: {', '.join(sorted(OPERATIONS))}"
            )
        return handler(self, locator, value)


def _center(box: Dict[str, float]) -> tuple:
    return box["x"] + box["width"] / 2, box["y"] + box["height"] / 2


def _requires_value(method: Callable[..., Any], convert: Callable[[Any], Any] = str):
    def _call(actions: WebActions, locator: str, value: Any) -> Any:
        if value is None:
            raise ValueError(f"Operation {getattr(method, '__name__', method)} requires a value")
        return method(actions, locator, convert(value))
    return _call


def _no_value(method: Callable[..., Any]):
    return lambda actions, locator, value: method(actions, locator)


OPERATIONS: Dict[str, Callable[[WebActions, str, Any], Any]] = {
    "click": _no_value(WebActions.click),
    "type": _requires_value(WebActions.type),
    "clear": _no_value(WebActions.clear),
    "select_by_value": _requires_value(WebActions.select_by_value),
    "select_by_text": _requires_value(WebActions.select_by_text),
    "select_by_index": _requires_value(WebActions.select_by_index, int),
    "hover": _no_value(WebActions.hover),
    "double_click": _no_value(WebActions.double_click),
    "right_click": _no_value(WebActions.right_click),
    "check": lambda actions, locator, value: actions.set_checkbox(locator, True),
    "uncheck": lambda actions, locator, value: actions.set_checkbox(locator, False),
    "upload_file": _requires_value(WebActions.upload_file),
    "get_text": _no_value(WebActions.get_text),
    "get_attribute": _requires_value(WebActions.get_attribute),
    "is_visible": _no_value(WebActions.is_visible),
    "is_existing": _no_value(WebActions.is_existing),
    "scroll_to_element": _no_value(WebActions.scroll_to_element),
    "wait_for_visible": _no_value(WebActions.wait_for_element_visible),
    "wait_for_invisible": _no_value(WebActions.wait_for_element_invisible),
    "drag_and_drop": _requires_value(WebActions.drag_and_drop),
}


__all__ = [
    "OPERATIONS",
    "WebActions",
]
