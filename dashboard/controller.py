"""
Dashboard controller: stream events, keys and resizes in, renders out.

Every handler runs on the event loop thread, so model updates and renders are
strictly serialized in arrival order.
"""

import asyncio
import signal
from contextlib import suppress
from enum import Enum
from typing import Optional, Protocol

from rich.console import Console

from core.config import Settings, settings
from core.logging_utils import get_logger, suppress_console_logging
from core.models import PayloadError, SnapshotUpdate
from core.state import StateModel
from dashboard.display import DisplayRenderer, RenderMode
from dashboard.terminal_input import KeyboardInput
from datafeeds.event_stream import EventStream, StreamClosedError

logger = get_logger(__name__)

QUIT_KEYS = frozenset({"CTRL_C", "q", "Q"})
REFRESH_KEYS = frozenset({"r", "R"})


class ControllerState(Enum):
    CONNECTING = "connecting"
    LIVE = "live"
    TERMINATED = "terminated"


class InputCapture(Protocol):
    def release(self) -> None: ...


class DashboardController:
    """Owns the snapshot and decides when and how the display repaints."""

    def __init__(
        self,
        renderer: DisplayRenderer,
        model: Optional[StateModel] = None,
        keyboard: Optional[InputCapture] = None,
    ):
        self.renderer = renderer
        self.model = model or StateModel()
        self.keyboard = keyboard
        self.state = ControllerState.CONNECTING
        self.exit_code = 0
        self.messages_applied = 0
        self.messages_dropped = 0
        self._closed = asyncio.Event()
        self._error: Optional[BaseException] = None

    @property
    def is_terminated(self) -> bool:
        return self.state is ControllerState.TERMINATED

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def start(self) -> None:
        """First paint: an empty table, before any data has arrived."""
        self.renderer.render(self.model.snapshot, RenderMode.FULL)

    # Event sources

    def on_message(self, data: str) -> bool:
        """Apply one stream message. Returns False when the message was dropped."""
        if self.is_terminated:
            return False
        try:
            update = SnapshotUpdate.from_json(data)
        except PayloadError as e:
            self.messages_dropped += 1
            logger.debug("[DASH] Dropped message: %s", e)
            return False

        self.model.apply_update(update)
        self.messages_applied += 1
        if self.state is ControllerState.CONNECTING:
            self.state = ControllerState.LIVE
            logger.info("[DASH] First update received, dashboard live")
        self.renderer.render(self.model.snapshot, RenderMode.DELTA)
        return True

    def on_key(self, key: str) -> None:
        if self.is_terminated:
            return
        if key in QUIT_KEYS:
            self.quit()
        elif key in REFRESH_KEYS:
            self.renderer.render(self.model.snapshot, RenderMode.FULL)

    def on_resize(self, width: int, height: int) -> None:
        if self.is_terminated:
            return
        self.renderer.resize(width, height)
        self.renderer.render(self.model.snapshot, RenderMode.FULL)

    # Lifecycle

    def quit(self, exit_code: int = 0) -> None:
        """Clear the screen, release the keyboard, then let the run loop exit."""
        if self.is_terminated:
            return
        self.renderer.clear_screen()
        if self.keyboard is not None:
            self.keyboard.release()
        self.state = ControllerState.TERMINATED
        self.exit_code = exit_code
        self._closed.set()

    def fail(self, error: BaseException) -> None:
        """Record a fatal error raised inside a loop callback and stop the run loop."""
        if self._error is None:
            self._error = error
        self._closed.set()

    async def wait_closed(self) -> None:
        await self._closed.wait()

    async def consume(self, stream: EventStream) -> None:
        """Feed every stream message through on_message until quit."""
        try:
            async for event in stream.messages():
                if self.is_terminated:
                    break
                self.on_message(event.data)
        except StreamClosedError as e:
            logger.error("[DASH] Event stream closed: %s", e)
            self.quit(exit_code=1)


def _guarded(controller: DashboardController, handler):
    """Wrap a loop callback so a failure ends the run instead of only being logged by asyncio."""

    def callback(*args):
        try:
            handler(*args)
        except Exception as e:
            controller.fail(e)

    return callback


async def run_dashboard(
    host: str,
    *,
    config: Settings = settings,
    console: Optional[Console] = None,
    stream: Optional[EventStream] = None,
    keyboard: Optional[KeyboardInput] = None,
) -> int:
    """Run the dashboard until the user quits. Returns the process exit code."""
    loop = asyncio.get_running_loop()
    console = console or Console()
    stream = stream or EventStream(config.stream_url(host), config=config)
    keyboard = keyboard or KeyboardInput()
    renderer = DisplayRenderer(console, title=config.dashboard_title)
    controller = DashboardController(renderer, keyboard=keyboard)

    def handle_resize() -> None:
        size = console.size
        controller.on_resize(size.width, size.height)

    logger.info("[DASH] Subscribing to %s", stream.url)
    suppress_console_logging(True)
    installed_signals: list[int] = []
    feed: Optional[asyncio.Task] = None
    closed: Optional[asyncio.Task] = None
    try:
        console.show_cursor(False)
        controller.start()
        keyboard.capture(loop, _guarded(controller, controller.on_key))

        for sig, handler in (
            (getattr(signal, "SIGWINCH", None), handle_resize),
            (signal.SIGINT, controller.quit),
            (signal.SIGTERM, controller.quit),
        ):
            if sig is None:
                continue
            with suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(sig, _guarded(controller, handler))
                installed_signals.append(sig)

        feed = asyncio.create_task(controller.consume(stream))
        closed = asyncio.create_task(controller.wait_closed())
        await asyncio.wait({feed, closed}, return_when=asyncio.FIRST_COMPLETED)

        if controller.error is not None:
            raise controller.error
        if feed.done() and not feed.cancelled() and feed.exception() is not None:
            raise feed.exception()
    finally:
        for task in (feed, closed):
            if task is not None and not task.done():
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
        for sig in installed_signals:
            loop.remove_signal_handler(sig)
        keyboard.release()
        console.show_cursor(True)
        await stream.close()
        suppress_console_logging(False)

    logger.info("[DASH] Dashboard closed (%s messages applied, %s dropped)",
                controller.messages_applied, controller.messages_dropped)
    return controller.exit_code
