import logging
from enum import Enum

from .display import DEPTH_MAX_MM, scale_depth

KEY_WAIT_MS = 10
QUIT_KEY = 'q'
DEPTH_WINDOW = "Depth"
DISPARITY_WINDOW = "Disparity"


class LoopState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class CaptureLoop:
    """
    Pull depth frames, derive disparity and show both until the quit key.

    The sensor session is started on construction and released by close(),
    which also runs on context exit and after the quit key. Collaborator
    errors are not handled here; they propagate out of run().

    Args:
        session: sensor session with start(), wait_for_latest_frame(), stop()
        converter: frame converter with to_disparity(depth_frame)
        display: display surface with show(), destroy_all(), poll_key()
        quit_key (str): key that ends the loop
        key_wait_ms (int): key poll timeout per iteration
        max_depth (int): depth value rendered black
    """
    def __init__(self, session, converter, display, quit_key=QUIT_KEY, key_wait_ms=KEY_WAIT_MS, max_depth=DEPTH_MAX_MM):
        self._session = session
        self._converter = converter
        self._display = display
        self._quit_key = quit_key
        self._key_wait_ms = key_wait_ms
        self._max_depth = max_depth

        self._state = LoopState.STOPPED
        self._depth_frame = None
        self._disparity_frame = None
        self._iterations = 0
        self.loop_logger = logging.getLogger(self.__class__.__name__)

        self._session.start()
        self._state = LoopState.RUNNING

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __del__(self):
        self.close()

    def run(self):
        if self._state is not LoopState.RUNNING:
            self.loop_logger.warning("run() called on a stopped capture loop")
            return

        self.loop_logger.info("Capture loop started")
        while self._state is LoopState.RUNNING:
            self.update()
            self.show()
            self._iterations += 1

            key = self._display.poll_key(self._key_wait_ms)
            if key is not None and key == ord(self._quit_key):
                self.loop_logger.info("Quit key pressed")
                self.close()

        self.loop_logger.info(f"Capture loop stopped after {self._iterations} iterations")

    def close(self):
        if getattr(self, "_state", LoopState.STOPPED) is not LoopState.RUNNING:
            return
        self._state = LoopState.STOPPED
        try:
            self._display.destroy_all()
        finally:
            self._session.stop()

    def update(self):
        self.update_frame()
        self.update_disparity()

    def update_frame(self):
        self._depth_frame = self._session.wait_for_latest_frame()
        self.loop_logger.debug(f"Depth frame {self._depth_frame.width}x{self._depth_frame.height}")

    def update_disparity(self):
        self._disparity_frame = self._converter.to_disparity(self._depth_frame)
        self.loop_logger.debug(f"Disparity baseline {self._disparity_frame.baseline}")

    def show(self):
        self.show_depth()
        self.show_disparity()

    def show_depth(self):
        if self._depth_frame is None or self._depth_frame.empty:
            return
        self._display.show(DEPTH_WINDOW, scale_depth(self._depth_frame.data, self._max_depth))

    def show_disparity(self):
        if self._disparity_frame is None or self._disparity_frame.empty:
            return
        self._display.show(DISPARITY_WINDOW, self._disparity_frame.data)

    @property
    def state(self):
        return self._state

    @property
    def iterations(self):
        return self._iterations

    @property
    def depth_frame(self):
        return self._depth_frame

    @property
    def disparity_frame(self):
        return self._disparity_frame

    @property
    def baseline(self):
        if self._disparity_frame is None:
            return None
        return self._disparity_frame.baseline
