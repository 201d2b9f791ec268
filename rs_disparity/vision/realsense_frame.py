import logging

import numpy as np
import pyrealsense2 as rs

from .errors import CaptureError, DeviceUnavailable, FrameTimeout, StreamConfigRejected
from .frames import DepthFrame, DisparityFrame, StreamConfig

FRAME_TIMEOUT_MS = 5000

logger = logging.getLogger(__name__)


def realsense_init(config: StreamConfig):
    """
    Build a RealSense pipeline and start it with a single depth stream

    Args:
        config (StreamConfig): requested depth stream
    Returns:
        pipeline: Started RealSense pipeline
        profile: pipeline profile returned by start()
    Raises:
        DeviceUnavailable: no device connected, or it could not be opened
        StreamConfigRejected: the device cannot deliver the requested stream
    """
    if len(rs.context().query_devices()) == 0:
        logger.error("No RealSense device connected")
        raise DeviceUnavailable("No RealSense device connected")

    pipeline = rs.pipeline()
    rs_config = rs.config()

    # Depth
    rs_config.enable_stream(
        getattr(rs.stream, config.stream),
        config.width,
        config.height,
        getattr(rs.format, config.format),
        config.fps,
    )

    if not rs_config.can_resolve(rs.pipeline_wrapper(pipeline)):
        logger.error(f"Stream config rejected by device: {config}")
        raise StreamConfigRejected(f"Device cannot stream {config}")

    try:
        profile = pipeline.start(rs_config)
    except RuntimeError as e:
        logger.error(f"Failed to start pipeline: {e}")
        raise DeviceUnavailable(str(e)) from e

    return pipeline, profile


def realsense_get_frame(pipeline, timeout_ms=FRAME_TIMEOUT_MS) -> DepthFrame:
    """
    Block until the started pipeline delivers the next depth frame

    Args:
        pipeline (rs.pipeline) : started pipeline
        timeout_ms (int) : SDK wait timeout

    Returns:
        DepthFrame : int16 samples of shape (H,W), vendor frame kept as handle
    """
    try:
        frames = pipeline.wait_for_frames(timeout_ms)
    except RuntimeError as e:
        logger.error(f"wait_for_frames failed: {e}")
        if "didn't arrive" in str(e):
            raise FrameTimeout(str(e)) from e
        raise DeviceUnavailable(str(e)) from e

    depth_frame = frames.get_depth_frame()
    if not depth_frame:
        raise CaptureError("Frameset carries no depth frame")

    # Size is read back every frame
    video_frame = rs.video_frame(depth_frame)
    width = video_frame.get_width()
    height = video_frame.get_height()
    data = np.frombuffer(depth_frame.get_data(), dtype=np.int16).reshape(height, width)

    return DepthFrame(width=width, height=height, data=data, handle=depth_frame)


class RealSenseSession:
    """
    Sensor session owning a RealSense pipeline with one depth stream
    """
    def __init__(self, config: StreamConfig = None, timeout_ms=FRAME_TIMEOUT_MS):
        self._config = config if config is not None else StreamConfig()
        self._timeout_ms = timeout_ms
        self.pipeline = None
        self.profile = None
        self.session_logger = logging.getLogger(self.__class__.__name__)

    def start(self):
        self.pipeline, self.profile = realsense_init(self._config)
        self.session_logger.info(
            f"Depth stream started: {self._config.width}x{self._config.height} @ {self._config.fps} fps"
        )
        return self.profile

    def wait_for_latest_frame(self) -> DepthFrame:
        if self.pipeline is None:
            raise CaptureError("Session is not started")
        return realsense_get_frame(self.pipeline, self._timeout_ms)

    def stop(self):
        if self.pipeline is None:
            return
        self.pipeline.stop()
        self.pipeline = None
        self.profile = None
        self.session_logger.info("Depth stream stopped")

    @property
    def config(self):
        return self._config

    @property
    def is_started(self):
        return self.pipeline is not None


class RealSenseDisparityConverter:
    """
    Frame converter backed by the SDK disparity transform
    """
    def __init__(self):
        self._transform = rs.disparity_transform(True)

    def to_disparity(self, depth: DepthFrame) -> DisparityFrame:
        if depth.handle is None:
            raise ValueError("DepthFrame has no RealSense frame attached")

        disparity_frame = rs.disparity_frame(self._transform.process(depth.handle))

        # Baseline comes from frame metadata
        baseline = disparity_frame.get_baseline()

        width = disparity_frame.get_width()
        height = disparity_frame.get_height()
        data = np.frombuffer(disparity_frame.get_data(), dtype=np.float32).reshape(height, width)

        return DisparityFrame(width=width, height=height, data=data, baseline=baseline)
