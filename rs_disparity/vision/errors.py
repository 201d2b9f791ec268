class CaptureError(RuntimeError):
    """Base class for sensor session failures."""


class DeviceUnavailable(CaptureError):
    """No depth sensor found, or it is already in use."""


class StreamConfigRejected(CaptureError):
    """Requested resolution/format/rate is not supported by the device."""


class FrameTimeout(CaptureError):
    """No frame arrived within the SDK timeout."""
