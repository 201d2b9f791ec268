import logging

import cv2
import numpy as np

DEPTH_MAX_MM = 10000


def scale_depth(depth_image, max_depth=DEPTH_MAX_MM):
    """
    Map depth samples 0..max_depth to 8-bit 255..0 (closer is brighter).

    Values outside the range saturate to 0 or 255, rounding half to even
    like OpenCV's convertTo.
    """
    alpha = -255.0 / max_depth
    scaled = np.rint(depth_image.astype(np.float64) * alpha + 255.0)
    return np.clip(scaled, 0, 255).astype(np.uint8)


class OpenCVDisplay:
    """
    Display surface drawing buffers into HighGUI windows
    """
    def __init__(self):
        cv2.setUseOptimized(True)
        self.display_logger = logging.getLogger(self.__class__.__name__)

    def show(self, window_name, image):
        cv2.imshow(window_name, image)

    def destroy_all(self):
        cv2.destroyAllWindows()
        self.display_logger.info("Windows closed")

    def poll_key(self, timeout_ms):
        key = cv2.waitKey(timeout_ms)
        if key == -1:
            return None
        # Drop modifier flags
        return key & 0xFFFF
