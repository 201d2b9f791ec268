import logging

from rs_disparity.vision.capture_loop import CaptureLoop
from rs_disparity.vision.display import OpenCVDisplay
from rs_disparity.vision.frames import StreamConfig
from rs_disparity.vision.realsense_frame import RealSenseDisparityConverter, RealSenseSession


def main():
    session = RealSenseSession(StreamConfig())
    with CaptureLoop(session, RealSenseDisparityConverter(), OpenCVDisplay()) as loop:
        try:
            loop.run()
        except KeyboardInterrupt:
            logging.info("Ended via keyboard interrupt...")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
