"""
Main Entry Point for the Live Emotion Overlay

Run with: python -m src.main
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.utils import Config, ConfigError, StreamOpenError, setup_logger
from src.live_emotions.app import run_app
from src.live_emotions.face_detection.detect import DetectorLoadError
from src.live_emotions.pipeline import PipelineError


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Live face detection with emotion labels over camera or screen video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Keys: s = screen capture, c = camera, q/Esc = quit"
    )

    parser.add_argument(
        "--source",
        choices=["camera", "screen"],
        default=None,
        help="Initial video source (default: pipeline.initial_source from config)"
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device ID (overrides config)"
    )

    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Delay between detection cycles in ms (overrides config)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else None
    logger = setup_logger("live_emotions", level=log_level)
    logger.info("=" * 50)
    logger.info("Live Emotion Overlay")
    logger.info("=" * 50)

    config = Config()
    if args.camera is not None:
        config.set("camera.device_id", args.camera)

    try:
        asyncio.run(run_app(config, source=args.source, interval_ms=args.interval))
    except (ConfigError, DetectorLoadError, StreamOpenError) as e:
        logger.critical(f"Startup failed: {e}")
        return 1
    except PipelineError as e:
        logger.critical(f"Stopped: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")

    logger.info("Shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
