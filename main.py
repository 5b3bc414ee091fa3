from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import MainVM
from app.views.main_window import MainWindow
from core.services.cluster_service import GAP_THRESHOLD_MS, ClusterService
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.metadata_repository import DEFAULT_MEDIA_PATTERN, MetadataFeedRepository
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _feed_path(settings: JsonSettings, argv: list[str]) -> Path | None:
    # First positional argument wins over the configured feed
    if len(argv) > 1 and argv[1]:
        return Path(argv[1])
    return settings.resolve_path("feed.path")


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    init_logging(
        log_dir=settings.get("logging.dir") or None,
        level=str(settings.get("logging.level", "INFO")),
    )
    logger.info("Starting with settings {}", settings.path)

    app = QApplication(sys.argv)

    repo = MetadataFeedRepository(settings.get("feed.media_pattern", DEFAULT_MEDIA_PATTERN))
    clusterer = ClusterService(settings.get_int("timeline.gap_threshold_ms", GAP_THRESHOLD_MS))
    vm = MainVM(repo, cluster_service=clusterer)
    img = ImageService(settings)

    win = MainWindow(vm=vm, image_service=img, settings=settings)
    feed = _feed_path(settings, sys.argv)
    if feed is not None and feed.exists():
        win.file_operations.load_feed(str(feed))
    else:
        logger.warning("No feed to load (configured: {}); starting empty", feed)
        win.refresh_timeline()
    win.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
