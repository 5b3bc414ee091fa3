from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

DISPLAY_PREFIX = "display|"
THUMB_PREFIX = "thumb|"


class _ImageTask(QRunnable):
    """QRunnable for background image loading.

    Emits `receiver.imageLoaded(token, path, image)` upon completion. The
    receiver is expected to own a Qt `Signal(str, str, object)` named
    `imageLoaded`.
    """

    def __init__(
        self, *, path: str, side: int, is_preview: bool, service: Any, receiver: QObject, token: str
    ) -> None:
        super().__init__()
        self._path = path
        self._side = side
        self._is_preview = is_preview
        self._service = service
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            if self._is_preview:
                img = self._service.get_preview(self._path, self._side)
            else:
                img = self._service.get_thumbnail(self._path, self._side)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Image task failed for {}: {}", self._path, ex)
            img = None
        try:
            receiver = self._receiver
            receiver.imageLoaded.emit(self._token, self._path, img)  # type: ignore[attr-defined]
        except RuntimeError:  # pragma: no cover - receiver already destroyed
            logger.debug("Receiver gone before image {} was delivered", self._path)


class ImageTaskRunner:
    """Dispatches image load tasks to the global thread pool.

    Tokens:
    - Display preview: "display|{path}|{side}"
    - Timeline thumbnail: "thumb|{path}|{height}"
    """

    def __init__(self, *, service: Any, receiver: QObject) -> None:
        self._service = service
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_preview(self, path: str, side: int = 0) -> str:
        """Request a display preview bounded by `side` (0 = full). Returns the token."""
        token = f"{DISPLAY_PREFIX}{path}|{side}"
        self._start(token, path, side, is_preview=True)
        return token

    def request_thumbnail(self, path: str, height: int) -> str:
        """Request a timeline thumbnail `height` pixels tall. Returns the token."""
        token = f"{THUMB_PREFIX}{path}|{height}"
        self._start(token, path, height, is_preview=False)
        return token

    def _start(self, token: str, path: str, side: int, *, is_preview: bool) -> None:
        if self._service is None:
            return
        task = _ImageTask(
            path=path,
            side=side,
            is_preview=is_preview,
            service=self._service,
            receiver=self._receiver,
            token=token,
        )
        self._pool.start(task)
