"""
Capture -> thumbnail -> toast -> upload -> clipboard/notification.

Blocking work runs on an executor; anything user-visible is posted back to
the MainQueue. Captures are not serialized against each other.
"""
from __future__ import annotations

import threading
from concurrent.futures import Executor, Future
from typing import Callable, Optional

from api.imgur_api import ImgurAPI, UploadResult
from core.settings_store import SettingsStore
from core.thumbnailer import generate_thumbnail
from core.toast import Toast, ToastPresenter
from utils.capture_types import CaptureArtifact, MediaKind
from utils.logger import logger
from utils.main_queue import MainQueue
from utils.notifications import show_notification


class CapturePipeline:
    def __init__(
        self,
        settings: SettingsStore,
        executor: Executor,
        main_queue: MainQueue,
        presenter: ToastPresenter,
        uploader: ImgurAPI,
        notify: Callable[[str, str], bool] = show_notification,
        thumbnailer: Callable = generate_thumbnail,
    ):
        self.settings = settings
        self.executor = executor
        self.main_queue = main_queue
        self.presenter = presenter
        self.uploader = uploader
        self.notify = notify
        self.thumbnailer = thumbnailer
        self._last_lock = threading.Lock()
        self._last_artifact: Optional[CaptureArtifact] = None

    @property
    def last_artifact(self) -> Optional[CaptureArtifact]:
        with self._last_lock:
            return self._last_artifact

    def handle_capture(
        self,
        artifact: CaptureArtifact,
        on_upload_complete: Optional[Callable[[UploadResult], None]] = None,
        on_finished: Optional[Callable[[], None]] = None,
    ) -> Future:
        """
        Start the pipeline for a new capture; returns the thumbnail future.

        on_finished runs on the main queue once the toast is gone and, when
        uploadMedia is on, the upload has completed.
        """
        with self._last_lock:
            self._last_artifact = artifact
        logger.info(f"Capture ready: {artifact.path} ({artifact.kind.value})")

        future = self.executor.submit(self.thumbnailer, artifact.path, artifact.kind)

        def _thumbnail_done(fut: Future):
            exc = fut.exception()
            if exc is not None:
                logger.error(f"Thumbnail worker failed for {artifact.path}: {exc}")
                thumbnail = None
            else:
                thumbnail = fut.result()
            self.main_queue.post(self._show_toast, artifact, thumbnail, on_upload_complete, on_finished)

        future.add_done_callback(_thumbnail_done)
        return future

    def _show_toast(self, artifact: CaptureArtifact, thumbnail, on_upload_complete, on_finished) -> Optional[Toast]:
        auto_upload = self.settings.get("uploadMedia")

        def _uploaded(result: UploadResult):
            if on_upload_complete is not None:
                on_upload_complete(result)
            if on_finished is not None:
                on_finished()

        def _after_toast():
            if auto_upload:
                self.upload(artifact, _uploaded)
            elif on_finished is not None:
                on_finished()

        if artifact.kind is MediaKind.VIDEO and not self.settings.get("showRecordingPreview"):
            thumbnail = None

        toast = self.presenter.present(thumbnail, artifact.path, on_dismiss=_after_toast)
        if toast is None:
            _after_toast()
        return toast

    def upload(
        self,
        artifact: CaptureArtifact,
        on_complete: Optional[Callable[[UploadResult], None]] = None,
    ) -> Future:
        """Upload off the main context; completion is delivered on the main queue."""
        def _deliver(result: UploadResult):
            self.main_queue.post(self._upload_finished, result, on_complete)

        return self.uploader.upload_async(self.executor, artifact.path, _deliver)

    def upload_last(self, on_complete: Optional[Callable[[UploadResult], None]] = None) -> Optional[Future]:
        artifact = self.last_artifact
        if artifact is None:
            logger.info("Nothing captured yet; upload skipped")
            return None
        return self.upload(artifact, on_complete)

    def _upload_finished(self, result: UploadResult, on_complete):
        if result.ok and result.copied:
            self.notify("Link copied", result.link)
        elif result.ok:
            self.notify("Uploaded (clipboard unavailable)", result.link)
        else:
            self.notify("Upload failed", result.detail or result.error.value)
        if on_complete is not None:
            on_complete(result)
