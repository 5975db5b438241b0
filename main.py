# =========================
# IMPORTS
# =========================
import argparse
import sys
import threading
import time
import tkinter as tk
from concurrent.futures import ThreadPoolExecutor

from api.imgur_api import ImgurAPI
from config import APP_NAME, APP_VERSION, WORKER_THREADS
from core.capture_pipeline import CapturePipeline
from core.capture_service import CaptureMode, CaptureService
from core.settings_store import SettingsStore
from core.toast import ToastPresenter
from gui.toast_window import attach_toast_windows
from utils.capture_types import CaptureArtifact
from utils.logger import logger
from utils.main_queue import MainQueue, TimerScheduler, TkScheduler
from utils.system_tray import create_tray_icon


# =========================
# APPLICATION
# =========================
class ShareShotApp:
    def __init__(self, settings: SettingsStore, root=None):
        self.settings = settings
        self.root = root
        self.main_queue = MainQueue()
        self.executor = ThreadPoolExecutor(max_workers=WORKER_THREADS, thread_name_prefix="shareshot")
        scheduler = TkScheduler(root) if root is not None else TimerScheduler(self.main_queue)
        self.presenter = ToastPresenter(settings, scheduler)
        if root is not None:
            self.presenter.add_renderer(attach_toast_windows(root))
        self.uploader = ImgurAPI(settings)
        self.capture_service = CaptureService(settings)
        self.pipeline = CapturePipeline(
            settings=settings,
            executor=self.executor,
            main_queue=self.main_queue,
            presenter=self.presenter,
            uploader=self.uploader,
        )

    def _run_capture(self, produce, on_upload_complete=None, on_finished=None):
        def _work():
            artifact = produce()
            if artifact is not None:
                self.pipeline.handle_capture(artifact, on_upload_complete, on_finished)
            return artifact
        return self.executor.submit(_work)

    def capture(self, mode: CaptureMode, on_upload_complete=None, on_finished=None):
        return self._run_capture(lambda: self.capture_service.capture(mode), on_upload_complete, on_finished)

    def record(self, seconds: int, on_upload_complete=None, on_finished=None):
        return self._run_capture(lambda: self.capture_service.record(seconds), on_upload_complete, on_finished)

    def upload_last(self):
        return self.pipeline.upload_last()

    def shutdown(self):
        self.executor.shutdown(wait=False)


def _wait_for(app: ShareShotApp, done, timeout: float = 300.0):
    """Drain the main queue on this thread until done() is true."""
    deadline = time.monotonic() + timeout
    while not done():
        app.main_queue.drain()
        if time.monotonic() > deadline:
            logger.error("Timed out waiting for pending work")
            return False
        time.sleep(0.05)
    app.main_queue.drain()
    return True


def run_tray(settings: SettingsStore):
    root = tk.Tk()
    root.withdraw()
    app = ShareShotApp(settings, root=root)
    app.main_queue.attach_tk(root)

    def _quit():
        app.main_queue.post(root.quit)

    icon = create_tray_icon(app, on_quit=_quit)
    icon.run_detached()
    logger.info(f"{APP_NAME} {APP_VERSION} running in the menu bar")
    try:
        root.mainloop()
    finally:
        icon.stop()
        app.shutdown()


def build_parser():
    parser = argparse.ArgumentParser(prog=APP_NAME.lower(), description="Capture, preview and share screenshots.")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--capture", choices=[m.value for m in CaptureMode], help="take one screenshot and exit")
    action.add_argument("--record", type=int, metavar="SECONDS", help="record the screen and exit")
    action.add_argument("--upload", nargs="+", metavar="FILE", help="upload files and copy the last link")
    action.add_argument("--reset-settings", action="store_true", help="restore every setting to its default")
    action.add_argument("--export-settings", metavar="FILE")
    action.add_argument("--import-settings", metavar="FILE")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = SettingsStore()

    if args.reset_settings:
        settings.reset_all()
        return 0
    if args.export_settings:
        settings.export_to(args.export_settings)
        return 0
    if args.import_settings:
        settings.import_from(args.import_settings)
        return 0

    if args.upload:
        app = ShareShotApp(settings)
        results = []
        for path in args.upload:
            app.pipeline.upload(CaptureArtifact.from_path(path), results.append)
        ok = _wait_for(app, lambda: len(results) == len(args.upload))
        app.shutdown()
        for result in results:
            print(result.link if result.ok else f"{result.file_path}: upload failed ({result.detail})")
        return 0 if ok and all(r.ok for r in results) else 1

    if args.capture or args.record is not None:
        app = ShareShotApp(settings)
        results = []
        finished = threading.Event()
        if args.capture:
            future = app.capture(CaptureMode(args.capture), results.append, finished.set)
        else:
            future = app.record(args.record, results.append, finished.set)
        artifact = future.result()
        if artifact is None:
            app.shutdown()
            return 1

        _wait_for(app, finished.is_set)
        app.shutdown()
        print(artifact.path)
        for result in results:
            print(result.link if result.ok else f"upload failed ({result.detail})")
        return 0

    run_tray(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
