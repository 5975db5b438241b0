import os
import threading

from utils.capture_types import CaptureArtifact, MediaKind
from utils.main_queue import MainQueue, TimerScheduler


def test_posted_work_runs_on_draining_thread():
    queue = MainQueue()
    seen = []

    worker = threading.Thread(target=queue.post, args=(lambda: seen.append(threading.current_thread()),))
    worker.start()
    worker.join()

    assert seen == []
    assert queue.drain() == 1
    assert seen == [threading.current_thread()]


def test_drain_preserves_order_and_limit():
    queue = MainQueue()
    seen = []
    for i in range(3):
        queue.post(seen.append, i)

    assert queue.drain(max_items=2) == 2
    assert seen == [0, 1]
    assert queue.drain() == 1
    assert seen == [0, 1, 2]


def test_failing_task_does_not_block_queue():
    queue = MainQueue()
    seen = []

    def boom():
        raise RuntimeError("bad task")

    queue.post(boom)
    queue.post(seen.append, "after")
    assert queue.drain() == 2
    assert seen == ["after"]


def test_timer_scheduler_posts_to_queue():
    queue = MainQueue()
    fired = threading.Event()
    TimerScheduler(queue).call_later(0, fired.set)

    for _ in range(100):
        if queue.drain():
            break
        threading.Event().wait(0.01)
    assert fired.is_set()


def test_artifact_kind_from_extension(tmp_path):
    assert CaptureArtifact.from_path(str(tmp_path / "a.PNG")).kind is MediaKind.IMAGE
    assert CaptureArtifact.from_path(str(tmp_path / "a.mov")).kind is MediaKind.VIDEO
    assert CaptureArtifact.from_path(str(tmp_path / "a.MP4")).kind is MediaKind.VIDEO
    assert os.path.isabs(CaptureArtifact.from_path("~/x.png").path)
