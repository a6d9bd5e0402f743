import time

import pytest

from knowgraph.selection import DetailWorker, SelectionBridge
from knowgraph.snapshot import EntityDetail


class StubSource:
    def __init__(self, fail=False):
        self.fail = fail
        self.requests = []

    def fetch(self, uid):
        self.requests.append(uid)
        if self.fail:
            raise ConnectionError("backend unavailable")
        return EntityDetail(uid, "note", f"entry {uid}")


class Recorder:
    def __init__(self, bridge):
        self.details = []
        self.loading = []
        self.selections = []
        bridge.detail_changed.connect(self.details.append)
        bridge.loading_changed.connect(self.loading.append)
        bridge.selection_changed.connect(self.selections.append)


@pytest.fixture
def sync_workers(monkeypatch):
    # Run fetches inline on the calling thread
    monkeypatch.setattr(DetailWorker, "start", DetailWorker.run)


@pytest.fixture
def pending_workers(monkeypatch):
    # Never run fetches; tests deliver results by hand
    monkeypatch.setattr(DetailWorker, "start", lambda self: None)


def test_select_fetches_detail(qapp, sync_workers):
    source = StubSource()
    bridge = SelectionBridge(source)
    seen = Recorder(bridge)

    bridge.select(5)

    assert source.requests == [5]
    assert bridge.selected_id == 5
    assert bridge.detail.title == "entry 5"
    assert not bridge.loading
    assert seen.loading == [True, False]
    assert seen.selections == [5]
    assert seen.details[-1] is bridge.detail


def test_loading_flag_while_request_outstanding(qapp, pending_workers):
    bridge = SelectionBridge(StubSource())
    seen = Recorder(bridge)

    bridge.select(1)

    assert bridge.loading
    assert seen.loading == [True]
    assert bridge.detail is None


def test_stale_response_does_not_overwrite_newer_selection(qapp, pending_workers):
    bridge = SelectionBridge(StubSource())
    detail_a = EntityDetail(1, "note", "A")
    detail_b = EntityDetail(2, "link", "B")

    bridge.select(1)
    bridge.select(2)
    bridge.on_fetched(1, detail_a)

    assert bridge.detail is None
    assert bridge.loading

    bridge.on_fetched(2, detail_b)
    assert bridge.detail is detail_b
    assert not bridge.loading

    # A's response arriving even later is still ignored
    bridge.on_fetched(1, detail_a)
    assert bridge.detail is detail_b


def test_failure_means_no_detail_but_keeps_selection(qapp, sync_workers):
    bridge = SelectionBridge(StubSource(fail=True))
    seen = Recorder(bridge)

    bridge.select(3)

    assert bridge.selected_id == 3
    assert bridge.detail is None
    assert not bridge.loading
    assert seen.details == [None, None]


def test_stale_failure_is_ignored(qapp, pending_workers):
    bridge = SelectionBridge(StubSource())
    bridge.select(1)
    bridge.select(2)

    bridge.on_failed(1, "timeout")

    assert bridge.selected_id == 2
    assert bridge.loading


def test_select_without_source_only_marks_selection(qapp):
    bridge = SelectionBridge()
    seen = Recorder(bridge)

    bridge.select(9)

    assert bridge.selected_id == 9
    assert not bridge.loading
    assert seen.loading == []


def test_clear_drops_selection(qapp, sync_workers):
    bridge = SelectionBridge(StubSource())
    bridge.select(4)
    seen = Recorder(bridge)

    bridge.clear()

    assert bridge.selected_id is None
    assert bridge.detail is None
    assert seen.selections == [None]


def test_changing_source_clears_selection(qapp, pending_workers):
    bridge = SelectionBridge(StubSource())
    bridge.select(4)

    bridge.set_source(StubSource())

    assert bridge.selected_id is None
    assert not bridge.loading


class SlowSource(StubSource):
    def fetch(self, uid):
        time.sleep(0.3)
        return super().fetch(uid)


def test_wait_blocks_until_slow_fetches_finish(qapp):
    bridge = SelectionBridge(SlowSource())
    bridge.select(1)
    bridge.select(2)
    workers = list(bridge._workers)

    bridge.wait()

    assert len(workers) == 2
    assert all(w.isFinished() for w in workers)
    assert sorted(bridge.source.requests) == [1, 2]


def test_worker_signals_carry_ids_beyond_32_bits(qapp, sync_workers):
    bridge = SelectionBridge(StubSource())
    recorder = Recorder(bridge)
    big_id = 2 ** 40 + 7

    bridge.select(big_id)

    assert recorder.details[-1].uid == big_id
    assert bridge.detail.uid == big_id
