import logging

from PyQt6.QtCore import QObject, QThread, pyqtSignal

logger = logging.getLogger(__name__)


class DetailWorker(QThread):
    result = pyqtSignal(object, object)  # uid, EntityDetail or None
    error = pyqtSignal(object, str)  # uid, message

    def __init__(self, source, uid):
        super().__init__()
        self.source = source
        self.uid = uid

    def run(self):
        try:
            detail = self.source.fetch(self.uid)
        except Exception as e:
            self.error.emit(self.uid, str(e))
            return
        self.result.emit(self.uid, detail)


class SelectionBridge(QObject):
    """Fetches entity detail for clicked nodes, last request wins.

    Requests are never cancelled. A response is applied only if its id is
    still the selected one when it arrives, so out-of-order completions
    cannot overwrite a newer selection.
    """

    selection_changed = pyqtSignal(object)  # uid or None
    detail_changed = pyqtSignal(object)  # EntityDetail or None
    loading_changed = pyqtSignal(bool)

    def __init__(self, source=None, parent=None):
        super().__init__(parent)
        self.source = source
        self.selected_id = None
        self.detail = None
        self.loading = False
        self._workers = set()

    def set_source(self, source):
        self.source = source
        self.clear()

    def select(self, uid):
        logger.info("Selected node %s", uid)
        self.selected_id = uid
        self.detail = None
        self._set_loading(self.source is not None)
        self.selection_changed.emit(uid)
        self.detail_changed.emit(None)
        if self.source is None:
            return

        worker = DetailWorker(self.source, uid)
        worker.result.connect(self.on_fetched)
        worker.error.connect(self.on_failed)
        worker.finished.connect(self._on_worker_done)
        self._workers.add(worker)
        worker.start()

    def clear(self):
        self.selected_id = None
        self.detail = None
        self._set_loading(False)
        self.selection_changed.emit(None)
        self.detail_changed.emit(None)

    def on_fetched(self, uid, detail):
        if uid != self.selected_id:
            logger.debug("Ignoring stale detail for node %s (selected: %s)", uid, self.selected_id)
            return
        self.detail = detail
        self._set_loading(False)
        self.detail_changed.emit(detail)

    def on_failed(self, uid, message):
        if uid != self.selected_id:
            logger.debug("Ignoring stale failure for node %s", uid)
            return
        logger.warning("Detail fetch for node %s failed: %s", uid, message)
        self.detail = None
        self._set_loading(False)
        self.detail_changed.emit(None)

    def wait(self, msecs=None):
        """Blocks until outstanding workers finish. Used on shutdown.

        Without msecs this waits as long as it takes; a QThread must not be
        destroyed while it is still running.
        """
        for worker in list(self._workers):
            if msecs is None:
                worker.wait()
            else:
                worker.wait(msecs)

    def _on_worker_done(self):
        worker = self.sender()
        self._workers.discard(worker)
        if worker is not None:
            worker.deleteLater()

    def _set_loading(self, value):
        if value != self.loading:
            self.loading = value
            self.loading_changed.emit(value)
