"""
Notification dispatcher.

Les emails partent APRÈS le commit, via une file bornée consommée par des
threads workers. Aucun échec d'envoi ne remonte à l'appelant :
- file pleine / dispatcher arrêté -> pas de Future
- exception du sender -> loggée, résultat False
"""
from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeout
from dataclasses import dataclass, field

from backend.app.db.models.core_types import NotificationKind
from backend.services.mailers import EmailSender

logger = logging.getLogger(__name__)

_STOP = object()


@dataclass
class EmailJob:
    kind: NotificationKind
    to_address: str
    subject: str
    html_body: str
    future: Future = field(default_factory=Future)


class NotificationDispatcher:
    def __init__(self, sender: EmailSender, *, max_pending: int = 100, workers: int = 2):
        self.sender = sender
        self.workers = max(1, workers)
        self._queue: queue.Queue = queue.Queue(maxsize=max_pending)
        self._threads: list[threading.Thread] = []
        self._running = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            for i in range(self.workers):
                t = threading.Thread(target=self._work, name=f"notify-{i}", daemon=True)
                t.start()
                self._threads.append(t)

    def stop(self, timeout: float = 5.0) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            threads, self._threads = self._threads, []

        for _ in threads:
            # bloquant : les sentinelles doivent passer même si la file est pleine
            self._queue.put(_STOP)
        for t in threads:
            t.join(timeout)

    def enqueue(self, kind: NotificationKind, to_address: str, subject: str, html_body: str) -> Future | None:
        if not self._running:
            logger.warning("Dispatcher stopped, %s to %s not sent", kind.value, to_address)
            return None

        job = EmailJob(kind=kind, to_address=to_address, subject=subject, html_body=html_body)
        try:
            self._queue.put_nowait(job)
        except queue.Full:
            logger.warning("Notification queue full, %s to %s dropped", kind.value, to_address)
            return None
        return job.future

    def send_and_wait(
        self,
        kind: NotificationKind,
        to_address: str,
        subject: str,
        html_body: str,
        timeout: float,
    ) -> bool:
        """
        Enqueue then wait at most `timeout` seconds for the outcome.
        A timed-out job keeps running on its worker.
        """
        fut = self.enqueue(kind, to_address, subject, html_body)
        if fut is None:
            return False
        try:
            return bool(fut.result(timeout=timeout))
        except FutureTimeout:
            logger.warning("No outcome for %s to %s after %.1fs", kind.value, to_address, timeout)
            return False

    def _work(self) -> None:
        while True:
            job = self._queue.get()
            try:
                if job is _STOP:
                    return
                self._deliver(job)
            finally:
                self._queue.task_done()

    def _deliver(self, job: EmailJob) -> None:
        try:
            ok = bool(self.sender.send(job.to_address, job.subject, job.html_body))
        except Exception:
            logger.exception("Email %s to %s failed", job.kind.value, job.to_address)
            ok = False

        if ok:
            logger.info("Email %s sent to %s", job.kind.value, job.to_address)
        else:
            logger.warning("Email %s to %s not delivered", job.kind.value, job.to_address)
        job.future.set_result(ok)
