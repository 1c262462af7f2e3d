"""Best-effort publication of account lifecycle events."""

from __future__ import annotations

import json
import logging
import queue
import threading
import time
from typing import Any, Dict, Optional, Tuple

import redis
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from auth_api import config

_LOGGER = logging.getLogger(__name__)


def _log_failed_attempt(retry_state: RetryCallState) -> None:
    topic = retry_state.args[0] if retry_state.args else "?"
    _LOGGER.warning(
        "Publishing %s failed (attempt %d): %s",
        topic,
        retry_state.attempt_number,
        retry_state.outcome.exception(),
    )


class NotificationPublishFailed(RuntimeError):
    """An event could not be handed to the message broker."""


class RedisNotificationPublisher:
    """Publishes JSON events on Redis pub/sub channels named after the topic."""

    def __init__(
        self,
        host: str = config.REDIS_HOST,
        port: int = config.REDIS_PORT,
        database: int = config.REDIS_DATABASE,
        client: Optional[redis.Redis] = None,
    ) -> None:
        self.r = client or redis.StrictRedis(
            host=host,
            port=port,
            db=database,
            socket_timeout=config.REQUEST_TIMEOUT_SECONDS,
        )

    def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        try:
            self.r.publish(topic, json.dumps(payload))
        except redis.exceptions.RedisError as e:
            raise NotificationPublishFailed(f"Failed to produce message: {e}") from e


class BackgroundNotificationDispatcher:
    """
    Queues events and publishes them from a worker thread.

    ``publish`` never blocks the caller and never raises: a failed delivery
    is retried with exponential backoff up to ``max_attempts`` times, after
    which the event is logged and dropped. A full queue drops the event.
    """

    def __init__(
        self,
        publisher: Any,
        max_queue_size: int = 1000,
        max_attempts: int = 5,
        backoff_seconds: float = 0.5,
    ) -> None:
        self.publisher = publisher
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self._queue: "queue.Queue[Optional[Tuple[str, Dict[str, Any]]]]" = queue.Queue(maxsize=max_queue_size)
        self._worker: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()

    def _ensure_worker(self) -> None:
        with self._start_lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(target=self._run, name="notification-dispatcher", daemon=True)
                self._worker.start()

    def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        self._ensure_worker()
        try:
            self._queue.put_nowait((topic, payload))
        except queue.Full:
            _LOGGER.error("Notification queue full, dropping %s event %s", topic, payload)

    def _deliver(self, topic: str, payload: Dict[str, Any]) -> bool:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds),
            retry=retry_if_exception_type(NotificationPublishFailed),
            before_sleep=_log_failed_attempt,
            reraise=False,
        )
        try:
            retrying(self.publisher.publish, topic, payload)
        except RetryError as e:
            _LOGGER.error("Giving up on %s event %s: %s", topic, payload, e.last_attempt.exception())
            return False
        return True

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                self._deliver(*item)
            finally:
                self._queue.task_done()

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait until queued events are handled; ``False`` on timeout."""
        if timeout is None:
            self._queue.join()
            return True
        deadline = time.monotonic() + timeout
        while self._queue.unfinished_tasks:
            if time.monotonic() >= deadline:
                return False
            time.sleep(0.01)
        return True

    def close(self) -> None:
        if self._worker is not None and self._worker.is_alive():
            self._queue.put(None)
            self._worker.join()
