from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Optional, Protocol

import httpx

from ..core.enums import AttendanceAction, Punctuality

logger = logging.getLogger(__name__)

_ACTION_LABELS = {
    AttendanceAction.CHECK_IN: "Check-in",
    AttendanceAction.CHECK_OUT: "Check-out",
}

_PUNCTUALITY_LABELS = {
    Punctuality.EARLY: "Early",
    Punctuality.ON_TIME: "On Time",
    Punctuality.LATE: "Late",
}


@dataclass(frozen=True)
class AttendanceEvent:
    kind: AttendanceAction
    employee_name: str
    occurred_at: datetime
    punctuality: Optional[Punctuality] = None

    def to_message(self) -> str:
        lines = [
            f"{_ACTION_LABELS[self.kind]}: {self.employee_name}",
            f"Time: {self.occurred_at.strftime('%Y-%m-%d %H:%M:%S')}",
        ]
        if self.punctuality is not None:
            lines.append(f"Status: {_PUNCTUALITY_LABELS[self.punctuality]}")
        return "\n".join(lines)


def _log_delivery_failure(event: AttendanceEvent, future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Unexpected error delivering %s event", event.kind.value, exc_info=exc)


class Notifier(Protocol):
    def publish(self, event: AttendanceEvent) -> None:
        """Hand the event off; must return without waiting for delivery."""

        raise NotImplementedError


class NullNotifier(Notifier):
    def publish(self, event: AttendanceEvent) -> None:
        logger.debug("Notifications disabled; dropping %s event", event.kind.value)


class TelegramNotifier(Notifier):
    """Posts attendance events to a Telegram group via the Bot API."""

    API_URL = "https://api.telegram.org/bot{token}/sendMessage"

    def __init__(self, *, bot_token: str, chat_id: str, executor: Executor, timeout: float = 5.0):
        self._url = self.API_URL.format(token=bot_token)
        self._chat_id = chat_id
        self._executor = executor
        self._timeout = float(timeout)

    def publish(self, event: AttendanceEvent) -> None:
        future = self._executor.submit(self.deliver, event)
        future.add_done_callback(partial(_log_delivery_failure, event))

    def deliver(self, event: AttendanceEvent) -> bool:
        payload = {"chat_id": self._chat_id, "text": event.to_message()}
        try:
            resp = httpx.post(self._url, json=payload, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.warning("Telegram delivery error for %s event: %s", event.kind.value, e)
            return False

        if resp.status_code != 200:
            logger.warning("Telegram delivery failed %s: %s", resp.status_code, resp.text)
            return False
        return True


def build_notifier(
    *,
    bot_token: Optional[str],
    chat_id: Optional[str],
    executor: Executor,
    timeout: float = 5.0,
) -> Notifier:
    if not bot_token or not chat_id:
        logger.info("Telegram config missing: token or chat id not set; notifications disabled")
        return NullNotifier()
    return TelegramNotifier(bot_token=bot_token, chat_id=chat_id, executor=executor, timeout=timeout)
