from datetime import datetime

import httpx

from src.face_attendance.face_attendance.core.enums import AttendanceAction, Punctuality
from src.face_attendance.face_attendance.notifications import notifier as notifier_module
from src.face_attendance.face_attendance.notifications.notifier import (
    AttendanceEvent,
    NullNotifier,
    TelegramNotifier,
    build_notifier,
)

from conftest import SyncExecutor

EVENT = AttendanceEvent(
    kind=AttendanceAction.CHECK_IN,
    employee_name="Ada Lovelace",
    occurred_at=datetime(2025, 3, 12, 8, 20),
    punctuality=Punctuality.LATE,
)


def test_message_format():
    assert EVENT.to_message() == "Check-in: Ada Lovelace\nTime: 2025-03-12 08:20:00\nStatus: Late"


def test_missing_config_disables_notifications():
    assert isinstance(build_notifier(bot_token=None, chat_id="1", executor=SyncExecutor()), NullNotifier)
    assert isinstance(build_notifier(bot_token="t", chat_id="", executor=SyncExecutor()), NullNotifier)


def test_delivery_posts_message(monkeypatch):
    sent = {}

    def fake_post(url, json, timeout):
        sent.update(url=url, json=json, timeout=timeout)
        return httpx.Response(200, json={"ok": True})

    monkeypatch.setattr(notifier_module.httpx, "post", fake_post)
    telegram = build_notifier(bot_token="TOKEN", chat_id="42", executor=SyncExecutor(), timeout=2.0)

    telegram.publish(EVENT)

    assert sent["url"] == "https://api.telegram.org/botTOKEN/sendMessage"
    assert sent["json"] == {"chat_id": "42", "text": EVENT.to_message()}
    assert sent["timeout"] == 2.0


def test_delivery_errors_are_swallowed(monkeypatch):
    def fake_post(url, json, timeout):
        raise httpx.ConnectTimeout("timed out")

    monkeypatch.setattr(notifier_module.httpx, "post", fake_post)
    telegram = TelegramNotifier(bot_token="T", chat_id="1", executor=SyncExecutor())
    assert telegram.deliver(EVENT) is False


def test_non_200_is_a_failed_delivery(monkeypatch):
    monkeypatch.setattr(notifier_module.httpx, "post", lambda url, json, timeout: httpx.Response(403, text="nope"))
    telegram = TelegramNotifier(bot_token="T", chat_id="1", executor=SyncExecutor())
    assert telegram.deliver(EVENT) is False


def test_unexpected_delivery_error_is_logged(monkeypatch, caplog):
    def fake_post(url, json, timeout):
        raise ValueError("bad payload")

    monkeypatch.setattr(notifier_module.httpx, "post", fake_post)
    telegram = TelegramNotifier(bot_token="T", chat_id="1", executor=SyncExecutor())

    telegram.publish(EVENT)

    assert "Unexpected error delivering" in caplog.text
    assert "bad payload" in caplog.text
