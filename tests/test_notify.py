import asyncio

from conftest import FakeAdapter, make_request

from rolecall_bot.core.notify import DeliveryResult, Notifier


def test_notify_delivered(adapter):
    notifier = Notifier(adapter)
    assert asyncio.run(notifier.notify(1, "hi")) is DeliveryResult.DELIVERED
    assert adapter.dms == [(1, "hi")]


def test_notify_failed_without_fallback():
    notifier = Notifier(FakeAdapter(dm_fails=True))
    assert asyncio.run(notifier.notify(1, "hi")) is DeliveryResult.FAILED


def test_notify_fallback_to_channel():
    adapter = FakeAdapter(dm_fails=True)
    notifier = Notifier(adapter)
    result = asyncio.run(
        notifier.notify(1, "hi", fallback_channel_id=20, fallback_content="<@1> hi")
    )
    assert result is DeliveryResult.FALLBACK
    assert adapter.messages == [(20, "<@1> hi")]


def test_notify_fallback_fails_too():
    notifier = Notifier(FakeAdapter(dm_fails=True, send_fails=True))
    result = asyncio.run(
        notifier.notify(1, "hi", fallback_channel_id=20, fallback_content="hi")
    )
    assert result is DeliveryResult.FAILED


def test_operator_log(adapter):
    notifier = Notifier(adapter, log_channel_id=999)
    assert asyncio.run(notifier.operator("changed")) is True
    assert adapter.messages == [(999, "changed")]


def test_operator_log_without_channel(adapter, caplog):
    notifier = Notifier(adapter)
    with caplog.at_level("INFO", logger="rolecall.notify"):
        assert asyncio.run(notifier.operator("changed")) is False
    assert adapter.messages == []
    assert "changed" in caplog.text


def test_operator_log_failure_is_swallowed():
    notifier = Notifier(FakeAdapter(send_fails=True), log_channel_id=999)
    assert asyncio.run(notifier.operator("changed")) is False


def test_react():
    adapter = FakeAdapter()
    request = make_request("x")
    assert asyncio.run(Notifier(adapter).react(request, "✅")) is True
    assert adapter.reactions == [(101, "✅")]
    assert asyncio.run(Notifier(FakeAdapter(react_fails=True)).react(request, "✅")) is False
