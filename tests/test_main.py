import asyncio

from pulse.config import Config, EndpointConfig, ReporterConfig
from pulse.input_monitor import InputListener, KeyboardListener, MouseMoveListener
from pulse.main import build_app


class FakeClient:
    def __init__(self):
        self.sent = []
        self.closed = False

    async def put(self, url, payload):
        self.sent.append((url, payload))

    async def aclose(self):
        self.closed = True


def _config(flush=True):
    return Config(
        endpoint=EndpointConfig(
            url="http://collector.test/all",
            keypress_url="http://collector.test/keys",
            mouse_url="",
            password="pw",
            timeout_s=None,
        ),
        reporter=ReporterConfig(interval_s=60.0, flush_on_exit=flush),
        log_level="INFO",
    )


def _fail_registration(monkeypatch):
    def broken(self):
        raise OSError("no display")

    for cls in InputListener.__subclasses__():
        monkeypatch.setattr(cls, "_create_hook", broken)


def test_counters_are_shared_between_listeners_and_reporters():
    app = build_app(_config(), client=FakeClient())
    kb, buttons, move = app.listeners
    keys, mouse = app.reporters

    assert kb.counter is app.keypress is keys.counter
    assert buttons.clicks is app.clicks is mouse.clicks
    assert move.travel is app.travel is mouse.travel
    assert keys.url == "http://collector.test/keys"
    assert mouse.url == "http://collector.test/all"
    assert keys.client is mouse.client is app.client


def test_degraded_start_and_flush_on_shutdown(monkeypatch, caplog):
    _fail_registration(monkeypatch)
    client = FakeClient()
    app = build_app(_config(), client=client)

    async def scenario():
        app.start()
        app.keypress.keypress.add(4)
        await app.shutdown()

    asyncio.run(scenario())

    assert all(listener.failed for listener in app.listeners)
    assert "No input listener could be registered" in caplog.text
    assert ("http://collector.test/keys", {"keypress": 4}) in client.sent
    assert len(client.sent) == 2
    assert app.keypress.keypress.get() == 0
    assert client.closed


def test_shutdown_without_flush(monkeypatch):
    _fail_registration(monkeypatch)
    client = FakeClient()
    app = build_app(_config(flush=False), client=client)

    async def scenario():
        app.start()
        await app.shutdown()

    asyncio.run(scenario())
    assert client.sent == []
    assert client.closed


class HookCrashedOnJoin:
    def __init__(self):
        self.daemon = False
        self.alive = False

    def start(self):
        self.alive = True

    def stop(self):
        self.alive = False

    def join(self, timeout=None):
        raise RuntimeError("callback thread crashed")

    def is_alive(self):
        return self.alive


def test_shutdown_cleans_up_after_unexpected_errors(monkeypatch, caplog):
    class BoomClient(FakeClient):
        async def put(self, url, payload):
            raise RuntimeError("boom")

    _fail_registration(monkeypatch)
    monkeypatch.setattr(KeyboardListener, "_create_hook", lambda self: HookCrashedOnJoin())
    moved = []
    monkeypatch.setattr(MouseMoveListener, "stop", lambda self: moved.append(self))

    client = BoomClient()
    app = build_app(_config(), client=client)

    async def scenario():
        app.start()
        await app.shutdown()

    asyncio.run(scenario())

    assert "[keypress] final report failed: boom" in caplog.text
    assert "[mouse] final report failed: boom" in caplog.text
    assert "[keyboard] listener stop failed" in caplog.text
    assert len(moved) == 1
    assert client.closed


def test_start_warns_about_missing_endpoint_and_password(monkeypatch, caplog):
    _fail_registration(monkeypatch)
    cfg = _config(flush=False)
    cfg.endpoint.keypress_url = ""
    cfg.endpoint.mouse_url = ""
    cfg.endpoint.password = ""
    app = build_app(cfg, client=FakeClient())

    async def scenario():
        app.start()
        await app.shutdown()

    asyncio.run(scenario())

    assert "No endpoint URL configured" in caplog.text
    assert "PULSE_PASSWORD is empty" in caplog.text
