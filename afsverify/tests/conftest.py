import pytest


AFS_ENV_VARS = (
    "AFS_ACCESS_KEY_ID",
    "AFS_APP_KEY",
    "AFS_ACCESS_KEY_SECRET",
    "AFS_ENDPOINT",
    "AFS_TIMEOUT_MS",
)


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    """
    Ensure tests never hit the live verifier accidentally.
    """
    for name in AFS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class RecordingTransport:
    """Stands in for RequestsTransport; records every call."""

    def __init__(self, response=None, error=None):
        self.response = {"Code": 100, "Msg": "ok"} if response is None else response
        self.error = error
        self.calls = []

    def get_json(self, url, params, *, timeout_s):
        self.calls.append({"url": url, "params": dict(params), "timeout_s": timeout_s})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def credentials():
    return {
        "AccessKeyId": "testid",
        "AppKey": "FFFF0000000001234567",
        "AccessKeySecret": "testsecret",
    }


@pytest.fixture
def call_fields():
    return {
        "Token": "FFFF0000000001234567:1516345200000:0.123",
        "SessionId": "01sdkLnJ2tbSBKKLJ0G2XU",
        "Sig": "05XqrtZ0EaFgmmqIQes-s/CA+*'",
        "RemoteIp": "127.0.0.1",
        "Scene": "nc_login",
    }


@pytest.fixture
def make_transport():
    return RecordingTransport
