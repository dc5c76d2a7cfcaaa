import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPENAPI_HOST", "OPENAPI_TOKEN", "OPENAPI_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
