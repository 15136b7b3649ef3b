import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

UMAMI_ENV = (
    "UMAMI_BASE_URL",
    "UMAMI_WEBSITE_ID",
    "UMAMI_SHARE_ID",
    "UMAMI_USERNAME",
    "UMAMI_PASSWORD",
    "UMAMI_TOKEN",
    "UMAMI_LIMIT",
    "UMAMI_TIMEOUT_S",
    "UMAMI_OUT",
    "UMAMI_SECRET_ARN",
)


@pytest.fixture(autouse=True)
def _aws_dummy_env(monkeypatch):
    # Safe defaults for tests; real creds come from contract tests only
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test")


@pytest.fixture(autouse=True)
def _clean_umami_env(monkeypatch):
    # a developer's shell/.env must not leak into tests
    for name in UMAMI_ENV:
        monkeypatch.delenv(name, raising=False)
