from __future__ import annotations

import sys
from pathlib import Path
from collections.abc import Iterator

import pytest

from trackbridge.session import Session
from trackbridge.native import SimulatedBackend
from trackbridge.state.settings import BridgeSettings, SessionSettings


def pytest_configure() -> None:
    # Keep `import trackbridge...` working when running `pytest` from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


@pytest.fixture
def backend() -> SimulatedBackend:
    return SimulatedBackend()


@pytest.fixture
def settings() -> BridgeSettings:
    return BridgeSettings(session=SessionSettings(wait_update_timeout_s=2.0, release_timeout_s=2.0))


@pytest.fixture
def session(backend: SimulatedBackend, settings: BridgeSettings) -> Iterator[Session]:
    s = Session(backend, settings=settings)
    yield s
    # The process claim is global; never leak it into the next test.
    if s.state.is_active:
        s.release()


@pytest.fixture
def running(session: Session) -> Session:
    session.init()
    session.run()
    return session
