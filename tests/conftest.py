from pathlib import Path

import pytest

from skelload.world import load_skeleton


FIXTURES_DIR = Path(__file__).parent / "fixtures"
DOUBLE_PENDULUM_PATH = FIXTURES_DIR / "double_pendulum.sdf"
SOFT_BLOB_PATH = FIXTURES_DIR / "soft_blob.sdf"
PLAYGROUND_PATH = FIXTURES_DIR / "playground.world"


@pytest.fixture(scope="session")
def double_pendulum():
    return load_skeleton(DOUBLE_PENDULUM_PATH)


@pytest.fixture(scope="session")
def soft_blob():
    return load_skeleton(SOFT_BLOB_PATH)
