# tests/conftest.py
from __future__ import annotations

import os
import random
from pathlib import Path

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import numpy as np
import pytest


@pytest.fixture(autouse=True, scope="session")
def _seed_everything() -> None:
    """Seed the global RNGs; generators in the package take explicit seeds anyway."""
    seed = int(os.environ.get("PYTEST_SEED", "1234"))
    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root (where pyproject.toml lives)."""
    return Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def example_scenario(project_root: Path) -> Path:
    return project_root / "src" / "example_scenario.json"
