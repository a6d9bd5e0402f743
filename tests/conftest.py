import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from knowgraph.graph_engine import ForceConfig, GraphEngine


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def fast_config():
    # Stiffer and warmer than the production defaults so tests settle quickly
    return ForceConfig(
        repulsion=10.0,
        spring_length=80.0,
        spring_k=0.05,
        gravity=0.01,
        damping=0.85,
        alpha_initial=0.3,
        alpha_decay=0.99,
        alpha_min=0.1,
        node_radius=10.0,
    )


@pytest.fixture
def engine(fast_config):
    return GraphEngine(fast_config, width=400, height=400, seed=7)

