"""
rabcalc Test Configuration and Fixtures
"""

import pytest

from rabcalc.bootstrap.config import EngineConfig, reset_config
from rabcalc.core.tables import default_tables
from rabcalc.cost import MaterialCatalog
from rabcalc.labor import LaborScheduler


@pytest.fixture(autouse=True)
def _fresh_config():
    """Never let a cached configuration leak between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def tables():
    """Default static tables."""
    return default_tables()


@pytest.fixture
def config():
    """Configuration with built-in defaults (no env, no file)."""
    return EngineConfig()


@pytest.fixture
def catalog():
    """Catalog seeded with the bundled price list."""
    return MaterialCatalog.default()


@pytest.fixture
def scheduler():
    """Scheduler at the default wages (150 000 / 135 000)."""
    return LaborScheduler()


@pytest.fixture
def single_stage_estimator(config, tables):
    from rabcalc.workflows import SingleStageEstimator
    return SingleStageEstimator(config=config, tables=tables)


@pytest.fixture
def footplate_estimator(config, tables, catalog):
    from rabcalc.workflows import FootplateEstimator
    return FootplateEstimator(config=config, tables=tables, catalog=catalog)


@pytest.fixture
def beam_estimator(config, tables, catalog):
    from rabcalc.workflows import BeamEstimator
    return BeamEstimator(config=config, tables=tables, catalog=catalog)


@pytest.fixture
def wall_estimator(config, tables, catalog):
    from rabcalc.workflows import WallEstimator
    return WallEstimator(config=config, tables=tables, catalog=catalog)


@pytest.fixture
def plaster_estimator(config, tables, catalog):
    from rabcalc.workflows import PlasterEstimator
    return PlasterEstimator(config=config, tables=tables, catalog=catalog)
