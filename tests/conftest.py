"""Shared fixtures for the risk engine tests."""

import copy

import numpy as np
import pytest
import yaml

from georisk.core.catalog import CatalogFile, GeoCatalog, catalog
from georisk.core.models import GeologicalSnapshot
from georisk.core.synthesizer import GeologicalSynthesizer
from georisk.utils.config import resolve_path, settings


class MidpointRng:
    """Deterministic stand-in for a numpy Generator: always the interval midpoint."""

    def __init__(self):
        self.calls = 0

    def uniform(self, low, high):
        self.calls += 1
        return (low + high) / 2


class LowRng:
    """Always returns the lower bound."""

    def uniform(self, low, high):
        return low


@pytest.fixture
def midpoint_rng():
    return MidpointRng()


@pytest.fixture
def seeded_rng():
    return np.random.default_rng(42)


@pytest.fixture
def zero_jitter(midpoint_rng):
    return GeologicalSynthesizer(rng=midpoint_rng)


@pytest.fixture
def raw_catalog():
    with open(resolve_path(settings.catalog.path), encoding="utf-8") as f:
        return copy.deepcopy(yaml.safe_load(f))


@pytest.fixture
def make_catalog():
    def _make(raw: dict) -> GeoCatalog:
        return GeoCatalog(CatalogFile(**raw))
    return _make


@pytest.fixture
def cuchilla():
    return catalog.district("Vereda La Cuchilla")


@pytest.fixture
def cuchilla_snapshot():
    return GeologicalSnapshot(
        elevation=2400,
        slope=30.0,
        precipitation=2200,
        soil_type="Entisol",
        geological_formation="Batolito Antioqueño",
    )


@pytest.fixture
def steep_snapshot():
    return GeologicalSnapshot(
        elevation=2450,
        slope=40.0,
        precipitation=2600,
        soil_type="Andisol",
        geological_formation="Batolito Antioqueño",
    )
