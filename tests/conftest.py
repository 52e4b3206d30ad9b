from __future__ import annotations

import itertools

import pytest

from sugars.core.build.config import ModelConfig, RunConfig
from sugars.core.build.example import example_graph
from sugars.core.store.store import ProcessGraphStore


@pytest.fixture
def example():
    return example_graph()


@pytest.fixture
def counter_ids():
    """Deterministic id factory: 'mill-1', 'e-2', ..."""
    seq = itertools.count(1)
    return lambda prefix: f"{prefix}-{next(seq)}"


@pytest.fixture
def store(counter_ids):
    return ProcessGraphStore(ModelConfig(run=RunConfig(delay_s=0.0)), id_factory=counter_ids)


@pytest.fixture
def slow_store(counter_ids):
    return ProcessGraphStore(ModelConfig(run=RunConfig(delay_s=0.05)), id_factory=counter_ids)
