# -- Shared Test Fixtures -- #

'''
Fixtures shared across the aquaSim test suite.

Sean Bowman [10/18/2026]
'''

import numpy as np
import pytest

from aquaSim.sph.protocols import SimulationConfig, SpawnRegion
from aquaSim.sph.particles import ParticleSet
from aquaSim.sph.pressure import SeededDirectionSource


@pytest.fixture
def defaultConfig() -> SimulationConfig:
    '''Reference Aqua configuration.'''
    return SimulationConfig()


@pytest.fixture
def weightlessConfig() -> SimulationConfig:
    '''Reference configuration with gravity and the predictor off.'''
    return SimulationConfig(gravity=0.0, predictionInterval=None)


@pytest.fixture
def aquaSpawn() -> SpawnRegion:
    '''Spawn region of the reference scene.'''
    return SpawnRegion(regionMin=(300.0, 24.0), regionMax=(600.0, 852.0))


@pytest.fixture
def directionSource() -> SeededDirectionSource:
    return SeededDirectionSource(seed=1234)


@pytest.fixture
def pairParticles() -> ParticleSet:
    '''Two particles 80 apart at mid-height, well inside the domain.'''
    return ParticleSet.fromPositions(np.array([[560.0, 450.0], [640.0, 450.0]]))
