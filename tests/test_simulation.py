# -- Simulation Tests -- #

'''
Tick ordering, state machine and command handling for the fluid.

Sean Bowman [10/18/2026]
'''

import dataclasses

import numpy as np
import pytest

from aquaSim.sph.commands import Command
from aquaSim.sph.density import computeDensities
from aquaSim.sph.particles import ParticleSet
from aquaSim.sph.pressure import SeededDirectionSource
from aquaSim.sph.protocols import ConfigurationError, SimulationConfig, SpawnRegion
from aquaSim.sph.simulation import FluidSimulation, initialize, positionsSnapshot, step
from aquaSim.scenarios.fluidBlock import FluidBlockConfig, createFluidBlock


def _aquaSimulation(**overrides):
    simConfig, spawnRegion = createFluidBlock(FluidBlockConfig.aqua())
    if overrides:
        simConfig = dataclasses.replace(simConfig, **overrides)
    return FluidSimulation.create(simConfig, spawnRegion)


def _stateArrays(simulation):
    p = simulation.particles
    return (p.positions.copy(), p.velocities.copy(), p.densities.copy())


######################################################################
# -- Initialization -- #
######################################################################

def testInitializeSeedsAtRest(defaultConfig, aquaSpawn):
    particles = initialize(30, aquaSpawn, defaultConfig)
    assert particles.nParticles == 30
    np.testing.assert_array_equal(particles.velocities, np.zeros((30, 2)))
    np.testing.assert_array_equal(particles.initialPositions, particles.positions)


def testInitializeUsesRequestedCount(defaultConfig, aquaSpawn):
    particles = initialize(12, aquaSpawn, defaultConfig)
    assert particles.nParticles == 12


def testInitializeRejectsZeroParticles(defaultConfig, aquaSpawn):
    with pytest.raises(ConfigurationError):
        initialize(0, aquaSpawn, defaultConfig)


def testInitializeRejectsCrowdedRegion(defaultConfig):
    tiny = SpawnRegion(regionMin=(100.0, 100.0), regionMax=(148.0, 148.0), spacing=24.0)
    assert tiny.gridCapacity == 9
    with pytest.raises(ConfigurationError):
        initialize(30, tiny, defaultConfig)


def testInitializeIsDeterministic(defaultConfig, aquaSpawn):
    a = initialize(30, aquaSpawn, defaultConfig)
    b = initialize(30, aquaSpawn, defaultConfig)
    np.testing.assert_array_equal(a.positions, b.positions)


######################################################################
# -- Tick -- #
######################################################################

def testLoneParticleFalls():
    config = SimulationConfig(particleCount=1)
    particles = ParticleSet.fromPositions(np.array([[600.0, 450.0]]))
    source = SeededDirectionSource(config.seed)
    for _ in range(10):
        step(particles, config, source)
    assert particles.positions[0, 1] < 450.0
    assert particles.positions[0, 0] == pytest.approx(600.0)
    assert particles.velocities[0, 1] < 0.0


def testDensitySampledAtPredictedPositions():
    config = SimulationConfig(particleCount=3, gravity=0.0, predictionInterval=0.5)
    positions = np.array([[500.0, 400.0], [530.0, 400.0], [500.0, 440.0]])
    velocities = np.array([[2.0, 0.0], [-1.0, 1.0], [0.0, -3.0]])
    particles = ParticleSet.fromPositions(positions)
    particles.velocities[:] = velocities

    step(particles, config, SeededDirectionSource(0))

    expected = computeDensities(
        positions + velocities * 0.5, positions, config.particleMass, config.smoothingRadius,
    )
    np.testing.assert_allclose(particles.densities, expected)


def testDensitySampledAtCurrentPositionsWithoutPredictor(weightlessConfig):
    positions = np.array([[500.0, 400.0], [530.0, 400.0]])
    particles = ParticleSet.fromPositions(positions)
    particles.velocities[:] = [[5.0, 0.0], [0.0, 5.0]]

    step(particles, weightlessConfig, SeededDirectionSource(0))

    expected = computeDensities(positions, positions, 1.0, weightlessConfig.smoothingRadius)
    np.testing.assert_allclose(particles.densities, expected)


def testEquilibriumPairStaysAtRest():
    simConfig, spawnRegion = createFluidBlock(FluidBlockConfig.equilibriumPair())
    simulation = FluidSimulation.create(simConfig, spawnRegion)
    start = simulation.positionsSnapshot()

    for _ in range(100):
        simulation.step()

    np.testing.assert_allclose(simulation.particles.positions, start, atol=1e-9)
    np.testing.assert_allclose(simulation.particles.velocities, 0.0, atol=1e-9)


def testParticlesStayInsideInsetDomain():
    simulation = _aquaSimulation()
    config = simulation.config
    for _ in range(200):
        simulation.step()

    positions = simulation.particles.positions
    assert np.all(np.isfinite(positions))
    assert np.all(positions >= config.particleRadius)
    assert np.all(positions[:, 0] <= config.domainWidth - config.particleRadius)
    assert np.all(positions[:, 1] <= config.domainHeight - config.particleRadius)


def testRunsAreReproducible():
    a = _aquaSimulation()
    b = _aquaSimulation()
    for _ in range(50):
        a.step()
        b.step()
    np.testing.assert_array_equal(a.particles.positions, b.particles.positions)


def testSnapshotIsReadOnlyCopy():
    simulation = _aquaSimulation()
    snapshot = positionsSnapshot(simulation.particles)
    with pytest.raises(ValueError):
        snapshot[0, 0] = -1.0
    simulation.step()
    assert not np.array_equal(snapshot, simulation.particles.positions)


######################################################################
# -- State Machine and Commands -- #
######################################################################

def testStartsRunning():
    simulation = _aquaSimulation()
    assert not simulation.isPaused
    assert simulation.step().step == 1


def testPausedTicksLeaveStateUntouched():
    simulation = _aquaSimulation()
    for _ in range(20):
        simulation.step()

    simulation.dispatch(Command.PAUSE_TOGGLE)
    before = _stateArrays(simulation)
    stepBefore = simulation.currentState.step

    for _ in range(50):
        state = simulation.step()

    for saved, current in zip(before, _stateArrays(simulation)):
        assert np.array_equal(saved, current)
    assert state.paused
    assert state.step == stepBefore


def testResumeContinuesMotion():
    simulation = _aquaSimulation()
    simulation.togglePause()
    simulation.step()
    simulation.togglePause()
    before = simulation.particles.positions.copy()
    simulation.step()
    assert not np.array_equal(before, simulation.particles.positions)


def testResetRestoresStartupLayout():
    simulation = _aquaSimulation()
    start = simulation.positionsSnapshot()
    for _ in range(40):
        simulation.step()

    simulation.dispatch(Command.RESET)

    particles = simulation.particles
    assert particles.nParticles == 30
    np.testing.assert_array_equal(particles.velocities, np.zeros((30, 2)))
    np.testing.assert_array_equal(particles.positions, start)


def testResetKeepsPauseState():
    simulation = _aquaSimulation()
    simulation.togglePause()
    simulation.reset()
    assert simulation.isPaused


def testStiffnessTuning():
    simulation = _aquaSimulation(stiffnessTuningFactor=2.0)
    k = simulation.config.pressureMultiplier

    simulation.dispatch(Command.INCREASE_STIFFNESS)
    assert simulation.config.pressureMultiplier == pytest.approx(2.0 * k)
    assert simulation.currentState.pressureMultiplier == pytest.approx(2.0 * k)

    simulation.dispatch(Command.DECREASE_STIFFNESS)
    simulation.dispatch(Command.DECREASE_STIFFNESS)
    assert simulation.config.pressureMultiplier == pytest.approx(k / 2.0)


def testDefaultTuningFactorIsTen():
    simulation = _aquaSimulation()
    simulation.increaseStiffness()
    assert simulation.config.pressureMultiplier == pytest.approx(0.3)


def testUnknownCommandRaises():
    simulation = _aquaSimulation()
    with pytest.raises(ValueError):
        simulation.dispatch('jump')


def testStateDiagnostics():
    simulation = _aquaSimulation()
    state = simulation.step()
    assert state.time == pytest.approx(simulation.config.timeStep)
    assert state.kineticEnergy >= 0.0
    assert state.meanDensity > 0.0
    assert state.maxDensity >= state.meanDensity
    assert state.maxVelocity == pytest.approx(simulation.particles.maxSpeed())


def testMismatchedParticleCountRejected():
    particles = ParticleSet.fromPositions(np.array([[500.0, 400.0], [520.0, 400.0]]))
    with pytest.raises(ConfigurationError):
        FluidSimulation(SimulationConfig(particleCount=30), particles)


######################################################################
# -- Coincident Particles -- #
######################################################################

class RecordingDirectionSource:
    '''Seeded direction source that keeps every vector it hands out.'''

    def __init__(self, seed):
        self._inner = SeededDirectionSource(seed)
        self.drawn = []

    def unitVector(self):
        u = self._inner.unitVector()
        self.drawn.append(u)
        return u


def testStatelessStepNeedsDirectionSource(weightlessConfig):
    particles = ParticleSet.fromPositions(np.array([[500.0, 400.0]]))
    with pytest.raises(TypeError):
        step(particles, weightlessConfig)


def testStackedPairSeparatesWithoutDrift(weightlessConfig):
    config = dataclasses.replace(weightlessConfig, particleCount=2)
    particles = ParticleSet.fromPositions(np.array([[600.0, 450.0], [600.0, 450.0]]))

    step(particles, config, SeededDirectionSource(3))

    assert np.linalg.norm(particles.positions[0] - particles.positions[1]) > 0.0
    np.testing.assert_allclose(particles.positions.mean(axis=0), [600.0, 450.0])
    np.testing.assert_allclose(particles.velocities.sum(axis=0), 0.0, atol=1e-15)


def testPersistentSourceDrawsFreshDirections(weightlessConfig):
    config = dataclasses.replace(weightlessConfig, particleCount=2)
    particles = ParticleSet.fromPositions(np.array([[8.0, 8.0], [8.0, 8.0]]))
    source = RecordingDirectionSource(seed=5)

    for _ in range(2):
        particles.restoreInitialLayout()
        step(particles, config, source)

    assert len(source.drawn) == 2
    assert not np.array_equal(source.drawn[0], source.drawn[1])
