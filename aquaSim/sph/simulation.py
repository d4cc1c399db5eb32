# -- SPH Fluid Simulation -- #

'''
Per-tick orchestration of the 2D SPH particle fluid.

Runs the solver phases in a fixed order over the whole particle set:

    1. Apply gravity to all velocities
    2. (Optional) Predict look-ahead sample positions
    3. Compute density for all particles from one position snapshot
    4. Compute pressure forces and kick all velocities
    5. Drift all positions and resolve wall collisions

No position is modified until steps 3 and 4 have finished for every
particle, so forces never depend on the order particles are visited.

FluidSimulation owns the particle set, the Running / Paused state
and the command handlers (pause, reset, stiffness tuning). The
module-level initialize / step / positionsSnapshot functions are the
stateless entry points it is built on.

Sean Bowman [10/15/2026]
'''

from __future__ import annotations

import dataclasses
import logging

import numpy as np

from aquaSim.sph.protocols import (
    ConfigurationError,
    SimulationConfig,
    SimulationState,
    SpawnRegion,
)
from aquaSim.sph.kernels import SphKernel, createKernel
from aquaSim.sph.particles import ParticleSet
from aquaSim.sph.density import computeDensities
from aquaSim.sph.pressure import (
    RandomDirectionSource,
    SeededDirectionSource,
    computePressureForces,
)
from aquaSim.sph.timeIntegration import SemiImplicitEuler
from aquaSim.sph.boundaryHandling import BoundaryResolver
from aquaSim.sph.commands import Command

logger = logging.getLogger(__name__)


######################################################################
# -- Stateless Entry Points -- #
######################################################################

def initialize(
    particleCount: int,
    spawnRegion: SpawnRegion,
    config: SimulationConfig,
) -> ParticleSet:
    '''
    Validate the configuration and seed a particle set at rest.

    Parameters:
    -----------
    particleCount : int
        Number of particles N
    spawnRegion : SpawnRegion
        Region and layout to seed
    config : SimulationConfig
        Simulation configuration

    Returns:
    --------
    ParticleSet : Particle set with zero velocities

    Raises:
    -------
    ConfigurationError : If the run preconditions are not met
    '''
    config = dataclasses.replace(config, particleCount=particleCount)
    config.validate()
    spawnRegion.validate(config)

    rng = np.random.default_rng(config.seed)
    particles = ParticleSet.createInRegion(
        particleCount, spawnRegion, config.particleMass, rng
    )

    logger.info(
        'ParticleSet initialized with %d particles in %s layout.',
        particles.nParticles, spawnRegion.layout,
    )
    logger.debug(
        'Spawn region %s -> %s, domain %.1f x %.1f',
        spawnRegion.regionMin, spawnRegion.regionMax,
        config.domainWidth, config.domainHeight,
    )
    return particles


def step(
    particles: ParticleSet,
    config: SimulationConfig,
    directionSource: RandomDirectionSource,
    kernel: SphKernel | None = None,
    integrator: SemiImplicitEuler | None = None,
    boundaryResolver: BoundaryResolver | None = None,
) -> None:
    '''
    Advance the particle set by one tick in place.

    Parameters:
    -----------
    particles : ParticleSet
        Particle set to advance
    config : SimulationConfig
        Simulation configuration (stiffness read at call time)
    directionSource : RandomDirectionSource
        Fallback direction for coincident particles. Pass the same
        source on every tick so each tick draws fresh directions;
        a new source per tick replays one sequence and can leave
        stacked particles stacked.
    kernel : SphKernel | None
        Smoothing kernel (defaults to config.kernelType)
    integrator : SemiImplicitEuler | None
        Integrator instance
    boundaryResolver : BoundaryResolver | None
        Wall collision resolver (defaults to one built from config)
    '''
    kernel = kernel or createKernel(config.kernelType)
    integrator = integrator or SemiImplicitEuler()
    boundaryResolver = boundaryResolver or BoundaryResolver(
        config.domainMin, config.domainMax,
        config.particleRadius, config.collisionDamping,
    )
    dt = config.timeStep

    # 1. External force
    integrator.applyGravity(particles, config.gravityVector, dt)

    # 2. Sample points for the density pass
    if config.usesPredictor:
        samplePoints = integrator.predictPositions(particles, config.predictionInterval)
    else:
        samplePoints = particles.positions

    # 3. Density for every particle from the current snapshot
    particles.densities[:] = computeDensities(
        samplePoints, particles.positions, particles.mass,
        config.smoothingRadius, kernel,
    )

    # 4. Pressure forces from the same snapshot, then kick
    forces = computePressureForces(
        particles.positions, particles.densities, particles.mass,
        config.smoothingRadius, config.targetDensity, config.pressureMultiplier,
        directionSource, kernel,
    )
    integrator.applyPressure(particles, forces, dt)

    # 5. Drift and wall collisions
    integrator.drift(particles, dt)
    boundaryResolver.enforceBoundary(particles)


def positionsSnapshot(particles: ParticleSet) -> np.ndarray:
    '''Read-only (N, 2) copy of the positions for rendering.'''
    return particles.positionsSnapshot()


######################################################################
# -- Simulation State Machine -- #
######################################################################

class FluidSimulation:
    '''
    Running / Paused state machine around the SPH tick.

    Starts Running. While Paused, step() leaves the particle set
    untouched. Commands take effect at the next tick boundary.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration
    particles : ParticleSet
        Particle set created by initialize()
    directionSource : RandomDirectionSource | None
        Fallback direction for coincident particles
        (defaults to a SeededDirectionSource from config.seed)
    kernel : SphKernel | None
        Smoothing kernel (defaults to config.kernelType)

    Raises:
    -------
    ConfigurationError : If the config is invalid or its particle
        count differs from the particle set
    '''

    def __init__(
        self,
        config: SimulationConfig,
        particles: ParticleSet,
        directionSource: RandomDirectionSource | None = None,
        kernel: SphKernel | None = None,
    ) -> None:
        config.validate()
        if particles.nParticles != config.particleCount:
            msg = (
                f'Configuration error: particle set holds {particles.nParticles} '
                f'particles but particleCount is {config.particleCount}'
            )
            logger.critical(msg)
            raise ConfigurationError(msg)

        self._config = config
        self._particles = particles
        self._directionSource = directionSource or SeededDirectionSource(config.seed)
        self._kernel = kernel or createKernel(config.kernelType)
        self._integrator = SemiImplicitEuler()
        self._boundaryResolver = BoundaryResolver(
            config.domainMin, config.domainMax,
            config.particleRadius, config.collisionDamping,
        )

        self._paused: bool = False
        self._step: int = 0

        # Each command has its own handler
        self._handlers = {
            Command.PAUSE_TOGGLE: self.togglePause,
            Command.RESET: self.reset,
            Command.INCREASE_STIFFNESS: self.increaseStiffness,
            Command.DECREASE_STIFFNESS: self.decreaseStiffness,
        }

        logger.info(
            'Simulation ready: %d particles, kernel %s, predictor %s.',
            particles.nParticles, config.kernelType,
            'on' if config.usesPredictor else 'off',
        )

    @classmethod
    def create(
        cls,
        config: SimulationConfig,
        spawnRegion: SpawnRegion,
        directionSource: RandomDirectionSource | None = None,
    ) -> FluidSimulation:
        '''Initialize a particle set from config and wrap it.'''
        particles = initialize(config.particleCount, spawnRegion, config)
        return cls(config, particles, directionSource=directionSource)

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(self) -> SimulationState:
        '''
        Advance one tick unless paused.

        Returns:
        --------
        SimulationState : State after the tick
        '''
        if self._paused:
            return self.currentState

        step(
            self._particles, self._config,
            directionSource=self._directionSource,
            kernel=self._kernel,
            integrator=self._integrator,
            boundaryResolver=self._boundaryResolver,
        )
        self._step += 1

        logger.debug(
            'Step %d | max speed %.4f | mean density %.5f',
            self._step, self._particles.maxSpeed(),
            float(np.mean(self._particles.densities)),
        )
        return self.currentState

    ######################################################################
    # -- Commands -- #
    ######################################################################

    def dispatch(self, command: Command) -> None:
        '''
        Run the handler for a command.

        Raises:
        -------
        ValueError : If the command has no handler
        '''
        handler = self._handlers.get(command)
        if handler is None:
            raise ValueError(f'Unknown command: {command!r}')
        handler()

    def togglePause(self) -> None:
        '''Switch between Running and Paused.'''
        self._paused = not self._paused
        logger.info('Simulation %s.', 'paused' if self._paused else 'resumed')

    def reset(self) -> None:
        '''Restore the startup layout at rest; N and pause state are kept.'''
        self._particles.restoreInitialLayout()
        logger.info('Particle set reset to its startup layout.')

    def increaseStiffness(self) -> None:
        '''Multiply the pressure multiplier by the tuning factor.'''
        self._setPressureMultiplier(
            self._config.pressureMultiplier * self._config.stiffnessTuningFactor
        )

    def decreaseStiffness(self) -> None:
        '''Divide the pressure multiplier by the tuning factor.'''
        self._setPressureMultiplier(
            self._config.pressureMultiplier / self._config.stiffnessTuningFactor
        )

    def _setPressureMultiplier(self, value: float) -> None:
        '''Swap in a config with the new stiffness for the next tick.'''
        self._config = dataclasses.replace(self._config, pressureMultiplier=value)
        logger.info('Pressure multiplier set to %g.', value)

    ######################################################################
    # -- Properties -- #
    ######################################################################

    def positionsSnapshot(self) -> np.ndarray:
        '''Read-only copy of the current positions.'''
        return positionsSnapshot(self._particles)

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        p = self._particles
        meanDensity = float(np.mean(p.densities)) if p.nParticles else 0.0
        maxDensity = float(np.max(p.densities)) if p.nParticles else 0.0

        return SimulationState(
            step=self._step,
            time=self._step * self._config.timeStep,
            paused=self._paused,
            pressureMultiplier=self._config.pressureMultiplier,
            kineticEnergy=p.kineticEnergy(),
            maxVelocity=p.maxSpeed(),
            meanDensity=meanDensity,
            maxDensity=maxDensity,
            maxDensityError=p.maxDensityError(self._config.targetDensity),
        )

    @property
    def particles(self) -> ParticleSet:
        '''Access the particle set.'''
        return self._particles

    @property
    def config(self) -> SimulationConfig:
        '''Configuration in effect for the next tick.'''
        return self._config

    @property
    def isPaused(self) -> bool:
        '''True while the simulation is frozen.'''
        return self._paused
