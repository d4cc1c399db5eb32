# -- SPH Simulation Protocols -- #

'''
Configuration and result dataclasses for the 2D particle fluid.

Defines the core data structures (SimulationConfig, SpawnRegion,
SimulationState) shared by the solver components, the runner
and the exporters.

Sean Bowman [10/12/2026]
'''

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass

import numpy as np

from aquaSim import constants as const

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    '''Raised when a simulation is configured in a way it cannot run.'''


def loadConfigDocument(configPath: str) -> dict:
    '''
    Read a JSON configuration document.

    Raises:
    -------
    FileNotFoundError : If the file does not exist (logged first)
    json.JSONDecodeError : If the file is not valid JSON (logged first)
    '''
    logger.info('Loading configuration from %s', configPath)
    try:
        with open(configPath, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error('Configuration file not found at %s', configPath)
        raise
    except json.JSONDecodeError:
        logger.error('Error decoding JSON from %s', configPath)
        raise


######################################################################
# -- Simulation Configuration -- #
######################################################################

@dataclass
class SimulationConfig:
    '''
    Configuration for a 2D SPH particle fluid.

    The domain is the closed rectangle [0, domainWidth] x [0, domainHeight]
    with y pointing up, so the floor is at y = 0.

    Parameters:
    -----------
    domainWidth : float
        Domain extent along x
    domainHeight : float
        Domain extent along y
    particleCount : int
        Number of particles N (fixed for the run)
    particleRadius : float
        Collision radius; the domain is inset by this amount
    smoothingRadius : float
        Kernel influence radius
    gravity : float
        Gravity magnitude
    gravityDirection : tuple[float, float]
        Direction gravity pulls in (normalized on use)
    timeStep : float
        Fixed integration step dt
    collisionDamping : float
        Velocity multiplier on wall contact, in (0, 1]
    targetDensity : float
        Rest density at which pressure is zero
    pressureMultiplier : float
        Stiffness of the linear equation of state
    predictionInterval : float | None
        Look-ahead for predicted sample positions; None disables
    stiffnessTuningFactor : float
        Multiplier applied per stiffness tuning command (e.g. 2 or 10)
    particleMass : float
        Uniform particle mass
    kernelType : str
        Kernel type: 'spikyPow2' or 'poly6'
    seed : int
        Seed for spawn jitter and coincident-particle directions
    '''

    domainWidth: float = const.domainWidth
    domainHeight: float = const.domainHeight
    particleCount: int = const.particleCount
    particleRadius: float = const.particleRadius
    smoothingRadius: float = const.smoothingRadius
    gravity: float = const.gravity
    gravityDirection: tuple[float, float] = (0.0, -1.0)
    timeStep: float = const.timeStep
    collisionDamping: float = const.collisionDamping
    targetDensity: float = const.targetDensity
    pressureMultiplier: float = const.pressureMultiplier
    predictionInterval: float | None = const.predictionInterval
    stiffnessTuningFactor: float = const.stiffnessTuningFactor
    particleMass: float = const.particleMass
    kernelType: str = const.kernelType
    seed: int = const.randomSeed

    @property
    def domainMin(self) -> np.ndarray:
        '''Lower-left corner of the domain.'''
        return np.zeros(2)

    @property
    def domainMax(self) -> np.ndarray:
        '''Upper-right corner of the domain.'''
        return np.array([self.domainWidth, self.domainHeight], dtype=np.float64)

    @property
    def gravityVector(self) -> np.ndarray:
        '''
        Gravity acceleration vector g = magnitude * unit direction.

        A zero direction yields a zero vector.
        '''
        direction = np.asarray(self.gravityDirection, dtype=np.float64)
        norm = float(np.linalg.norm(direction))
        if norm == 0.0:
            return np.zeros(2)
        return self.gravity * direction / norm

    @property
    def usesPredictor(self) -> bool:
        '''True if density is sampled at look-ahead positions.'''
        return self.predictionInterval is not None

    def validate(self) -> None:
        '''
        Check run preconditions.

        Raises:
        -------
        ConfigurationError : If any precondition is violated
        '''
        problems = []
        if self.particleCount <= 0:
            problems.append(f'particleCount must be > 0 (got {self.particleCount})')
        if self.particleRadius <= 0:
            problems.append(f'particleRadius must be > 0 (got {self.particleRadius})')
        if self.smoothingRadius <= 0:
            problems.append(f'smoothingRadius must be > 0 (got {self.smoothingRadius})')
        if self.domainWidth <= 0 or self.domainHeight <= 0:
            problems.append(
                f'domain extents must be > 0 (got {self.domainWidth} x {self.domainHeight})'
            )
        elif 2.0 * self.particleRadius > min(self.domainWidth, self.domainHeight):
            problems.append('particleRadius leaves no room inside the domain')
        if not 0.0 < self.collisionDamping <= 1.0:
            problems.append(f'collisionDamping must be in (0, 1] (got {self.collisionDamping})')
        if self.timeStep <= 0:
            problems.append(f'timeStep must be > 0 (got {self.timeStep})')
        if self.particleMass <= 0:
            problems.append(f'particleMass must be > 0 (got {self.particleMass})')
        if self.stiffnessTuningFactor <= 0:
            problems.append(
                f'stiffnessTuningFactor must be > 0 (got {self.stiffnessTuningFactor})'
            )

        if problems:
            msg = 'Configuration error: ' + '; '.join(problems)
            logger.critical(msg)
            raise ConfigurationError(msg)

    @classmethod
    def fromDict(cls, data: dict) -> SimulationConfig:
        '''
        Build a configuration from parsed JSON sections.

        Reads the 'domain', 'particles', 'sph', 'forces' and
        'simulation' sections; missing keys fall back to defaults.

        Parameters:
        -----------
        data : dict
            Parsed configuration document

        Returns:
        --------
        SimulationConfig : Loaded configuration
        '''
        domainSection = data.get('domain', {})
        particleSection = data.get('particles', {})
        sphSection = data.get('sph', {})
        forceSection = data.get('forces', {})
        simSection = data.get('simulation', {})

        return cls(
            domainWidth=domainSection.get('width', const.domainWidth),
            domainHeight=domainSection.get('height', const.domainHeight),
            particleCount=particleSection.get('count', const.particleCount),
            particleRadius=particleSection.get('radius', const.particleRadius),
            particleMass=particleSection.get('mass', const.particleMass),
            smoothingRadius=sphSection.get('smoothingRadius', const.smoothingRadius),
            targetDensity=sphSection.get('targetDensity', const.targetDensity),
            pressureMultiplier=sphSection.get('pressureMultiplier', const.pressureMultiplier),
            kernelType=sphSection.get('kernelType', const.kernelType),
            gravity=forceSection.get('gravity', const.gravity),
            gravityDirection=tuple(forceSection.get('gravityDirection', (0.0, -1.0))),
            collisionDamping=forceSection.get('collisionDamping', const.collisionDamping),
            timeStep=simSection.get('timeStep', const.timeStep),
            predictionInterval=simSection.get('predictionInterval', const.predictionInterval),
            stiffnessTuningFactor=simSection.get(
                'stiffnessTuningFactor', const.stiffnessTuningFactor
            ),
            seed=simSection.get('seed', const.randomSeed),
        )

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationConfig:
        '''
        Load configuration from a JSON file.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        SimulationConfig : Loaded configuration
        '''
        return cls.fromDict(loadConfigDocument(configPath))

    def toDict(self) -> dict:
        '''Sectioned dictionary in the same layout fromDict reads.'''
        return {
            'domain': {'width': self.domainWidth, 'height': self.domainHeight},
            'particles': {
                'count': self.particleCount,
                'radius': self.particleRadius,
                'mass': self.particleMass,
            },
            'sph': {
                'smoothingRadius': self.smoothingRadius,
                'targetDensity': self.targetDensity,
                'pressureMultiplier': self.pressureMultiplier,
                'kernelType': self.kernelType,
            },
            'forces': {
                'gravity': self.gravity,
                'gravityDirection': list(self.gravityDirection),
                'collisionDamping': self.collisionDamping,
            },
            'simulation': {
                'timeStep': self.timeStep,
                'predictionInterval': self.predictionInterval,
                'stiffnessTuningFactor': self.stiffnessTuningFactor,
                'seed': self.seed,
            },
        }


######################################################################
# -- Spawn Region -- #
######################################################################

@dataclass
class SpawnRegion:
    '''
    Rectangle inside the domain where particles are seeded.

    Parameters:
    -----------
    regionMin : tuple[float, float]
        Lower-left corner
    regionMax : tuple[float, float]
        Upper-right corner
    layout : str
        'grid' (row-by-row fill at fixed spacing) or 'scatter'
        (uniform random positions)
    spacing : float
        Grid spacing for the 'grid' layout
    jitter : float
        Horizontal jitter amplitude for the 'grid' layout
    '''

    regionMin: tuple[float, float]
    regionMax: tuple[float, float]
    layout: str = 'grid'
    spacing: float = const.spawnSpacing
    jitter: float = const.spawnJitter

    @property
    def gridCapacity(self) -> int:
        '''Number of grid sites inside the region (inclusive of edges).'''
        if self.spacing <= 0:
            return 0
        nx = math.floor((self.regionMax[0] - self.regionMin[0]) / self.spacing + 1e-9) + 1
        ny = math.floor((self.regionMax[1] - self.regionMin[1]) / self.spacing + 1e-9) + 1
        return max(nx, 0) * max(ny, 0)

    def validate(self, config: SimulationConfig) -> None:
        '''
        Check the region fits the domain and can hold the particles.

        Raises:
        -------
        ConfigurationError : If the region is unusable
        '''
        lo = np.asarray(self.regionMin, dtype=np.float64)
        hi = np.asarray(self.regionMax, dtype=np.float64)

        problems = []
        if np.any(hi < lo):
            problems.append('spawn region max must not be below its min')
        if np.any(lo < config.domainMin) or np.any(hi > config.domainMax):
            problems.append('spawn region must lie inside the domain')
        if self.layout == 'grid':
            if self.spacing <= 0:
                problems.append(f'grid spacing must be > 0 (got {self.spacing})')
            elif self.gridCapacity < config.particleCount:
                problems.append(
                    f'spawn region holds {self.gridCapacity} grid sites, '
                    f'fewer than {config.particleCount} particles'
                )
        elif self.layout != 'scatter':
            problems.append(f'unknown spawn layout: {self.layout}')

        if problems:
            msg = 'Configuration error: ' + '; '.join(problems)
            logger.critical(msg)
            raise ConfigurationError(msg)


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Diagnostic snapshot of the simulation after a tick.

    Parameters:
    -----------
    step : int
        Number of ticks advanced (paused ticks are not counted)
    time : float
        Simulated time (step * dt)
    paused : bool
        Whether the simulation is paused
    pressureMultiplier : float
        Stiffness in effect for the next tick
    kineticEnergy : float
        Total kinetic energy (1/2) m |v|^2
    maxVelocity : float
        Maximum particle speed
    meanDensity : float
        Mean density from the last density pass
    maxDensity : float
        Maximum density from the last density pass
    maxDensityError : float
        Maximum relative density error |rho - rho_0| / rho_0
    '''

    step: int
    time: float
    paused: bool
    pressureMultiplier: float
    kineticEnergy: float
    maxVelocity: float
    meanDensity: float
    maxDensity: float
    maxDensityError: float
