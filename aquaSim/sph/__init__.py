# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine.

Provides kernel functions, density estimation, the pressure solver,
time integration, boundary collisions and the per-tick simulation.

Sean Bowman [10/15/2026]
'''

from aquaSim.sph.protocols import (
    ConfigurationError,
    SimulationConfig,
    SimulationState,
    SpawnRegion,
    loadConfigDocument,
)
from aquaSim.sph.kernels import (
    Poly6Kernel,
    SpikyPow2Kernel,
    createKernel,
    smoothingKernel,
    smoothingKernelDerivative,
)
from aquaSim.sph.particles import ParticleSet
from aquaSim.sph.density import calculateDensity, computeDensities
from aquaSim.sph.pressure import (
    SeededDirectionSource,
    densityToPressure,
    pairFallbackDirections,
    pressureForce,
    sharedPressure,
)
from aquaSim.sph.boundaryHandling import BoundaryResolver, resolveCollisions
from aquaSim.sph.commands import Command
from aquaSim.sph.simulation import FluidSimulation, initialize, positionsSnapshot, step
