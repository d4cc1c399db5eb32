# -- SPH Pressure Solver -- #

'''
Linear equation of state and symmetrized pairwise pressure forces.

Pressure from density (linear EOS):
    p = (rho - rho_0) * k

Pressure is negative where the local density is below the rest
density, which pulls sparse particles back together.

Pressure force on particle i:
    F_i = -sum_{j != i} p_ij * e_ji * W'(d_ij) * m / rho_j

    p_ij = (p_i + p_j) / 2       (shared pressure)
    e_ji = (x_i - x_j) / d_ij     (unit vector from j to i)

Averaging the pair pressure makes the force on i from j equal and
opposite to the force on j from i whenever the two densities agree.

Coincident particles (d_ij == 0) have no defined direction. A unit
vector is drawn from an injected, seeded direction source instead,
which also separates particles that would otherwise stay stacked.
One vector u is drawn per coincident pair: the lower index uses +u
and the higher -u, so the pair forces stay equal and opposite.

References:
-----------
Muller et al. (2003) -- Particle-Based Fluid Simulation for
    Interactive Applications

Sean Bowman [10/13/2026]
'''

from __future__ import annotations

import math
from typing import Protocol

import numpy as np

from aquaSim.sph.kernels import SphKernel, SpikyPow2Kernel


######################################################################
# -- Random Direction Source -- #
######################################################################

class RandomDirectionSource(Protocol):
    '''Protocol for the fallback direction of coincident particles.'''

    def unitVector(self) -> np.ndarray:
        '''Return a unit vector, shape (2,).'''
        ...


class SeededDirectionSource:
    '''
    Uniformly distributed unit vectors from a seeded generator.

    Parameters:
    -----------
    seed : int | None
        Seed for numpy.random.default_rng
    '''

    def __init__(self, seed: int | None = 0) -> None:
        self._rng = np.random.default_rng(seed)

    def unitVector(self) -> np.ndarray:
        '''Return a unit vector at a uniformly random angle.'''
        angle = self._rng.uniform(0.0, 2.0 * math.pi)
        return np.array([math.cos(angle), math.sin(angle)])


######################################################################
# -- Equation of State -- #
######################################################################

def densityToPressure(density, targetDensity: float, pressureMultiplier: float):
    '''
    Linear equation of state p = (rho - rho_0) * k.

    Works on scalars and NumPy arrays alike.
    '''
    return (density - targetDensity) * pressureMultiplier


def sharedPressure(
    densityA,
    densityB,
    targetDensity: float,
    pressureMultiplier: float,
):
    '''
    Mean of the two particles' pressures.

    Parameters:
    -----------
    densityA : float | np.ndarray
        Density of the first particle(s)
    densityB : float | np.ndarray
        Density of the second particle(s)
    targetDensity : float
        Rest density rho_0
    pressureMultiplier : float
        EOS stiffness k

    Returns:
    --------
    float | np.ndarray : Shared pressure
    '''
    pressureA = densityToPressure(densityA, targetDensity, pressureMultiplier)
    pressureB = densityToPressure(densityB, targetDensity, pressureMultiplier)
    return (pressureA + pressureB) / 2.0


######################################################################
# -- Pressure Force -- #
######################################################################

def pressureForce(
    index: int,
    positions: np.ndarray,
    densities: np.ndarray,
    mass: float,
    radius: float,
    targetDensity: float,
    pressureMultiplier: float,
    directionSource: RandomDirectionSource,
    kernel: SphKernel | None = None,
    pairDirections: dict[tuple[int, int], np.ndarray] | None = None,
) -> np.ndarray:
    '''
    Pressure force on one particle from all others.

    Vectorized over the other particles. Neighbors with zero
    density contribute nothing rather than dividing by zero.

    Parameters:
    -----------
    index : int
        Particle i
    positions : np.ndarray
        Position snapshot, shape (N, 2)
    densities : np.ndarray
        Densities computed from the same snapshot, shape (N,)
    mass : float
        Uniform particle mass
    radius : float
        Kernel influence radius
    targetDensity : float
        Rest density rho_0
    pressureMultiplier : float
        EOS stiffness k
    directionSource : RandomDirectionSource
        Fallback direction for coincident particles
    kernel : SphKernel | None
        Smoothing kernel (defaults to SpikyPow2Kernel)
    pairDirections : dict[tuple[int, int], np.ndarray] | None
        Fallback unit vector u per coincident pair (i, j) with i < j,
        from pairFallbackDirections. The lower index uses +u and the
        higher index -u. When None, one vector is drawn from
        directionSource per coincident neighbor.

    Returns:
    --------
    np.ndarray : Force vector, shape (2,)
    '''
    kernel = kernel or SpikyPow2Kernel()

    others = np.arange(positions.shape[0]) != index
    if not np.any(others):
        return np.zeros(2)

    # Unit vectors from each neighbor j toward i
    offsets = positions[index] - positions[others]
    dist = np.linalg.norm(offsets, axis=1)

    directions = np.zeros_like(offsets)
    separated = dist > 0.0
    directions[separated] = offsets[separated] / dist[separated, np.newaxis]
    neighborIndices = np.flatnonzero(others)
    for k in np.flatnonzero(~separated):
        j = int(neighborIndices[k])
        if pairDirections is None:
            directions[k] = directionSource.unitVector()
        elif index < j:
            directions[k] = pairDirections[(index, j)]
        else:
            directions[k] = -pairDirections[(j, index)]

    slopes = kernel.derivativeBatch(dist, radius)
    neighborDensities = densities[others]
    shared = sharedPressure(
        neighborDensities, densities[index], targetDensity, pressureMultiplier
    )

    # mass / rho_j, zero where rho_j == 0
    volumes = np.divide(
        mass,
        neighborDensities,
        out=np.zeros_like(neighborDensities, dtype=np.float64),
        where=neighborDensities != 0.0,
    )

    coeff = shared * slopes * volumes
    total = np.sum(coeff[:, np.newaxis] * directions, axis=0)

    return -total


def pairFallbackDirections(
    positions: np.ndarray,
    directionSource: RandomDirectionSource,
) -> dict[tuple[int, int], np.ndarray]:
    '''
    Draw one unit vector per coincident pair (i, j), i < j.

    Parameters:
    -----------
    positions : np.ndarray
        Position snapshot, shape (N, 2)
    directionSource : RandomDirectionSource
        Source of the fallback directions

    Returns:
    --------
    dict[tuple[int, int], np.ndarray] : Direction per coincident pair
    '''
    offsets = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
    coincident = np.linalg.norm(offsets, axis=2) == 0.0

    pairDirections = {}
    for i, j in zip(*np.nonzero(np.triu(coincident, k=1))):
        pairDirections[(int(i), int(j))] = directionSource.unitVector()
    return pairDirections


def computePressureForces(
    positions: np.ndarray,
    densities: np.ndarray,
    mass: float,
    radius: float,
    targetDensity: float,
    pressureMultiplier: float,
    directionSource: RandomDirectionSource,
    kernel: SphKernel | None = None,
) -> np.ndarray:
    '''
    Pressure force on every particle from one snapshot.

    One fallback direction is drawn per coincident pair, so the
    forces within every pair stay equal and opposite. Pairs are
    visited in index order, so the draws are reproducible for a
    given seed.

    Returns:
    --------
    np.ndarray : Forces, shape (N, 2)
    '''
    kernel = kernel or SpikyPow2Kernel()
    forces = np.zeros_like(positions, dtype=np.float64)
    pairDirections = pairFallbackDirections(positions, directionSource)

    for i in range(positions.shape[0]):
        forces[i] = pressureForce(
            i, positions, densities, mass, radius,
            targetDensity, pressureMultiplier, directionSource, kernel,
            pairDirections=pairDirections,
        )

    return forces
