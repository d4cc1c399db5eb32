# -- SPH Particle Set -- #

'''
Dataclass representing the fluid particle state.

Stores positions, velocities and densities as contiguous NumPy
arrays for vectorized operations. All particles share one mass.
Index identity is stable for the lifetime of a run: a particle is
referred to only by its row in these arrays.

Sean Bowman [10/12/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from aquaSim.sph.protocols import SpawnRegion


@dataclass
class ParticleSet:
    '''
    Fixed-size SPH particle set.

    Vector quantities have shape (N, 2) and scalar quantities (N,).

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 2)
    velocities : np.ndarray
        Particle velocities, shape (N, 2)
    densities : np.ndarray
        Densities from the most recent density pass, shape (N,)
    mass : float
        Uniform particle mass
    initialPositions : np.ndarray
        Startup layout restored by reset, shape (N, 2)
    '''

    positions: np.ndarray
    velocities: np.ndarray
    densities: np.ndarray
    mass: float
    initialPositions: np.ndarray

    @property
    def nParticles(self) -> int:
        '''Number of particles N.'''
        return self.positions.shape[0]

    def kineticEnergy(self) -> float:
        '''
        Total kinetic energy.

        KE = (1/2) * m * sum_i |v_i|^2

        Returns:
        --------
        float : Kinetic energy
        '''
        speedsSq = np.sum(self.velocities * self.velocities, axis=1)
        return float(0.5 * self.mass * np.sum(speedsSq))

    def maxSpeed(self) -> float:
        '''Maximum velocity magnitude (0 for an empty set).'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.velocities, axis=1)))

    def maxDensityError(self, targetDensity: float) -> float:
        '''
        Maximum relative density error.

        Returns max |rho_i - rho_0| / rho_0, or the absolute error
        when the target density is zero.

        Parameters:
        -----------
        targetDensity : float
            Rest density rho_0

        Returns:
        --------
        float : Maximum density error
        '''
        if self.nParticles == 0:
            return 0.0
        errors = np.abs(self.densities - targetDensity)
        if targetDensity != 0.0:
            errors = errors / abs(targetDensity)
        return float(np.max(errors))

    def restoreInitialLayout(self) -> None:
        '''Return every particle to its startup position at rest.'''
        self.positions[:] = self.initialPositions
        self.velocities[:] = 0.0
        self.densities[:] = 0.0

    def positionsSnapshot(self) -> np.ndarray:
        '''Read-only copy of the current positions.'''
        snapshot = self.positions.copy()
        snapshot.setflags(write=False)
        return snapshot

    @classmethod
    def fromPositions(cls, positions: np.ndarray, mass: float = 1.0) -> ParticleSet:
        '''
        Create a particle set at rest from explicit positions.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        mass : float
            Uniform particle mass

        Returns:
        --------
        ParticleSet : Particle set with zero velocity and density
        '''
        positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        nParticles = positions.shape[0]

        return cls(
            positions=positions,
            velocities=np.zeros((nParticles, 2)),
            densities=np.zeros(nParticles),
            mass=float(mass),
            initialPositions=positions.copy(),
        )

    @classmethod
    def createInRegion(
        cls,
        particleCount: int,
        region: SpawnRegion,
        mass: float,
        rng: np.random.Generator,
    ) -> ParticleSet:
        '''
        Seed particles inside a spawn region.

        The 'grid' layout fills rows bottom-up, left to right, at the
        region spacing, stopping once particleCount sites are used.
        Each grid particle gets a small random horizontal jitter so
        that no two columns are perfectly aligned. The 'scatter'
        layout draws uniform random positions in the region.

        Parameters:
        -----------
        particleCount : int
            Number of particles N
        region : SpawnRegion
            Region and layout to seed
        mass : float
            Uniform particle mass
        rng : np.random.Generator
            Seeded generator for jitter / scatter

        Returns:
        --------
        ParticleSet : Particle set at rest
        '''
        lo = np.asarray(region.regionMin, dtype=np.float64)
        hi = np.asarray(region.regionMax, dtype=np.float64)

        if region.layout == 'scatter':
            positions = rng.uniform(low=lo, high=hi, size=(particleCount, 2))
        else:
            s = region.spacing
            xCoords = np.arange(lo[0], hi[0] + s * 1e-9, s)
            yCoords = np.arange(lo[1], hi[1] + s * 1e-9, s)

            # Row-major: x varies fastest, rows stack upward
            xx, yy = np.meshgrid(xCoords, yCoords, indexing='xy')
            sites = np.column_stack([xx.ravel(), yy.ravel()])
            positions = sites[:particleCount].copy()

            if region.jitter > 0.0:
                positions[:, 0] += rng.uniform(0.0, region.jitter, size=particleCount)
            # Jitter never pushes a particle out of the region
            np.clip(positions, lo, hi, out=positions)

        return cls.fromPositions(positions, mass=mass)
