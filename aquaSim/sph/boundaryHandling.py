# -- SPH Boundary Conditions -- #

'''
Collision response against the walls of a rectangular domain.

Particles are treated as discs of the collision radius, so the
usable region is the domain inset by that radius on every side.
A particle that leaves the inset region on an axis is clamped back
onto the edge and its velocity component on that axis is reflected
and scaled by the damping factor:

    v_axis <- -damping * v_axis

Both axes are checked on every call, so a particle that escapes
through a corner is corrected on x and y in the same pass.

Sean Bowman [10/14/2026]
'''

from __future__ import annotations

import numpy as np

from aquaSim.sph.particles import ParticleSet


def resolveCollisions(
    position: np.ndarray,
    velocity: np.ndarray,
    domainMin: np.ndarray,
    domainMax: np.ndarray,
    particleRadius: float,
    damping: float,
) -> tuple[np.ndarray, np.ndarray]:
    '''
    Clamp one particle into the inset domain and reflect its velocity.

    Parameters:
    -----------
    position : np.ndarray
        Particle position, shape (2,)
    velocity : np.ndarray
        Particle velocity, shape (2,)
    domainMin : np.ndarray
        Lower-left domain corner
    domainMax : np.ndarray
        Upper-right domain corner
    particleRadius : float
        Collision radius (inset distance)
    damping : float
        Restitution factor in (0, 1]

    Returns:
    --------
    tuple[np.ndarray, np.ndarray] : (position, velocity) after the response
    '''
    position = np.array(position, dtype=np.float64)
    velocity = np.array(velocity, dtype=np.float64)
    lower = np.asarray(domainMin, dtype=np.float64) + particleRadius
    upper = np.asarray(domainMax, dtype=np.float64) - particleRadius

    for d in range(2):
        if position[d] < lower[d]:
            position[d] = lower[d]
            velocity[d] *= -damping
        elif position[d] > upper[d]:
            position[d] = upper[d]
            velocity[d] *= -damping

    return (position, velocity)


class BoundaryResolver:
    '''
    Applies wall collisions to a whole particle set.

    Vectorized over particles with the same per-axis rule as
    resolveCollisions.

    Parameters:
    -----------
    domainMin : np.ndarray
        Lower-left domain corner
    domainMax : np.ndarray
        Upper-right domain corner
    particleRadius : float
        Collision radius
    damping : float
        Restitution factor in (0, 1]
    '''

    def __init__(
        self,
        domainMin: np.ndarray,
        domainMax: np.ndarray,
        particleRadius: float,
        damping: float,
    ) -> None:
        self._lower = np.asarray(domainMin, dtype=np.float64) + particleRadius
        self._upper = np.asarray(domainMax, dtype=np.float64) - particleRadius
        self._damping = damping

    def enforceBoundary(self, particles: ParticleSet) -> None:
        '''
        Clamp positions and reflect velocities in place.

        Parameters:
        -----------
        particles : ParticleSet
            Particle set to correct
        '''
        positions = particles.positions
        velocities = particles.velocities

        for d in range(2):
            belowMin = positions[:, d] < self._lower[d]
            positions[belowMin, d] = self._lower[d]
            velocities[belowMin, d] *= -self._damping

            aboveMax = positions[:, d] > self._upper[d]
            positions[aboveMax, d] = self._upper[d]
            velocities[aboveMax, d] *= -self._damping
