# -- SPH Time Integration -- #

'''
Semi-implicit (symplectic) Euler integration for the particle set.

The update is split into phases so the simulation can interleave
the density and pressure passes between them:

    v += g * dt                   (external force, first)
    x_pred = x + v * tau          (look-ahead sample points, optional)
    a = F_pressure / rho          (zero where rho == 0)
    v += a * dt                   (kick)
    x += v * dt                   (drift, uses the updated velocity)

Every phase runs over the whole particle set before the next one
starts, so all pressure forces see the same position snapshot.

References:
-----------
Hairer et al. (2003) -- Geometric Numerical Integration

Sean Bowman [10/13/2026]
'''

from __future__ import annotations

import numpy as np

from aquaSim.sph.particles import ParticleSet


class SemiImplicitEuler:
    '''
    Symplectic Euler integrator split into per-phase updates.

    The drift uses the velocity after both kicks (gravity and
    pressure), which is what makes the scheme symplectic.
    '''

    def applyGravity(self, particles: ParticleSet, gravity: np.ndarray, dt: float) -> None:
        '''
        Add the external gravity impulse to every velocity.

        Parameters:
        -----------
        particles : ParticleSet
            Particle set to update in place
        gravity : np.ndarray
            Gravity vector, shape (2,)
        dt : float
            Time step
        '''
        particles.velocities += np.asarray(gravity, dtype=np.float64) * dt

    def predictPositions(self, particles: ParticleSet, lookahead: float) -> np.ndarray:
        '''
        Look-ahead positions x + v * tau, not committed to the set.

        Parameters:
        -----------
        particles : ParticleSet
            Current particle set
        lookahead : float
            Look-ahead interval tau

        Returns:
        --------
        np.ndarray : Predicted positions, shape (N, 2)
        '''
        return particles.positions + particles.velocities * lookahead

    def applyPressure(
        self, particles: ParticleSet, pressureForces: np.ndarray, dt: float
    ) -> None:
        '''
        Kick velocities by the pressure acceleration F / rho.

        Particles with zero density receive zero acceleration.

        Parameters:
        -----------
        particles : ParticleSet
            Particle set with densities from the current tick
        pressureForces : np.ndarray
            Pressure forces, shape (N, 2)
        dt : float
            Time step
        '''
        densities = particles.densities[:, np.newaxis]
        accelerations = np.divide(
            pressureForces,
            densities,
            out=np.zeros_like(pressureForces, dtype=np.float64),
            where=densities != 0.0,
        )
        particles.velocities += accelerations * dt

    def drift(self, particles: ParticleSet, dt: float) -> None:
        '''Advance positions with the updated velocities.'''
        particles.positions += particles.velocities * dt
