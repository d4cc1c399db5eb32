# -- SPH Density Estimation -- #

'''
Kernel-weighted density estimation over the particle set.

    rho(x) = sum_i m * W(|x_i - x|, R)

The sum runs over every particle, including the particle whose
density is being sampled (self-contribution at d = 0). Cost is O(N)
per sample point and O(N^2) for a full pass over the set. There is
no neighbor search: every pair is evaluated and the compact kernel
support zeroes out distant pairs.

Sean Bowman [10/13/2026]
'''

from __future__ import annotations

import numpy as np

from aquaSim.sph.kernels import SphKernel, SpikyPow2Kernel


def calculateDensity(
    samplePoint: np.ndarray,
    positions: np.ndarray,
    mass: float,
    radius: float,
    kernel: SphKernel | None = None,
) -> float:
    '''
    Density at a single sample point.

    Parameters:
    -----------
    samplePoint : np.ndarray
        Point to sample, shape (2,)
    positions : np.ndarray
        Particle positions, shape (N, 2); N may be 0
    mass : float
        Uniform particle mass
    radius : float
        Kernel influence radius
    kernel : SphKernel | None
        Smoothing kernel (defaults to SpikyPow2Kernel)

    Returns:
    --------
    float : Density (>= 0; 0 for an empty set)
    '''
    kernel = kernel or SpikyPow2Kernel()
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
    if positions.shape[0] == 0:
        return 0.0

    dist = np.linalg.norm(positions - np.asarray(samplePoint, dtype=np.float64), axis=1)
    influence = kernel.evaluateBatch(dist, radius)
    return float(mass * np.sum(influence))


def computeDensities(
    samplePoints: np.ndarray,
    positions: np.ndarray,
    mass: float,
    radius: float,
    kernel: SphKernel | None = None,
) -> np.ndarray:
    '''
    Density at every sample point against one position snapshot.

    Vectorized: builds the full (S, N) distance matrix with NumPy
    broadcasting, evaluates the kernel once and sums each row.

    Parameters:
    -----------
    samplePoints : np.ndarray
        Sample points, shape (S, 2); usually the particle positions
        themselves or their predicted positions
    positions : np.ndarray
        Particle positions, shape (N, 2)
    mass : float
        Uniform particle mass
    radius : float
        Kernel influence radius
    kernel : SphKernel | None
        Smoothing kernel (defaults to SpikyPow2Kernel)

    Returns:
    --------
    np.ndarray : Densities, shape (S,)
    '''
    kernel = kernel or SpikyPow2Kernel()
    samplePoints = np.asarray(samplePoints, dtype=np.float64).reshape(-1, 2)
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)

    if positions.shape[0] == 0:
        return np.zeros(samplePoints.shape[0])

    # offsets[s, i] = x_i - sample_s
    offsets = positions[np.newaxis, :, :] - samplePoints[:, np.newaxis, :]
    dist = np.linalg.norm(offsets, axis=2)

    return mass * np.sum(kernel.evaluateBatch(dist, radius), axis=1)
