# -- SPH Smoothing Kernels -- #

'''
Smoothing kernel functions for 2D SPH density estimation.

Implements two compactly supported kernels with their radial
derivatives. The kernel provides the weighting function W(d, R)
used to interpolate the density field from neighboring particles,
and its derivative dW/dd drives the pressure force.

Key properties of a valid kernel here:
- Normalization: integral of W over the disk of radius R = 1
- Compact support: W = 0 for d >= R
- Positivity: W >= 0 within support
- Monotonic: W decreases from d = 0 to d = R

Normalizing to a unit disk integral keeps density values on a
comparable scale when the smoothing radius is changed.

References:
-----------
Muller et al. (2003) -- Particle-Based Fluid Simulation for
    Interactive Applications
Monaghan (1992) -- Smoothed Particle Hydrodynamics

Sean Bowman [10/12/2026]
'''

from __future__ import annotations

import math
from typing import Protocol

import numpy as np


######################################################################
# -- Kernel Protocol -- #
######################################################################

class SphKernel(Protocol):
    '''Protocol for 2D SPH smoothing kernel functions.'''

    def evaluate(self, distance: float, radius: float) -> float:
        '''
        Evaluate kernel W(d, R).

        Parameters:
        -----------
        distance : float
            Distance between particle and sample point
        radius : float
            Kernel influence radius (must be > 0)

        Returns:
        --------
        float : Kernel value [1/length^2]
        '''
        ...

    def derivative(self, distance: float, radius: float) -> float:
        '''
        Evaluate the radial derivative dW/dd.

        Parameters:
        -----------
        distance : float
            Distance between particles
        radius : float
            Kernel influence radius (must be > 0)

        Returns:
        --------
        float : dW/dd [1/length^3], <= 0 inside the support
        '''
        ...

    def evaluateBatch(self, distances: np.ndarray, radius: float) -> np.ndarray:
        '''Evaluate W for an array of distances.'''
        ...

    def derivativeBatch(self, distances: np.ndarray, radius: float) -> np.ndarray:
        '''Evaluate dW/dd for an array of distances.'''
        ...


######################################################################
# -- Spiky (R - d)^2 Kernel -- #
######################################################################

class SpikyPow2Kernel:
    '''
    Quadratic "spiky" kernel in (R - d).

    W(d) = (R - d)^2 / V      for 0 <= d < R
    W(d) = 0                  for d >= R

    Normalization volume (2D):
        V = pi * R^4 / 6

    Derivative:
        dW/dd = -2 * (R - d) / V = (d - R) * 12 / (pi * R^4)

    The derivative is non-zero at d = 0, so coincident particles
    still push each other apart once a direction is chosen.
    '''

    def _volume(self, radius: float) -> float:
        '''Disk integral of (R - d)^2 for the given radius.'''
        return math.pi * radius ** 4 / 6.0

    def evaluate(self, distance: float, radius: float) -> float:
        '''
        Evaluate the spiky kernel W(d, R).

        Parameters:
        -----------
        distance : float
            Distance to the sample point
        radius : float
            Influence radius

        Returns:
        --------
        float : Kernel value
        '''
        if distance >= radius:
            return 0.0

        gap = radius - distance
        return gap * gap / self._volume(radius)

    def derivative(self, distance: float, radius: float) -> float:
        '''
        Evaluate dW/dd for the spiky kernel.

        Parameters:
        -----------
        distance : float
            Distance between particles
        radius : float
            Influence radius

        Returns:
        --------
        float : Kernel slope (non-positive)
        '''
        if distance >= radius:
            return 0.0

        scale = 12.0 / (math.pi * radius ** 4)
        return (distance - radius) * scale

    ######################################################################
    # -- Vectorized (Batch) Operations -- #
    ######################################################################

    def evaluateBatch(self, distances: np.ndarray, radius: float) -> np.ndarray:
        '''
        Evaluate W(d, R) for an array of distances.

        Parameters:
        -----------
        distances : np.ndarray
            Array of distances, any shape
        radius : float
            Influence radius

        Returns:
        --------
        np.ndarray : Kernel values, same shape as distances
        '''
        distances = np.asarray(distances, dtype=np.float64)
        gap = np.clip(radius - distances, 0.0, None)
        return gap * gap / self._volume(radius)

    def derivativeBatch(self, distances: np.ndarray, radius: float) -> np.ndarray:
        '''
        Evaluate dW/dd for an array of distances.

        Parameters:
        -----------
        distances : np.ndarray
            Array of distances, any shape
        radius : float
            Influence radius

        Returns:
        --------
        np.ndarray : Kernel slopes, same shape as distances
        '''
        distances = np.asarray(distances, dtype=np.float64)
        scale = 12.0 / (math.pi * radius ** 4)
        return np.where(distances < radius, (distances - radius) * scale, 0.0)


######################################################################
# -- Poly6 (R^2 - d^2)^3 Kernel -- #
######################################################################

class Poly6Kernel:
    '''
    Sextic polynomial kernel in (R^2 - d^2).

    W(d) = (R^2 - d^2)^3 / V     for 0 <= d < R

    Normalization volume (2D):
        V = pi * R^8 / 4

    Derivative:
        dW/dd = -6 * d * (R^2 - d^2)^2 / V
              = -24 * d * (R^2 - d^2)^2 / (pi * R^8)

    Smoother near the origin than the spiky kernel, but the
    derivative vanishes at d = 0.
    '''

    def _volume(self, radius: float) -> float:
        '''Disk integral of (R^2 - d^2)^3 for the given radius.'''
        return math.pi * radius ** 8 / 4.0

    def evaluate(self, distance: float, radius: float) -> float:
        '''
        Evaluate the poly6 kernel W(d, R).

        Parameters:
        -----------
        distance : float
            Distance to the sample point
        radius : float
            Influence radius

        Returns:
        --------
        float : Kernel value
        '''
        if distance >= radius:
            return 0.0

        diff = radius * radius - distance * distance
        return diff * diff * diff / self._volume(radius)

    def derivative(self, distance: float, radius: float) -> float:
        '''
        Evaluate dW/dd for the poly6 kernel.

        Parameters:
        -----------
        distance : float
            Distance between particles
        radius : float
            Influence radius

        Returns:
        --------
        float : Kernel slope (non-positive)
        '''
        if distance >= radius:
            return 0.0

        diff = radius * radius - distance * distance
        return -6.0 * distance * diff * diff / self._volume(radius)

    ######################################################################
    # -- Vectorized (Batch) Operations -- #
    ######################################################################

    def evaluateBatch(self, distances: np.ndarray, radius: float) -> np.ndarray:
        '''Evaluate W(d, R) for an array of distances.'''
        distances = np.asarray(distances, dtype=np.float64)
        diff = np.clip(radius * radius - distances * distances, 0.0, None)
        return diff ** 3 / self._volume(radius)

    def derivativeBatch(self, distances: np.ndarray, radius: float) -> np.ndarray:
        '''Evaluate dW/dd for an array of distances.'''
        distances = np.asarray(distances, dtype=np.float64)
        diff = np.clip(radius * radius - distances * distances, 0.0, None)
        return -6.0 * distances * diff * diff / self._volume(radius)


######################################################################
# -- Kernel Factory -- #
######################################################################

def createKernel(kernelType: str) -> SphKernel:
    '''
    Create a kernel instance by type name.

    Parameters:
    -----------
    kernelType : str
        Kernel type: 'spikyPow2' or 'poly6'

    Returns:
    --------
    SphKernel : Kernel instance

    Raises:
    -------
    ValueError : If kernel type is unknown
    '''
    if kernelType == 'spikyPow2':
        return SpikyPow2Kernel()
    elif kernelType == 'poly6':
        return Poly6Kernel()
    else:
        raise ValueError(f'Unknown kernel type: {kernelType}')


_defaultKernel = SpikyPow2Kernel()


def smoothingKernel(distance: float, radius: float) -> float:
    '''Default kernel W(d, R); zero outside the support.'''
    return _defaultKernel.evaluate(distance, radius)


def smoothingKernelDerivative(distance: float, radius: float) -> float:
    '''Default kernel slope dW/dd; zero outside the support.'''
    return _defaultKernel.derivative(distance, radius)
