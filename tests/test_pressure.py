# -- Pressure Solver Tests -- #

'''
Equation of state, pair symmetry and coincident-particle handling.

Sean Bowman [10/18/2026]
'''

import math

import numpy as np
import pytest

from aquaSim.sph.density import computeDensities
from aquaSim.sph.kernels import SpikyPow2Kernel, smoothingKernelDerivative
from aquaSim.sph.pressure import (
    SeededDirectionSource,
    computePressureForces,
    densityToPressure,
    pairFallbackDirections,
    pressureForce,
    sharedPressure,
)


class FixedDirection:
    '''Direction source that always returns +x.'''

    def __init__(self):
        self.calls = 0

    def unitVector(self):
        self.calls += 1
        return np.array([1.0, 0.0])


def testDensityToPressureSign():
    assert densityToPressure(0.2, 0.1, 0.03) == pytest.approx(0.003)
    assert densityToPressure(0.05, 0.1, 0.03) == pytest.approx(-0.0015)
    assert densityToPressure(0.1, 0.1, 0.03) == 0.0


def testSharedPressureIsMean():
    shared = sharedPressure(0.3, 0.1, targetDensity=0.1, pressureMultiplier=2.0)
    assert shared == pytest.approx(0.2)
    np.testing.assert_allclose(
        sharedPressure(np.array([0.1, 0.5]), 0.3, 0.1, 1.0), [0.1, 0.3]
    )


def testSeededDirectionSourceIsReproducible():
    a = SeededDirectionSource(seed=3)
    b = SeededDirectionSource(seed=3)
    for _ in range(10):
        u = a.unitVector()
        np.testing.assert_array_equal(u, b.unitVector())
        assert np.linalg.norm(u) == pytest.approx(1.0)


def testPairForcesAreEqualAndOpposite(directionSource):
    positions = np.array([[500.0, 400.0], [560.0, 430.0]])
    densities = computeDensities(positions, positions, 1.0, 160.0)
    forces = computePressureForces(
        positions, densities, 1.0, 160.0,
        targetDensity=1.0e-5, pressureMultiplier=0.03,
        directionSource=directionSource,
    )
    assert np.linalg.norm(forces[0]) > 0.0
    np.testing.assert_allclose(forces[0], -forces[1], rtol=1e-12, atol=0.0)


def testCompressedPairRepels(directionSource):
    positions = np.array([[500.0, 400.0], [520.0, 400.0]])
    densities = computeDensities(positions, positions, 1.0, 160.0)
    forces = computePressureForces(
        positions, densities, 1.0, 160.0,
        targetDensity=0.0, pressureMultiplier=1.0,
        directionSource=directionSource,
    )
    # Positive pressure pushes particle 0 toward -x, particle 1 toward +x
    assert forces[0, 0] < 0.0
    assert forces[1, 0] > 0.0
    assert forces[0, 1] == pytest.approx(0.0, abs=1e-15)


def testSparsePairAttracts(directionSource):
    positions = np.array([[500.0, 400.0], [600.0, 400.0]])
    densities = computeDensities(positions, positions, 1.0, 160.0)
    forces = computePressureForces(
        positions, densities, 1.0, 160.0,
        targetDensity=1.0, pressureMultiplier=1.0,
        directionSource=directionSource,
    )
    assert forces[0, 0] > 0.0
    assert forces[1, 0] < 0.0


def testCoincidentParticlesGiveFiniteForce(directionSource):
    positions = np.array([[300.0, 300.0], [300.0, 300.0]])
    densities = computeDensities(positions, positions, 1.0, 160.0)
    forces = computePressureForces(
        positions, densities, 1.0, 160.0,
        targetDensity=0.0, pressureMultiplier=0.03,
        directionSource=directionSource,
    )
    assert np.all(np.isfinite(forces))
    assert np.all(np.linalg.norm(forces, axis=1) > 0.0)


def testCoincidentUsesInjectedDirection():
    positions = np.array([[300.0, 300.0], [300.0, 300.0]])
    densities = computeDensities(positions, positions, 1.0, 160.0)
    source = FixedDirection()

    force = pressureForce(
        0, positions, densities, 1.0, 160.0,
        targetDensity=0.0, pressureMultiplier=1.0, directionSource=source,
    )

    shared = densities[0]
    expected = -shared * smoothingKernelDerivative(0.0, 160.0) / densities[1]
    assert source.calls == 1
    assert force[0] == pytest.approx(expected)
    assert force[1] == 0.0


def testZeroDensityNeighborContributesNothing(directionSource):
    positions = np.array([[0.0, 0.0], [10.0, 0.0]])
    densities = np.array([1.0, 0.0])
    force = pressureForce(
        0, positions, densities, 1.0, 160.0,
        targetDensity=0.5, pressureMultiplier=1.0,
        directionSource=directionSource, kernel=SpikyPow2Kernel(),
    )
    np.testing.assert_array_equal(force, np.zeros(2))


def testLoneParticleFeelsNoForce(directionSource):
    positions = np.array([[10.0, 10.0]])
    force = pressureForce(
        0, positions, np.array([1.0]), 1.0, 160.0, 0.1, 1.0, directionSource,
    )
    np.testing.assert_array_equal(force, np.zeros(2))


def testForceMagnitudeMatchesPairFormula(directionSource):
    d = 50.0
    positions = np.array([[0.0, 0.0], [d, 0.0]])
    densities = np.array([0.4, 0.4])
    target, k = 0.1, 2.0
    force = pressureForce(0, positions, densities, 1.0, 160.0, target, k, directionSource)

    shared = (0.4 - target) * k
    # Direction from particle 1 to particle 0 is -x
    expected = -shared * (-1.0) * smoothingKernelDerivative(d, 160.0) / 0.4
    assert force[0] == pytest.approx(expected)
    assert math.isclose(force[1], 0.0, abs_tol=1e-18)


def testCoincidentPairForcesAreEqualAndOpposite(directionSource):
    positions = np.array([[300.0, 300.0], [300.0, 300.0]])
    densities = computeDensities(positions, positions, 1.0, 160.0)
    forces = computePressureForces(
        positions, densities, 1.0, 160.0,
        targetDensity=0.1, pressureMultiplier=0.03,
        directionSource=directionSource,
    )
    assert np.linalg.norm(forces[0]) > 0.0
    np.testing.assert_allclose(forces[0], -forces[1], rtol=1e-12, atol=0.0)


def testCoincidentClusterHasNoNetForce(directionSource):
    positions = np.array([[300.0, 300.0]] * 3)
    densities = computeDensities(positions, positions, 1.0, 160.0)
    forces = computePressureForces(
        positions, densities, 1.0, 160.0,
        targetDensity=0.0, pressureMultiplier=1.0,
        directionSource=directionSource,
    )
    scale = np.max(np.abs(forces))
    np.testing.assert_allclose(forces.sum(axis=0), 0.0, atol=1e-12 * scale)


def testOneFallbackDrawPerCoincidentPair():
    positions = np.array([[5.0, 5.0], [5.0, 5.0], [9.0, 5.0], [9.0, 5.0], [1.0, 1.0]])
    source = FixedDirection()

    pairDirections = pairFallbackDirections(positions, source)

    assert sorted(pairDirections) == [(0, 1), (2, 3)]
    assert source.calls == 2
