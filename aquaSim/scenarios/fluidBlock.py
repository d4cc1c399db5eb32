# -- Fluid Block Scenario -- #

'''
Block of fluid released inside a closed rectangular box.

Particles are seeded in a spawn sub-region of the box and fall
under gravity, spreading across the floor until the pressure
field balances. The scenario creates:

1. A SimulationConfig for the box and SPH parameters
2. A SpawnRegion describing where and how particles are seeded

The default preset reproduces the reference "Aqua" scene: 30
particles filled row by row from the floor in the middle-left
quarter of a 1200 x 900 view.

Sean Bowman [10/16/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

from aquaSim import constants as const
from aquaSim.sph.protocols import SimulationConfig, SpawnRegion
from aquaSim.sph.kernels import createKernel


######################################################################
# -- Fluid Block Configuration -- #
######################################################################

@dataclass
class FluidBlockConfig:
    '''
    Configuration for a fluid block scenario.

    Parameters:
    -----------
    boxWidth : float
        Box width
    boxHeight : float
        Box height
    particleCount : int
        Number of particles
    spawnMin : tuple[float, float]
        Lower-left corner of the spawn region
    spawnMax : tuple[float, float]
        Upper-right corner of the spawn region
    layout : str
        'grid' or 'scatter'
    spacing : float
        Grid spacing for the 'grid' layout
    jitter : float
        Horizontal jitter for the 'grid' layout
    smoothingRadius : float
        Kernel influence radius
    gravity : float
        Gravity magnitude
    targetDensity : float | None
        Rest density; None derives it from the spawn spacing so
        that two particles one spacing apart are at rest
    pressureMultiplier : float
        EOS stiffness
    predictionInterval : float | None
        Look-ahead interval; None disables the predictor
    nSteps : int
        Number of ticks to run
    outputInterval : int
        Ticks between exported frames
    '''

    boxWidth: float = const.domainWidth
    boxHeight: float = const.domainHeight
    particleCount: int = const.particleCount
    spawnMin: tuple[float, float] = (const.domainWidth / 4.0, const.spawnSpacing)
    spawnMax: tuple[float, float] = (
        const.domainWidth / 2.0,
        const.domainHeight - 2.0 * const.spawnSpacing,
    )
    layout: str = 'grid'
    spacing: float = const.spawnSpacing
    jitter: float = const.spawnJitter
    smoothingRadius: float = const.smoothingRadius
    gravity: float = const.gravity
    targetDensity: float | None = const.targetDensity
    pressureMultiplier: float = const.pressureMultiplier
    predictionInterval: float | None = const.predictionInterval
    nSteps: int = 600
    outputInterval: int = 5

    @classmethod
    def aqua(cls) -> FluidBlockConfig:
        '''
        Reference scene.

        30 particles, weak gravity, runs in a fraction of a second.
        '''
        return cls()

    @classmethod
    def dense(cls) -> FluidBlockConfig:
        '''
        Larger scattered block.

        ~300 particles with a tighter kernel, runs in tens of seconds.
        '''
        return cls(
            particleCount=300,
            spawnMin=(200.0, 100.0),
            spawnMax=(700.0, 600.0),
            layout='scatter',
            smoothingRadius=60.0,
            targetDensity=2.0e-3,
            pressureMultiplier=1.0,
            nSteps=400,
        )

    @classmethod
    def equilibriumPair(cls) -> FluidBlockConfig:
        '''
        Two particles at rest with zero shared pressure.

        Gravity is off and the rest density matches the pair's
        own density, so neither particle should move.
        '''
        width = const.domainWidth
        height = const.domainHeight
        separation = const.smoothingRadius / 2.0
        return cls(
            particleCount=2,
            spawnMin=(width / 2.0 - separation / 2.0, height / 2.0),
            spawnMax=(width / 2.0 + separation / 2.0, height / 2.0),
            spacing=separation,
            jitter=0.0,
            gravity=0.0,
            targetDensity=None,
            nSteps=100,
        )


######################################################################
# -- Scenario Creation -- #
######################################################################

def createFluidBlock(
    blockConfig: FluidBlockConfig,
    kernelType: str = const.kernelType,
    seed: int = const.randomSeed,
) -> tuple[SimulationConfig, SpawnRegion]:
    '''
    Create a fluid block simulation from configuration.

    When targetDensity is None it is set to the density a particle
    sees from itself plus one neighbor at the spawn spacing:

        rho_0 = m * (W(0) + W(spacing))

    Parameters:
    -----------
    blockConfig : FluidBlockConfig
        Scenario configuration
    kernelType : str
        Kernel type name
    seed : int
        Master seed

    Returns:
    --------
    tuple[SimulationConfig, SpawnRegion] :
        Ready-to-run configuration and spawn region
    '''
    targetDensity = blockConfig.targetDensity
    if targetDensity is None:
        kernel = createKernel(kernelType)
        h = blockConfig.smoothingRadius
        targetDensity = const.particleMass * (
            kernel.evaluate(0.0, h) + kernel.evaluate(blockConfig.spacing, h)
        )

    simConfig = SimulationConfig(
        domainWidth=blockConfig.boxWidth,
        domainHeight=blockConfig.boxHeight,
        particleCount=blockConfig.particleCount,
        smoothingRadius=blockConfig.smoothingRadius,
        gravity=blockConfig.gravity,
        targetDensity=targetDensity,
        pressureMultiplier=blockConfig.pressureMultiplier,
        predictionInterval=blockConfig.predictionInterval,
        kernelType=kernelType,
        seed=seed,
    )

    spawnRegion = SpawnRegion(
        regionMin=blockConfig.spawnMin,
        regionMax=blockConfig.spawnMax,
        layout=blockConfig.layout,
        spacing=blockConfig.spacing,
        jitter=blockConfig.jitter,
    )

    return (simConfig, spawnRegion)
