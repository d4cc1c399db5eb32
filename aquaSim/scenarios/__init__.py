# -- Simulation Scenarios Package -- #

'''
Pre-configured simulation scenarios for the 2D particle fluid.

Each scenario provides a SimulationConfig and the spawn region
the particles are seeded in.

Sean Bowman [10/16/2026]
'''

from aquaSim.scenarios.fluidBlock import FluidBlockConfig, createFluidBlock
