# -- aquaSim Package -- #

'''
2D particle fluid simulation using Smoothed Particle Hydrodynamics (SPH).

A small column of particles released into a box under gravity,
driven by a linear equation of state and brute-force pairwise
pressure forces.

Sean Bowman [10/15/2026]
'''

__version__ = '0.1.0'

from aquaSim.runner import AquaSimRunner
from aquaSim.scenarios.fluidBlock import FluidBlockConfig
from aquaSim.export.frameExporter import FrameExporter
