# -- Export Package -- #

'''
Frame export utilities for the particle fluid simulation.

Sean Bowman [10/16/2026]
'''

from aquaSim.export.frameExporter import FrameExporter, loadFrames
