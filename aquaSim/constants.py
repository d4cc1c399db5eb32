# -- Default Constants for the Aqua SPH Simulation -- #

'''
Default physical and numerical constants for the 2D particle fluid.

Units are screen-space: lengths in view pixels, time in ticks.
These defaults reproduce the reference "Aqua" scene: a small column
of particles released into a 1200 x 900 view under weak gravity.

Sean Bowman [10/12/2026]
'''

#--------------------------------------------------------------------#
# -- Domain -- #
#--------------------------------------------------------------------#

# Window size the view is scaled from [px]
windowWidth: float = 800.0
windowHeight: float = 600.0

# Simulation view is 1.5x the window
domainWidth: float = 1.5 * windowWidth
domainHeight: float = 1.5 * windowHeight

#--------------------------------------------------------------------#
# -- Particles -- #
#--------------------------------------------------------------------#

# Number of fluid particles
particleCount: int = 30

# Visual / collision radius [px]
particleRadius: float = 8.0

# Uniform particle mass
particleMass: float = 1.0

# Grid spacing used when seeding the spawn region [px]
spawnSpacing: float = 24.0

# Horizontal jitter applied to grid-seeded particles [px]
spawnJitter: float = 1.0

#--------------------------------------------------------------------#
# -- SPH Numerical Parameters -- #
#--------------------------------------------------------------------#

# Kernel influence radius [px]
smoothingRadius: float = 160.0

# Gravity magnitude [px/tick^2]
gravity: float = 0.005

# Fixed time step [ticks]
timeStep: float = 2.0

# Velocity multiplier applied on wall contact (restitution)
collisionDamping: float = 0.95

# Rest density: local pressure is zero at this density
targetDensity: float = 0.1

# Stiffness of the linear equation of state
pressureMultiplier: float = 0.03

# Look-ahead interval for predicted sample positions
# Distinct from the time step; set to None to disable
predictionInterval: float = 1.0 / 120.0

# Factor applied to the pressure multiplier per tuning command
stiffnessTuningFactor: float = 10.0

# Kernel type: 'spikyPow2' or 'poly6'
kernelType: str = 'spikyPow2'

# Master seed for spawn jitter and coincident-particle directions
randomSeed: int = 0
