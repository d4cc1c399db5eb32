# -- aquaSim Module Entry-Point -- #

'''
Allows running the simulation with `python -m aquaSim`.

Sean Bowman [10/15/2026]
'''

from aquaSim.runner import main

main()
