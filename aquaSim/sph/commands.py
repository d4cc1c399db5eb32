# -- Simulation Commands -- #

'''
Commands accepted by the simulation from an input layer.

Sean Bowman [10/14/2026]
'''

from __future__ import annotations

from enum import Enum


class Command(Enum):
    '''Discrete control commands for a running simulation.'''

    PAUSE_TOGGLE = 'pauseToggle'
    RESET = 'reset'
    INCREASE_STIFFNESS = 'increaseStiffness'
    DECREASE_STIFFNESS = 'decreaseStiffness'

    @classmethod
    def fromKey(cls, key: str) -> Command | None:
        '''
        Map a keyboard key to a command.

        Keys: 'p' pause toggle, 'r'/'R' reset, 'a' stiffer,
        'b' softer. Any other key maps to None.
        '''
        return _keyBindings.get(key)


_keyBindings = {
    'p': Command.PAUSE_TOGGLE,
    'r': Command.RESET,
    'R': Command.RESET,
    'a': Command.INCREASE_STIFFNESS,
    'b': Command.DECREASE_STIFFNESS,
}
