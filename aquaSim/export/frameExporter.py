# -- Simulation Frame Exporter -- #

'''
Exports simulation frames as JSON for offline visualization.

Collects read-only position snapshots during the run and writes
them to a JSON file that the Plotly frame animation can load.

The output format stores particle positions, speeds and densities
for each frame, along with the configuration and a diagnostics
history.

Sean Bowman [10/16/2026]
'''

from __future__ import annotations

import json
import logging
import os
from datetime import datetime

import numpy as np

from aquaSim.sph.protocols import SimulationConfig, SimulationState
from aquaSim.sph.particles import ParticleSet

logger = logging.getLogger(__name__)


class FrameExporter:
    '''
    Collects and exports simulation frame data as JSON.

    Usage:
        exporter = FrameExporter()
        # Between ticks:
        exporter.addFrame(state, particles)
        # After simulation:
        exporter.export(config, outputDir='output')

    Output JSON format:
    {
        "meta": { "type": "aquaSim", "nFrames": 121, "created": "...", ... },
        "config": { "domain": {...}, "particles": {...}, ... },
        "frames": [
            {
                "step": 0,
                "time": 0.0,
                "paused": false,
                "positions": [[x0, y0], [x1, y1], ...],
                "speeds": [v0, v1, ...],
                "densities": [rho0, rho1, ...]
            },
            ...
        ],
        "history": {
            "steps": [...],
            "kinetic": [...],
            "maxDensityError": [...],
            "pressureMultiplier": [...]
        }
    }
    '''

    def __init__(self) -> None:
        self._frames: list[dict] = []
        self._history: dict[str, list[float]] = {
            'steps': [],
            'kinetic': [],
            'maxDensityError': [],
            'pressureMultiplier': [],
        }

    @property
    def nFrames(self) -> int:
        '''Number of collected frames.'''
        return len(self._frames)

    @property
    def frames(self) -> list[dict]:
        '''Collected frames, oldest first.'''
        return self._frames

    def addFrame(self, state: SimulationState, particles: ParticleSet) -> None:
        '''
        Record a simulation frame.

        Parameters:
        -----------
        state : SimulationState
            Current simulation state diagnostics
        particles : ParticleSet
            Current particle set (only read)
        '''
        positions = particles.positionsSnapshot()
        speeds = np.linalg.norm(particles.velocities, axis=1)

        frame = {
            'step': state.step,
            'time': round(state.time, 6),
            'paused': state.paused,
            'positions': np.round(positions, 4).tolist(),
            'speeds': np.round(speeds, 6).tolist(),
            'densities': particles.densities.tolist(),
        }
        self._frames.append(frame)

        self._history['steps'].append(state.step)
        self._history['kinetic'].append(state.kineticEnergy)
        self._history['maxDensityError'].append(state.maxDensityError)
        self._history['pressureMultiplier'].append(state.pressureMultiplier)

    def toDict(self, config: SimulationConfig) -> dict:
        '''
        Assemble the export document without writing it.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration for metadata

        Returns:
        --------
        dict : JSON-serializable export document
        '''
        return {
            'meta': {
                'type': 'aquaSim',
                'nFrames': len(self._frames),
                'nParticles': len(self._frames[0]['positions']) if self._frames else 0,
                'created': datetime.now().isoformat(),
            },
            'config': config.toDict(),
            'frames': self._frames,
            'history': self._history,
        }

    def export(
        self,
        config: SimulationConfig,
        outputDir: str = 'aquaSim/output',
        scenarioName: str = 'aqua',
    ) -> str:
        '''
        Write all collected frames to a JSON file.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration for metadata
        outputDir : str
            Output directory path
        scenarioName : str
            Scenario name for the filename

        Returns:
        --------
        str : Path to the exported JSON file
        '''
        os.makedirs(outputDir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'aquaSim_{scenarioName}_{timestamp}.json'
        filepath = os.path.join(outputDir, filename)

        with open(filepath, 'w') as f:
            json.dump(self.toDict(config), f, indent=None, separators=(',', ':'))

        logger.info('Exported %d frames to %s', len(self._frames), filepath)
        return filepath


def loadFrames(filepath: str) -> dict:
    '''Read an export document written by FrameExporter.export.'''
    with open(filepath, 'r') as f:
        return json.load(f)
