# -- aquaSim Runner -- #

'''
Command-line entry point for running the 2D SPH particle fluid.

Builds a scenario, runs the simulation headless for a fixed number
of ticks, displays progress, optionally replays a scripted list of
interactive commands (pause, reset, stiffness tuning) and exports
frame data for the Plotly animation.

Usage:
    python -m aquaSim                                  # Reference Aqua scene
    python -m aquaSim --preset dense                   # ~300 scattered particles
    python -m aquaSim --config configs/aquaDefault.json
    python -m aquaSim --commands 100:p,150:p,200:a     # Scripted key presses
    python -m aquaSim --plot                           # Also write HTML figures

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import time as timeModule

from aquaSim import constants as const
from aquaSim.sph.protocols import SimulationConfig, SpawnRegion, loadConfigDocument
from aquaSim.sph.simulation import FluidSimulation
from aquaSim.sph.commands import Command
from aquaSim.scenarios.fluidBlock import FluidBlockConfig, createFluidBlock
from aquaSim.export.frameExporter import FrameExporter
from aquaSim.utils import setupLogging

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = 'aquaSim/output'

PRESETS = {
    'aqua': FluidBlockConfig.aqua,
    'dense': FluidBlockConfig.dense,
    'pair': FluidBlockConfig.equilibriumPair,
}


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='aquaSim -- 2D SPH particle fluid',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file',
    )
    parser.add_argument(
        '--preset', type=str, default='aqua',
        choices=sorted(PRESETS),
        help='Scenario preset (default: aqua)',
    )
    parser.add_argument(
        '--steps', type=int, default=None,
        help='Number of ticks to run (default: from preset or config)',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Master random seed (default: from preset or config)',
    )
    parser.add_argument(
        '--commands', type=str, default='',
        help='Scripted commands as step:key pairs, e.g. 100:p,150:p,200:a',
    )
    parser.add_argument(
        '--no-export', action='store_true',
        help='Skip frame data export',
    )
    parser.add_argument(
        '--output-dir', type=str, default=DEFAULT_OUTPUT_DIR,
        help=f'Output directory for exported frames (default: {DEFAULT_OUTPUT_DIR})',
    )
    parser.add_argument(
        '--plot', action='store_true',
        help='Write the frame animation and diagnostics as HTML',
    )
    parser.add_argument(
        '--log-level', type=str, default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (default: WARNING)',
    )
    parser.add_argument(
        '--log-file', type=str, default=None,
        help='Optional rotating log file',
    )

    return parser


def parseCommandScript(script: str) -> dict[int, list[Command]]:
    '''
    Parse a scripted command list.

    Parameters:
    -----------
    script : str
        Comma-separated 'tick:key' pairs, e.g. '100:p,150:p'.
        Ticks count loop iterations, paused ones included.

    Returns:
    --------
    dict[int, list[Command]] : Commands to dispatch before each tick

    Raises:
    -------
    ValueError : If an entry is malformed or its key is not bound
    '''
    schedule: dict[int, list[Command]] = {}
    for entry in filter(None, (e.strip() for e in script.split(','))):
        tickText, sep, key = entry.partition(':')
        if not sep or not tickText.strip().isdigit():
            raise ValueError(f'Malformed command entry: {entry!r} (expected tick:key)')
        command = Command.fromKey(key.strip())
        if command is None:
            raise ValueError(f'No command bound to key {key.strip()!r}')
        schedule.setdefault(int(tickText), []).append(command)
    return schedule


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class AquaSimRunner:
    '''
    Runs a particle fluid simulation and stores results.

    Handles the full pipeline: scenario setup, simulation loop
    with progress reporting and scripted commands, optional frame
    export and optional HTML figures.
    '''

    def __init__(self) -> None:
        self._exporter: FrameExporter = FrameExporter()

    @property
    def exporter(self) -> FrameExporter:
        '''Frames collected by the last run.'''
        return self._exporter

    def runFromConfig(
        self,
        configPath: str,
        nSteps: int | None = None,
        seed: int | None = None,
        commands: dict[int, list[Command]] | None = None,
        doExport: bool = True,
        exportDir: str = DEFAULT_OUTPUT_DIR,
        plot: bool = False,
    ) -> dict:
        '''
        Run a simulation from a JSON configuration file.

        Besides the SimulationConfig sections, the file may hold a
        'spawn' section (regionMin, regionMax, layout, spacing,
        jitter) and a 'run' section (nSteps, outputInterval).

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file
        nSteps : int | None
            Overrides run.nSteps
        seed : int | None
            Overrides simulation.seed
        commands : dict[int, list[Command]] | None
            Scripted commands keyed by tick
        doExport : bool
            Whether to export frame data
        exportDir : str
            Output directory for frame export
        plot : bool
            Whether to write HTML figures

        Returns:
        --------
        dict : Simulation results summary
        '''
        data = loadConfigDocument(configPath)
        simConfig = SimulationConfig.fromDict(data)

        if seed is not None:
            simConfig = dataclasses.replace(simConfig, seed=seed)

        spawnSection = data.get('spawn', {})
        runSection = data.get('run', {})
        defaults = FluidBlockConfig()

        spawnRegion = SpawnRegion(
            regionMin=tuple(spawnSection.get('regionMin', defaults.spawnMin)),
            regionMax=tuple(spawnSection.get('regionMax', defaults.spawnMax)),
            layout=spawnSection.get('layout', defaults.layout),
            spacing=spawnSection.get('spacing', defaults.spacing),
            jitter=spawnSection.get('jitter', defaults.jitter),
        )

        scenarioName = os.path.splitext(os.path.basename(configPath))[0]
        return self.runSimulation(
            simConfig,
            spawnRegion,
            nSteps=nSteps if nSteps is not None else runSection.get('nSteps', defaults.nSteps),
            outputInterval=runSection.get('outputInterval', defaults.outputInterval),
            commands=commands,
            doExport=doExport,
            exportDir=exportDir,
            scenarioName=scenarioName,
            plot=plot,
        )

    def runFluidBlock(
        self,
        blockConfig: FluidBlockConfig,
        nSteps: int | None = None,
        seed: int = const.randomSeed,
        commands: dict[int, list[Command]] | None = None,
        doExport: bool = True,
        exportDir: str = DEFAULT_OUTPUT_DIR,
        scenarioName: str = 'aqua',
        plot: bool = False,
    ) -> dict:
        '''
        Run a fluid block scenario.

        Parameters:
        -----------
        blockConfig : FluidBlockConfig
            Scenario configuration
        nSteps : int | None
            Overrides blockConfig.nSteps
        seed : int
            Master random seed
        commands : dict[int, list[Command]] | None
            Scripted commands keyed by tick
        doExport : bool
            Whether to export frame data
        exportDir : str
            Output directory for frame export
        scenarioName : str
            Scenario name for output filenames
        plot : bool
            Whether to write HTML figures

        Returns:
        --------
        dict : Simulation results summary
        '''
        simConfig, spawnRegion = createFluidBlock(blockConfig, seed=seed)
        return self.runSimulation(
            simConfig,
            spawnRegion,
            nSteps=nSteps if nSteps is not None else blockConfig.nSteps,
            outputInterval=blockConfig.outputInterval,
            commands=commands,
            doExport=doExport,
            exportDir=exportDir,
            scenarioName=scenarioName,
            plot=plot,
        )

    def runSimulation(
        self,
        simConfig: SimulationConfig,
        spawnRegion: SpawnRegion,
        nSteps: int,
        outputInterval: int = 5,
        commands: dict[int, list[Command]] | None = None,
        doExport: bool = True,
        exportDir: str = DEFAULT_OUTPUT_DIR,
        scenarioName: str = 'aqua',
        plot: bool = False,
    ) -> dict:
        '''
        Run a simulation for a fixed number of ticks.

        Scripted commands for tick k are dispatched before tick k,
        so they take effect at a tick boundary.

        Parameters:
        -----------
        simConfig : SimulationConfig
            Simulation configuration
        spawnRegion : SpawnRegion
            Region and layout to seed
        nSteps : int
            Number of ticks (paused ticks included)
        outputInterval : int
            Ticks between exported frames
        commands : dict[int, list[Command]] | None
            Scripted commands keyed by tick
        doExport : bool
            Whether to export frame data
        exportDir : str
            Output directory for frame export
        scenarioName : str
            Scenario name for output filenames
        plot : bool
            Whether to write HTML figures

        Returns:
        --------
        dict : Simulation results summary
        '''
        commands = commands or {}
        outputInterval = max(1, int(outputInterval))
        self._exporter = FrameExporter()

        print()
        print('=' * 62)
        print('  AQUASIM -- 2D SPH PARTICLE FLUID')
        print('=' * 62)
        print()

        #--------------------------------------------------------------------#
        # Scenario Setup
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  SCENARIO SETUP')
        print('-' * 62)

        simulation = FluidSimulation.create(simConfig, spawnRegion)
        particles = simulation.particles

        print(f'  Domain:            {simConfig.domainWidth:8.1f} x {simConfig.domainHeight:.1f}')
        print(f'  Particles:         {particles.nParticles:8d}')
        print(f'  Spawn Layout:      {spawnRegion.layout:>8s}')
        print(f'  Particle Radius:   {simConfig.particleRadius:8.2f}')
        print(f'  Smoothing Radius:  {simConfig.smoothingRadius:8.2f}')
        print(f'  Kernel:            {simConfig.kernelType:>8s}')
        print(f'  Gravity:           {simConfig.gravity:8.4f}')
        print(f'  Time Step:         {simConfig.timeStep:8.3f}')
        print(f'  Target Density:    {simConfig.targetDensity:10.4e}')
        print(f'  Pressure Mult.:    {simConfig.pressureMultiplier:10.4e}')
        print(f'  Ticks:             {nSteps:8d}')
        print()

        # Record initial frame
        self._exporter.addFrame(simulation.currentState, particles)

        #--------------------------------------------------------------------#
        # Simulation Loop
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  RUNNING SIMULATION')
        print('-' * 62)
        print()
        print(f'  {"Tick":>6}  {"Step":>6}  {"State":>7}  {"MaxVel":>8}  {"DensErr":>8}  {"KE":>10}')
        print('  ' + '-' * 58)

        wallClockStart = timeModule.time()
        printInterval = max(1, nSteps // 20)
        nCommands = 0

        for tick in range(nSteps):
            for command in commands.get(tick, []):
                simulation.dispatch(command)
                nCommands += 1
                print(f'  {tick:6d}  >> {command.name}')

            state = simulation.step()

            if (tick + 1) % outputInterval == 0:
                self._exporter.addFrame(state, particles)

            if (tick + 1) % printInterval == 0:
                print(
                    f'  {tick + 1:6d}  {state.step:6d}  '
                    f'{"paused" if state.paused else "running":>7}  '
                    f'{state.maxVelocity:8.4f}  {state.maxDensityError * 100:8.2f}  '
                    f'{state.kineticEnergy:10.4e}'
                )

        wallClockSeconds = timeModule.time() - wallClockStart

        # Final frame
        finalState = simulation.currentState
        if nSteps % outputInterval != 0:
            self._exporter.addFrame(finalState, particles)

        print()
        print('  Simulation complete.')
        print(f'  Ticks run:         {nSteps:8d}')
        print(f'  Steps advanced:    {finalState.step:8d}')
        print(f'  Commands applied:  {nCommands:8d}')
        print(f'  Wall-clock time:   {wallClockSeconds:8.2f} s')
        print(f'  Frames collected:  {self._exporter.nFrames:8d}')
        print()

        logger.info(
            'Run finished: %d ticks, %d steps, %.2f s wall clock.',
            nSteps, finalState.step, wallClockSeconds,
        )

        #--------------------------------------------------------------------#
        # Export
        #--------------------------------------------------------------------#
        exportPath = None
        if doExport:
            print('-' * 62)
            print('  EXPORTING FRAME DATA')
            print('-' * 62)

            exportPath = self._exporter.export(
                config=simulation.config,
                outputDir=exportDir,
                scenarioName=scenarioName,
            )
            print(f'  Exported to: {exportPath}')
            print()

        figurePaths: list[str] = []
        if plot:
            figurePaths = self._writeFigures(simulation.config, exportDir, scenarioName)

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        print('=' * 62)
        print('  SIMULATION SUMMARY')
        print('=' * 62)
        print(f'  Final KE:          {finalState.kineticEnergy:10.4e}')
        print(f'  Mean Density:      {finalState.meanDensity:10.4e}')
        print(f'  Max Density:       {finalState.maxDensity:10.4e}')
        print(f'  Max Density Error: {finalState.maxDensityError * 100:8.2f} %')
        print(f'  Max Velocity:      {finalState.maxVelocity:8.4f}')
        print(f'  Pressure Mult.:    {finalState.pressureMultiplier:10.4e}')
        print(f'  Paused:            {str(finalState.paused):>8s}')
        print('=' * 62)
        print()

        return {
            'finalState': finalState,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._exporter.nFrames,
            'exportPath': exportPath,
            'figurePaths': figurePaths,
            'simulation': simulation,
        }

    def _writeFigures(
        self,
        config: SimulationConfig,
        outputDir: str,
        scenarioName: str,
    ) -> list[str]:
        '''Write the frame animation and diagnostics figure as HTML.'''
        # Plotly is only needed when figures are requested
        from aquaSim.visualization.framePlots import (
            createDiagnosticsFigure,
            createFrameAnimation,
        )

        print('-' * 62)
        print('  WRITING FIGURES')
        print('-' * 62)

        os.makedirs(outputDir, exist_ok=True)
        exportData = self._exporter.toDict(config)

        paths = []
        for suffix, figure in (
            ('animation', createFrameAnimation(exportData)),
            ('diagnostics', createDiagnosticsFigure(exportData)),
        ):
            path = os.path.join(outputDir, f'aquaSim_{scenarioName}_{suffix}.html')
            figure.write_html(path)
            paths.append(path)
            print(f'  Wrote: {path}')
            logger.info('Wrote figure %s', path)
        print()

        return paths


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: list[str] | None = None) -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    setupLogging(args.log_level, args.log_file)

    try:
        commands = parseCommandScript(args.commands)
    except ValueError as exc:
        parser.error(str(exc))

    runner = AquaSimRunner()

    if args.config:
        runner.runFromConfig(
            args.config,
            nSteps=args.steps,
            seed=args.seed,
            commands=commands,
            doExport=not args.no_export,
            exportDir=args.output_dir,
            plot=args.plot,
        )
    else:
        blockConfig = PRESETS[args.preset]()
        runner.runFluidBlock(
            blockConfig,
            nSteps=args.steps,
            seed=args.seed if args.seed is not None else const.randomSeed,
            commands=commands,
            doExport=not args.no_export,
            exportDir=args.output_dir,
            scenarioName=args.preset,
            plot=args.plot,
        )


if __name__ == '__main__':
    main()
