# -- Runner Smoke Tests -- #

'''
Headless end-to-end runs through the CLI runner.

Sean Bowman [10/18/2026]
'''

import json
import logging
import logging.handlers
import os

import pytest

from aquaSim.runner import AquaSimRunner, buildParser, main, parseCommandScript
from aquaSim.scenarios.fluidBlock import FluidBlockConfig
from aquaSim.sph.commands import Command
from aquaSim.utils import setupLogging


@pytest.fixture
def restoreRootLogger():
    root = logging.getLogger()
    savedHandlers = list(root.handlers)
    savedLevel = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = savedHandlers
    root.setLevel(savedLevel)


def testParseCommandScript():
    schedule = parseCommandScript('100:p, 150:p,150:a,3:R')
    assert schedule == {
        100: [Command.PAUSE_TOGGLE],
        150: [Command.PAUSE_TOGGLE, Command.INCREASE_STIFFNESS],
        3: [Command.RESET],
    }
    assert parseCommandScript('') == {}


@pytest.mark.parametrize('script', ['p', '10:x', 'ten:p', '-1:p'])
def testParseCommandScriptRejects(script):
    with pytest.raises(ValueError):
        parseCommandScript(script)


def testParserDefaults():
    args = buildParser().parse_args([])
    assert args.preset == 'aqua'
    assert args.config is None
    assert not args.no_export


def testScriptedPauseAndExport(tmp_path):
    runner = AquaSimRunner()
    result = runner.runFluidBlock(
        FluidBlockConfig.aqua(),
        nSteps=20,
        commands={5: [Command.PAUSE_TOGGLE], 10: [Command.PAUSE_TOGGLE, Command.INCREASE_STIFFNESS]},
        exportDir=str(tmp_path),
        scenarioName='smoke',
    )

    finalState = result['finalState']
    assert finalState.step == 15
    assert not finalState.paused
    assert finalState.pressureMultiplier == pytest.approx(0.3)

    # Initial frame plus one every 5 ticks
    assert result['nFrames'] == 5
    assert os.path.exists(result['exportPath'])
    with open(result['exportPath']) as f:
        document = json.load(f)
    assert document['frames'][2]['paused'] is True


def testRunFromConfig(tmp_path):
    configPath = tmp_path / 'pair.json'
    configPath.write_text(json.dumps({
        'particles': {'count': 2},
        'forces': {'gravity': 0.0},
        'spawn': {
            'regionMin': [560.0, 450.0],
            'regionMax': [640.0, 450.0],
            'spacing': 80.0,
            'jitter': 0.0,
        },
        'run': {'nSteps': 7, 'outputInterval': 3},
    }))

    result = AquaSimRunner().runFromConfig(str(configPath), doExport=False)

    assert result['exportPath'] is None
    assert result['finalState'].step == 7
    # Initial, ticks 3 and 6, then the final state
    assert result['nFrames'] == 4


def testMainWritesFigures(tmp_path, restoreRootLogger):
    main([
        '--preset', 'pair', '--steps', '10', '--no-export', '--plot',
        '--output-dir', str(tmp_path),
    ])
    written = sorted(os.listdir(tmp_path))
    assert written == ['aquaSim_pair_animation.html', 'aquaSim_pair_diagnostics.html']


def testSetupLoggingWithFile(tmp_path, restoreRootLogger):
    logFile = tmp_path / 'logs' / 'aquaSim.log'
    setupLogging('DEBUG', str(logFile))

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)

    logging.getLogger('aquaSim.test').info('hello')
    for handler in root.handlers:
        handler.flush()
    assert 'hello' in logFile.read_text()
