# -- General Utilities for aquaSim -- #

'''
Logging setup shared by the runner and any other entry point.

Sean Bowman [10/17/2026]
'''

import logging
import logging.handlers
import os

#--------------------------------------------------------------------#
# -- Logging -- #
#--------------------------------------------------------------------#

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setupLogging(
    level: str = 'WARNING',
    logFile: str | None = None,
    logFormat: str = DEFAULT_LOG_FORMAT,
) -> None:
    '''
    Configure the root logger.

    Logs to the console, and additionally to a rotating file when a
    path is given (1 MB per file, 5 backups). Existing handlers on
    the root logger are replaced so repeated calls do not duplicate
    output.

    Parameters:
    -----------
    level : str
        Logging level name, e.g. 'INFO' or 'DEBUG'
    logFile : str | None
        Optional log file path; its directory is created if needed
    logFormat : str
        Format string for all handlers
    '''
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(logFormat)

    consoleHandler = logging.StreamHandler()
    consoleHandler.setFormatter(formatter)
    logger.addHandler(consoleHandler)

    if logFile:
        logDir = os.path.dirname(logFile)
        if logDir:
            os.makedirs(logDir, exist_ok=True)

        fileHandler = logging.handlers.RotatingFileHandler(
            logFile, maxBytes=1024 * 1024, backupCount=5
        )
        fileHandler.setFormatter(formatter)
        logger.addHandler(fileHandler)

    logger.debug('Logging initialized at level %s.', level.upper())
