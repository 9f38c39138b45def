## logging setup for patterncad
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
# 
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
# 
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Logging setup for the ``patterncad`` logger namespace.

Library modules only call ``logging.getLogger(__name__)``; nothing is
printed until an application calls ``setup_logging``.  The level may be
given directly (number or name) or taken from ``Settings.log_level``.
Calling it again replaces the handlers it installed earlier and leaves
handlers added by anyone else alone.
"""

import logging
import sys
from typing import Optional, Union

from patterncad.config import DEFAULT_SETTINGS, Settings, level_number

__all__ = ['setup_logging', 'LOGGER_NAME']

LOGGER_NAME = 'patterncad'
FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
DATEFMT = '%H:%M:%S'
OWNER_TAG = '_patterncad_handler'


def _drop_own_handlers(logger: logging.Logger) -> None:
    for h in list(logger.handlers):
        if getattr(h, OWNER_TAG, False):
            logger.removeHandler(h)
            h.close()


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None,
                  settings: Optional[Settings] = None, stream=None) -> logging.Logger:
    """Configure and return the ``patterncad`` logger.

    ``level`` wins over ``settings.log_level``; with neither, the default
    settings apply.  ``stream`` defaults to stdout.
    """
    if level is None:
        level = (settings or DEFAULT_SETTINGS).log_level
    level = level_number(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    _drop_own_handlers(logger)

    formatter = logging.Formatter(FORMAT, datefmt=DATEFMT)
    handlers = [logging.StreamHandler(stream if stream is not None else sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for h in handlers:
        setattr(h, OWNER_TAG, True)
        h.setLevel(level)
        h.setFormatter(formatter)
        logger.addHandler(h)

    logger.debug("logging at %s", logging.getLevelName(level))
    return logger
