# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Logging setup for the c2k command line.

Library code only calls ``logging.getLogger(__name__)``; handlers are
attached here, on the ``c2k`` logger, by the CLI.
"""
import logging
import os
from typing import Optional, Union

import click

LOGGER_NAME = "c2k"
ENV_LOG_LEVEL = "C2K_LOG_LEVEL"
LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(name)s:%(lineno)d] %(message)s"

_LEVEL_COLORS = (
    (logging.ERROR, "red"),
    (logging.WARNING, "yellow"),
    (logging.INFO, "green"),
    (logging.DEBUG, "bright_black"),
)

class ColorFormatter(logging.Formatter):
    """
    Formatter that colors each record according to its severity.
    """
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for level, color in _LEVEL_COLORS:
            if record.levelno >= level:
                return click.style(message, fg=color)
        return message

class ClickEchoHandler(logging.Handler):
    """
    Writes records through click.echo so that they follow whatever stderr
    stream is current when the record is emitted.
    """
    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)

def parse_log_level(value: Optional[Union[str, int]]) -> Optional[int]:
    """
    Converts a level name ("warning", "DEBUG") or number into a logging level.

    :param value: The level name or number.
    :return: The numeric level, or None if the value is empty or unknown.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value
    v = value.strip().upper()
    if not v:
        return None
    if v.isdigit():
        return int(v)
    if v == "WARN":
        v = "WARNING"
    level = logging.getLevelName(v)
    return level if isinstance(level, int) else None

def setup_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Configures the ``c2k`` logger.

    If ``level`` is None, ``C2K_LOG_LEVEL`` is consulted; the default is WARNING
    so that unsupported-feature warnings are always visible.

    :param level: Level name or number.
    :return: The configured logger.
    """
    resolved = parse_log_level(level)
    if resolved is None:
        resolved = parse_log_level(os.environ.get(ENV_LOG_LEVEL)) or logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)

    # Drop handlers from a previous call to avoid duplicate output
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = ClickEchoHandler()
    handler.setFormatter(ColorFormatter(LOG_FORMAT if resolved >= logging.INFO else DEBUG_LOG_FORMAT))
    logger.addHandler(handler)
    return logger
