#
#    This file is part of pitrapez, parallel trapezoidal estimation of PI.
#
#    pitrapez is free software: you can redistribute it and/or modify
#    it under the terms of the GNU Lesser General Public License as
#    published by the Free Software Foundation, either version 3 of
#    the License, or (at your option) any later version.
#
#    pitrapez is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#    GNU Lesser General Public License for more details.
#
#    You should have received a copy of the GNU Lesser General Public
#    License along with pitrapez. If not, see <http://www.gnu.org/licenses/>.
#
from logging.config import dictConfig
import os
import logging

import pitrapez


loggingConfig = {}

LOG_FORMAT = "[%(asctime)-15s] %(module)-9s %(levelname)-7s %(message)s"


def initLogging(verbosity=0, name="pitrapez"):
    """Creates a logger writing on the standard error. Standard output is
    left to the command-line session."""
    global loggingConfig

    verbose_levels = {
        -2: "CRITICAL",
        -1: "ERROR",
        0: "WARNING",
        1: "INFO",
        2: "DEBUG",
        3: "NOTSET",
    }
    verbosity = max(-2, min(verbosity, 3))
    log_handlers = {
        "console":
        {
            "class": "logging.StreamHandler",
            "formatter": "{name}Formatter".format(name=name),
            "stream": "ext://sys.stderr",
        },
    }
    loggingConfig.update({
        "{name}Logger".format(name=name):
        {
            "handlers": ["console"],
            "level": verbose_levels[verbosity],
            "propagate": False,
        },
    })
    dict_log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": log_handlers,
        "loggers": loggingConfig,
        "formatters":
        {
            "{name}Formatter".format(name=name):
            {
                "format": LOG_FORMAT,
            },
        },
    }
    dictConfig(dict_log_config)
    return logging.getLogger("{name}Logger".format(name=name))


def setLoggerIdentity(logger, identity):
    """Prefix the records of logger with the given worker identity."""
    try:
        logger.handlers[0].setFormatter(
            logging.Formatter(
                "[%(asctime)-15s] %(module)-9s ({0}) %(levelname)-7s "
                "%(message)s".format(identity)
            )
        )
    except IndexError:
        logger.debug(
            "Could not set worker name into logger ({0})".format(identity)
        )


def workerName(index):
    """Socket identity of the worker of the given launch index."""
    return "worker-{0}".format(index).encode()


def getPackageRoot():
    """Return the directory containing the pitrapez package."""
    return os.path.dirname(os.path.dirname(os.path.abspath(pitrapez.__file__)))


def getWorkerEnvironment(pythonPath=None):
    """Return a copy of the environment with the package root prepended to
    PYTHONPATH, so workers import the same code as the origin."""
    env = os.environ.copy()
    paths = [pythonPath or getPackageRoot()]
    if env.get("PYTHONPATH"):
        paths.append(env["PYTHONPATH"])
    env["PYTHONPATH"] = os.pathsep.join(paths)
    return env


def KeyboardInterruptHandler(signum, frame):
    """This is use in the interruption handler"""
    raise KeyboardInterrupt("Shutting down!")
