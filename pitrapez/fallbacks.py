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
"""Module containing builins fallbacks or exceptions when the futures API is
used outside of a running worker pool."""
import sys
import warnings
from functools import wraps


class NotStartedProperly(Exception):
    """No worker pool is running"""
    pass


def _controllerNotStarted():
    futures = sys.modules.get('pitrapez.futures')
    return futures is None or not futures.__dict__.get("_controller", None)


def ensureStartedProperlyMapFallback(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if _controllerNotStarted():
            if not hasattr(ensureStartedProperlyMapFallback, "already"):
                warnings.warn(
                    "No worker pool is running.\n"
                    "Start your computation with launcher.WorkerPool.run().\n"
                    "Your map call has been replaced by the builtin "
                    "serial Python map().",
                    RuntimeWarning
                )
                ensureStartedProperlyMapFallback.already = True
            return map(*args, **kwargs)
        return func(*args, **kwargs)
    return wrapper


def ensureStartedProperly(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if _controllerNotStarted():
            raise NotStartedProperly("No worker pool is running.\n"
                                     "Start your computation with "
                                     "launcher.WorkerPool.run().")
        return func(*args, **kwargs)
    return wrapper
