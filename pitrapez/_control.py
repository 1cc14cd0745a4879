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
import traceback

import greenlet

from ._types import Future, UnrecognizedFuture
from .fallbacks import NotStartedProperly
import pitrapez

# Future currently running in greenlet
current = None
# Dictionary of existing futures
futureDict = {}
# Queue of futures pending execution
execQueue = None


def delFuture(afuture):
    """Delete future afuture"""
    try:
        del futureDict[afuture.id]
    except KeyError:
        raise UnrecognizedFuture(
            "The future ID {0} was unavailable in the "
            "futureDict of worker {1}".format(afuture.id, pitrapez.worker))
    try:
        del futureDict[afuture.parentId].children[afuture]
    except KeyError:
        # The root future has no parent
        pass


def runFuture(future):
    """Callable greenlet in charge of running tasks. Workers call it
    directly."""
    future.stopWatch.reset()
    future.executor = pitrapez.worker
    try:
        future.resultValue = future.callable(*future.args, **future.kargs)
    except Exception as err:
        future.exceptionValue = err
        future.exceptionTraceback = str(traceback.format_exc())
        pitrapez.logger.debug(
            "The following error occured on a worker:\n%r\n%s",
            err,
            traceback.format_exc(),
        )
    future.executionTime = future.stopWatch.get()
    future.isDone = True
    return future


def runController(callable_, *args, **kargs):
    """Callable greenlet implementing controller logic."""
    if execQueue is None:
        raise NotStartedProperly(
            "No worker pool is running. Use launcher.WorkerPool.run().")

    rootId = (-1, 0)
    future = Future(rootId, callable_, *args, **kargs)
    future.greenlet = greenlet.greenlet(runFuture)
    future = future._switch(future)

    # Every switch back here comes from a future waiting on its children:
    # hand it the next future returned by the workers.
    while not (future.parentId == rootId and future._ended()):
        child = execQueue.pop()
        try:
            parent = futureDict[child.parentId]
        except KeyError:
            pitrapez.logger.warning(
                "Orphan future {0} returned by {1}".format(
                    child.id,
                    child.executor,
                )
            )
            continue
        future = parent._switch(child)

    # Special case of removing the root future from the futureDict
    delFuture(future)

    if future.exceptionValue is not None:
        raise future.exceptionValue
    return future.resultValue
