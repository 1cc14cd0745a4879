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
from collections import deque
import itertools
import time

import pitrapez
from pitrapez._comm import OriginCommunicator
from pitrapez._comm.zmqcomm import INIT, REPLY


# This class encapsulates a stopwatch that returns elapse time in seconds.
class StopWatch(object):
    # initialize stopwatch.
    def __init__(self):
        self.totalTime = 0
        self.startTime = time.perf_counter()
        self.halted = False
    # return elapse time.
    def get(self):
        if self.halted:
            return self.totalTime
        else:
            return self.totalTime + time.perf_counter() - self.startTime
    # halt stopWatch.
    def halt(self):
        self.halted = True
        self.totalTime += time.perf_counter() - self.startTime
    # resume stopwatch.
    def resume(self):
        self.halted = False
        self.startTime = time.perf_counter()
    # set stopwatch to zero.
    def reset(self):
        self.__init__()


class UnrecognizedFuture(Exception):
    """Some Operation Involved an invalid/unrecognized future"""
    pass


class WorkerLost(Exception):
    """A worker process ended before returning the futures it was given."""
    pass


class Future(object):
    """This class encapsulates an independent future that can be executed in
    parallel. The root future runs on the origin and spawns children that are
    executed by the workers."""
    rank = itertools.count()
    def __init__(self, parentId, callable, *args, **kargs):
        """Initialize a new Future."""
        self.id = (pitrapez.worker, next(Future.rank))
        self.executor = None  # name of the executing worker
        self.parentId = parentId  # id of parent
        self.callable = callable  # callable object
        self.args = args  # arguments of callable
        self.kargs = kargs  # key arguments of callable
        self.stopWatch = StopWatch()  # stop watch for measuring time
        self.greenlet = None  # cooperative thread for running future
        self.resultValue = None  # future result
        self.exceptionValue = None  # exception raised by callable
        self.exceptionTraceback = None
        self.executionTime = None
        self.isDone = False
        self.callback = []  # set callback
        self.children = {}  # set children list of the callable (dict for speedier delete)
        # insert future into global dictionary
        pitrapez._control.futureDict[self.id] = self

    def __eq__(self, other):
        # This uses he fact that id's are unique
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        """Convert future to string."""
        return "{0}:{1}{2}{3}={4}".format(
            self.id,
            getattr(self.callable, "__name__", "partial"),
            self.args,
            self.kargs,
            self.resultValue,
        )

    def _switch(self, future):
        """Switch greenlet."""
        pitrapez._control.current = self
        assert self.greenlet is not None, ("No greenlet to switch to:"
                                           "\n{0}".format(self.__dict__))
        return self.greenlet.switch(future)

    def done(self):
        """Returns True if the call finished running, False otherwise. This
        function processes the messages waiting on the origin socket."""
        queue = pitrapez._control.execQueue
        if queue is not None and not self._ended():
            queue.updateQueue()
        return self._ended()

    def _ended(self):
        """True if the call finished running, False otherwise. This function
        does not update the queue."""
        return self.isDone

    def result(self):
        """Return the value returned by the call. If the call hasn't yet
        completed then this method will wait for it, without limit.

        If the call raised an exception then this method will raise the same
        exception.

        :returns: The value returned by the callable object."""
        if not self._ended():
            return pitrapez.futures._join(self)
        if self.exceptionValue is not None:
            raise self.exceptionValue
        return self.resultValue

    def exception(self):
        """Return the exception raised by the call, or None if it completed
        without raising."""
        return self.exceptionValue

    def add_done_callback(self, callable_):
        """Attach a callable to the future that will be called on the origin
        when the future finishes running. Callable will be called with the
        future as its only argument.

        If the future has already completed then callable will be called
        immediately."""
        self.callback.append(callable_)

        # If already completed, execute it immediately
        if self._ended():
            self.callback[-1](self)

    def _execute_callbacks(self):
        for callback in self.callback:
            try:
                callback(self)
            except Exception:
                pitrapez.logger.exception(
                    "Callback of future {0} raised".format(self.id)
                )


class FutureQueue(object):
    """This class encapsulates the futures that are pending execution on the
    workers of a pool. Within this class lies the entry points for future
    communications.

    No future is handed out before every expected worker advertised itself;
    from then on each pending future goes to the idle worker that waited
    the longest, so a batch of as many futures as workers is spread one per
    worker, in launch order."""
    def __init__(self, workers, healthCheck=None):
        """Initialize queue to empty elements and create a communication
        object.

        :param workers: Names of the workers expected to connect.
        :param healthCheck: Callable invoked whenever a poll times out; it
            raises if the pool can no longer answer."""
        self.workers = list(workers)
        self.healthCheck = healthCheck
        self.movable = deque()
        self.ready = deque()
        self.inprogress = {}
        self.connected = set()
        self.available = deque()
        self.started = False
        self.socket = OriginCommunicator()

    def append(self, future):
        """Queue a newly spawned future for remote execution."""
        if future.greenlet is not None or future.isDone:
            raise ValueError(
                "The future id {0} being added to queue is not movable"
                .format(future.id))
        self.movable.append(future)
        self.flush()

    def flush(self):
        """Hand pending futures to idle workers, one future per worker."""
        if not self.started:
            return
        while self.movable and self.available:
            worker = self.available.popleft()
            future = self.movable.popleft()
            self.socket.sendFuture(worker, future)
            self.inprogress[worker] = future
            pitrapez.logger.debug(
                "Sent {0} to worker {1}".format(future.id, worker)
            )

    def pop(self):
        """Pop the next future that came back from a worker, blocking until
        one arrives."""
        while len(self.ready) == 0:
            self.flush()
            if not self.socket._poll(pitrapez.POLLING_TIME):
                if self.healthCheck is not None:
                    self.healthCheck()
            self.updateQueue()
        return self.ready.popleft()

    def waitWorkers(self):
        """Block until every expected worker advertised itself."""
        while not self.started:
            if not self.socket._poll(pitrapez.POLLING_TIME):
                if self.healthCheck is not None:
                    self.healthCheck()
            self.updateQueue()

    def _startWorker(self, worker):
        if worker in self.connected:
            pitrapez.logger.warning(
                "Worker {0} advertised itself twice".format(worker)
            )
            return
        self.connected.add(worker)
        pitrapez.logger.debug("Worker {0} is ready".format(worker))
        if self.started:
            self.available.append(worker)
        elif self.connected.issuperset(self.workers):
            self.available.extend(self.workers)
            self.available.extend(sorted(self.connected - set(self.workers)))
            self.started = True
            pitrapez.logger.debug(
                "All {0} worker(s) connected".format(len(self.connected))
            )

    def updateQueue(self):
        """Process inbound communication buffer."""
        for category, worker, future in self.socket.recvIncoming():
            if category == INIT:
                self._startWorker(worker)
            elif category == REPLY:
                self.inprogress.pop(worker, None)
                self.available.append(worker)
                try:
                    thisFuture = pitrapez._control.futureDict[future.id]
                except KeyError:
                    pitrapez.logger.warning(
                        'Received an unexpected future: {0}'.format(future.id)
                    )
                    continue
                thisFuture.resultValue = future.resultValue
                thisFuture.exceptionValue = future.exceptionValue
                thisFuture.exceptionTraceback = future.exceptionTraceback
                thisFuture.executor = future.executor
                thisFuture.executionTime = future.executionTime
                thisFuture.isDone = True
                self.finalizeReturnedFuture(thisFuture)
        self.flush()

    def finalizeReturnedFuture(self, future):
        """Finalize a future that was generated here and executed remotely.
        """
        if not future.isDone or future.executor is None:
            raise UnrecognizedFuture(
                "The future ID {0} was not executed remotely and returned"
                .format(future.id))
        pitrapez.logger.debug(
            "Future {0} came back from {1} after {2:.6f}s".format(
                future.id,
                future.executor,
                future.executionTime,
            )
        )
        future._execute_callbacks()
        pitrapez._control.delFuture(future)
        self.ready.append(future)

    def shutdown(self):
        """Ask every connected worker to stop and release the socket."""
        for worker in sorted(self.connected):
            self.socket.sendShutdown(worker)
        self.socket.shutdown()
