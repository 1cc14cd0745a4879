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
from collections import namedtuple

from ._types import Future
from . import _control as control
from .fallbacks import (
    ensureStartedProperlyMapFallback,
    ensureStartedProperly,
    NotStartedProperly
)


# Constants stated by PEP 3148 (http://www.python.org/dev/peps/pep-3148/#module-functions)
FIRST_COMPLETED = 'FIRST_COMPLETED'
FIRST_EXCEPTION = 'FIRST_EXCEPTION'
ALL_COMPLETED = 'ALL_COMPLETED'

DoneAndNotDoneFutures = namedtuple('DoneAndNotDoneFutures', 'done not_done')

# This is the greenlet for running the controller logic.
_controller = None


def _startup(rootFuture, *args, **kargs):
    """Runs the root future on the origin.

    :param rootFuture: Any callable object (function or class object with *__call__*
        method); this object will be called once and allows the use of parallel
        calls inside this object.
    :param args: A tuple of positional arguments that will be passed to the
        callable object.
    :param kargs: A dictionary of additional keyword arguments that will be
        passed to the callable object.

    :returns: The result of the root Future.

    The futures queue (control.execQueue) must be in place; see
    launcher.WorkerPool.run."""
    import greenlet
    global _controller
    _controller = greenlet.greenlet(control.runController)
    try:
        return _controller.switch(rootFuture, *args, **kargs)
    finally:
        _controller = None


def _mapFuture(callable_, *iterables):
    """Similar to the built-in map function, but each of its
    iteration will spawn a separate independent parallel Future that will run
    on a worker as `callable(*args)`.

    :returns: A list of Future objects, each corresponding to an iteration of
        map."""
    childrenList = []
    for args in zip(*iterables):
        childrenList.append(submit(callable_, *args))
    return childrenList


def _mapGenerator(futures):
    """Generator function that iterates through the results in-order."""
    for future in _waitAll(*futures):
        yield future.resultValue


@ensureStartedProperlyMapFallback
def map(func, *iterables):
    """map(func, *iterables)
    Equivalent to
    `map(func, \\*iterables, ...)
    <http://docs.python.org/library/functions.html#map>`_
    but *func* is executed on the workers and several calls to func may be
    made concurrently. If a call raises an exception then that exception will
    be raised when its value is retrieved from the iterator.

    :param func: Any picklable callable object (function or class object with
        *__call__* method) defined in an importable module.
    :param iterables: Iterable objects; each will be zipped to form an iterable
        of arguments tuples that will be passed to the callable object as a
        separate Future.

    :returns: A generator of map results, each corresponding to one map
        iteration."""
    futures = _mapFuture(func, *iterables)
    return _mapGenerator(futures)


@ensureStartedProperly
def submit(func, *args):
    """Submit an independent asynchronous :class:`~pitrapez._types.Future`
    that will run on a worker as `func(*args)`.

    :param func: Any picklable callable object (function or class object with
        *__call__* method) defined in an importable module.
    :param args: A tuple of positional arguments that will be passed to the
        func object.

    :returns: A future object for retrieving the Future result."""
    assert callable(func), (
        "The provided func parameter is not a callable."
    )
    child = Future(control.current.id, func, *args)

    control.futureDict[control.current.id].children[child] = None
    control.execQueue.append(child)
    return child


def _waitAny(*children):
    """Waits on any child Future created by the calling Future.

    :param children: A tuple of children Future objects spawned by the calling
        Future.

    :return: A generator function that iterates on futures that are done.

    The generator produces results of the children in a non deterministic order
    that depends on the particular parallel execution of the Futures. The
    generator returns a tuple as soon as one becomes available."""
    n = len(children)
    # check for available results
    for future in children:
        if future.exceptionValue:
            raise future.exceptionValue
        if future._ended():
            yield future
            n -= 1
    future = control.current
    while n > 0:
        # wait for remaining results; switch to controller
        future.stopWatch.halt()
        childFuture = _controller.switch(future)
        future.stopWatch.resume()
        if childFuture.exceptionValue:
            raise childFuture.exceptionValue
        # Only yield if executed future was in children, otherwise loop
        if childFuture in children:
            yield childFuture
            n -= 1


def _waitAll(*children):
    """Wait on all child futures specified by a tuple of previously created
       Future.

    The generator produces results in the order that they are specified by
    the children argument."""
    for future in children:
        for f in _waitAny(future):
            yield f


def wait(fs, return_when=ALL_COMPLETED):
    """Wait for the futures in the given sequence to complete. There is no
    limit on the wait time. An exception raised by one of the futures is
    raised here as soon as it comes back.

    :param fs: The sequence of Futures to wait upon.
    :param return_when: Indicates when this function should return. The options
        are:

        ===============   ================================================
        FIRST_COMPLETED   Return when any future finishes.
        FIRST_EXCEPTION   Return when any future finishes by raising an
                          exception. If no future raises an exception then
                          it is equivalent to ALL_COMPLETED.
        ALL_COMPLETED     Return when all futures finish.
        ===============   ================================================

    :return: A named 2-tuple of sets. The first set, named 'done', contains the
        futures that completed before the wait completed. The second set, named
        'not_done', contains uncompleted futures."""
    if return_when == FIRST_COMPLETED:
        next(_waitAny(*fs))
    elif return_when in [ALL_COMPLETED, FIRST_EXCEPTION]:
        for _ in _waitAll(*fs):
            pass
    else:
        raise ValueError("Unknown return_when: {0}".format(return_when))
    done = set(f for f in fs if f._ended())
    not_done = set(fs) - done
    return DoneAndNotDoneFutures(done, not_done)


def as_completed(fs):
    """Iterates over the given futures that yields each as it completes. This
    call is blocking.

    :param fs: The sequence of Futures to wait upon.

    :return: An iterator that yields the given Futures as they complete."""
    return _waitAny(*fs)


def _join(child):
    """This private function is for joining the current Future with one of its
    child Future.

    :param child: A child Future object spawned by the calling Future.

    :return: The result of the child Future."""
    for future in _waitAny(child):
        return future.resultValue
