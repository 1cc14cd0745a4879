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
"""Parallel estimation of PI: the integration steps are split in contiguous
chunks, one per worker, and the partial sums are added in chunk order."""
from functools import reduce
import operator

import pitrapez
from pitrapez import futures
from pitrapez.integrator import integrate
from pitrapez.launcher import WorkerPool
from pitrapez._types import StopWatch


def chunkBounds(totalIntervals, numThreads):
    """Split the step indices [0, totalIntervals) in numThreads contiguous
    half-open ranges.

    Every range holds totalIntervals // numThreads steps except the last one,
    which also takes the remainder of the division.

    :returns: A list of (start, end) tuples, in worker order."""
    intervalsPerThread = totalIntervals // numThreads
    bounds = []
    for i in range(numThreads):
        start = i * intervalsPerThread
        if i == numThreads - 1:
            end = totalIntervals
        else:
            end = (i + 1) * intervalsPerThread
        bounds.append((start, end))
    return bounds


def sumInOrder(partials):
    """Left-to-right float accumulation starting at 0.0."""
    # builtin sum() compensates rounding on floats since Python 3.12
    return reduce(operator.add, partials, 0.0)


def integrateChunks(totalIntervals, numThreads):
    """Root future: integrates every chunk on the workers and joins them all
    before adding their partial sums."""
    launches = [
        futures.submit(integrate, start, end, totalIntervals)
        for start, end in chunkBounds(totalIntervals, numThreads)
    ]
    futures.wait(launches, return_when=futures.ALL_COMPLETED)
    return sumInOrder([future.result() for future in launches])


def calculatePi(totalIntervals, numThreads):
    """Estimates PI by integrating 4 / (1 + x^2) over [0, 1] with
    totalIntervals trapezoids spread over numThreads worker processes.

    :returns: A (pi, elapsed) tuple; elapsed is the wall-clock time in seconds
        from the workers launch until all of them are joined."""
    pitrapez.logger.info(
        "Integrating {0} intervals over {1} worker(s).".format(
            totalIntervals,
            numThreads,
        )
    )
    pool = WorkerPool(numThreads)
    watch = StopWatch()
    pi = pool.run(integrateChunks, totalIntervals, numThreads)
    elapsed = watch.get()
    pitrapez.logger.info("PI estimated in {0:.6f}s.".format(elapsed))
    return pi, elapsed
