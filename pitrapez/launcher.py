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
import sys
import subprocess
import time

import pitrapez
from pitrapez import utils, futures
from pitrapez import _control as control
from pitrapez._types import FutureQueue, WorkerLost


class WorkerPool(object):
    """Worker processes of one parallel run. Every worker is a fresh Python
    process launched by run() and joined before run() returns."""

    def __init__(self, size, pythonExecutable=None, verbose=None):
        assert size > 0, "A pool needs at least one worker."
        self.size = size
        self.pythonExecutable = (
            pythonExecutable
            or pitrapez.CONFIGURATION.get('python_interpreter')
            or sys.executable
        )
        if verbose is None:
            verbose = pitrapez.CONFIGURATION.get('verbose', 0)
        self.verbose = min(max(verbose, 0), 2)
        self.workerNames = [utils.workerName(i) for i in range(size)]
        self.subprocesses = []

    def __repr__(self):
        return "{0} worker(s) ({1})".format(
            self.size,
            self.pythonExecutable,
        )

    def _getWorkerCommandList(self, index, address):
        """Generate the worker command as list"""
        c = [
            self.pythonExecutable,
            '-m',
            'pitrapez.bootstrap',
            '--origin-address', address,
            '--worker-index', str(index),
        ]
        if self.verbose >= 1:
            c.append('-' + 'v' * self.verbose)
        return c

    def launch(self, address):
        """Launch every worker of the pool toward the origin address."""
        env = utils.getWorkerEnvironment()
        for index in range(self.size):
            self.subprocesses.append(
                subprocess.Popen(
                    self._getWorkerCommandList(index, address),
                    env=env,
                )
            )
        pitrapez.logger.debug('Launched {0}.'.format(self))
        return self.subprocesses

    def checkWorkers(self):
        """Raise WorkerLost if a worker process ended during the run."""
        for name, process in zip(self.workerNames, self.subprocesses):
            returnCode = process.poll()
            if returnCode is not None:
                raise WorkerLost(
                    "Worker {0} exited with code {1} before the end of the "
                    "run.".format(name.decode(), returnCode)
                )

    def run(self, func, *args):
        """Launch the workers, run func(*args) as the root future on this
        process and join every worker.

        :returns: The result of func."""
        pitrapez.IS_RUNNING = True
        control.execQueue = FutureQueue(
            self.workerNames,
            healthCheck=self.checkWorkers,
        )
        try:
            self.launch(control.execQueue.socket.address)
            control.execQueue.waitWorkers()
            return futures._startup(func, *args)
        finally:
            control.execQueue.shutdown()
            control.execQueue = None
            control.futureDict.clear()
            self.join()
            pitrapez.IS_RUNNING = False

    def join(self):
        """Wait for every worker; the ones still alive after the shutdown
        grace period are terminated."""
        deadline = time.time() + pitrapez.SHUTDOWN_GRACE
        for process in self.subprocesses:
            try:
                process.wait(timeout=max(deadline - time.time(), 0))
            except subprocess.TimeoutExpired:
                pitrapez.logger.warning(
                    "Terminating worker process {0}.".format(process.pid)
                )
                try:
                    process.terminate()
                    process.wait()
                except OSError:
                    pass
        del self.subprocesses[:]
