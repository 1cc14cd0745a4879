#!/usr/bin/env python
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
import argparse

import pitrapez
from pitrapez import utils
from pitrapez import _control as control
from pitrapez._comm import WorkerCommunicator, Shutdown


class Bootstrap(object):
    """Connects a worker process to its origin and executes the futures it
    receives until the origin asks it to stop."""
    def __init__(self):
        self.parser = None
        self.args = None
        self.verbose = 0

    def main(self, argv=None):
        """Bootstrap a worker."""
        if self.args is None:
            self.parse(argv)

        self.log = utils.initLogging(self.verbose, name="worker")

        self.setWorker()

        self.run()

    def makeParser(self):
        """Generate the argparse parser object containing the bootloader
           accepted parameters
        """
        self.parser = argparse.ArgumentParser(description='Starts a worker.',
                                              prog=("{0} -m pitrapez.bootstrap"
                                                    ).format(sys.executable))

        self.parser.add_argument('--origin-address',
                                 help="The zmq address of the origin socket",
                                 required=True)
        self.parser.add_argument('--worker-index',
                                 help="The launch index of this worker",
                                 type=int,
                                 default=0)
        self.parser.add_argument('--verbose', '-v', action='count',
                                 help=("Verbosity level of this worker "
                                       "(-vv for more)"), default=0)
        self.parser.add_argument('--quiet', '-q', action='store_true',
                                 help="Suppress the output")

    def parse(self, argv=None):
        """Generate a argparse parser and parse the command-line arguments"""
        if self.parser is None:
            self.makeParser()
        self.args = self.parser.parse_args(argv)
        self.verbose = self.args.verbose if not self.args.quiet else -1

    def setWorker(self):
        """Setup the worker constants."""
        pitrapez.IS_RUNNING = True
        pitrapez.worker = utils.workerName(self.args.worker_index)
        pitrapez.logger = self.log
        utils.setLoggerIdentity(self.log, pitrapez.worker.decode())

    def run(self):
        """Execute the futures sent by the origin, one at a time."""
        comm = WorkerCommunicator(self.args.origin_address, pitrapez.worker)
        try:
            comm.sendReady()
            while True:
                try:
                    future = comm.recvFuture()
                except Shutdown as e:
                    pitrapez.logger.debug("Stopping: {0}".format(e))
                    break
                pitrapez.logger.debug("Running {0}".format(future))
                control.runFuture(future)
                comm.sendResult(future)
        finally:
            comm.shutdown()
            pitrapez.IS_RUNNING = False


if __name__ == "__main__":
    b = Bootstrap()
    b.main()
