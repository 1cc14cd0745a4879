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
# Global imports
import argparse
import re
import sys
import signal
import traceback

# Local imports
import pitrapez
from pitrapez import utils
from pitrapez.pi import calculatePi


PROMPT = "Podaj liczbe watkow (1-50): "
RANGE_ERROR = "Liczba watkow musi byc w przedziale 1-50.\n"
TIME_REPORT = "Czas obliczen z {0} watkami: {1:.6f} sekund.\n"
PI_REPORT = "Przyblizona wartosc PI wynosi: {0:.8f}\n"

leadingInteger = re.compile(r"\s*([-+]?\d+)")


def readWorkerCount(stream):
    """Read the worker count the way a C++ stream extraction does: the
    blank lines are skipped and the leading integer of the first other line
    is used, anything else reads as 0."""
    line = stream.readline()
    while line and not line.strip():
        line = stream.readline()
    match = leadingInteger.match(line)
    if match is None:
        return 0
    return int(match.group(1))


def makeParser():
    parser = argparse.ArgumentParser(
        description="Estimates PI by integrating 4/(1+x^2) over [0, 1] with "
                    "the trapezoidal rule, split over parallel workers. The "
                    "worker count is read from the standard input.",
        prog="{0} -m pitrapez".format(sys.executable),
    )
    parser.add_argument('--verbose', '-v',
                        action='count',
                        help="Verbosity level of this launch script (-vv for "
                             "more)",
                        default=0)
    parser.add_argument('--quiet', '-q',
                        action='store_true',
                        help="Only report errors")
    parser.add_argument('--python-interpreter',
                        nargs=1,
                        help="The python interpreter executable with which to "
                             "run the workers",
                        default=[sys.executable],
                        metavar="Path")
    return parser


def main(argv=None):
    """Interactive session: asks for the worker count, estimates PI and
    reports the computation time and the estimate."""
    try:
        signal.signal(signal.SIGQUIT, utils.KeyboardInterruptHandler)
    except AttributeError:
        # SIGQUIT doesn't exist on Windows
        signal.signal(signal.SIGTERM, utils.KeyboardInterruptHandler)

    args = makeParser().parse_args(argv)
    verbose = args.verbose if not args.quiet else -1
    pitrapez.logger = utils.initLogging(verbosity=verbose)
    pitrapez.CONFIGURATION.update({
        'verbose': verbose,
        'python_interpreter': args.python_interpreter[0],
    })

    sys.stdout.write(PROMPT)
    sys.stdout.flush()
    numThreads = readWorkerCount(sys.stdin)

    if not pitrapez.MIN_WORKERS <= numThreads <= pitrapez.MAX_WORKERS:
        sys.stderr.write(RANGE_ERROR)
        sys.stderr.flush()
        sys.exit(1)

    try:
        pi, elapsed = calculatePi(pitrapez.TOTAL_INTERVALS, numThreads)
    except Exception:
        pitrapez.logger.error('Error while computing PI:')
        pitrapez.logger.error(traceback.format_exc())
        sys.exit(1)

    sys.stdout.write(TIME_REPORT.format(numThreads, elapsed))
    sys.stdout.write(PI_REPORT.format(pi))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
