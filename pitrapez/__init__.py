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
__author__ = ("pitrapez Development Team",)
__version__ = "1.0"
__revision__ = "0"

import logging


# In case pitrapez was not initialized correctly
CONFIGURATION = {}
IS_RUNNING = False
worker = b"origin"
logger = logging.getLogger()

# Number of trapezoids over [0, 1] used by the command-line session
TOTAL_INTERVALS = 100000000
MIN_WORKERS = 1
MAX_WORKERS = 50

# Milliseconds between two polls of the origin socket
POLLING_TIME = 500
# Seconds given to workers to exit after a shutdown before being terminated
SHUTDOWN_GRACE = 5
