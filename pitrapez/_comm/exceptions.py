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


class Shutdown(Exception):
    """The origin asked this worker to stop."""
    pass


class ReferenceBroken(Exception):
    """An element could not be pickled or its definition could not be found
    by the receiving process."""
    pass
