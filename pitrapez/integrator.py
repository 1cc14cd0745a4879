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
"""Trapezoidal rule over a fixed uniform partition of [0, 1]."""


def integrand(x):
    """f(x) = 4 / (1 + x^2), whose integral over [0, 1] is PI."""
    return 4.0 / (1.0 + x * x)


def integrate(start, end, totalIntervals):
    """Sum of the trapezoids of index start (included) to end (excluded).

    :param start: First step index of the range.
    :param end: Step index following the last one of the range.
    :param totalIntervals: Number of equal steps dividing [0, 1].

    :returns: The contribution of the range to the integral, accumulated in
        increasing index order."""
    total = 0.0
    step = 1.0 / totalIntervals
    for i in range(start, end):
        x0 = i * step
        x1 = (i + 1) * step
        total += (integrand(x0) + integrand(x1)) * step / 2.0
    return total
