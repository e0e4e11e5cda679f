'''
Two-variable statistics over running sums.

Only the sufficient statistics are kept, never the samples themselves.
'''

from dataclasses import dataclass
from typing import NamedTuple
import math

from .util import CalculatorError


@dataclass(frozen=True)
class Stats:
    n: float = 0
    sum_x: float = 0.0
    sum_x2: float = 0.0
    sum_y: float = 0.0
    sum_y2: float = 0.0
    sum_xy: float = 0.0

    def add(self, x, y):
        return self._accumulate(x, y, 1)

    def remove(self, x, y):
        '''
        Mirror of add. Nothing stops n from going negative.
        '''
        return self._accumulate(x, y, -1)

    def _accumulate(self, x, y, sign):
        return Stats(n=self.n + sign,
                     sum_x=self.sum_x + sign * x,
                     sum_x2=self.sum_x2 + sign * x * x,
                     sum_y=self.sum_y + sign * y,
                     sum_y2=self.sum_y2 + sign * y * y,
                     sum_xy=self.sum_xy + sign * x * y)


class Regression(NamedTuple):
    slope: float
    intercept: float
    r: float


def mean(stats):
    '''
    (x̄, ȳ)
    '''
    if stats.n == 0:
        raise CalculatorError('Error 2')
    return stats.sum_x / stats.n, stats.sum_y / stats.n


def _sample_sd(n, total, squares):
    return math.sqrt(max(0.0, (squares - total * total / n) / (n - 1)))


def std_dev(stats):
    '''
    Sample standard deviations (sx, sy).
    '''
    n = stats.n
    if n < 2:
        raise CalculatorError('Error 2')
    return (_sample_sd(n, stats.sum_x, stats.sum_x2),
            _sample_sd(n, stats.sum_y, stats.sum_y2))


def regression(stats):
    '''
    Least-squares line y = slope·x + intercept and correlation r.

    Too few samples or no spread in x gives a zero line; no spread in y
    counts as a perfect fit.
    '''
    n = stats.n
    spread_x = n * stats.sum_x2 - stats.sum_x ** 2
    if n < 2 or spread_x == 0:
        return Regression(0.0, 0.0, 0.0)
    covariance = n * stats.sum_xy - stats.sum_x * stats.sum_y
    slope = covariance / spread_x
    intercept = (stats.sum_y - slope * stats.sum_x) / n
    denominator = math.sqrt(max(0.0, spread_x * (n * stats.sum_y2 - stats.sum_y ** 2)))
    r = 1.0 if denominator == 0 else covariance / denominator
    return Regression(slope, intercept, r)


def estimate_x(stats, y):
    line = regression(stats)
    x = 0.0 if line.slope == 0 else (y - line.intercept) / line.slope
    return x, line.r


def estimate_y(stats, x):
    line = regression(stats)
    return line.slope * x + line.intercept, line.r


def weighted_mean(stats):
    '''
    Mean of x weighted by y.
    '''
    if stats.sum_y == 0:
        raise CalculatorError('Error 2')
    return stats.sum_xy / stats.sum_y
