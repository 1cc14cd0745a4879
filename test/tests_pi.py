import pitrapez

import unittest
import math

from pitrapez import futures
from pitrapez.integrator import integrate
from pitrapez.launcher import WorkerPool
from pitrapez.pi import chunkBounds, sumInOrder, integrateChunks, calculatePi


def failingChunks(totalIntervals):
    """Root future whose only child divides by zero on its worker."""
    task = futures.submit(integrate, 0, totalIntervals, 0)
    futures.wait([task], return_when=futures.ALL_COMPLETED)
    return task.result()


class TestChunkBounds(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(TestChunkBounds, self).__init__(*args, **kwargs)

    def assertPartition(self, bounds, total):
        self.assertEqual(bounds[0][0], 0)
        self.assertEqual(bounds[-1][1], total)
        for (_, end), (start, _) in zip(bounds, bounds[1:]):
            self.assertEqual(end, start)
        self.assertEqual(sum(end - start for start, end in bounds), total)

    def test_four_intervals_two_workers(self):
        self.assertEqual(chunkBounds(4, 2), [(0, 2), (2, 4)])

    def test_single_worker(self):
        self.assertEqual(chunkBounds(100000000, 1), [(0, 100000000)])

    def test_remainder_goes_to_last(self):
        self.assertEqual(chunkBounds(10, 3), [(0, 3), (3, 6), (6, 10)])
        self.assertEqual(chunkBounds(100000000, 7)[-1],
                         (6 * 14285714, 100000000))

    def test_coverage(self):
        for total in (1, 2, 5, 49, 50, 51, 1000, 100000000):
            for workers in range(1, min(total, 50) + 1):
                bounds = chunkBounds(total, workers)
                self.assertEqual(len(bounds), workers)
                self.assertPartition(bounds, total)

    def test_equal_chunks_when_divisible(self):
        bounds = chunkBounds(100000000, 50)
        self.assertEqual(set(end - start for start, end in bounds),
                         set([2000000]))


class TestSumInOrder(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(TestSumInOrder, self).__init__(*args, **kwargs)

    def test_left_fold(self):
        partials = [1e16, 1.0, -1e16, 1.0]
        # ((1e16 + 1) - 1e16) + 1 loses the first 1.0
        self.assertEqual(sumInOrder(partials), 1.0)

    def test_empty(self):
        self.assertEqual(sumInOrder([]), 0.0)


class TestCalculatePi(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(TestCalculatePi, self).__init__(*args, **kwargs)

    def test_four_intervals_two_workers(self):
        pi, elapsed = calculatePi(4, 2)
        expected = sumInOrder([integrate(0, 2, 4), integrate(2, 4, 4)])
        self.assertEqual(pi, expected)
        self.assertAlmostEqual(pi, 3.1311764705882354)
        self.assertGreater(elapsed, 0.0)

    def test_matches_local_computation(self):
        total = 20000
        pi, _ = calculatePi(total, 4)
        partials = [integrate(start, end, total)
                    for start, end in chunkBounds(total, 4)]
        self.assertEqual(pi, sumInOrder(partials))
        self.assertAlmostEqual(pi, math.pi, delta=1e-8)

    def test_invariant_under_worker_count(self):
        total = 10000
        single, _ = calculatePi(total, 1)
        for workers in (2, 3, 8):
            pi, _ = calculatePi(total, workers)
            self.assertAlmostEqual(pi, single, places=12)

    def test_one_and_fifty_workers(self):
        total = 5000
        single, _ = calculatePi(total, 1)
        fifty, _ = calculatePi(total, 50)
        self.assertAlmostEqual(single, fifty, places=12)

    def test_worker_exception_is_raised(self):
        pool = WorkerPool(2)
        with self.assertRaises(ZeroDivisionError):
            pool.run(failingChunks, 10)
        self.assertEqual(pool.subprocesses, [])

    def test_pool_is_reusable_after_run(self):
        pool = WorkerPool(3)
        first = pool.run(integrateChunks, 300, 3)
        second = pool.run(integrateChunks, 300, 3)
        self.assertEqual(first, second)


if __name__ == "__main__":
    suite = unittest.TestSuite()
    loader = unittest.TestLoader()
    suite.addTests(loader.loadTestsFromTestCase(TestChunkBounds))
    suite.addTests(loader.loadTestsFromTestCase(TestSumInOrder))
    suite.addTests(loader.loadTestsFromTestCase(TestCalculatePi))
    unittest.TextTestRunner(verbosity=2).run(suite)
