import pitrapez

import unittest
import io
import re
import sys
import subprocess
from unittest import mock

from pitrapez import __main__ as cli
from pitrapez import utils


class TestReadWorkerCount(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(TestReadWorkerCount, self).__init__(*args, **kwargs)

    def read(self, text):
        return cli.readWorkerCount(io.StringIO(text))

    def test_plain(self):
        self.assertEqual(self.read("4\n"), 4)
        self.assertEqual(self.read("50"), 50)

    def test_leading_token(self):
        self.assertEqual(self.read("  7 workers\n"), 7)
        self.assertEqual(self.read("12abc\n"), 12)
        self.assertEqual(self.read("-3\n"), -3)

    def test_no_integer(self):
        self.assertEqual(self.read("abc\n"), 0)
        self.assertEqual(self.read("\n"), 0)
        self.assertEqual(self.read(""), 0)
        self.assertEqual(self.read("\n \n\t\n"), 0)

    def test_blank_lines_are_skipped(self):
        self.assertEqual(self.read("\n4\n"), 4)
        self.assertEqual(self.read("  \n\t\n 9 \n"), 9)
        self.assertEqual(self.read("\nabc\n5\n"), 0)


class TestSession(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(TestSession, self).__init__(*args, **kwargs)

    def runSession(self, text, argv=()):
        stdout, stderr = io.StringIO(), io.StringIO()
        with mock.patch.object(sys, 'stdin', io.StringIO(text)), \
                mock.patch.object(sys, 'stdout', stdout), \
                mock.patch.object(sys, 'stderr', stderr), \
                mock.patch.object(pitrapez, 'TOTAL_INTERVALS', 1000):
            try:
                code = cli.main(list(argv))
            except SystemExit as e:
                code = e.code
        return code, stdout.getvalue(), stderr.getvalue()

    def test_zero_is_rejected(self):
        code, out, err = self.runSession("0\n")
        self.assertEqual(code, 1)
        self.assertEqual(out, cli.PROMPT)
        self.assertEqual(err, "Liczba watkow musi byc w przedziale 1-50.\n")

    def test_fifty_one_is_rejected(self):
        code, out, err = self.runSession("51\n")
        self.assertEqual(code, 1)
        self.assertEqual(out, "Podaj liczbe watkow (1-50): ")
        self.assertEqual(err, "Liczba watkow musi byc w przedziale 1-50.\n")

    def test_garbage_is_rejected(self):
        code, _, err = self.runSession("many\n")
        self.assertEqual(code, 1)
        self.assertEqual(err, cli.RANGE_ERROR)

    def test_report(self):
        code, out, err = self.runSession("2\n")
        self.assertEqual(code, 0)
        self.assertEqual(err, "")
        lines = out[len(cli.PROMPT):].splitlines()
        self.assertTrue(out.startswith(cli.PROMPT))
        self.assertEqual(len(lines), 2)
        self.assertRegex(
            lines[0],
            r"^Czas obliczen z 2 watkami: \d+\.\d{6} sekund\.$",
        )
        self.assertRegex(
            lines[1],
            r"^Przyblizona wartosc PI wynosi: 3\.14159\d{3}$",
        )

    def test_blank_line_before_count(self):
        code, out, err = self.runSession("\n3\n")
        self.assertEqual(code, 0)
        self.assertEqual(err, "")
        self.assertIn("Czas obliczen z 3 watkami: ", out)

    def test_report_is_fixed_notation(self):
        self.assertEqual(cli.TIME_REPORT.format(4, 0.5),
                         "Czas obliczen z 4 watkami: 0.500000 sekund.\n")
        self.assertEqual(cli.PI_REPORT.format(3.14159264),
                         "Przyblizona wartosc PI wynosi: 3.14159264\n")

    def test_verbose_logs_on_stderr(self):
        code, out, err = self.runSession("1\n", argv=["-v"])
        self.assertEqual(code, 0)
        self.assertIn("Integrating 1000 intervals over 1 worker(s).", err)
        self.assertNotIn("Integrating", out)

    def tearDown(self):
        pitrapez.CONFIGURATION.clear()
        pitrapez.logger = utils.initLogging(0)


class TestCommandLine(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(TestCommandLine, self).__init__(*args, **kwargs)

    def test_out_of_range_exit_code(self):
        for value in ("0", "51"):
            process = subprocess.run(
                [sys.executable, "-m", "pitrapez"],
                input=value + "\n",
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                universal_newlines=True,
                env=utils.getWorkerEnvironment(),
            )
            self.assertEqual(process.returncode, 1)
            self.assertEqual(process.stdout, "Podaj liczbe watkow (1-50): ")
            self.assertEqual(process.stderr,
                             "Liczba watkow musi byc w przedziale 1-50.\n")

    def test_hundred_million_intervals_four_workers(self):
        # Full-size run, takes tens of seconds
        process = subprocess.run(
            [sys.executable, "-m", "pitrapez"],
            input="4\n",
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            universal_newlines=True,
            env=utils.getWorkerEnvironment(),
        )
        self.assertEqual(process.returncode, 0, process.stderr)
        self.assertTrue(process.stdout.startswith(cli.PROMPT))
        lines = process.stdout[len(cli.PROMPT):].splitlines()
        self.assertEqual(len(lines), 2)
        self.assertRegex(
            lines[0],
            r"^Czas obliczen z 4 watkami: \d+\.\d{6} sekund\.$",
        )
        self.assertIn(lines[1], (
            "Przyblizona wartosc PI wynosi: 3.14159264",
            "Przyblizona wartosc PI wynosi: 3.14159265",
        ))


if __name__ == "__main__":
    suite = unittest.TestSuite()
    loader = unittest.TestLoader()
    suite.addTests(loader.loadTestsFromTestCase(TestReadWorkerCount))
    suite.addTests(loader.loadTestsFromTestCase(TestSession))
    suite.addTests(loader.loadTestsFromTestCase(TestCommandLine))
    unittest.TextTestRunner(verbosity=2).run(suite)
