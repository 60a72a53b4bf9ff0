import io
import unittest
from contextlib import redirect_stdout, redirect_stderr

from paillier_scheme import cli


def run_cli(*argv):
    buf = io.StringIO()
    with redirect_stdout(buf):
        status = cli.main(list(argv))
    return status, buf.getvalue()


class TestCli(unittest.TestCase):
    """
    Tests the demo and benchmark commands.
    """

    def test_01_demo_passes(self):
        print("\n[Test CLI] Running: test_01_demo_passes")
        status, out = run_cli("demo", "--bits", "16")
        self.assertEqual(status, 0)
        self.assertIn("Message after encryption and decryption: 5555", out)
        self.assertIn("m1 + m2 mod N: 112", out)
        self.assertIn("m1 * m2 mod N: 3015", out)
        self.assertNotIn("FAILED", out)

    def test_02_demo_with_seed(self):
        print("[Test CLI] Running: test_02_demo_with_seed")
        status, out = run_cli("demo", "--bits", "24", "--seed", "7", "--m1", "1000", "--m2", "2000")
        self.assertEqual(status, 0)
        self.assertIn("NOT secure", out)
        self.assertIn("m1 + m2 mod N: 3000", out)
        self.assertIn("m1 * m2 mod N: 2000000", out)

    def test_03_benchmark(self):
        print("[Test CLI] Running: test_03_benchmark")
        status, out = run_cli("benchmark", "--bits", "32", "--rounds", "3", "--seed", "1")
        self.assertEqual(status, 0)
        for label in ("Key generation", "Encrypt", "Decrypt", "Add", "Multiply"):
            self.assertIn(label, out)

    def test_04_invalid_bits_reported(self):
        print("[Test CLI] Running: test_04_invalid_bits_reported")
        status, out = run_cli("demo", "--bits", "0")
        self.assertEqual(status, 2)
        self.assertIn("Error:", out)

    def test_05_invalid_rounds(self):
        print("[Test CLI] Running: test_05_invalid_rounds")
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main(["benchmark", "--rounds", "0"])

    def test_06_command_required(self):
        print("[Test CLI] Running: test_06_command_required")
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main([])


if __name__ == "__main__":
    unittest.main()
