import io
import os
import tempfile
import unittest

from linesuffix.linesuffix import run


class RunTests(unittest.TestCase):
    def test_stream_to_stream(self):
        out = io.StringIO()
        code = run(["--suffix", ",x\\n", "--first-line-suffix", ",D\\n"], data=io.StringIO("A,B,C\n1,2,3\n"), out=out)
        self.assertEqual(code, 0)
        self.assertEqual(out.getvalue(), "A,B,C,D\n1,2,3,x\n")

    def test_input_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "rows.csv")
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write("1,2\r\n3,4\r\n\r\n")
            out = io.StringIO()
            self.assertEqual(run([path, "-s", ",x\\n", "-b", "2"], out=out), 0)
        self.assertEqual(out.getvalue(), "1,2,x\n3,4,x\n")

    def test_missing_suffix(self):
        with self.assertRaises(SystemExit) as cm:
            run([], data=io.StringIO("a\n"), out=io.StringIO())
        self.assertEqual(cm.exception.code, 2)

    def test_missing_input_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "missing.csv")
            self.assertEqual(run([path, "-s", ";"], out=io.StringIO()), 1)

    def test_invalid_buffer_size(self):
        data = io.StringIO("a\n")
        self.assertEqual(run(["-s", ";", "-b", "0"], data=data, out=io.StringIO()), 1)
        self.assertFalse(data.closed)


if __name__ == "__main__":
    unittest.main(verbosity=2)
