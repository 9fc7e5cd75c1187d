from linesuffix.linesuffix import run

raise SystemExit(run())
