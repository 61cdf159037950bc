"""Module entry point for ``python -m cli``.

Equivalent to the ``datablob`` console script.
"""

from __future__ import annotations

import sys

from cli.main import main


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
