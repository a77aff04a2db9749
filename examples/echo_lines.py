"""Number the lines of standard input.

    printf 'a\nb\n' | python examples/echo_lines.py | head -1
"""

from __future__ import annotations

import logging

from pipekit import prelude as P
from pipekit import run_effect, zip
from pipekit.handles import stdin_ln, stdout_ln

logging.basicConfig(level=logging.DEBUG)


def numbered():
    counter = P.unfoldr(lambda n: (n, n + 1), 1)
    return zip(counter, stdin_ln()) | P.map(lambda pair: f"{pair[0]:>4}  {pair[1]}")


if __name__ == "__main__":
    run_effect(numbered() | stdout_ln())
