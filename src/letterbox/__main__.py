"""``python -m letterbox``: serve the newsletter API.

Same flags as ``letterbox run``.
"""

import sys

from letterbox.cli import main

main(["run", *sys.argv[1:]])
