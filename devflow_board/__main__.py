import sys
from pathlib import Path

from devflow_board.app import run_board

run_board(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
