import os
import sys


# Ensure `src/backend` is on sys.path so `common...`, `api...` and `scripts...` import
# without an installed package, even when pytest runs from the repository root.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)
