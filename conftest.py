"""Root conftest.py: ensure the local source tree takes priority over installed packages."""
import sys
import os

# Insert the repository root at the beginning of sys.path so that the local
# pkginspector/ directory takes precedence over an installed copy.
_repo_root = os.path.dirname(os.path.abspath(__file__))
if _repo_root not in sys.path:
    sys.path.insert(0, _repo_root)
