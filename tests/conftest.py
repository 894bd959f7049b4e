"""Shared pytest configuration for the jot tests."""

import io
import os
import sys
import tempfile
from pathlib import Path

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Keep settings away from the real ~/.jot; must run before jot is imported
os.environ["JOT_HOME"] = tempfile.mkdtemp(prefix="jot-tests-")

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
