"""Shared test configuration."""

import sys
from pathlib import Path

# Run from a plain checkout without installing the package
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
