# PyTest runs this file before even attempting to import any of the test cases,
# so we can set up import paths here.
import os
import sys
from pathlib import Path

test_dir = Path(__file__).parent
root_dir = test_dir.parent.resolve()
src_dir = root_dir / "src"

try:
    import tag_entropy_eval  # noqa: F401
except ImportError:
    # tweak up paths so pytest can work without installing the package
    sys.path.insert(0, os.fspath(src_dir))
