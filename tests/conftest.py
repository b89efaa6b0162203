import os
import sys

# Ensure src/ (resort.*, resort_handlers.*) and tests/ (factories) are importable
HERE = os.path.abspath(os.path.dirname(__file__))
ROOT = os.path.abspath(os.path.join(HERE, "..", "src"))
for path in (ROOT, HERE):
    if path not in sys.path:
        sys.path.insert(0, path)
