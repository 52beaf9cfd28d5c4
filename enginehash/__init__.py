"""
enginehash — Flutter Engine Snapshot Hash Ledger
================================================
Tracks the Dart VM snapshot hash compiled into every Flutter engine release,
extracted byte-level from the engine's gen_snapshot binary.
"""

__version__ = "1.0.0"
__license__ = "MIT"
__description__ = "Flutter engine snapshot hash extraction and ledger"
