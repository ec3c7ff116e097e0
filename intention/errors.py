# intention/errors.py

from typing import List

class IntentionError(Exception):
    """Base error for the intention package"""

class IntentStoreError(IntentionError):
    """Storage could not be read or written (disk-level failure or unaddressable path)"""

class DanglingOverrideError(IntentionError):
    """An appended intent overrides ids missing from the file's history"""

    def __init__(self, path: str, missing: List[str]):
        self.path = path
        self.missing = missing
        super().__init__(
            f"Override ids not found in history of {path}: {', '.join(missing)}"
        )
