"""
Id generation capability

request / interaction id 由外部注入，測試時可換成可預期的序號。
"""

import itertools
import uuid
from typing import Protocol


class IdGenerator(Protocol):
    """產生唯一 id 的介面"""

    def new_id(self) -> str:
        ...


class UuidIdGenerator:
    """正式環境用：prefix + uuid4 前 8 碼"""

    def __init__(self, prefix: str = "req"):
        self.prefix = prefix

    def new_id(self) -> str:
        return f"{self.prefix}_{uuid.uuid4().hex[:8]}"


class SequentialIdGenerator:
    """測試用：prefix_0001, prefix_0002, ..."""

    def __init__(self, prefix: str = "id", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def new_id(self) -> str:
        return f"{self.prefix}_{next(self._counter):04d}"
