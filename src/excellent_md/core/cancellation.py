"""
取消令牌
一次转换调用共享一个令牌：截止时间（超时）或调用方主动取消
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from .errors import ConversionCancelled, ConversionTimeout


@dataclass
class CancellationToken:
    """协作式取消信号，check() 为非阻塞轮询"""

    deadline: float | None = None
    _event: threading.Event = field(default_factory=threading.Event, init=False, repr=False)
    _reason: str | None = field(default=None, init=False)

    @classmethod
    def with_timeout(cls, seconds: float) -> CancellationToken:
        """创建在 seconds 秒后过期的令牌"""
        return cls(deadline=time.monotonic() + seconds)

    @classmethod
    def expired(cls) -> CancellationToken:
        """创建已过期的令牌"""
        return cls(deadline=time.monotonic())

    def cancel(self, reason: str = "cancelled by caller") -> None:
        """主动取消（可在其他线程调用），已超时则保持超时状态"""
        if self._event.is_set() or self.timed_out:
            return
        self._reason = reason
        self._event.set()

    @property
    def timed_out(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.timed_out

    def check(self) -> None:
        """已取消则抛出异常，先发生的原因生效"""
        if self._event.is_set():
            raise ConversionCancelled(self._reason or "cancelled by caller")
        if self.timed_out:
            raise ConversionTimeout()
