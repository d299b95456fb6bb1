"""
转换统计
以接口形式注入到转换器和服务中，替代进程级全局计数器
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .models import SheetOutcome


class ConversionMetrics(ABC):
    """统计接口"""

    @abstractmethod
    def request_received(self) -> None:
        """收到一次转换请求"""
        ...

    @abstractmethod
    def conversion_succeeded(self) -> None:
        """转换成功"""
        ...

    @abstractmethod
    def conversion_failed(self) -> None:
        """转换失败（请求被拒绝或致命错误）"""
        ...

    @abstractmethod
    def sheet_processed(self, outcome: SheetOutcome) -> None:
        """一个 sheet 处理完成"""
        ...


class NullMetrics(ConversionMetrics):
    """不做任何统计"""

    def request_received(self) -> None:
        pass

    def conversion_succeeded(self) -> None:
        pass

    def conversion_failed(self) -> None:
        pass

    def sheet_processed(self, outcome: SheetOutcome) -> None:
        pass


@dataclass
class InMemoryMetrics(ConversionMetrics):
    """进程内计数器（线程安全）"""

    requests_total: int = 0
    conversions_total: int = 0
    conversion_errors_total: int = 0
    sheets_total: int = 0
    sheet_errors_total: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def request_received(self) -> None:
        with self._lock:
            self.requests_total += 1

    def conversion_succeeded(self) -> None:
        with self._lock:
            self.conversions_total += 1

    def conversion_failed(self) -> None:
        with self._lock:
            self.conversion_errors_total += 1

    def sheet_processed(self, outcome: SheetOutcome) -> None:
        with self._lock:
            self.sheets_total += 1
            if outcome.error:
                self.sheet_errors_total += 1

    def snapshot(self) -> dict[str, int]:
        """返回当前计数"""
        with self._lock:
            return {
                "requests_total": self.requests_total,
                "conversions_total": self.conversions_total,
                "conversion_errors_total": self.conversion_errors_total,
                "sheets_total": self.sheets_total,
                "sheet_errors_total": self.sheet_errors_total,
            }
