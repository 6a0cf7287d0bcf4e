"""
Console progress reporting for long passes (parsing, rendering).
"""


class ProgressReporter:
    """
    Prints ``[LABEL] done/total (pct%)`` each time another ``step_percent``
    of the total is crossed.
    """

    def __init__(self, label: str, total: int = 0, step_percent: int = 10):
        self.label = label
        self.total = total
        self.step_percent = max(1, step_percent)
        self.done = 0
        self._next_mark = self.step_percent

    def start(self, total: int) -> None:
        self.total = total
        self.done = 0
        self._next_mark = self.step_percent

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 100.0
        return min(100.0, self.done * 100.0 / self.total)

    def advance(self, count: int = 1) -> None:
        self.done += count
        if self.total <= 0:
            return
        if self.percent >= self._next_mark and self.done < self.total:
            print(f"  [{self.label}] {self.done}/{self.total} ({self.percent:.0f}%)")
            while self._next_mark <= self.percent:
                self._next_mark += self.step_percent

    def finish(self) -> None:
        print(f"  [{self.label}] {self.done}/{self.total} (100%)")
