"""Progress bar utilities for extraction runs."""

from .subtitles import format_timestamp


class ExtractionProgressBar:
    """Terminal progress bar usable as the sampler's progress callback."""

    def __init__(self, step_percent: int = 5, bar_len: int = 30):
        self.step_percent = step_percent
        self.bar_len = bar_len
        self.last_percent = -1

    def __call__(self, fraction: float, timestamp: float) -> None:
        percent = int(100 * min(max(fraction, 0.0), 1.0))
        if percent == self.last_percent or percent % self.step_percent != 0:
            return
        filled = int(self.bar_len * percent / 100)
        bar = "█" * filled + "░" * (self.bar_len - filled)
        print(
            f"\r  Extracting: [{bar}] {percent}% ({format_timestamp(timestamp)})",
            end="",
            flush=True,
        )
        self.last_percent = percent

    def finish(self) -> None:
        if self.last_percent >= 0:
            print(flush=True)
