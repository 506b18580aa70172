"""logging.Handler that writes records to daily log files."""

import logging

from log_facade import LogFacade


class DailyLogHandler(logging.Handler):
    """Route standard ``logging`` records through ``LogFacade.write``.

    Each record becomes one timestamped line. ``path`` and ``filename``
    follow ``LogFacade.write`` defaults when left empty.
    """

    def __init__(self, path="", filename: str = "", level=logging.NOTSET):
        super().__init__(level)
        self.path = path
        self.filename = filename

    @classmethod
    def from_config(cls, config, **kwargs) -> "DailyLogHandler":
        return cls(path=config.log_dir, **kwargs)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            LogFacade.write(self.format(record), filename=self.filename, path=self.path)
        except Exception:
            self.handleError(record)
