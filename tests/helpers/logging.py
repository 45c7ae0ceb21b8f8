from cmdrunner.logging import Logger, LogLevel


class LoggerStub(Logger):
    """
    Logger that discards everything.
    """

    def log(self, _level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        pass

    def push_level(self, level: LogLevel) -> None:
        pass

    def pop_level(self) -> LogLevel:
        return LogLevel.INFO


class RecordingLogger(LoggerStub):
    """
    Logger that keeps (level, message) pairs for assertions.
    """

    def __init__(self) -> None:
        self.records: list[tuple[LogLevel, str]] = []

    def log(self, _level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        self.records.append((_level, " ".join(str(a) for a in args)))

    def messages(self, level: LogLevel) -> list[str]:
        return [message for record_level, message in self.records if record_level is level]


logger_stub = LoggerStub()
