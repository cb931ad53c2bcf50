import sys


class SimulatorError(Exception):
    """Base class for every error raised by the simulator."""


class UsageError(SimulatorError):
    pass


class StoreOpenError(SimulatorError, OSError):
    """The backing store file could not be opened or created."""


class StoreIOError(SimulatorError, OSError):
    """A seek, read or write on the backing store failed."""


class TraceOpenError(SimulatorError, OSError):
    pass


class CapacityExhaustedError(SimulatorError):
    """Physical memory has no free frame left for a page fault."""

    def __init__(self, num_frames, page_number=None):
        self.num_frames = num_frames
        self.page_number = page_number
        message = f"Physical memory exhausted: all {num_frames} frames are allocated"
        if page_number is not None:
            message += f" (page {page_number} cannot be loaded)"
        super().__init__(message)


class MalformedTraceLine(SimulatorError, ValueError):
    def __init__(self, line, line_number=None):
        self.line = line
        self.line_number = line_number
        where = f" on line {line_number}" if line_number is not None else ""
        super().__init__(f"Malformed virtual address{where}: {line!r}")


def stderr_logger(message):
    """Default logger: one diagnostic line on standard error."""
    print(message, file=sys.stderr)
