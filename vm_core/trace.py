import re

from vm_core.errors import MalformedTraceLine, TraceOpenError, stderr_logger

_ADDRESS_RE = re.compile(r'[+-]?\d+')


def parse_address(line, lenient=False, line_number=None):
    """
    Parses one trace line into a virtual address.

    Strict parsing accepts a single decimal integer surrounded by optional
    whitespace and raises MalformedTraceLine otherwise. Lenient parsing takes
    the leading integer, if any, and falls back to 0 for anything else.
    """
    text = line.strip()
    if lenient:
        match = _ADDRESS_RE.match(text)
        return int(match.group()) if match else 0
    if not _ADDRESS_RE.fullmatch(text):
        raise MalformedTraceLine(line.rstrip('\n'), line_number)
    return int(text)


def iter_addresses(lines, lenient=False, logger=None):
    """Yields addresses from trace lines, warning about and skipping bad ones."""
    logger = logger if logger else stderr_logger
    for line_number, line in enumerate(lines, start=1):
        if not lenient and not line.strip():
            continue
        try:
            yield parse_address(line, lenient=lenient, line_number=line_number)
        except MalformedTraceLine as e:
            logger(f"Warning: {e}; skipping.")


def read_trace(path, lenient=False, logger=None):
    """Opens a trace file now and returns a generator over its addresses."""
    try:
        trace_file = open(path, 'r', errors='surrogateescape')
    except OSError as e:
        raise TraceOpenError(f"Cannot open trace file '{path}': {e.strerror or e}") from e
    return _read_and_close(trace_file, lenient, logger)


def _read_and_close(trace_file, lenient, logger):
    with trace_file:
        yield from iter_addresses(trace_file, lenient=lenient, logger=logger)
