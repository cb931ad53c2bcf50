import os

from vm_core.address import NUM_PAGES, PAGE_SIZE
from vm_core.errors import StoreIOError, StoreOpenError, stderr_logger

DEFAULT_PATH = 'disk.bin'
ON_ERROR_POLICIES = ('continue', 'raise')


class BackingStore:
    """
    Page-indexed view of the "disk" image file.

    Page p occupies bytes [p * page_size, (p + 1) * page_size) of the file.
    Anything past the current end of the file reads back as zeros, so an
    empty or freshly created image behaves like a zero-filled disk.

    on_error decides what a failed read does:
        'continue' - log a warning, count it in io_errors, return a zero page
        'raise'    - raise StoreIOError
    """

    def __init__(self, path=DEFAULT_PATH, page_size=PAGE_SIZE, num_pages=NUM_PAGES,
                 on_error='continue', logger=None):
        if on_error not in ON_ERROR_POLICIES:
            raise ValueError(f"on_error must be one of {ON_ERROR_POLICIES}, got {on_error!r}")
        self.path = path
        self.page_size = page_size
        self.num_pages = num_pages
        self.on_error = on_error
        self.logger = logger if logger else stderr_logger
        self.io_errors = 0
        self._file = None

    @property
    def is_open(self):
        return self._file is not None

    def open(self):
        """Opens the image read/write, creating it if it does not exist."""
        if self._file is not None:
            return self
        try:
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o666)
            self._file = os.fdopen(fd, 'r+b')
        except OSError as e:
            raise StoreOpenError(f"Cannot open backing store '{self.path}': {e.strerror or e}") from e
        return self

    def close(self):
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as e:
            raise StoreIOError(f"Cannot close backing store '{self.path}': {e.strerror or e}") from e
        finally:
            self._file = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def _check_page_number(self, page_number):
        if not (0 <= page_number < self.num_pages):
            raise ValueError(f"Page number {page_number} is outside the backing store (0-{self.num_pages - 1}).")

    def _read_failed(self, message):
        if self.on_error == 'raise':
            raise StoreIOError(message)
        self.io_errors += 1
        self.logger(f"Warning: {message}; using a zero-filled page.")
        return bytes(self.page_size)

    def read_page(self, page_number):
        """Returns exactly page_size bytes for page_number."""
        self._check_page_number(page_number)
        if self._file is None:
            return self._read_failed(f"Cannot read page {page_number}: backing store '{self.path}' is not open")
        try:
            self._file.seek(page_number * self.page_size)
            data = self._file.read(self.page_size)
        except OSError as e:
            return self._read_failed(f"Cannot read page {page_number} from '{self.path}': {e.strerror or e}")
        # Short read past the end of the image
        return data.ljust(self.page_size, b'\0')

    def write_page(self, page_number, data):
        """Writes one page, zero-padding or truncating data to page_size."""
        self._check_page_number(page_number)
        if self._file is None:
            raise StoreIOError(f"Cannot write page {page_number}: backing store '{self.path}' is not open")
        block = bytes(data[:self.page_size]).ljust(self.page_size, b'\0')
        try:
            self._file.seek(page_number * self.page_size)
            self._file.write(block)
            self._file.flush()
        except OSError as e:
            raise StoreIOError(f"Cannot write page {page_number} to '{self.path}': {e.strerror or e}") from e
