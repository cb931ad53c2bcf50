from vm_core.address import TLB_SIZE


class TLB:
    """
    Translation lookaside buffer with FIFO replacement.

    Entries live in two parallel ring-buffer arrays. head_position marks the
    oldest entry; while the buffer fills, new entries are appended at
    num_filled. Once full, num_filled stays at capacity and every insert
    overwrites the oldest entry and advances the head.
    """

    def __init__(self, capacity=TLB_SIZE):
        self.capacity = capacity
        self.page_numbers = [None] * capacity
        self.frame_numbers = [None] * capacity
        self.num_filled = 0
        self.head_position = 0

    def initialize(self):
        self.page_numbers = [None] * self.capacity
        self.frame_numbers = [None] * self.capacity
        self.num_filled = 0
        self.head_position = 0

    def _slots(self):
        # Slot indices from oldest to newest
        for index in range(self.num_filled):
            yield (self.head_position + index) % self.capacity

    def lookup(self, page_number):
        """Returns the cached frame number for page_number, or None on a miss."""
        for slot in self._slots():
            if self.page_numbers[slot] == page_number:
                return self.frame_numbers[slot]
        return None

    def insert(self, page_number, frame_number):
        """
        Adds <page_number, frame_number>. Does not check for an existing entry
        for the same page; callers insert only after a miss.

        Returns the evicted (page_number, frame_number) pair, or None.
        """
        if self.num_filled < self.capacity:
            self.page_numbers[self.num_filled] = page_number
            self.frame_numbers[self.num_filled] = frame_number
            self.num_filled += 1
            return None

        evicted = (self.page_numbers[self.head_position], self.frame_numbers[self.head_position])
        self.page_numbers[self.head_position] = page_number
        self.frame_numbers[self.head_position] = frame_number
        self.head_position = (self.head_position + 1) % self.capacity
        return evicted

    def entries(self):
        """Current (page_number, frame_number) pairs, oldest first."""
        return [(self.page_numbers[slot], self.frame_numbers[slot]) for slot in self._slots()]

    def is_full(self):
        return self.num_filled == self.capacity

    def __len__(self):
        return self.num_filled

    def __contains__(self, page_number):
        return self.lookup(page_number) is not None
