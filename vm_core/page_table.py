from vm_core.address import NUM_PAGES

UNMAPPED = -1


class PageTable:
    """Single-level, direct-indexed map from page number to frame number."""

    def __init__(self, num_pages=NUM_PAGES):
        self.num_pages = num_pages
        self.entries = [UNMAPPED] * num_pages

    def initialize(self):
        """Marks every page unmapped."""
        for page_number in range(self.num_pages):
            self.entries[page_number] = UNMAPPED

    def lookup(self, page_number):
        """Returns the frame number for page_number, or UNMAPPED."""
        return self.entries[page_number]

    def is_mapped(self, page_number):
        return self.entries[page_number] != UNMAPPED

    def map(self, page_number, frame_number):
        # Mappings are permanent for the run; only an identical remap is allowed
        current = self.entries[page_number]
        if current != UNMAPPED and current != frame_number:
            raise ValueError(f"Page {page_number} is already mapped to frame {current}, cannot remap to {frame_number}.")
        self.entries[page_number] = frame_number

    def mapped_pages(self):
        return {page: frame for page, frame in enumerate(self.entries) if frame != UNMAPPED}
