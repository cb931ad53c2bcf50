PAGE_SIZE = 256  # bytes per page (and per frame)
NUM_PAGES = 256  # one byte's worth of page-number bits
NUM_FRAMES = 256  # 256 frames x 256 bytes = 64 KB physical memory
TLB_SIZE = 16

OFFSET_MASK = 0xFF
PAGE_NUM_MASK = 0xFF00
PAGE_NUM_SHIFT = 8


def get_offset(virtual_address):
    return virtual_address & OFFSET_MASK


def get_page_number(virtual_address):
    # Bits above the 16-bit address space are ignored
    return (virtual_address & PAGE_NUM_MASK) >> PAGE_NUM_SHIFT


def decode(virtual_address):
    """Splits a virtual address into (page_number, offset)."""
    return get_page_number(virtual_address), get_offset(virtual_address)
