from typing import Callable, Iterable, Iterator

from vm_core.address import NUM_FRAMES, PAGE_SIZE, TLB_SIZE, decode
from vm_core.errors import CapacityExhaustedError, stderr_logger
from vm_core.page_table import UNMAPPED, PageTable
from vm_core.physical_memory import PhysicalMemory
from vm_core.tlb import TLB


class Statistics:
    """Running counters for one simulated machine."""

    def __init__(self):
        self.addresses_processed = 0
        self.tlb_hits = 0
        self.page_faults = 0

    @property
    def tlb_misses(self):
        return self.addresses_processed - self.tlb_hits

    @property
    def page_fault_rate(self):
        if not self.addresses_processed:
            return 0.0
        return self.page_faults / self.addresses_processed

    @property
    def tlb_hit_rate(self):
        if not self.addresses_processed:
            return 0.0
        return self.tlb_hits / self.addresses_processed

    def as_dict(self):
        return {
            'addresses_processed': self.addresses_processed,
            'tlb_hits': self.tlb_hits,
            'tlb_misses': self.tlb_misses,
            'page_faults': self.page_faults,
            'page_fault_rate': self.page_fault_rate,
            'tlb_hit_rate': self.tlb_hit_rate,
        }


class TranslationResult:
    def __init__(self, virtual_address, page_number, offset, frame_number, value,
                 tlb_hit=False, page_fault=False):
        self.virtual_address = virtual_address
        self.page_number = page_number
        self.offset = offset
        self.frame_number = frame_number
        self.physical_address = frame_number * PAGE_SIZE + offset
        self.value = value  # unsigned byte, 0-255
        self.tlb_hit = tlb_hit
        self.page_fault = page_fault

    def __repr__(self):
        return (f"TranslationResult(va={self.virtual_address}, page={self.page_number}, "
                f"offset={self.offset}, frame={self.frame_number}, pa={self.physical_address}, "
                f"value={self.value}, tlb_hit={self.tlb_hit}, page_fault={self.page_fault})")


class TranslationMachine:
    """
    One simulated machine: TLB, page table, physical memory and counters.

    Every virtual address goes TLB -> page table -> backing store. A TLB miss
    that finds the page mapped still refreshes the TLB but is not a fault;
    only an unmapped page counts as a page fault. Machines share nothing, so
    separate traces need separate instances.
    """

    def __init__(self, backing_store, num_frames: int = NUM_FRAMES, tlb_size: int = TLB_SIZE,
                 verbose: bool = False, logger: Callable[[str], None] = None):
        self.backing_store = backing_store
        self.tlb = TLB(capacity=tlb_size)
        self.page_table = PageTable()
        self.memory = PhysicalMemory(num_frames=num_frames)
        self.stats = Statistics()
        self.verbose = verbose
        self.logger = logger if logger else stderr_logger

    def _log_step(self, message: str):
        if self.verbose:
            self.logger(message)

    def reset(self):
        """Starts a fresh run: empty TLB, unmapped page table, no frames, zeroed counters."""
        self.tlb.initialize()
        self.page_table.initialize()
        self.memory.reset()
        self.stats = Statistics()

    def handle_page_fault(self, page_number: int) -> int:
        """Loads page_number from the backing store into the next free frame and maps it."""
        # Checked up front so a full memory leaves every structure untouched
        if self.memory.is_full():
            raise CapacityExhaustedError(self.memory.num_frames, page_number)

        block = self.backing_store.read_page(page_number)
        frame_number = self.memory.allocate_and_load(block)
        self.page_table.map(page_number, frame_number)
        self.stats.page_faults += 1
        self._log_step(f"Page fault: page {page_number} loaded into frame {frame_number}")
        return frame_number

    def translate(self, virtual_address: int) -> TranslationResult:
        page_number, offset = decode(virtual_address)
        tlb_hit = False
        page_fault = False

        frame_number = self.tlb.lookup(page_number)
        if frame_number is not None:
            tlb_hit = True
            self.stats.tlb_hits += 1
            self._log_step(f"TLB hit: page {page_number} -> frame {frame_number}")
        else:
            self._log_step(f"TLB miss: page {page_number}")
            frame_number = self.page_table.lookup(page_number)
            if frame_number == UNMAPPED:
                frame_number = self.handle_page_fault(page_number)
                page_fault = True
            else:
                self._log_step(f"Page table hit: page {page_number} -> frame {frame_number}")

            evicted = self.tlb.insert(page_number, frame_number)
            if evicted is not None:
                self._log_step(f"TLB update: evicted page {evicted[0]} (frame {evicted[1]}), "
                               f"added page {page_number} -> frame {frame_number}")
            else:
                self._log_step(f"TLB update: added page {page_number} -> frame {frame_number}")

        value = self.memory.read_byte(frame_number, offset)
        self.stats.addresses_processed += 1
        return TranslationResult(virtual_address, page_number, offset, frame_number, value,
                                 tlb_hit=tlb_hit, page_fault=page_fault)

    def run(self, addresses: Iterable[int]) -> Iterator[TranslationResult]:
        """Translates addresses in order, yielding one result per address."""
        for virtual_address in addresses:
            yield self.translate(virtual_address)

    def get_stats(self):
        return self.stats.as_dict()

    def get_tlb_snapshot(self):
        return self.tlb.entries()

    def get_page_table_snapshot(self):
        return self.page_table.mapped_pages()
