"""
Virtual memory simulator.

Reads a trace of decimal virtual addresses, translates each one through a
16-entry FIFO TLB and a 256-entry page table backed by a disk image, and
prints the physical address and stored byte for every address followed by
the page fault and TLB hit rates.
"""
import argparse
import sys

from vm_core.address import NUM_FRAMES
from vm_core.backing_store import DEFAULT_PATH, BackingStore
from vm_core.errors import (CapacityExhaustedError, StoreIOError, StoreOpenError,
                            TraceOpenError, UsageError, stderr_logger)
from vm_core.report import format_summary, format_translation
from vm_core.trace import read_trace
from vm_core.translator import TranslationMachine


def build_parser():
    parser = argparse.ArgumentParser(
        prog='memory-simulator',
        description='Simulate virtual to physical address translation with a TLB and a page table.')
    parser.add_argument('tracefile', help='File of newline-separated decimal virtual addresses')
    parser.add_argument('-b', '--backing-store', default=DEFAULT_PATH,
                        help=f'Disk image read on page faults, created if absent (default: {DEFAULT_PATH})')
    parser.add_argument('-f', '--frames', type=int, default=NUM_FRAMES,
                        help=f'Number of physical frames, 1-{NUM_FRAMES} (default: {NUM_FRAMES})')
    parser.add_argument('--fail-fast', action='store_true',
                        help='Abort on backing store errors instead of continuing with zero pages')
    parser.add_argument('--lenient', action='store_true',
                        help='Read malformed trace lines as address 0 instead of skipping them')
    parser.add_argument('--unsigned-bytes', action='store_true',
                        help='Print values as 0-255 instead of signed 8-bit integers')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log every TLB and page table step to standard error')
    parser.add_argument('--plot', metavar='PATH',
                        help='Save a chart of the cumulative TLB hit and page fault rates')
    return parser


def check_args(args):
    if not (1 <= args.frames <= NUM_FRAMES):
        raise UsageError(f"--frames must be between 1 and {NUM_FRAMES}, got {args.frames}")


def main(argv=None, logger=None):
    logger = logger if logger else stderr_logger
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        check_args(args)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        logger(f"Error: {e}")
        return 2

    store = BackingStore(args.backing_store, on_error='raise' if args.fail_fast else 'continue',
                         logger=logger)
    try:
        store.open()
    except StoreOpenError as e:
        if args.fail_fast:
            logger(f"Error: {e}")
            return 1
        logger(f"Warning: {e}")

    try:
        addresses = read_trace(args.tracefile, lenient=args.lenient, logger=logger)
    except TraceOpenError as e:
        logger(f"Error: {e}")
        store.close()
        return 1

    machine = TranslationMachine(store, num_frames=args.frames, verbose=args.verbose, logger=logger)
    results = [] if args.plot else None
    exit_code = 0
    try:
        for result in machine.run(addresses):
            print(format_translation(result, signed=not args.unsigned_bytes))
            if results is not None:
                results.append(result)
    except (CapacityExhaustedError, StoreIOError) as e:
        logger(f"Error: {e}")
        exit_code = 1
    finally:
        addresses.close()
        try:
            store.close()
        except StoreIOError as e:
            logger(f"Error: {e}")

    print(format_summary(machine.stats))

    if results is not None:
        from vm_core.plot import plot_rates
        try:
            plot_rates(results, args.plot)
        except OSError as e:
            logger(f"Error: Cannot write chart '{args.plot}': {e.strerror or e}")
            exit_code = 1
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
