import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import Mock, patch

import memory_simulator
from vm_core.backing_store import BackingStore
from vm_core.errors import StoreIOError


class TestMemorySimulatorCLI(unittest.TestCase):

    def setUp(self):
        """Create a trace file and a seeded disk image in a scratch directory."""
        self.tmpdir = tempfile.TemporaryDirectory()
        self.disk = os.path.join(self.tmpdir.name, 'disk.bin')
        with BackingStore(self.disk) as store:
            page = bytearray(256)
            page[5] = 200
            page[6] = 100
            store.write_page(1, page)
        self.logger = Mock()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write_trace(self, *lines):
        path = os.path.join(self.tmpdir.name, 'addresses.txt')
        with open(path, 'w') as f:
            f.write(''.join(f'{line}\n' for line in lines))
        return path

    def run_main(self, *args):
        out = io.StringIO()
        with redirect_stdout(out):
            code = memory_simulator.main(list(args), logger=self.logger)
        return code, out.getvalue().splitlines()

    def logged(self):
        return [call[0][0] for call in self.logger.call_args_list]

    def test_translates_trace(self):
        """Test per-address lines and the summary for a small trace"""
        trace = self.write_trace(261, 262, 0)
        code, lines = self.run_main(trace, '--backing-store', self.disk)

        self.assertEqual(code, 0)
        self.assertEqual(lines, [
            'Virtual address: 261 Physical address: 5 Value: -56',
            'Virtual address: 262 Physical address: 6 Value: 100',
            'Virtual address: 0 Physical address: 256 Value: 0',
            'Page Fault Rate: 0.666667, TLB Hit Rate: 0.333333',
        ])
        self.logger.assert_not_called()

    def test_unsigned_bytes(self):
        """Test --unsigned-bytes prints raw byte values"""
        trace = self.write_trace(261)
        code, lines = self.run_main(trace, '-b', self.disk, '--unsigned-bytes')
        self.assertEqual(code, 0)
        self.assertEqual(lines[0], 'Virtual address: 261 Physical address: 5 Value: 200')

    def test_missing_disk_image_is_created(self):
        """Test a fresh disk image reads as zeros"""
        disk = os.path.join(self.tmpdir.name, 'new.bin')
        trace = self.write_trace(256, 256)
        code, lines = self.run_main(trace, '-b', disk)
        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(disk))
        self.assertEqual(lines[-1], 'Page Fault Rate: 0.500000, TLB Hit Rate: 0.500000')

    def test_wrong_argument_count(self):
        """Test running without a trace file is a usage error"""
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            memory_simulator.main([], logger=self.logger)
        self.assertNotEqual(ctx.exception.code, 0)
        self.assertIn('usage', err.getvalue())

    def test_too_many_arguments(self):
        """Test two positional arguments are rejected"""
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            memory_simulator.main(['a.txt', 'b.txt'], logger=self.logger)
        self.assertNotEqual(ctx.exception.code, 0)

    def test_frames_out_of_range(self):
        """Test --frames outside 1-256 is rejected before processing"""
        trace = self.write_trace(0)
        err = io.StringIO()
        with redirect_stderr(err):
            code, lines = self.run_main(trace, '-b', self.disk, '--frames', '0')
        self.assertEqual(code, 2)
        self.assertEqual(lines, [])
        self.assertTrue(self.logged()[0].startswith('Error:'))

    def test_missing_trace_is_fatal(self):
        """Test an unreadable trace file stops the run with an error"""
        code, lines = self.run_main(os.path.join(self.tmpdir.name, 'nope.txt'), '-b', self.disk)
        self.assertEqual(code, 1)
        self.assertEqual(lines, [])
        self.assertIn('Cannot open trace file', self.logged()[0])

    def test_unopenable_store_continues_by_default(self):
        """Test a disk image that cannot be opened is reported and read as zeros"""
        disk = os.path.join(self.tmpdir.name, 'missing', 'disk.bin')
        trace = self.write_trace(261)
        code, lines = self.run_main(trace, '-b', disk)
        self.assertEqual(code, 0)
        self.assertEqual(lines[0], 'Virtual address: 261 Physical address: 5 Value: 0')
        messages = self.logged()
        self.assertTrue(messages[0].startswith('Warning: Cannot open backing store'))
        self.assertTrue(messages[1].startswith('Warning:'))

    def test_unopenable_store_with_fail_fast(self):
        """Test --fail-fast aborts when the disk image cannot be opened"""
        disk = os.path.join(self.tmpdir.name, 'missing', 'disk.bin')
        trace = self.write_trace(261)
        code, lines = self.run_main(trace, '-b', disk, '--fail-fast')
        self.assertEqual(code, 1)
        self.assertEqual(lines, [])
        self.assertTrue(self.logged()[0].startswith('Error: Cannot open backing store'))

    def test_capacity_exhaustion_stops_run(self):
        """Test running out of frames is reported and the partial summary printed"""
        trace = self.write_trace(0, 256, 512, 768)
        code, lines = self.run_main(trace, '-b', self.disk, '--frames', '2')
        self.assertEqual(code, 1)
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[-1], 'Page Fault Rate: 1.000000, TLB Hit Rate: 0.000000')
        self.assertIn('Physical memory exhausted', self.logged()[0])

    def test_malformed_lines_skipped(self):
        """Test malformed trace lines are warned about and not counted"""
        trace = self.write_trace(256, 'bogus', 256)
        code, lines = self.run_main(trace, '-b', self.disk)
        self.assertEqual(code, 0)
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[-1], 'Page Fault Rate: 0.500000, TLB Hit Rate: 0.500000')
        self.assertTrue(self.logged()[0].startswith('Warning:'))

    def test_undecodable_line_skipped(self):
        """Test a line that is not valid text is warned about and the run completes"""
        path = os.path.join(self.tmpdir.name, 'addresses.txt')
        with open(path, 'wb') as f:
            f.write(b'256\n\xff\xfe\n512\n')
        code, lines = self.run_main(path, '-b', self.disk)
        self.assertEqual(code, 0)
        self.assertEqual(lines, [
            'Virtual address: 256 Physical address: 0 Value: 0',
            'Virtual address: 512 Physical address: 256 Value: 0',
            'Page Fault Rate: 1.000000, TLB Hit Rate: 0.000000',
        ])
        messages = self.logged()
        self.assertEqual(len(messages), 1)
        self.assertTrue(messages[0].startswith('Warning:'))

    def test_read_error_with_fail_fast_stops_run(self):
        """Test --fail-fast ends the run on a store read error and prints the partial summary"""
        trace = self.write_trace(256, 512, 256)
        failing_read = Mock(side_effect=[bytes(256), StoreIOError('Cannot read page 2 from disk')])
        with patch.object(BackingStore, 'read_page', failing_read):
            code, lines = self.run_main(trace, '-b', self.disk, '--fail-fast')
        self.assertEqual(code, 1)
        self.assertEqual(lines, [
            'Virtual address: 256 Physical address: 0 Value: 0',
            'Page Fault Rate: 1.000000, TLB Hit Rate: 0.000000',
        ])
        self.assertEqual(self.logged(), ['Error: Cannot read page 2 from disk'])

    def test_malformed_lines_lenient(self):
        """Test --lenient reads malformed lines as address 0"""
        trace = self.write_trace('bogus')
        code, lines = self.run_main(trace, '-b', self.disk, '--lenient')
        self.assertEqual(code, 0)
        self.assertEqual(lines[0], 'Virtual address: 0 Physical address: 0 Value: 0')

    def test_empty_trace(self):
        """Test an empty trace prints zero rates"""
        trace = self.write_trace()
        code, lines = self.run_main(trace, '-b', self.disk)
        self.assertEqual(code, 0)
        self.assertEqual(lines, ['Page Fault Rate: 0.000000, TLB Hit Rate: 0.000000'])

    def test_verbose(self):
        """Test --verbose logs translation steps"""
        trace = self.write_trace(256, 256)
        code, _ = self.run_main(trace, '-b', self.disk, '-v')
        self.assertEqual(code, 0)
        self.assertTrue(any(m.startswith('TLB hit') for m in self.logged()))

    def test_plot(self):
        """Test --plot writes a chart file"""
        chart = os.path.join(self.tmpdir.name, 'rates.png')
        trace = self.write_trace(256, 256, 512)
        code, _ = self.run_main(trace, '-b', self.disk, '--plot', chart)
        self.assertEqual(code, 0)
        self.assertGreater(os.path.getsize(chart), 0)


if __name__ == '__main__':
    unittest.main()
