from vm_core.address import NUM_FRAMES, PAGE_SIZE
from vm_core.errors import CapacityExhaustedError


class PhysicalMemory:
    """Fixed set of frames filled in order; frames are never evicted or reused."""

    def __init__(self, num_frames=NUM_FRAMES, frame_size=PAGE_SIZE):
        self.num_frames = num_frames
        self.frame_size = frame_size
        self.memory = [bytearray(frame_size) for _ in range(num_frames)]
        self.highest_open_frame = 0  # next frame handed out on a fault

    def reset(self):
        for frame in self.memory:
            frame[:] = bytes(self.frame_size)
        self.highest_open_frame = 0

    def is_full(self):
        return self.highest_open_frame >= self.num_frames

    def allocate_and_load(self, block):
        """Copies block into the next free frame and returns that frame's number."""
        if len(block) != self.frame_size:
            raise ValueError(f"Block is {len(block)} bytes, expected {self.frame_size}.")
        if self.is_full():
            raise CapacityExhaustedError(self.num_frames)

        frame_number = self.highest_open_frame
        self.memory[frame_number][:] = block
        self.highest_open_frame += 1
        return frame_number

    def _check_allocated(self, frame_number):
        if not (0 <= frame_number < self.highest_open_frame):
            raise ValueError(f"Frame {frame_number} has not been allocated (allocated: 0-{self.highest_open_frame - 1}).")

    def read_byte(self, frame_number, offset):
        self._check_allocated(frame_number)
        return self.memory[frame_number][offset]

    def read_frame(self, frame_number):
        self._check_allocated(frame_number)
        return bytes(self.memory[frame_number])

    def frames_in_use(self):
        return self.highest_open_frame

    def get_free_frames_count(self):
        return self.num_frames - self.highest_open_frame
