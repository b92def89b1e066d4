import math
import numpy as np
from .geometry import WaveDirection
from .optics import InvalidParameterError

DEFAULT_STEP = 5.0


def sample_count(length, step=DEFAULT_STEP):
    if not step > 0:
        raise InvalidParameterError(f"sampling step must be positive, got {step}")
    return math.ceil(length / step) + 1


class WaveformPath:
    """A sinusoid drawn along a beam segment.

    The points are produced lazily and from scratch on every iteration, so the
    same path can be walked any number of times. The wave is displaced
    perpendicular to the beam (the beam direction rotated by 90 degrees) and
    its phase is referenced at whichever end of the segment the beam's
    wave_direction names.
    """

    def __init__(self, beam, amplitude, step=DEFAULT_STEP):
        self.beam = beam
        self.amplitude = amplitude
        self.step = step
        self.count = sample_count(beam.length, step)

    def __len__(self):
        return self.count

    def _frame(self):
        (x0, y0), (x1, y1) = self.beam.start, self.beam.end
        length = self.beam.length
        if length == 0:
            return length, (0.0, 0.0)
        # unit normal to the beam
        return length, (-(y1 - y0) / length, (x1 - x0) / length)

    def offset(self, t):
        length = self.beam.length
        k = 2 * math.pi / self.beam.wavelength
        if self.beam.wave_direction is WaveDirection.FROM_END:
            return -self.amplitude * math.sin(k * (1 - t) * length + self.beam.starting_phase)
        return self.amplitude * math.sin(k * t * length + self.beam.starting_phase)

    def __iter__(self):
        (x0, y0), (x1, y1) = self.beam.start, self.beam.end
        _, (nx, ny) = self._frame()
        last = max(self.count - 1, 1)
        for i in range(self.count):
            t = i / last
            d = self.offset(t)
            yield (x0 + t * (x1 - x0) + d * nx, y0 + t * (y1 - y0) + d * ny)

    def to_array(self):
        """The same samples as a (count, 2) array."""
        start = np.asarray(self.beam.start, dtype=float)
        end = np.asarray(self.beam.end, dtype=float)
        length, normal = self._frame()

        t = np.linspace(0, 1, num=self.count) if self.count > 1 else np.zeros(1)
        k = 2 * np.pi / self.beam.wavelength
        if self.beam.wave_direction is WaveDirection.FROM_END:
            d = -self.amplitude * np.sin(k * (1 - t) * length + self.beam.starting_phase)
        else:
            d = self.amplitude * np.sin(k * t * length + self.beam.starting_phase)

        return start + t[:, np.newaxis] * (end - start) + d[:, np.newaxis] * np.asarray(normal)


def waveform_paths(beams, amplitude, step=DEFAULT_STEP):
    return {name: WaveformPath(beam, amplitude, step) for name, beam in beams}
