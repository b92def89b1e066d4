import logging
import math
from collections import namedtuple
from dataclasses import dataclass, replace
from typing import Tuple
from .geometry import WaveDirection, compute_beams
from .materials import DEFAULT_MATERIAL, film_index
from .optics import InvalidParameterError, interference_cue
from .waveform import DEFAULT_STEP, waveform_paths

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Parameters:
    incidence_angle_deg: float
    film_thickness_nm: float
    film_refractive_index: float
    substrate_refractive_index: float = 1.5
    air_refractive_index: float = 1.0
    wavelength_nm: float = 500.0
    pixels_per_nm: float = 0.3  # scales nanometers to display pixels

    def __post_init__(self):
        for name in ("incidence_angle_deg", "film_thickness_nm"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value}")
        for name in (
            "film_refractive_index",
            "substrate_refractive_index",
            "air_refractive_index",
            "wavelength_nm",
            "pixels_per_nm",
        ):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise InvalidParameterError(f"{name} must be positive, got {value}")
        if not self.film_refractive_index > 1:
            raise InvalidParameterError(
                f"film_refractive_index must be greater than 1, got {self.film_refractive_index}"
            )

    @property
    def incidence_angle_rad(self):
        return math.radians(self.incidence_angle_deg)

    @property
    def film_thickness_px(self):
        return self.film_thickness_nm * self.pixels_per_nm


@dataclass(frozen=True)
class SimulationConfig:
    """Everything about a simulation that the user can't drag around.

    Coordinates are display pixels with y growing downwards.
    """

    wavelength_nm: float = 500.0
    air_refractive_index: float = 1.0
    substrate_refractive_index: float = 1.5
    pixels_per_nm: float = 0.3
    angle_range: Tuple[float, float] = (0.0, 30.0)
    thickness_range: Tuple[float, float] = (10.0, 700.0)
    amplitude: float = 8.0
    sampling_step: float = DEFAULT_STEP
    # the incident wave's phase reference; FROM_END pins it at the film surface
    wave_anchor: WaveDirection = WaveDirection.FROM_START
    show_waves: bool = True
    entry_x: float = 150.0
    entry_y: float = 20.0
    film_top_y: float = 200.0
    substrate_bottom_y: float = 480.0
    beam_length: float = 180.0  # of the beams travelling through air
    width: float = 600.0
    interference_tolerance: float = 0.1

    def __post_init__(self):
        for name in ("angle_range", "thickness_range"):
            low, high = getattr(self, name)
            if not low <= high:
                raise InvalidParameterError(f"{name} is empty: {low} > {high}")
        if not self.thickness_range[0] > 0:
            raise InvalidParameterError("films must be thicker than 0 nm")
        if not self.sampling_step > 0:
            raise InvalidParameterError(
                f"sampling_step must be positive, got {self.sampling_step}"
            )
        if not self.entry_y < self.film_top_y:
            raise InvalidParameterError("the light must enter above the film")
        thickest = self.film_top_y + self.thickness_range[1] * self.pixels_per_nm
        if thickest > self.substrate_bottom_y:
            raise InvalidParameterError(
                f"a {self.thickness_range[1]} nm film reaches y={thickest}, "
                f"below the substrate at y={self.substrate_bottom_y}"
            )

    def parameters(self, incidence_angle_deg, film_thickness_nm, film_refractive_index=None):
        if film_refractive_index is None:
            film_refractive_index = film_index(DEFAULT_MATERIAL)

        params = Parameters(
            incidence_angle_deg=incidence_angle_deg,
            film_thickness_nm=film_thickness_nm,
            film_refractive_index=film_refractive_index,
            substrate_refractive_index=self.substrate_refractive_index,
            air_refractive_index=self.air_refractive_index,
            wavelength_nm=self.wavelength_nm,
            pixels_per_nm=self.pixels_per_nm,
        )
        self.validate(params)
        return params

    def validate(self, params):
        low, high = self.angle_range
        if not low <= params.incidence_angle_deg <= high:
            raise InvalidParameterError(
                f"incidence angle {params.incidence_angle_deg} deg is outside [{low}, {high}]"
            )
        low, high = self.thickness_range
        if not low <= params.film_thickness_nm <= high:
            raise InvalidParameterError(
                f"film thickness {params.film_thickness_nm} nm is outside [{low}, {high}]"
            )


# the two flavours of the page: a plain refraction demo that keeps the
# incident wave pinned at the surface and hides the waves unless asked for,
# and the interference demo with waves running from the light source
VARIANTS = {
    "refraction": SimulationConfig(
        angle_range=(0.0, 30.0),
        thickness_range=(10.0, 700.0),
        amplitude=6.0,
        wave_anchor=WaveDirection.FROM_END,
        show_waves=False,
    ),
    "interference": SimulationConfig(),
}


def variant(name, **overrides):
    try:
        config = VARIANTS[name]
    except KeyError:
        raise InvalidParameterError(
            f"unknown variant {name!r}, expected one of {', '.join(VARIANTS)}"
        ) from None
    return replace(config, **overrides)


Frame = namedtuple(
    "Frame",
    [
        "params",
        "config",
        "beams",
        "waveforms",
        "cue",
    ],
)


def simulate(params, config, phase_offset=0.0):
    config.validate(params)
    log.debug("simulating %s at phase %.3f", params, phase_offset)

    beams = compute_beams(params, config, phase_offset=phase_offset)
    waveforms = {}
    if config.show_waves:
        waveforms = waveform_paths(beams, config.amplitude, config.sampling_step)

    cue = None
    if not beams.total_internal_reflection:
        cue = interference_cue(
            params.wavelength_nm,
            params.air_refractive_index,
            params.film_refractive_index,
            params.substrate_refractive_index,
            params.incidence_angle_rad,
            params.film_thickness_nm,
            tolerance=config.interference_tolerance,
        )

    return Frame(params=params, config=config, beams=beams, waveforms=waveforms, cue=cue)
