import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
from .optics import (
    InvalidParameterError,
    TotalInternalReflectionError,
    path_phase,
    reflection_phase_shift,
    refraction_angle,
    wavelength_in_medium,
)

log = logging.getLogger(__name__)

Point = Tuple[float, float]

BEAM_NAMES = ("incident", "reflected", "refracted", "internal", "transmitted")

DEFAULT_COLORS = {
    "incident": "#e74c3c",
    "reflected": "#e67e22",
    "refracted": "#27ae60",
    "internal": "#8e44ad",
    "transmitted": "#2980b9",
}

DEFAULT_LABELS = {
    "incident": "Incident",
    "reflected": "Reflected",
    "refracted": "Refracted",
    "internal": "Substrate reflection",
    "transmitted": "Transmitted",
}


class WaveDirection(Enum):
    # where the wave's phase reference sits on the segment
    FROM_START = "start"
    FROM_END = "end"


@dataclass(frozen=True)
class LayerBoundaries:
    film_top_y: float
    film_bottom_y: float
    substrate_top_y: float
    substrate_bottom_y: float

    @property
    def film_thickness(self):
        return self.film_bottom_y - self.film_top_y


@dataclass(frozen=True)
class BeamSegment:
    start: Point
    end: Point
    wavelength: float  # in pixels
    starting_phase: float  # in radians
    wave_direction: WaveDirection = WaveDirection.FROM_START
    color: str = "black"
    label: Optional[str] = None

    def __post_init__(self):
        if not self.wavelength > 0:
            raise InvalidParameterError(
                f"beam wavelength must be positive, got {self.wavelength}"
            )

    @property
    def length(self):
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    # angle from the vertical; y grows downwards so upward beams have dy < 0
    @property
    def angle(self):
        return math.atan2(self.end[0] - self.start[0], abs(self.end[1] - self.start[1]))

    # the phase on the far side of the segment, where the next beam picks up
    @property
    def end_phase(self):
        if self.wave_direction is WaveDirection.FROM_END:
            return self.starting_phase
        return self.starting_phase + path_phase(self.length, self.wavelength)


@dataclass(frozen=True)
class BeamSet:
    layers: LayerBoundaries
    beams: Mapping[str, BeamSegment] = field(default_factory=dict)
    refraction_angle: Optional[float] = None
    total_internal_reflection: bool = False

    def __post_init__(self):
        # a read-only copy, so the caller's dict can't change the set afterwards
        object.__setattr__(self, "beams", MappingProxyType(dict(self.beams)))

    def __getitem__(self, name):
        return self.beams[name]

    def __contains__(self, name):
        return name in self.beams

    def __iter__(self):
        return iter(self.beams.items())

    def __len__(self):
        return len(self.beams)


def compute_layers(params, config):
    film_bottom_y = config.film_top_y + params.film_thickness_nm * params.pixels_per_nm

    layers = LayerBoundaries(
        film_top_y=config.film_top_y,
        film_bottom_y=film_bottom_y,
        substrate_top_y=film_bottom_y,
        substrate_bottom_y=config.substrate_bottom_y,
    )
    if not (
        math.isfinite(film_bottom_y)
        and layers.film_top_y < layers.film_bottom_y <= layers.substrate_bottom_y
    ):
        raise InvalidParameterError(
            f"a {params.film_thickness_nm} nm film does not fit between "
            f"y={layers.film_top_y} and y={layers.substrate_bottom_y}"
        )
    return layers


# leave upwards into the air at an angle from the vertical
def _rise(point, angle, distance):
    return (point[0] + distance * math.sin(angle), point[1] - distance * math.cos(angle))


# travel at an angle from the vertical until reaching the line y = to_y
def _cross(point, angle, to_y):
    return (point[0] + math.tan(angle) * abs(to_y - point[1]), to_y)


def compute_beams(params, config, phase_offset=0.0, colors=None, labels=None):
    """Lay out the five beam segments for one frame.

    Recomputes everything from params and config. phase_offset is the phase of
    the source, which the animation advances between frames.

    When the light cannot enter the film the result only holds the incident and
    reflected beams and is flagged with total_internal_reflection.
    """
    colors = {**DEFAULT_COLORS, **(colors or {})}
    labels = {**DEFAULT_LABELS, **(labels or {})}

    layers = compute_layers(params, config)
    theta = params.incidence_angle_rad
    n_air = params.air_refractive_index
    n_film = params.film_refractive_index
    n_substrate = params.substrate_refractive_index

    lambda_air = wavelength_in_medium(params.wavelength_nm, params.pixels_per_nm, n_air)
    lambda_film = wavelength_in_medium(params.wavelength_nm, params.pixels_per_nm, n_film)

    def beam(name, start, end, wavelength, phase, direction=WaveDirection.FROM_START):
        return BeamSegment(
            start=start,
            end=end,
            wavelength=wavelength,
            starting_phase=phase,
            wave_direction=direction,
            color=colors[name],
            label=labels[name],
        )

    beams = {}

    entry = (config.entry_x, config.entry_y)
    hit = _cross(entry, theta, layers.film_top_y)
    beams["incident"] = beam(
        "incident", entry, hit, lambda_air, phase_offset, config.wave_anchor
    )
    surface_phase = beams["incident"].end_phase

    beams["reflected"] = beam(
        "reflected",
        hit,
        _rise(hit, theta, config.beam_length),
        lambda_air,
        reflection_phase_shift(surface_phase, n_air, n_film),
    )

    try:
        theta_film = refraction_angle(theta, n_air, n_film)
    except TotalInternalReflectionError as e:
        log.warning("%s; only the reflected beam is drawn", e)
        return BeamSet(layers=layers, beams=beams, total_internal_reflection=True)

    bottom = _cross(hit, theta_film, layers.film_bottom_y)
    beams["refracted"] = beam("refracted", hit, bottom, lambda_film, surface_phase)

    top = _cross(bottom, theta_film, layers.film_top_y)
    beams["internal"] = beam(
        "internal",
        bottom,
        top,
        lambda_film,
        reflection_phase_shift(beams["refracted"].end_phase, n_film, n_substrate),
    )

    # snell's law is reversible, so this leaves at the incidence angle
    theta_exit = refraction_angle(theta_film, n_film, n_air)
    beams["transmitted"] = beam(
        "transmitted",
        top,
        _rise(top, theta_exit, config.beam_length),
        lambda_air,
        -beams["internal"].end_phase,
    )

    log.debug(
        "beams at %.2f deg: refraction angle %.2f deg, film %.1f px",
        params.incidence_angle_deg,
        math.degrees(theta_film),
        layers.film_thickness,
    )
    return BeamSet(layers=layers, beams=beams, refraction_angle=theta_film)
