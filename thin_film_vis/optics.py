import logging
import math
from collections import namedtuple
import numpy as np

log = logging.getLogger(__name__)


class OpticsError(Exception):
    pass


class InvalidParameterError(OpticsError, ValueError):
    pass


class TotalInternalReflectionError(OpticsError, ArithmeticError):
    """Raised when Snell's law has no real solution.

    The light does not refract into the second medium at all, so there is no
    angle to return and no refracted beam to draw.
    """

    def __init__(self, incidence_angle, n1, n2):
        self.incidence_angle = incidence_angle
        self.n1 = n1
        self.n2 = n2
        super().__init__(
            f"total internal reflection at {math.degrees(incidence_angle):.2f} deg "
            f"going from n={n1} into n={n2}"
        )


def _check_index(n, name="refractive index"):
    if not n > 0:
        raise InvalidParameterError(f"{name} must be positive, got {n}")


# sin(theta2) = n1 sin(theta1) / n2
def refraction_angle(incidence_angle, n1, n2):
    _check_index(n1)
    _check_index(n2)
    if not math.isfinite(incidence_angle):
        raise InvalidParameterError(f"incidence angle must be finite, got {incidence_angle}")

    sin_theta2 = n1 * math.sin(incidence_angle) / n2
    # the arcsine is only defined on [-1, 1]; check before calling it
    if abs(sin_theta2) > 1:
        raise TotalInternalReflectionError(incidence_angle, n1, n2)

    return math.asin(sin_theta2)


# the phase in radians accumulated traveling path_length
def path_phase(path_length, wavelength):
    if not wavelength > 0:
        raise InvalidParameterError(f"wavelength must be positive, got {wavelength}")
    return 2 * math.pi * path_length / wavelength


def reflection_phase_shift(incoming_phase, n_incident, n_next):
    # the reflected beam is parametrized backwards from the reflection point,
    # so the phase reverses. reflecting off a denser medium adds a half turn.
    phase = -incoming_phase
    if n_next > n_incident:
        phase += math.pi
    return phase


def wavelength_in_medium(wavelength_nm, pixels_per_nm, n):
    _check_index(n)
    return wavelength_nm * pixels_per_nm / n


def fresnel(n1, n2, theta1):
    cos_theta_i = np.cos(theta1)
    # using snell's law and 1 - sin^2 = cos^2. emath keeps the evanescent
    # case complex instead of producing nan
    cos_theta_t = np.emath.sqrt(1 - ((n1 / n2) * np.sin(theta1)) ** 2)

    # amplitude reflection and transmission coefficients for s- and p-polarized waves
    r_s = (n1 * cos_theta_i - n2 * cos_theta_t) / (n1 * cos_theta_i + n2 * cos_theta_t)
    r_p = (n1 * cos_theta_t - n2 * cos_theta_i) / (n2 * cos_theta_i + n1 * cos_theta_t)
    t_s = r_s + 1
    t_p = n1 / n2 * (r_p + 1)

    # assume the light source is nonpolarized, so average the results
    return (r_s + r_p) / 2, (t_s + t_p) / 2


# the difference between the paths of light reflecting off the upper and lower
# surfaces of the film, taking refractive index into account
def optical_path_difference(n_film, theta_film, thickness):
    return 2 * n_film * thickness * np.cos(theta_film)


def film_reflectance(wavelength, n_air, n_film, n_substrate, theta1, thickness):
    """Reflectance of a single film on a substrate.

    wavelength and thickness share a unit. Sums every internally reflected
    wave (the Airy formula) and squares the amplitude to yield intensity.
    """
    theta_film = refraction_angle(theta1, n_air, n_film)

    # the round-trip phase accumulated inside the film
    phase = 2 * np.pi * optical_path_difference(n_film, theta_film, thickness) / wavelength

    r_top, _ = fresnel(n_air, n_film, theta1)
    r_bottom, _ = fresnel(n_film, n_substrate, theta_film)

    r = (r_top + r_bottom * np.exp(1j * phase)) / (1 + r_top * r_bottom * np.exp(1j * phase))
    return float(np.abs(r) ** 2)


InterferenceCue = namedtuple(
    "InterferenceCue",
    [
        "phase_difference",
        "relative_amplitude",
        "kind",
        "reflectance",
    ],
)


def interference_cue(
    wavelength, n_air, n_film, n_substrate, theta1, thickness, tolerance=0.1
):
    """Classify how the two outgoing beams combine.

    Compares the beam reflected at the top of the film with the one leaving
    the film after the substrate reflection. Both half-turn flips are counted,
    so two flips cancel and one flip inverts the cue.
    """
    theta_film = refraction_angle(theta1, n_air, n_film)
    opd = optical_path_difference(n_film, theta_film, thickness)

    flip_top = math.pi if n_film > n_air else 0.0
    flip_bottom = math.pi if n_substrate > n_film else 0.0

    delta = (2 * math.pi * opd / wavelength + flip_bottom - flip_top) % (2 * math.pi)
    amplitude = abs(math.cos(delta / 2))

    if amplitude >= 1 - tolerance:
        kind = "constructive"
    elif amplitude <= tolerance:
        kind = "destructive"
    else:
        kind = "intermediate"

    log.debug("phase difference %.3f rad, relative amplitude %.3f", delta, amplitude)

    return InterferenceCue(
        phase_difference=delta,
        relative_amplitude=amplitude,
        kind=kind,
        reflectance=film_reflectance(
            wavelength, n_air, n_film, n_substrate, theta1, thickness
        ),
    )
