import math
import pytest
from thin_film_vis.geometry import BEAM_NAMES, WaveDirection
from thin_film_vis.materials import MATERIALS, film_index, material_name
from thin_film_vis.optics import InvalidParameterError
from thin_film_vis.simulate import (
    VARIANTS,
    Parameters,
    SimulationConfig,
    simulate,
    variant,
)


def test_default_parameters():
    config = SimulationConfig()
    params = config.parameters(15, 100)
    assert params.film_refractive_index == 1.38
    assert params.substrate_refractive_index == 1.5
    assert params.air_refractive_index == 1.0
    assert params.wavelength_nm == 500
    assert params.film_thickness_px == pytest.approx(30)
    assert params.incidence_angle_rad == pytest.approx(math.radians(15))


@pytest.mark.parametrize("angle, thickness", [(-1, 100), (30.5, 100), (15, 5), (15, 701)])
def test_out_of_range_parameters(angle, thickness):
    with pytest.raises(InvalidParameterError):
        SimulationConfig().parameters(angle, thickness, 1.38)


def test_range_edges_are_allowed():
    config = SimulationConfig()
    config.parameters(0, 10, 1.38)
    config.parameters(30, 700, 1.38)


@pytest.mark.parametrize(
    "overrides",
    [
        {"film_refractive_index": 1.0},
        {"film_refractive_index": 0.8},
        {"substrate_refractive_index": 0},
        {"air_refractive_index": -1},
        {"wavelength_nm": 0},
        {"pixels_per_nm": float("nan")},
    ],
)
def test_parameters_reject_bad_values(overrides):
    values = dict(incidence_angle_deg=15, film_thickness_nm=100, film_refractive_index=1.38)
    values.update(overrides)
    with pytest.raises(InvalidParameterError):
        Parameters(**values)


@pytest.mark.parametrize(
    "overrides",
    [
        {"angle_range": (30, 0)},
        {"thickness_range": (0, 700)},
        {"sampling_step": 0},
        {"entry_y": 250},
        {"substrate_bottom_y": 300},
    ],
)
def test_config_rejects_bad_layouts(overrides):
    with pytest.raises(InvalidParameterError):
        SimulationConfig(**overrides)


def test_variants():
    assert set(VARIANTS) == {"refraction", "interference"}
    assert VARIANTS["refraction"].wave_anchor is WaveDirection.FROM_END
    assert not VARIANTS["refraction"].show_waves
    assert VARIANTS["interference"].show_waves

    config = variant("interference", amplitude=3.0)
    assert config.amplitude == 3.0
    assert VARIANTS["interference"].amplitude != 3.0

    with pytest.raises(InvalidParameterError):
        variant("prism")


def test_materials():
    assert film_index("MgF2") == 1.38
    assert film_index("mgf2") == 1.38
    assert all(n > 1 for n in MATERIALS.values())
    with pytest.raises(InvalidParameterError):
        film_index("unobtainium")


def test_simulate_builds_a_whole_frame():
    config = variant("interference")
    frame = simulate(config.parameters(15, 100, 1.38), config)

    assert tuple(name for name, _ in frame.beams) == BEAM_NAMES
    assert set(frame.waveforms) == set(BEAM_NAMES)
    for name, path in frame.waveforms.items():
        assert path.beam is frame.beams[name]
        assert path.amplitude == config.amplitude
        assert len(path) == math.ceil(path.beam.length / config.sampling_step) + 1
    assert frame.cue.kind == "intermediate"


def test_simulate_without_waves():
    config = variant("refraction")
    frame = simulate(config.parameters(15, 100, 1.38), config)
    assert frame.waveforms == {}
    assert len(frame.beams) == 5


def test_simulate_validates_against_the_config():
    config = SimulationConfig()
    params = Parameters(45, 100, 1.38)
    with pytest.raises(InvalidParameterError):
        simulate(params, config)


def test_simulate_is_repeatable():
    config = SimulationConfig()
    params = config.parameters(12, 250, 1.77)
    first, second = simulate(params, config), simulate(params, config)
    assert first.beams == second.beams
    assert first.cue == second.cue
    for name in first.waveforms:
        assert list(first.waveforms[name]) == list(second.waveforms[name])


def test_simulate_total_internal_reflection():
    config = SimulationConfig(air_refractive_index=1.8, angle_range=(0, 80))
    frame = simulate(config.parameters(60, 100, 1.38), config)
    assert frame.beams.total_internal_reflection
    assert frame.cue is None
    assert set(frame.waveforms) == {"incident", "reflected"}


@pytest.mark.parametrize("name", ["incidence_angle_deg", "film_thickness_nm"])
@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_parameters_reject_non_finite_values(name, value):
    values = dict(incidence_angle_deg=15, film_thickness_nm=100, film_refractive_index=1.38)
    values[name] = value
    with pytest.raises(InvalidParameterError):
        Parameters(**values)


def test_material_names_ignore_case():
    assert material_name("mgf2") == "MgF2"
    assert material_name("WATER") == "water"
    with pytest.raises(InvalidParameterError):
        material_name("glass")
