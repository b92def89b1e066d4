from .optics import InvalidParameterError

# refractive indices of common coating materials near 500 nm
MATERIALS = {
    "water": 1.33,
    "MgF2": 1.38,
    "SiO2": 1.46,
    "Al2O3": 1.77,
    "ZrO2": 2.0,
}

DEFAULT_MATERIAL = "MgF2"


def material_name(name):
    """The name a material is listed under, matched ignoring case."""
    for material in MATERIALS:
        if material.lower() == name.lower():
            return material
    raise InvalidParameterError(
        f"unknown film material {name!r}, expected one of {', '.join(MATERIALS)}"
    )


def film_index(name):
    return MATERIALS[material_name(name)]
