import argparse
import math
import os
import sys
from rich import print
from rich.table import Table
from thin_film_vis.materials import DEFAULT_MATERIAL, MATERIALS, film_index, material_name
from thin_film_vis.optics import OpticsError
from thin_film_vis.util import exit_with_error, init_logging
from .simulate import VARIANTS, simulate, variant


def build_parser():
    parser = argparse.ArgumentParser(
        prog="thinfilm-vis",
        description="Thin-film interference beam visualizer",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--angle",
        type=float,
        help="the incidence angle in degrees, measured from the normal",
        default=15.0,
    )
    parser.add_argument(
        "--thickness",
        type=float,
        help="the thickness of the film in nanometers",
        default=100.0,
    )
    parser.add_argument(
        "--material",
        type=material_name,
        choices=list(MATERIALS),
        help="the film material",
        default=DEFAULT_MATERIAL,
    )
    parser.add_argument(
        "--film-index",
        type=float,
        help="use this refractive index for the film instead of a named material",
    )
    parser.add_argument(
        "--variant",
        choices=list(VARIANTS),
        help="which flavour of the simulation to run",
        default="interference",
    )
    waves = parser.add_mutually_exclusive_group()
    waves.add_argument(
        "--waves", action="store_true", help="draw the waves even if the variant hides them"
    )
    waves.add_argument(
        "--no-waves", action="store_true", help="draw plain rays without the waves"
    )

    # args for the display
    parser.add_argument(
        "--display", action="store_true", help="display the beams using matplotlib"
    )
    parser.add_argument(
        "--animate", action="store_true", help="animate the waves (implies --display)"
    )
    parser.add_argument(
        "--frames", type=int, help="the number of frames in one animation cycle", default=60
    )
    parser.add_argument("--save", help="save the rendered figure to this file instead of showing it")
    parser.add_argument("--verbose", action="store_true", help="log every recomputation")
    return parser


def report(frame):
    table = Table(title="Beam segments")
    for column in ("beam", "start (px)", "end (px)", "length (px)", "wavelength (px)", "phase (rad)"):
        table.add_column(column)

    for name, beam in frame.beams:
        table.add_row(
            beam.label or name,
            f"({beam.start[0]:.1f}, {beam.start[1]:.1f})",
            f"({beam.end[0]:.1f}, {beam.end[1]:.1f})",
            f"{beam.length:.1f}",
            f"{beam.wavelength:.1f}",
            f"{beam.starting_phase:.3f}",
        )
    print(table)

    if frame.beams.total_internal_reflection:
        print("[yellow]Total internal reflection: no light enters the film.[/yellow]")
        return

    cue = frame.cue
    print(f"Refraction angle: {math.degrees(frame.beams.refraction_angle):.2f}°")
    print(
        f"Phase difference {cue.phase_difference:.3f} rad, "
        f"relative amplitude {cue.relative_amplitude:.2f}: [bold]{cue.kind}[/bold] interference"
    )
    print(f"Film reflectance: {cue.reflectance * 100:.2f}%")


def main(argv=None):
    args = build_parser().parse_args(argv)
    init_logging(args.verbose)

    try:
        overrides = {}
        if args.waves or args.no_waves:
            overrides["show_waves"] = args.waves
        config = variant(args.variant, **overrides)
        n_film = args.film_index if args.film_index is not None else film_index(args.material)
        params = config.parameters(args.angle, args.thickness, n_film)
        frame = simulate(params, config)
    except OpticsError as e:
        exit_with_error(str(e))

    report(frame)

    if args.animate:
        import matplotlib.pyplot as plt
        from .render import animate

        try:
            anim = animate(params, config, frames=args.frames)
        except OpticsError as e:
            exit_with_error(str(e))
        if args.save:
            anim.save(args.save)
        else:
            plt.show()
    elif args.display or args.save:
        from .render import show

        show(params, config, save=args.save)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nProcess interrupted. Shutting down...")
        try:
            sys.exit(130)
        except SystemExit:
            os._exit(130)
