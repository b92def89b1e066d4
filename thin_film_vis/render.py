import math
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.patches import Rectangle
from .optics import InvalidParameterError
from .simulate import simulate

FILM_COLOR = "#aed6f1"
SUBSTRATE_COLOR = "#d5dbdb"


def draw_layers(ax, layers, width):
    ax.add_patch(
        Rectangle(
            (0, layers.film_top_y),
            width,
            layers.film_thickness,
            facecolor=FILM_COLOR,
            edgecolor="none",
            label="film",
        )
    )
    ax.add_patch(
        Rectangle(
            (0, layers.substrate_top_y),
            width,
            layers.substrate_bottom_y - layers.substrate_top_y,
            facecolor=SUBSTRATE_COLOR,
            edgecolor="none",
            label="substrate",
        )
    )


def draw_frame(ax, frame):
    """Draw one frame and return the artists of the moving waves."""
    config = frame.config
    draw_layers(ax, frame.beams.layers, config.width)

    # the straight rays are faint when the waves are drawn on top of them
    ray_alpha = 0.35 if frame.waveforms else 1.0
    for name, beam in frame.beams:
        ax.plot(
            [beam.start[0], beam.end[0]],
            [beam.start[1], beam.end[1]],
            color=beam.color,
            alpha=ray_alpha,
            linestyle="--" if frame.waveforms else "-",
            label=None if frame.waveforms else beam.label,
        )

    waves = {}
    for name, path in frame.waveforms.items():
        points = path.to_array()
        (waves[name],) = ax.plot(
            points[:, 0], points[:, 1], color=path.beam.color, label=path.beam.label
        )

    if frame.beams.total_internal_reflection:
        ax.set_title("total internal reflection: no light enters the film")
    else:
        ax.set_title(
            f"{frame.params.incidence_angle_deg:.1f}° incidence, "
            f"refraction {math.degrees(frame.beams.refraction_angle):.1f}°, "
            f"{frame.cue.kind} interference"
        )

    ax.set_xlim(0, config.width)
    ax.set_ylim(0, config.substrate_bottom_y)
    # pixel coordinates grow downwards
    ax.invert_yaxis()
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.legend(loc="upper right", fontsize="small")
    return waves


def show(params, config, save=None):
    fig, ax = plt.subplots(figsize=(8, 6))
    draw_frame(ax, simulate(params, config))
    if save:
        fig.savefig(save)
    else:
        plt.show()
    return fig


def animate(params, config, frames=60, interval=30, phase_step=None):
    """Run the waves by advancing the source phase every frame.

    Every frame is simulated from scratch; only the wave lines are updated.
    """
    if frames < 1:
        raise InvalidParameterError(f"an animation needs at least one frame, got {frames}")
    if phase_step is None:
        phase_step = 2 * math.pi / frames

    fig, ax = plt.subplots(figsize=(8, 6))
    waves = draw_frame(ax, simulate(params, config))

    def update(i):
        frame = simulate(params, config, phase_offset=-i * phase_step)
        for name, line in waves.items():
            points = frame.waveforms[name].to_array()
            line.set_data(points[:, 0], points[:, 1])
        return list(waves.values())

    return FuncAnimation(fig, func=update, frames=frames, interval=interval, blit=True)
