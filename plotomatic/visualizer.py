import os

import matplotlib.pyplot as plt
import numpy as np

from .exporter import DrawingExporter
from .models import Feature
from .utils.units import to_units

# Matplotlib colors per feature
FEATURE_COLORS = {
    Feature.DRILL: 'black',
    Feature.CONTOUR: 'blue',
    Feature.POCKET: 'green',
    Feature.REF: 'gray',
}


def _split_runs(points):
    """Group consecutive flattened points by their source entity tag."""
    runs = []
    current_tag = None
    for p in points:
        tag = p.src.split(':')[0]
        if tag != current_tag:
            runs.append((tag, []))
            current_tag = tag
        runs[-1][1].append(p)
    return runs


def plot_drawing_preview(exporter: DrawingExporter, features, output_file: str = None,
                         dpi: int = 300, font_size: int = 8, sample_step: float = None):
    """
    Generate a visual preview of the flattened feature points.

    Args:
        exporter: Exporter bound to the drawing and its configuration
        features: Features to plot, in order
        output_file: Optional path to save the plot
        dpi: Plot resolution
        font_size: Font size for annotations
        sample_step: Arc/circle sample spacing in active units
    """
    units = exporter.config.units
    fig, ax = plt.subplots(figsize=(10, 8), dpi=dpi)

    summary = []
    for feature in features:
        feature = Feature.parse(feature)
        points = exporter.flatten_feature_points(feature, sample_step)
        if not points:
            continue
        summary.append(f"• {feature.value}: {len(points)} points")
        color = FEATURE_COLORS[feature]
        linestyle = '--' if feature is Feature.REF else '-'

        for i, (tag, run) in enumerate(_split_runs(points)):
            coords = np.array([[to_units(p.x_mm, units), to_units(p.y_mm, units)] for p in run])
            label = feature.value if i == 0 else ""
            if tag.startswith('POINT#'):
                ax.plot(coords[:, 0], coords[:, 1], marker='+', linestyle='none', color=color,
                        markersize=8, markeredgewidth=2, label=label)
            else:
                ax.plot(coords[:, 0], coords[:, 1], linestyle=linestyle, color=color,
                        linewidth=1.5, label=label)
            ax.text(coords[0, 0], coords[0, 1], tag, fontsize=font_size, color=color,
                    verticalalignment='bottom', horizontalalignment='left')

    ax.set_xlabel(f"X-axis ({units.value})", fontsize=font_size + 2)
    ax.set_ylabel(f"Y-axis ({units.value})", fontsize=font_size + 2)
    ax.set_title("Drawing Preview", fontsize=font_size + 4)
    if summary:
        ax.legend(fontsize=font_size)
        ax.text(0.02, 0.02, "Flattened Points:\n" + "\n".join(summary), transform=ax.transAxes,
                fontsize=font_size, verticalalignment='bottom', horizontalalignment='left',
                bbox=dict(boxstyle="round,pad=0.5", facecolor="lightblue", alpha=0.8))
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal', adjustable='datalim')
    ax.margins(0.1)

    plt.tight_layout()

    if output_file:
        fig.savefig(output_file, dpi=dpi, bbox_inches='tight')

    return fig


def save_plot_preview(exporter: DrawingExporter, features, base_filename: str,
                      output_dir: str = "output") -> str:
    """
    Save a plot preview to the output directory.

    Args:
        exporter: Exporter bound to the drawing
        features: Features to plot
        base_filename: Base name for the output file (without extension)
        output_dir: Directory to write into

    Returns:
        Path of the written PNG
    """
    plot_filename = os.path.join(output_dir, f"{base_filename}_preview.png")
    fig = plot_drawing_preview(exporter, features, plot_filename, dpi=150, font_size=10)
    plt.close(fig)
    return plot_filename
