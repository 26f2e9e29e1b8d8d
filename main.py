#!/usr/bin/env python3

import os
import sys

from config import Config
from plotomatic.drawing import validate_drawing
from plotomatic.drawing_parser import parse_drawing_file, ParseError
from plotomatic.exporter import DrawingExporter
from plotomatic.models import DrawingConfig
from plotomatic.user_interface import (
    EXPORT_FORMATS,
    select_input_file,
    get_export_settings,
    select_features,
    select_export_format,
    display_summary,
)

# Formats written once per feature rather than once per export
PER_FEATURE_FORMATS = {'1', '2'}


def render_export(exporter: DrawingExporter, format_key: str, features, feature=None) -> str:
    """Produce the text for one menu format."""
    if format_key == '1':
        return exporter.export_waypoints_csv(feature)
    if format_key == '2':
        return exporter.export_segments_csv(feature)
    if format_key == '3':
        return exporter.export_points_csv(features)
    if format_key == '4':
        return exporter.export_gcode(features)
    if format_key == '5':
        return exporter.export_ir_json(features, Config.IR_PURPOSE, Config.IR_Z_STRATEGY)
    return exporter.export_teaching_pseudo(features)


def main():
    """Main application entry point."""
    print("=== PlotOMatic Drawing Exporter ===")
    print("Export drawn entities as waypoints, segments, G-code, JSON IR or pseudocode\n")

    output_dir = Config.OUTPUT_DIR
    os.makedirs(output_dir, exist_ok=True)

    while True:  # Loop to allow retry on parse errors
        try:
            input_file = select_input_file(Config.INPUT_DIR)
            print(f"\nSelected drawing file: {input_file}")

            print("Parsing drawing file...")
            drawing = parse_drawing_file(input_file)
            print(f"\nFound {len(drawing)} entities")
            break

        except ParseError as e:
            print(f"\n❌ ERROR: Problem with drawing file:")
            print(f"{str(e)}")
            print(f"\nPlease fix the drawing file and try again.")

            retry = input("\nWould you like to select a different file or retry? (y/n): ").lower().strip()
            if retry not in ['y', 'yes']:
                print("Exiting...")
                sys.exit(1)
            continue

    for warning in validate_drawing(drawing):
        print(f"⚠️  {warning} (skipped in exports)")

    config = get_export_settings(DrawingConfig.from_object(Config))
    features = select_features(drawing.feature_counts())
    format_key = select_export_format()

    base_name = os.path.splitext(os.path.basename(input_file))[0]
    suffix = EXPORT_FORMATS[format_key][1]
    if format_key in PER_FEATURE_FORMATS:
        targets = [(f, os.path.join(output_dir, f"{base_name}_{f.value.lower()}{suffix}")) for f in features]
    else:
        targets = [(None, os.path.join(output_dir, f"{base_name}{suffix}"))]

    if not display_summary(input_file, config, features, format_key, [path for _, path in targets]):
        print("Operation cancelled.")
        return

    exporter = DrawingExporter(config, drawing)
    try:
        print("\nExporting...")
        for feature, path in targets:
            text = render_export(exporter, format_key, features, feature)
            with open(path, 'w') as f:
                f.write(text + "\n")
            print(f"✅ Written: {path} ({len(text.splitlines())} lines)")
    except (OSError, ValueError) as e:
        print(f"\n❌ Error exporting drawing: {str(e)}")
        sys.exit(1)

    show_plot = input("\nWould you like to save a visual preview of the drawing? (y/n): ").lower().strip()
    if show_plot in ['y', 'yes']:
        try:
            from plotomatic.visualizer import save_plot_preview
            print("Generating visual preview...")
            plot_filename = save_plot_preview(exporter, features, base_name, output_dir)
            print(f"Plot saved to: {plot_filename}")
        except ImportError:
            print("⚠️  Visual preview requires matplotlib. Install with: pip install matplotlib")


if __name__ == "__main__":
    main()
