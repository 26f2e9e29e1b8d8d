import os
from typing import List

from .models import DrawingConfig, EXPORTABLE_FEATURES, Feature, FEATURE_HINTS, Units

# Menu key -> (label, file suffix)
EXPORT_FORMATS = {
    '1': ("Waypoints CSV", "_waypoints.csv"),
    '2': ("Segments CSV", "_segments.csv"),
    '3': ("Points CSV (all selected features)", "_points.csv"),
    '4': ("G-code", ".gcode"),
    '5': ("JSON IR", "_ir.json"),
    '6': ("Teaching pseudocode", "_pseudo.txt"),
}


def get_input_files(input_dir: str = "input") -> List[str]:
    """Get list of available drawing files."""
    if not os.path.exists(input_dir):
        return []

    files = sorted(f for f in os.listdir(input_dir) if f.endswith('.json'))
    return files


def select_input_file(input_dir: str = "input") -> str:
    """Prompt user to select a drawing file."""
    files = get_input_files(input_dir)

    if not files:
        print(f"No drawing files found in the '{input_dir}' directory.")
        print("Please add a .json drawing file (same shape as the JSON IR export).")
        raise SystemExit(1)

    print("Available drawing files:")
    for i, file in enumerate(files, 1):
        print(f"{i}. {file}")

    while True:
        try:
            choice = int(input(f"\nSelect file (1-{len(files)}): ")) - 1
            if 0 <= choice < len(files):
                return os.path.join(input_dir, files[choice])
            else:
                print(f"Please enter a number between 1 and {len(files)}")
        except ValueError:
            print("Please enter a valid number")


def get_float_input(prompt: str, default: float = None) -> float:
    while True:
        try:
            if default is not None:
                user_input = input(f"{prompt} (default: {default}): ").strip()
                if not user_input:
                    return default
            else:
                user_input = input(f"{prompt}: ").strip()

            value = float(user_input)
            if value <= 0:
                print("Please enter a positive number")
                continue
            return value
        except ValueError:
            print("Please enter a valid number")


def get_export_settings(defaults: DrawingConfig) -> DrawingConfig:
    """Prompt for units and grid step, starting from the configured defaults."""
    print("\n=== Export Settings ===")
    while True:
        units = input(f"Units 'in' or 'mm' (default: {defaults.units.value}): ").strip()
        if not units:
            units = defaults.units.value
        try:
            units = Units.parse(units)
            break
        except ValueError as e:
            print(str(e))

    grid_step = get_float_input(f"Sample/grid step ({units.value})", defaults.grid_step)

    return DrawingConfig(
        units=units,
        grid_step=grid_step,
        major_every=defaults.major_every,
        view_width=defaults.view_width,
        coord_flavor=defaults.coord_flavor,
        center_world=defaults.center_world,
        work_zero_world=defaults.work_zero_world,
    )


def select_features(counts) -> List[Feature]:
    """Prompt for the features to export; REF is left out by default."""
    print("\nFeatures in drawing:")
    for feature in Feature:
        print(f"  {feature.value:<8} {counts.get(feature, 0):>3} entities  - {FEATURE_HINTS[feature]}")

    default = ",".join(f.value for f in EXPORTABLE_FEATURES)
    while True:
        raw = input(f"\nFeatures to export, comma separated (default: {default}): ").strip()
        if not raw:
            return list(EXPORTABLE_FEATURES)
        try:
            return [Feature.parse(name) for name in raw.split(',') if name.strip()]
        except ValueError as e:
            print(str(e))


def select_export_format() -> str:
    """Prompt for one of EXPORT_FORMATS and return its menu key."""
    print("\nExport formats:")
    for key, (label, _) in EXPORT_FORMATS.items():
        print(f"{key}. {label}")

    while True:
        choice = input(f"\nSelect format (1-{len(EXPORT_FORMATS)}): ").strip()
        if choice in EXPORT_FORMATS:
            return choice
        print(f"Please enter a number between 1 and {len(EXPORT_FORMATS)}")


def display_summary(input_file: str, config: DrawingConfig, features: List[Feature],
                    format_key: str, output_files: List[str]) -> bool:
    """Display a summary of the export and ask for confirmation."""
    print(f"\n=== Export Summary ===")
    print(f"Input file: {input_file}")
    print(f"Format: {EXPORT_FORMATS[format_key][0]}")
    print(f"Features: {', '.join(f.value for f in features)}")
    print(f"Units: {config.units.value} ({config.decimals} decimals)")
    print(f"Sample step: {config.grid_step} {config.units.value}")
    print(f"Coordinate flavor: {config.coord_flavor.value}")
    for path in output_files:
        print(f"Output: {path}")

    confirm = input("\nProceed with export? (y/n): ").lower().strip()
    return confirm in ['y', 'yes']
