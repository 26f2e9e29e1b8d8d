import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Drawing/export defaults, overridable through the environment or .env."""

    # Units and grid
    UNITS = os.environ.get('PLOTOMATIC_UNITS', 'in')  # 'in' or 'mm'
    GRID_STEP = float(os.environ.get('PLOTOMATIC_GRID_STEP', 0.25))  # in UNITS
    MAJOR_EVERY = int(os.environ.get('PLOTOMATIC_MAJOR_EVERY', 4))
    VIEW_WIDTH = float(os.environ.get('PLOTOMATIC_VIEW_WIDTH', 12))  # in UNITS

    # 'haas' records coordinates relative to work zero; anything else is raw world
    COORD_FLAVOR = os.environ.get('PLOTOMATIC_COORD_FLAVOR', 'haas')

    # JSON IR header fields
    IR_PURPOSE = os.environ.get('PLOTOMATIC_IR_PURPOSE', 'drawing_export')
    IR_Z_STRATEGY = os.environ.get('PLOTOMATIC_IR_Z_STRATEGY', 'none')

    # CLI directories
    INPUT_DIR = os.environ.get('PLOTOMATIC_INPUT_DIR', 'input')
    OUTPUT_DIR = os.environ.get('PLOTOMATIC_OUTPUT_DIR', 'output')
