DEFAULT_API_BASE_URL = "http://localhost:3000"

# Board sizes offered by the control panel and their button labels.
SUPPORTED_SIZES = (4, 9, 16, 25)
SIZE_LABELS = {
    4: "Small",
    9: "Normal",
    16: "Hard",
    25: "Extra Hard",
}
DEFAULT_SIZE = 9
DEFAULT_CLUES = 30
# Minimum share of the grid that must be given, in percent (rounded up).
MIN_CLUE_PERCENT = 10

WINDOW_WIDTH = 1024
WINDOW_HEIGHT = 720
WINDOW_TITLE = "Sudoku Solver"

# Grid footprint relative to the area right of the control column.
GRID_MAX_WIDTH_PCT = 0.92
GRID_MAX_HEIGHT_PCT = 0.90
GRID_MIN_CELL_SIZE = 18
GRID_MARGIN = 24

# Control column geometry (left side of the window).
CONTROL_COLUMN_WIDTH = 300
CONTROL_PADDING = 16
SIZE_BUTTON_HEIGHT = 64
ACTION_BUTTON_HEIGHT = 48
CLUE_FIELD_HEIGHT = 40
