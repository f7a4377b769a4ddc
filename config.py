# config.py
import os

# ======= Core units / cell size =======
CELL_SIZE = float(os.getenv("TC_CELL_SIZE", "1.0"))

# ======= Generation defaults =======
# Parsed into OverlapPolicy / ColliderTarget by models.py.
OVERLAP        = os.getenv("TC_OVERLAP", "NotAllowed")
TARGET         = os.getenv("TC_TARGET", "UseHostObject")
CONTAINER_NAME = os.getenv("TC_CONTAINER_NAME", "ColliderContainer")

# ======= Text tile maps =======
OCCUPIED_CHARS = os.getenv("TC_OCCUPIED_CHARS", "#X1")
MAX_CELLS      = int(os.getenv("TC_MAX_CELLS", "250000"))

# ======= Output names =======
COORDS_OUT  = os.getenv("TC_COORDS_OUT", "colliders.txt")
LAYOUT_HTML = os.getenv("TC_LAYOUT_HTML", "collider_view.html")

class CFG:
    CELL_SIZE = CELL_SIZE

    OVERLAP        = OVERLAP
    TARGET         = TARGET
    CONTAINER_NAME = CONTAINER_NAME

    OCCUPIED_CHARS = OCCUPIED_CHARS
    MAX_CELLS      = MAX_CELLS

    COORDS_OUT  = COORDS_OUT
    LAYOUT_HTML = LAYOUT_HTML

__all__ = ["CFG"]
