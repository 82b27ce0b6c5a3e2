# config.py
MAX_LOG_ODDS = 50.0  # saturation bound for stored log-odds

# Map-server style thresholds written next to the exported raster
OCCUPIED_THRESH = "0.80"
FREE_THRESH = "0.20"

# Smoothing kernel used when smooth() is called without one
DEFAULT_KERNEL = "recorded"

# Default absolute tolerance for GridMap.equals
DEFAULT_TOL = 1e-9
