import os

# Test-friendly defaults for constants read at import time
os.environ.setdefault("RECONNECT_DELAY", "0")
os.environ.setdefault("CONNECT_TIMEOUT", "5")
