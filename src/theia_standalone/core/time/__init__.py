from theia_standalone.core.time.abc import Time
from theia_standalone.core.time.real import RealTime

__all__ = [
    "RealTime",
    "Time",
]
