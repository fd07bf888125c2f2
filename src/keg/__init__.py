"""keg: index of Knowledge Exchange Grid nodes."""

from .models import Dex, DexEntry

__version__ = "0.1.0"

__all__ = ["Dex", "DexEntry", "__version__"]
