# Re-export the main Base class from db.py for match engine models
# so every model shares the same metadata
from db import Base

__all__ = ["Base"]
