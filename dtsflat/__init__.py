"""dtsflat - Flatten nested namespaces in ambient type declarations."""

from dtsflat.config import FlattenConfig
from dtsflat.errors import UnsupportedShapeError
from dtsflat.phases.emit import print_program
from dtsflat.phases.flatten import flatten_program
from dtsflat.pipeline import transpile

__version__ = "0.1.0"
__all__ = ["FlattenConfig", "UnsupportedShapeError", "flatten_program", "print_program", "transpile"]
