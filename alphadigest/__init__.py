"""AlphaDigest - Digestion products and modification isoform enumeration.

This library turns proteins and nucleic acids into digestion products and
annotates them with fixed modifications and every budgeted combination of
variable modifications, generating isoforms lazily so that proteome-scale
digestion never materializes the combinatorial space.
"""

__version__ = "0.1.0"

from alphadigest import constants
from alphadigest import modifications
from alphadigest import pools
from alphadigest import database
from alphadigest import log_config

__all__ = [
    "constants",
    "modifications",
    "pools",
    "database",
    "log_config",
]
