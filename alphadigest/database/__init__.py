"""Digestion products and the modification placement engine.

Provides the parent/product data model, deterministic fixed-modification
placement and lazy, budgeted enumeration of variable-modification patterns.

- ``BioPolymer``: parent protein or nucleic acid
- ``DigestionProduct``: weakly-referenced window of a parent
- ``enumerate_fixed_assignment``: one fixed assignment per product
- ``enumerate_variable_patterns``: restartable lazy pattern sequence
- ``Digester``: cleavage + modification driver with thread-confined pools
- ``read_fasta``: FASTA files to parent biopolymers
"""

from .biopolymer import (
    BioPolymer,
    PolymerKind,
)

from .digestion_product import (
    CleavageSpecificity,
    DigestionProduct,
)

from .fixed_modifications import (
    enumerate_fixed_assignment,
    start_terminus_slot,
    end_terminus_slot,
)

from .variable_modifications import (
    VariableModificationPatterns,
    enumerate_variable_patterns,
    count_variable_patterns,
)

from .digestion import (
    CLEAVAGE_RULES,
    CleavageRule,
    DigestionParams,
    Digester,
    ModifiedProduct,
    cleave,
    combine_with_fixed,
    digest_biopolymers,
    find_variable_modification_candidates,
)

from .fasta_reader import (
    parse_header,
    iter_fasta,
    read_fasta,
    read_multiple_fasta,
)

__all__ = [
    # Data model
    'BioPolymer',
    'PolymerKind',
    'CleavageSpecificity',
    'DigestionProduct',

    # Fixed modifications
    'enumerate_fixed_assignment',
    'start_terminus_slot',
    'end_terminus_slot',

    # Variable modifications
    'VariableModificationPatterns',
    'enumerate_variable_patterns',
    'count_variable_patterns',

    # Digestion
    'CLEAVAGE_RULES',
    'CleavageRule',
    'DigestionParams',
    'Digester',
    'ModifiedProduct',
    'cleave',
    'combine_with_fixed',
    'digest_biopolymers',
    'find_variable_modification_candidates',

    # FASTA input
    'parse_header',
    'iter_fasta',
    'read_fasta',
    'read_multiple_fasta',
]
