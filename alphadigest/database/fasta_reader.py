"""FASTA reading into biopolymers.

Streams protein or nucleic-acid FASTA files into ``BioPolymer`` parents
ready for digestion. UniProt headers (``sp|P12345|NAME_HUMAN ...``) give the
accession from the second field and the entry name from the third; other
headers use their first token as accession.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from .biopolymer import BioPolymer, PolymerKind

logger = logging.getLogger(__name__)


def parse_header(header: str) -> Tuple[str, Optional[str]]:
    """Extract accession and entry name from a FASTA header.

    Parameters
    ----------
    header : str
        Header line without the leading '>'

    Returns
    -------
    accession : str
    name : str or None
        UniProt entry name when present

    Examples
    --------
    >>> parse_header("sp|P12345|NAME_HUMAN Some protein")
    ('P12345', 'NAME_HUMAN')
    >>> parse_header("RNA_7 tRNA fragment")
    ('RNA_7', None)
    """
    first_token = header.strip().split()[0] if header.strip() else ""
    fields = first_token.split('|')
    if len(fields) >= 3:
        return fields[1], fields[2] or None
    if len(fields) == 2:
        return fields[1], None
    return first_token, None


def iter_fasta(
    fasta_path: Union[str, Path],
    kind: PolymerKind = PolymerKind.PROTEIN,
    min_length: int = 0,
) -> Iterator[BioPolymer]:
    """Stream biopolymers from a FASTA file.

    Entries with an empty sequence or shorter than ``min_length`` are
    skipped. Sequences are upper-cased.

    Raises
    ------
    FileNotFoundError
        If ``fasta_path`` does not exist; raised by the call itself, before
        any entry is requested
    """
    fasta_path = Path(fasta_path)
    if not fasta_path.exists():
        raise FileNotFoundError(f"FASTA file not found: {fasta_path}")
    return _iter_records(fasta_path, kind, min_length)


def _iter_records(fasta_path: Path, kind: PolymerKind, min_length: int) -> Iterator[BioPolymer]:
    header = None
    chunks: List[str] = []

    def build() -> Optional[BioPolymer]:
        sequence = ''.join(chunks).upper()
        if not sequence or len(sequence) < min_length:
            return None
        accession, name = parse_header(header)
        return BioPolymer(sequence, accession, kind=kind, name=name)

    with open(fasta_path) as f:
        for line in f:
            if line.startswith('>'):
                if header is not None:
                    biopolymer = build()
                    if biopolymer is not None:
                        yield biopolymer
                header = line[1:].strip()
                chunks = []
            elif header is not None:
                chunks.append(line.strip())

    if header is not None:
        biopolymer = build()
        if biopolymer is not None:
            yield biopolymer


def read_fasta(
    fasta_path: Union[str, Path],
    kind: PolymerKind = PolymerKind.PROTEIN,
    min_length: int = 0,
) -> List[BioPolymer]:
    """Read all biopolymers of a FASTA file.

    Examples
    --------
    >>> proteins = read_fasta("human.fasta", min_length=7)
    >>> proteins[0].accession
    'P12345'
    """
    fasta_path = Path(fasta_path)
    logger.info(f"Reading FASTA file: {fasta_path.name}")
    biopolymers = list(iter_fasta(fasta_path, kind=kind, min_length=min_length))
    logger.info(f"Read {len(biopolymers):,} {kind.value} entries from {fasta_path.name}")
    return biopolymers


def read_multiple_fasta(
    fasta_paths: List[Union[str, Path]],
    kind: PolymerKind = PolymerKind.PROTEIN,
    min_length: int = 0,
) -> List[BioPolymer]:
    """Read several FASTA files and concatenate their entries in order."""
    biopolymers: List[BioPolymer] = []
    for fasta_path in fasta_paths:
        biopolymers.extend(read_fasta(fasta_path, kind=kind, min_length=min_length))

    logger.info(f"Combined {len(biopolymers):,} entries from {len(fasta_paths)} files")
    return biopolymers
