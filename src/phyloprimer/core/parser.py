"""FASTA input file parser."""

from __future__ import annotations

from pathlib import Path
from typing import List

from loguru import logger

from ..exceptions import ParseError
from ..models import Sequence


class FastaParser:
    """Parser for multi-record FASTA files."""

    def __init__(self, input_file: Path):
        """Initialize parser with input file path."""
        self.input_file = Path(input_file)
        self.sequences: List[Sequence] = []

        if not self.input_file.exists():
            raise ParseError("Input file not found", input_file=str(self.input_file))

    def parse(self) -> List[Sequence]:
        """Parse the input file and return list of Sequence objects."""
        self.sequences = []
        records = []
        current_name = None
        current_lines: List[str] = []

        logger.info(f"Parsing FASTA input file: {self.input_file}")

        try:
            with open(self.input_file, 'r', encoding='utf-8') as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()

                    # Skip empty and comment lines
                    if not line or line.startswith(';'):
                        continue

                    if line.startswith('>'):
                        if current_name is not None or current_lines:
                            records.append((current_name, current_lines))
                        current_name = line[1:].strip()
                        current_lines = []
                        if not current_name:
                            logger.warning(f"Empty FASTA header on line {line_number}")
                    else:
                        current_lines.append(line)

                if current_name is not None or current_lines:
                    records.append((current_name, current_lines))

        except (IOError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to read input file: {e}", input_file=str(self.input_file))

        for name, lines in records:
            sequence = Sequence.from_raw(name, "".join(lines))
            if not sequence.bases:
                logger.warning(f"Record {sequence.name} has no A/C/G/T bases")
            self.sequences.append(sequence)

        if not self.sequences:
            raise ParseError("No FASTA records found", input_file=str(self.input_file))

        logger.info(f"Successfully parsed {len(self.sequences)} sequences")
        return self.sequences

    def to_fasta(self, output_file: Path, line_width: int = 60) -> Path:
        """Write parsed sequences to a FASTA file."""
        if not self.sequences:
            raise ParseError("No sequences to write. Run parse() first.")

        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Writing FASTA file: {output_file}")

        try:
            with open(output_file, 'w') as f:
                for sequence in self.sequences:
                    f.write(f">{sequence.name}\n")
                    for i in range(0, len(sequence.bases), line_width):
                        f.write(f"{sequence.bases[i:i + line_width]}\n")

        except IOError as e:
            raise ParseError(f"Failed to write FASTA file: {e}", input_file=str(output_file))

        return output_file

    def get_sequence_by_name(self, name: str) -> Sequence | None:
        """Get sequence by name."""
        for sequence in self.sequences:
            if sequence.name == name:
                return sequence
        return None

    def get_statistics(self) -> dict:
        """Get parsing statistics."""
        if not self.sequences:
            return {"total_sequences": 0}

        lengths = [len(sequence) for sequence in self.sequences]

        return {
            "total_sequences": len(self.sequences),
            "min_sequence_length": min(lengths),
            "max_sequence_length": max(lengths),
            "avg_sequence_length": sum(lengths) / len(lengths),
        }
