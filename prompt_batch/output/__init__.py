"""Response file naming and writing."""

from prompt_batch.output.io import AtomicWriter
from prompt_batch.output.paths import output_name, output_path_for


__all__ = ["AtomicWriter", "output_name", "output_path_for"]
