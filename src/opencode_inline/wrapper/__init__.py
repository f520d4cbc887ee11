"""Stdin wrapper protocol: frame the selection, call the AI tool, extract the reply."""

from .extract import Extraction, extract_first_block, reduce_response
from .framing import frame_prompt

__all__ = ["Extraction", "extract_first_block", "frame_prompt", "reduce_response"]
