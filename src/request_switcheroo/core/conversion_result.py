"""
Data structures representing the output of a source conversion.

This module defines the `ConversionResult` Pydantic model, which carries the
generated code, error messages, rewrite statistics and the execution trace.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
  """
  Container for the results of converting one source unit.
  """

  code: str = Field(default="", description="The generated source code.")
  errors: List[str] = Field(default_factory=list, description="Error messages encountered.")
  success: bool = Field(default=True, description="True if the pipeline completed without fatal errors.")
  rewrites: int = Field(default=0, description="Number of call sites rewritten.")
  unresolved: int = Field(default=0, description="Method calls left alone because types were unresolved.")
  imports: List[str] = Field(default_factory=list, description="Import statements injected.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0

  @property
  def changed(self) -> bool:
    """True if at least one call site was rewritten."""
    return self.rewrites > 0
