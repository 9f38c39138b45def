## exception hierarchy for patterncad
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
# 
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
# 
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Pattern-engine exceptions.

Error code ranges:
- N0xx: numeric failures (NaN/Infinity reaching geometry)
- C1xx: configuration failures (unknown names, missing options)

Degenerate geometry and empty selections are not errors; those
operations quietly do nothing.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Diagnostic:
    """A single diagnostic describing a failure."""
    code: str                       # N001, C101, etc.
    message: str                    # Human-readable message
    shape: Optional[str] = None     # repr of the offending shape
    operation: Optional[str] = None # operation that produced the failure
    hints: List[str] = field(default_factory=list)

    def format(self) -> str:
        """Format the diagnostic for display."""
        parts = [f"error[{self.code}]: {self.message}"]
        if self.operation is not None:
            parts.append(f"    --> in operation: {self.operation}")
        if self.shape is not None:
            parts.append(f"    --> shape: {self.shape}")
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")
        return "\n".join(parts)


class PatternError(Exception):
    """Base class for pattern-engine errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.format())

    @property
    def code(self) -> str:
        return self.diagnostic.code


class NumericError(PatternError):
    """NaN or Infinity detected in geometry."""

    def __init__(self, message: str, shape=None, operation: str = None,
                 code: str = "N001"):
        super().__init__(Diagnostic(
            code=code,
            message=message,
            shape=repr(shape) if shape is not None else None,
            operation=operation,
        ))
        self.shape = shape
        self.operation = operation


class ConfigurationError(PatternError, ValueError):
    """Invalid or missing construction parameter."""

    def __init__(self, message: str, hints: Optional[List[str]] = None,
                 code: str = "C101"):
        super().__init__(Diagnostic(
            code=code,
            message=message,
            hints=list(hints or []),
        ))


def unknown_name(kind: str, name: str, available) -> ConfigurationError:
    """Build the error raised for an unknown catalog/option name."""
    names = ', '.join(available)
    return ConfigurationError(f'Unknown {kind}: "{name}". Available: {names}',
                              code="C102")
