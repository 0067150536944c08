"""
Exceptions shared by the code generation core.
"""

from typing import Optional


class CodegenError(Exception):
    """Fatal generation failure; aborts the whole run with no output."""

    def __init__(self, message: str, shape_id: Optional[object] = None):
        super().__init__(message)
        self.shape_id = shape_id
