"""
Python code generator module.

Generates Python model classes and clients for event-stream RPC services.
"""

from .generator import PythonGenerator, create_python_generator
from .naming import create_python_sanitizer, python_local_reserved
from .profile import PythonRenderer, create_python_profile

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    # Naming
    "create_python_sanitizer",
    "python_local_reserved",
    # Profile
    "PythonRenderer",
    "create_python_profile",
]
