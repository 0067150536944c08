"""
C++ code generator module.
"""

from .generator import CppGenerator, create_cpp_generator
from .naming import create_cpp_sanitizer
from .profile import CppRenderer, create_cpp_profile

__all__ = [
    "CppGenerator",
    "create_cpp_generator",
    "create_cpp_sanitizer",
    "CppRenderer",
    "create_cpp_profile",
]
