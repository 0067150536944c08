"""
Java code generator module.
"""

from .generator import JavaGenerator, create_java_generator
from .naming import create_java_sanitizer
from .profile import JavaRenderer, create_java_profile

__all__ = [
    "JavaGenerator",
    "create_java_generator",
    "create_java_sanitizer",
    "JavaRenderer",
    "create_java_profile",
]
