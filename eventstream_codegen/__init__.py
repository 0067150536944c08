"""
Event-stream RPC code generator.

Turns a Smithy-style service model into data models and clients for
Python, TypeScript, C++ and Java.
"""

__version__ = "0.1.0"
