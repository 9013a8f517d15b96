"""
Proxy emitters, one per target language.
"""

from __future__ import annotations

from .base import EmitContext, LanguageDescriptor
from .javascript import JavaScriptEmitter
from .python import PythonEmitter

__all__ = ["EmitContext", "LanguageDescriptor", "JavaScriptEmitter", "PythonEmitter"]
