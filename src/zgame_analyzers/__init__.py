"""ZGame Analyzers - static analysis rules for Unity C# projects."""

__version__ = "0.1.0"
