"""Token model, shell runtime, builtins and test tooling for compiling shell scripts."""

__version__ = "0.1.0"