"""yabs - Yet another build system for C/C++ projects."""

__version__ = "0.1.0"
