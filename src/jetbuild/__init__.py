"""Jetbuild - native application builds driven by an external AOT toolchain."""

__version__ = "0.1.0"
