"""Metys bridge: local HTTP bridge between the disassembler front-end and radare2."""

__version__ = "0.1.0"
