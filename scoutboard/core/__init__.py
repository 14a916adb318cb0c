"""Core domain layer - entities, interfaces, services and exceptions."""

from scoutboard.core import entities, exceptions, interfaces

__all__ = ["entities", "interfaces", "exceptions"]
