"""Pluggable application modules, discovered by core.registry.ModuleLoader."""
