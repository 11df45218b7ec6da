"""CLI command modules discovered by codep.core.registry."""
