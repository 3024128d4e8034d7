"""Command implementations behind the `polycule` CLI."""
