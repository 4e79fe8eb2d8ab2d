"""Service layer for skillscan.

Services never import from skillscan.ui, skillscan.cli, or typer. Consumer
layers (the CLI) handle presentation.
"""
