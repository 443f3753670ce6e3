"""
Freehold CLI - Command-line tools over a YAML plot map.

Usage:
    freehold locate map.yaml 5 5
    freehold check map.yaml
    freehold render map.yaml plots.png --scale 8
"""

__version__ = "1.0.0"
