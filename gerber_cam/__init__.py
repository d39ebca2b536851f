"""
Gerber CAM Package.

RS-274X/X2 export engine for PCB artwork: converts exact-integer board
geometry into byte-exact Gerber files with deduplicated apertures, minimal
mode switching and an MD5 checksum trailer.

Subpackages:
    geometry: Length, Angle, Point, Ellipse and Polygon value types
    plot_ir: Intermediate representation for plot operations
    cam: Aperture registry and Gerber generator
    configs: Export configuration loading and validation
    utils: Atomic I/O, hashing, logging and job-file schemas
    scripts: Command-line export entry point
"""

__version__ = "0.4.0"

__all__ = ["geometry", "plot_ir", "cam", "configs", "utils", "scripts"]
