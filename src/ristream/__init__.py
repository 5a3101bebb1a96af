"""ristream: cache and replay inline archives and object instances in RI streams.

The package is organised around a linear chain of ``Renderer`` stages:

- ``ristream.ri``        : the call interface, command records and filters,
- ``ristream.rib``       : RIB text front end and writer,
- ``ristream.pipelines`` : ready-made chains (``run_expand``),
- ``ristream.cli`` / ``ristream.api`` : outer surfaces.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
