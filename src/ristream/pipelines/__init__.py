"""Pipeline entry points for ristream.

Currently exposed:

- :func:`run_expand`: RIB text -> inline archive filter -> RIB text,
  implemented in ``expand.py``.
"""

from __future__ import annotations

from .expand import ExpandResult, build_chain, run_expand

__all__ = ["ExpandResult", "build_chain", "run_expand"]
