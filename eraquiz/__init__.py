"""EraQuiz package initialization.

Recognition quiz core: relevance-window estimation, the session state
machine, and the manager that ties them to a store and the analytics engine.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
