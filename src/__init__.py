"""draftmodels: bulk generation of reusable drafting models from documents."""

from draftmodels.version import __version__

__all__ = ["__version__"]
