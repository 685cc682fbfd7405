"""lfstrack - track file patterns with Git LFS.

Merges requested patterns into .gitattributes and refreshes the timestamps
of already-committed files so git re-runs the LFS clean filter on them.
"""

from lfstrack.core.constants import LFSTRACK_VERSION, TrackOptions

__version__ = LFSTRACK_VERSION

__all__ = ["TrackOptions", "__version__"]
