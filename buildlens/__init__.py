"""buildlens: bounded, paginated views over a remote build service.

Turns single-shot backend queries (one revision, one log chunk, one diff
at a time) into safe views:
  - Revision history pages, newest first, with show-all
  - Source diffs bounded per file unless the full diff is requested
  - Build logs read incrementally while they are still growing
  - Multibuild packages addressed as ``base:flavor``
  - Job summaries: worker id and elapsed build time
"""

__version__ = "0.1.0"
__description__ = "Bounded, paginated views over a remote build service"

from buildlens.config import ViewerConfig
from buildlens.core.artifact_view import ArtifactView

__all__ = ["ArtifactView", "ViewerConfig", "__version__"]
