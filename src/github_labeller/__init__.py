"""github-labeller.

Create or update a set of GitHub labels on one repository, or on every
repository of a user or organization, optionally copying the label set from
an existing repository.
"""

__version__ = "0.1.0"

from github_labeller.events import LabelAdded, ProgressChannel
from github_labeller.labeller import LabelRequest, LabelSyncRun, SyncResult, run, start_sync
from github_labeller.labels import Label

__all__ = [
    "__version__",
    "Label",
    "LabelAdded",
    "LabelRequest",
    "LabelSyncRun",
    "ProgressChannel",
    "SyncResult",
    "run",
    "start_sync",
]
