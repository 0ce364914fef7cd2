"""
Playlist provisioning engine.

Locator, reconciler, asset acquisition, step pipeline and the orchestrator
that wires them into one run.
"""

from playlistctl.provisioning.assets import AssetAcquirer
from playlistctl.provisioning.locator import ResourceLocator
from playlistctl.provisioning.orchestrator import PlaylistPublisher, RunReport
from playlistctl.provisioning.pipeline import PipelineResult, StepOutcome, StepPipeline
from playlistctl.provisioning.reconciler import PlaylistReconciler, ReconcileResult

__all__ = [
    "AssetAcquirer",
    "PipelineResult",
    "PlaylistPublisher",
    "PlaylistReconciler",
    "ReconcileResult",
    "ResourceLocator",
    "RunReport",
    "StepOutcome",
    "StepPipeline",
]
