"""Progress reporting adapters."""

from pixcache.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]
