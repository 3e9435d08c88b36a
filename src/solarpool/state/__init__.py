"""State layer.

The sample log and the calibration config are the only mutable state in the
pipeline. They are owned objects passed to the series builder, never globals.
"""

from solarpool.state.config import ConfigStore
from solarpool.state.samples import SampleStore

__all__ = ["ConfigStore", "SampleStore"]
