"""XYZ text output sink.

Writes a PointCloud as whitespace separated `x y z` rows. The cloud name and
color are kept in the commented header so the file can be imported into a
point cloud viewer without losing them.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from domain.sampling.value_objects import PointCloud

logger = logging.getLogger(__name__)

COORDINATE_FORMAT = "%.3f"  # millimeter resolution


class XyzFileSink:
    """PointCloudSink writing one XYZ file per published cloud."""

    def __init__(self, file_path: Path | str) -> None:
        self.path = Path(file_path)

    def publish(self, cloud: PointCloud) -> None:
        data = np.array([s.as_tuple() for s in cloud.samples], dtype=np.float64)
        header = "\n".join(
            [
                f"name: {cloud.name}",
                "color: {:.3f} {:.3f} {:.3f}".format(*cloud.color),
                "x y z",
            ]
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        np.savetxt(
            self.path, data.reshape(-1, 3), fmt=COORDINATE_FORMAT, header=header
        )
        logger.info("Wrote %d points to %s", len(cloud), self.path.name)
