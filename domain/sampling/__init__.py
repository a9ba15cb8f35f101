"""Sampling Bounded Context.

Responsible for sampling ground heights on a regular grid inside a polygon:
- Value Objects: Polygon, BoundingBox, HeightSample, RunSummary, PointCloud
- Ports: SelectionSource, SpacingSource, HeightResolver, PointCloudSink,
  NotificationSink
- Services: is_inside (ray casting), sample_grid_heights (grid scan)
"""
