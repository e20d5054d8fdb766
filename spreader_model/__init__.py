# Spreader Detector: infection risk from recorded meetings
#
# Architecture:
# - etl/: Roster and meetings ingestion, record types
# - engines/: Merge sort, id lookup, probability propagation
# - analysis/: Risk bands and report writing
# - visualization/: Risk profile figure
# - pipeline.py: End-to-end driver

__version__ = "1.0.0"
