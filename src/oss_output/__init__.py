"""
oss-output: transactional file output from pipeline tasks to Alibaba Cloud OSS.

Each task stages its partitions as local temporary files and uploads them
as discrete objects under deterministic keys.
"""

__version__ = "0.1.0"
