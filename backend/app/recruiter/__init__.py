from app.recruiter.calibration import calibrate
from app.recruiter.pipeline import build_pipeline, redacted_name
from app.recruiter.store import PipelineStore, pipeline_store

__all__ = [
    "PipelineStore",
    "build_pipeline",
    "calibrate",
    "pipeline_store",
    "redacted_name",
]
