from .job import Job, DEFAULT_PIPELINE_STAGES
from .candidate import Candidate, StageHistory, INITIAL_STAGE, REJECTED_STAGE
from .pipeline_log import PipelineLog

__all__ = [
    "Job",
    "Candidate",
    "StageHistory",
    "PipelineLog",
    "DEFAULT_PIPELINE_STAGES",
    "INITIAL_STAGE",
    "REJECTED_STAGE",
]
