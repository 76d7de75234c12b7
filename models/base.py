import enum


# ============================================================================
# ENUMS
# ============================================================================

class UploadStatus(str, enum.Enum):
    """Terminal state of one upload attempt"""
    DONE = "done"
    RESCHEDULED = "rescheduled"
    ABANDONED = "abandoned"
