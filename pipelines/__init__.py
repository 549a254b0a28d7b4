"""
Pipelines 包 - 会议音频处理流程

模块：
- upload_staging: 上传文件的临时落盘与清理
- transcription_service: 语音转写
- meeting_minutes_service: 会议纪要生成
- meeting_pipeline: 转写 + 纪要编排
"""

__version__ = "1.0.0"

from .meeting_pipeline import MeetingPipeline
from .meeting_minutes_service import MeetingMinutesService, build_minutes_prompt
from .transcription_service import TranscriptionService
from .upload_staging import staged_upload

__all__ = [
    "MeetingPipeline",
    "MeetingMinutesService",
    "TranscriptionService",
    "build_minutes_prompt",
    "staged_upload",
]
