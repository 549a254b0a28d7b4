"""
Meeting Audio API Module

Transcription and meeting minutes routes with their request/response models.
The router lives in ``api.audio.routes``.

Author: AI Assistant
Date: 2025-11-18
"""
