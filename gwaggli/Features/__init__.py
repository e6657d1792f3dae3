"""
Feature slices of Gwaggli: audio capture, streaming and transcription.
"""
