"""Video transcription service: yt-dlp / moviepy audio acquisition and Whisper transcription."""

__version__ = "1.1.1"
