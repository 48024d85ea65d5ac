"""qqcodec - rich message transcoding for QQ bot payloads."""
__version__ = "0.1.0"
