"""Unit tests for ZeTranslate.

This package contains test modules for all components of the ZeTranslate application.
Tests use pytest with asyncio support and mock HTTP/network calls via monkeypatch.
"""
