"""
Helper utilities for procmon_analytics.

This module provides various utility functions for file handling and
data formatting.
"""

import hashlib
from datetime import datetime
from pathlib import Path
from typing import Union

from loguru import logger


class FormatHelper:
    """Helper class for data formatting."""

    @staticmethod
    def format_bytes(bytes_count: float) -> str:
        """Format bytes to human-readable format."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_count < 1024.0:
                return f"{bytes_count:.1f} {unit}"
            bytes_count /= 1024.0
        return f"{bytes_count:.1f} PB"

    @staticmethod
    def format_number(number: int) -> str:
        """Format number with thousand separators."""
        return f"{number:,}"

    @staticmethod
    def format_percentage(fraction: float) -> str:
        """Format a 0-1 fraction as a percentage."""
        return f"{fraction * 100:.2f}%"

    @staticmethod
    def truncate_string(text: str, max_length: int = 100) -> str:
        """Truncate string to maximum length."""
        if len(text) <= max_length:
            return text
        return text[:max_length - 3] + "..."


class FileHelper:
    """Helper class for file operations."""

    HASH_BLOCK_SIZE = 1024 * 1024

    @staticmethod
    def get_file_size(file_path: Union[str, Path]) -> int:
        """Get file size in bytes."""
        return Path(file_path).stat().st_size

    @staticmethod
    def get_modified_time(file_path: Union[str, Path]) -> str:
        """Get file modification time as an ISO string."""
        return datetime.fromtimestamp(Path(file_path).stat().st_mtime).isoformat()

    @staticmethod
    def compute_file_hash(file_path: Union[str, Path]) -> str:
        """
        Compute the SHA-256 digest of a file.

        The file is read in fixed-size blocks so large logs are never held
        in memory.

        Args:
            file_path: File to hash

        Returns:
            Hex digest
        """
        digest = hashlib.sha256()
        with open(file_path, 'rb') as f:
            for block in iter(lambda: f.read(FileHelper.HASH_BLOCK_SIZE), b''):
                digest.update(block)
        logger.debug(f"Computed SHA-256 for {file_path}")
        return digest.hexdigest()
