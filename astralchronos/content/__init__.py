"""
Static content package.
"""
from astralchronos.content.repository import (
    ContentError,
    ContentRepository,
    get_content_repository,
)

__all__ = [
    'ContentError',
    'ContentRepository',
    'get_content_repository',
]
