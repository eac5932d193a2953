"""
API package for cardmate.
Contains HTTP clients for the course database and the hosted store.
"""

from .base_api import BaseAPI
from .dgcr import DGCRClient, DGCRCourse, to_course
from .rest_store import RestStore

__all__ = ['BaseAPI', 'DGCRClient', 'DGCRCourse', 'RestStore', 'to_course']
