"""
NoteVault Backend - Collaborative Note Sharing

Backend for personal notes that can be shared read-only with named
collaborators or published through unguessable public links.

Version: 1.0.0
"""

__version__ = "1.0.0"
