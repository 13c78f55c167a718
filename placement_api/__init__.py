"""
PlacementPro API
Campus placement management backend.

Architecture:
- MongoDB: profiles, institutions, jobs, applications
- Adzuna: off-campus job listings (demo data when not configured)
"""

__version__ = "1.0.0"
