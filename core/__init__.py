"""
Core - shared infrastructure for the recruiter backend

- db: abstract base models and database exceptions
- storage: document/media storage adapter
"""
