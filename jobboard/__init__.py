"""
Job Board API
Role-scoped job board backend: applicants, HR and admins.

Architecture:
- PostgreSQL (via SQLAlchemy ORM): users, profiles, jobs, applications, messaging
- JWT bearer auth resolved per request
- Uniform {ok, data|error} JSON envelope on every endpoint
"""

__version__ = "1.0.0"
