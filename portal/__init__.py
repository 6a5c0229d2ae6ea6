"""
Study Abroad Portal
Role-based application portal for students, agents and universities.

Architecture:
- PostgreSQL: users, role profiles, programs, applications, documents, tasks, commissions
- FastAPI: REST API with bearer session tokens
- Statistics + search services on top of the storage gateway
"""

__version__ = "1.0.0"
