"""
Placement Hub
Internship placement marketplace for students, company reps and Career Center staff.

Architecture:
- models: aggregates and their state machines (internship, application, withdrawal)
- services: cross-aggregate rules (acceptance exclusivity, caps, guards)
- db: in-memory store plus SQLAlchemy snapshots
"""

__version__ = "1.0.0"
