"""JobHub — job-board API.

Jobs, categories and applications behind a Clerk-backed identity layer,
plus comments and likes with real-time notifications per job.
"""

__version__ = "0.1.0"
