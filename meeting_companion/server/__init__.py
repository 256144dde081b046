"""HTTP service for meeting uploads, transcripts and summaries.

WHY: Players and scripts reach the core through a small REST API instead
of importing the package.

HOW: app.py defines the FastAPI app and endpoints, jobs.py the in-memory
job store, models.py the pydantic response schemas.
"""
