import os
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# DEV ONLY default secret. Set SECRET_KEY in the environment for real deployments.
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE = timedelta(minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")))

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/coursetrack.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Roles
ROLE_STUDENT = "STUDENT"
ROLE_MENTOR = "MENTOR"
ROLE_INSTRUCTOR = "INSTRUCTOR"
ROLES = (ROLE_STUDENT, ROLE_MENTOR, ROLE_INSTRUCTOR)

# Attachment types
ATTACHMENT_ASSIGNMENT = "ASSIGNMENT"
ATTACHMENT_LINK = "LINK"
ATTACHMENT_NOTE = "NOTE"
ATTACHMENT_TYPES = (ATTACHMENT_ASSIGNMENT, ATTACHMENT_LINK, ATTACHMENT_NOTE)

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"
