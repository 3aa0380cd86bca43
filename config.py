import os
from dotenv import load_dotenv

load_dotenv()

FLASK_HOST = os.environ.get("FLASK_HOST", "localhost")
FLASK_PORT = int(os.environ.get("FLASK_PORT", 5000))
DEBUG = os.environ.get("DEBUG", False)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
CORS_ALLOW = os.environ.get("CORS_ALLOW", "http://localhost:5001")

# scm command line
JAZZ_EXECUTABLE = os.environ.get("JAZZ_EXECUTABLE", "scm")
SCM_USERNAME = os.environ.get("SCM_USERNAME", "")
SCM_PASSWORD = os.environ.get("SCM_PASSWORD", "")
SCM_TIMEOUT = float(os.environ.get("SCM_TIMEOUT", 5 * 60))
# Printed by "scm status" in front of incoming changes; localized by scm.
SCM_INCOMING_TOKEN = os.environ.get("SCM_INCOMING_TOKEN", "Incoming:")

# RTC repository
SCM_REPOSITORY_LOCATION = os.environ.get("SCM_REPOSITORY_LOCATION", "")
SCM_STREAM_NAME = os.environ.get("SCM_STREAM_NAME", "")
SCM_WORKSPACE_NAME = os.environ.get("SCM_WORKSPACE_NAME", "")
JOB_WORKSPACE = os.environ.get("JOB_WORKSPACE", ".")

CHANGELOG_PATH = os.environ.get("CHANGELOG_PATH", "./changelog.xml")
