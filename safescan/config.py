"""
Configuration settings for the SafeScan backend
"""
import os
from dotenv import load_dotenv

# Load .env file from project root (parent of safescan directory)
env_path = os.path.join(os.path.dirname(__file__), "..", ".env")
load_dotenv(dotenv_path=env_path)

# Server Configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
APP_ENV = os.getenv("APP_ENV", "development")

# Frontend origin: used for CORS and as the target of generated QR codes
BASE_URL = os.getenv("BASE_URL", "http://localhost:5173")

# Database Configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./safescan.db")

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "backend.log")

# Account constraints
MIN_PASSWORD_LENGTH = 6
MAX_TOKENS_PER_USER = int(os.getenv("MAX_TOKENS_PER_USER", "5"))

# Largest request body accepted, in bytes (10 MB)
MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024)))
