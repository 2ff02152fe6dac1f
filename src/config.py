import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    PORT = int(os.getenv("PORT", 8000))
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

    # Gemini generateContent endpoint
    GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-preview-09-2025")
    GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "60"))

    # Retry: delay before attempt n+1 is BASE_DELAY * 2**n seconds
    GEMINI_MAX_RETRIES = int(os.getenv("GEMINI_MAX_RETRIES", "5"))
    GEMINI_RETRY_BASE_DELAY = float(os.getenv("GEMINI_RETRY_BASE_DELAY", "1.0"))

    @staticmethod
    def gemini_api_key() -> str:
        """GEMINI_API_KEY is looked up per call so a missing key is reported per request."""
        return os.getenv("GEMINI_API_KEY", "")


config = Config()
