import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Tavily Search API Configuration
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY")
TAVILY_URL = os.getenv("TAVILY_URL", "https://api.tavily.com/search")
SEARCH_MAX_RESULTS = int(os.getenv("SEARCH_MAX_RESULTS", "6"))
SEARCH_QUERY_LIMIT = int(os.getenv("SEARCH_QUERY_LIMIT", "300"))

# Groq API Configuration (OpenAI-compatible chat completions)
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_URL = os.getenv("GROQ_URL", "https://api.groq.com/openai/v1/chat/completions")
GROQ_VERDICT_MODEL = os.getenv("GROQ_VERDICT_MODEL", "llama-3.1-8b-instant")
GROQ_SCORING_MODEL = os.getenv("GROQ_SCORING_MODEL", "llama-3.3-70b-versatile")

# Upstream request timeout in seconds
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

# Missing credential policies: "neutral" or "error"
SEARCH_MISSING_KEY_POLICY = os.getenv("SEARCH_MISSING_KEY_POLICY", "neutral").lower()
VERDICT_MISSING_KEY_POLICY = os.getenv("VERDICT_MISSING_KEY_POLICY", "neutral").lower()

# Analysis cooldown per client
COOLDOWN_SECONDS = float(os.getenv("COOLDOWN_SECONDS", "5"))

# Server Configuration
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
BACKEND_PORT = int(os.getenv("BACKEND_PORT", "8000"))
BACKEND_HOST = os.getenv("BACKEND_HOST", "0.0.0.0")
