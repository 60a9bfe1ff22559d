"""
Portfolio Assistant configuration.

Module-level constants with environment variable overrides. Every tunable
of the query resolution engine lives here so hosts (console loop, HTTP
backend) and tests share the same defaults.

Environment:
- PORTFOLIO_ASSIST_KB_SOURCE: knowledge-base JSON path or http(s) URL
- PORTFOLIO_ASSIST_SYNONYMS_SOURCE: synonym table JSON path or URL
- PORTFOLIO_ASSIST_ERROR_LOG: error log file (stdout when empty)
- PORTFOLIO_ASSIST_CONFIDENCE: confident-answer score ceiling (0..1)
- PORTFOLIO_ASSIST_MIN_SIMILARITY: per-field similarity floor (0..1)
- PORTFOLIO_ASSIST_FALLBACK_LIMIT: size of the did-you-mean list
- PORTFOLIO_ASSIST_SESSION_LIMIT: most HTTP sessions kept at once
- PORTFOLIO_ASSIST_SESSION_IDLE_SECONDS: idle time before a session is dropped
- PORTFOLIO_ASSIST_HOST / PORTFOLIO_ASSIST_PORT: HTTP backend bind address
"""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
DATA_DIR = PROJECT_ROOT / "data"

KNOWLEDGE_BASE_SOURCE = os.getenv(
    "PORTFOLIO_ASSIST_KB_SOURCE", str(DATA_DIR / "knowledge-base.json")
).strip()
SYNONYMS_SOURCE = os.getenv(
    "PORTFOLIO_ASSIST_SYNONYMS_SOURCE", str(DATA_DIR / "synonyms.json")
).strip()
ERROR_LOG_PATH = os.getenv("PORTFOLIO_ASSIST_ERROR_LOG", "").strip()
HTTP_TIMEOUT_SECONDS = float(os.getenv("PORTFOLIO_ASSIST_HTTP_TIMEOUT", "10"))

# Matching thresholds (scores are lower-is-better, 0 = perfect)
CONFIDENCE_THRESHOLD = float(os.getenv("PORTFOLIO_ASSIST_CONFIDENCE", "0.35"))
MIN_SIMILARITY = float(os.getenv("PORTFOLIO_ASSIST_MIN_SIMILARITY", "0.65"))
FALLBACK_LIMIT = int(os.getenv("PORTFOLIO_ASSIST_FALLBACK_LIMIT", "3"))

# HTTP backend session bounds
SESSION_LIMIT = int(os.getenv("PORTFOLIO_ASSIST_SESSION_LIMIT", "1000"))
SESSION_IDLE_SECONDS = float(os.getenv("PORTFOLIO_ASSIST_SESSION_IDLE_SECONDS", "1800"))

# partial_ratio is only used for queries at least this long
PARTIAL_MATCH_MIN_LENGTH = 4

# Searchable fields and their weights
FIELD_WEIGHTS = {
    "name": 0.9,
    "title": 0.9,
    "company_name": 0.8,
    "description": 0.6,
    "technologies": 0.85,
    "tags": 0.8,
    "skills": 0.8,
    "skills_gained": 0.8,
    "problems_solved": 0.8,
    "lessons_gained": 0.6,
    "headline": 0.6,
}

# Filler and question words removed from a query before fuzzy matching
STOP_WORDS = frozenset({
    "a", "an", "the", "is", "are", "was", "were", "be", "been",
    "what", "which", "who", "whom", "how", "why", "when", "where",
    "do", "does", "did", "can", "could", "would", "should", "will",
    "he", "his", "him", "she", "her", "they", "their", "you", "your",
    "i", "me", "my", "we", "it", "its", "this", "that", "these", "those",
    "of", "in", "on", "at", "for", "to", "from", "by", "with", "about",
    "and", "or", "any", "some", "there", "tell", "show", "give", "please",
    "want", "know", "details", "more", "like",
})

# Small talk: closed token set and canonical responses (insertion order matters)
SMALL_TALK_TOKENS = frozenset({
    "hi", "hello", "hey", "thanks", "thank", "yo", "good", "morning", "evening",
})
SMALL_TALK_RESPONSES = {
    "hi": "👋 Hello! I'm Saba, Nati's AI-powered portfolio assistant. Ask me anything!",
    "hello": "Hi there! Ask me about Nati's projects or skills.",
    "hey": "Hey! 👋 Curious about Nati's projects, skills, or experience?",
    "thanks": "You're welcome! 😄 Want to know more about Nati's achievements?",
    "thank": "Happy to help! 😊 Any other question about Nati?",
    "yo": "Yo! 🤙 What would you like to know about Nati's work?",
    "good": "Good to see you! Ask me about Nati's projects or skills.",
    "morning": "Good morning! ☀️ What would you like to know about Nati?",
    "evening": "Good evening! 🌙 Ask me anything about Nati's work.",
}
SMALL_TALK_MAX_TOKENS = 3
SMALL_TALK_FUZZY_MIN_LENGTH = 5

# Follow-up continuation
AFFIRMATIONS = frozenset({
    "yes", "y", "yeah", "yep", "sure", "ok", "okay", "more", "please", "tell me more",
})
GENERIC_PERFORMANCE_ANSWER = (
    "🚀 He optimized queries, lazy-loaded UI, and added caching to improve performance."
)

# Canned texts
GREETING = "👋 Hi I'm Saba. Ask me anything about his projects, or try a suggested question."
NO_MATCH_FOLLOW_UPS = (
    "Would you like a list of top projects?",
    "Do you want his top skills?",
)
NO_MATCH_EXAMPLES = (
    "Tell me about MedHub Ethiopia",
    "What are his frontend skills?",
    "Show testimonials",
)

# HTTP backend
HTTP_HOST = os.getenv("PORTFOLIO_ASSIST_HOST", "127.0.0.1")
HTTP_PORT = int(os.getenv("PORTFOLIO_ASSIST_PORT", "8000"))
