"""
Centralized configuration — all env vars and constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Redis / RQ ────────────────────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
SCRAP_WEBHOOK_QUEUE = os.getenv('SCRAP_WEBHOOK_QUEUE', 'scrap-webhook')
SYNC_QUEUE = os.getenv('SYNC_QUEUE', 'sync')

# Set to "1" to run the scrap-webhook consumer in this process
SCRAP_WEBHOOK_LISTENER = os.getenv('SCRAP_WEBHOOK_LISTENER', '0')

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Bright Data (scraping provider) ──────────────────────────────────────────
BRIGHT_DATA_API_TOKEN = os.getenv('BRIGHT_DATA_API_TOKEN')
BRIGHT_DATA_API_URL = os.getenv('BRIGHT_DATA_API_URL', 'https://api.brightdata.com/datasets/v3')
BRIGHT_DATA_PROFILE_DATASET = os.getenv('BRIGHT_DATA_PROFILE_DATASET', 'gd_l1viktl72bvl7bjuj0')
BRIGHT_DATA_POSTS_DATASET = os.getenv('BRIGHT_DATA_POSTS_DATASET', 'gd_lyy3tktm25m4avu764')

# Public base URL the provider calls back on; the job id is appended as a path segment
SCRAP_WEBHOOK_URL = os.getenv('SCRAP_WEBHOOK_URL', 'http://localhost:8080/scrap-webhook')
SCRAP_REQUEST_TIMEOUT = int(os.getenv('SCRAP_REQUEST_TIMEOUT', '10'))

# ── Platforms ─────────────────────────────────────────────────────────────────
PLATFORM_LINKEDIN = 'LinkedIn'
PLATFORM_X = 'X'
PLATFORM_YOUTUBE = 'YouTube'
PLATFORM_INSTAGRAM = 'Instagram'

PLATFORMS = [
    PLATFORM_X,
    PLATFORM_YOUTUBE,
    PLATFORM_INSTAGRAM,
    PLATFORM_LINKEDIN,
]

# ── Scrap job values ──────────────────────────────────────────────────────────
JOB_TYPES = ['profile', 'posts']

JOB_STATUSES = [
    'pending',
    'processing',
    'completed',
    'failed',
]

TERMINAL_JOB_STATUSES = ('completed', 'failed')
