import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./mcaid.db")

# Frontend base URL for CORS and links in emails
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# SMTP Email Configuration (preferred transport)
EMAIL_HOST = os.getenv("EMAIL_HOST")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_USER = os.getenv("EMAIL_USER")
EMAIL_PASS = os.getenv("EMAIL_PASS")
EMAIL_USE_TLS = os.getenv("EMAIL_USE_TLS", "true").lower() == "true"
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "MCaid <noreply@mcaid.app>")

# Resend Email Configuration (fallback when no SMTP host is set)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")

# Twilio SMS Configuration - SMS is skipped when these are missing
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")
TWILIO_MESSAGING_SERVICE_SID = os.getenv("TWILIO_MESSAGING_SERVICE_SID")

# OneSignal Push Configuration - push falls back to a no-op without these
ONESIGNAL_APP_ID = os.getenv("ONESIGNAL_APP_ID")
ONESIGNAL_API_KEY = os.getenv("ONESIGNAL_API_KEY")

# Per-request timeout handed to the HTTP transports (Twilio, OneSignal)
NOTIFICATION_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "10"))
# How long shutdown waits for in-flight notification dispatches
NOTIFICATION_DRAIN_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_DRAIN_TIMEOUT_SECONDS", "5"))
