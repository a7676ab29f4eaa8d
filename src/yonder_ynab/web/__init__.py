"""
Web endpoints (Django).

- POST /import?api_key=...  raw Yonder CSV upload
- POST /                    Telegram bot webhook
"""
