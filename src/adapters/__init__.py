"""Adapters that connect the core ports to Telegram, Google and OpenAI."""
