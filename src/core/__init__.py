"""Core domain package for factscope.

Core contains link extraction, query building, score parsing, ranking and the
pipeline orchestrator without any Telegram, HTTP or model-specific code,
keeping the business logic portable and testable with fakes.
"""
