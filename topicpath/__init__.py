"""
TopicPath - Content progress and localization resolution for topic-based lessons.

Subpackages:
- schemas: Pydantic models for topics, stories, chapters, skills and progress
- classroom: playability, promotion, recency, views, localization and storage
- utils: clock helpers
"""

__version__ = "0.1.0"
