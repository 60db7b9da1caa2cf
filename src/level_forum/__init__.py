"""Level Forum: topics, posts, comments, voting, reputation and moderation."""

__version__ = "0.1.0"
