"""Real-time event type constants.

Learn: Centralizing event types as constants prevents typos and
makes it easy to discover every event a job channel can carry.
The frontend switches on these strings.
"""

# ─── Comments ─────────────────────────────────────────────

COMMENT_ADDED = "comment.added"
COMMENT_DELETED = "comment.deleted"

# ─── Likes ────────────────────────────────────────────────

LIKE_UPDATED = "like.updated"
