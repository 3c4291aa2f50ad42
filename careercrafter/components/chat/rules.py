"""Constants and canned copy for the career assistant."""

from __future__ import annotations

import re

from ...platform.brand import BRAND_ASSISTANT_NAME, BRAND_NAME

# Intent patterns, evaluated in order; the first matching intent wins.
JOB_SEARCH_PATTERNS = [
    re.compile(r"find|search|looking for|need|want|show me|get me|tell me about.*job", re.IGNORECASE),
    re.compile(r"react.*job|developer.*job|frontend.*job|backend.*job", re.IGNORECASE),
    re.compile(r"job.*react|job.*developer|job.*frontend", re.IGNORECASE),
]
JOB_SEARCH_PHRASES = ("career opportunities", "work opportunities")
HIRING_KEYWORDS = ("hire", "recruit", "candidate")
PREMIUM_KEYWORDS = ("premium", "upgrade", "subscription", "plan")
GREETING_PATTERN = re.compile(r"^(hi|hello|hey|sup|what's up|howdy)$", re.IGNORECASE)

# Canonical skill -> substrings that mention it.
SKILL_PATTERNS = {
    "react": ("react", "reactjs", "react.js"),
    "javascript": ("javascript", "js", "es6"),
    "node": ("node", "nodejs", "node.js"),
    "python": ("python",),
    "java": ("java",),
    "frontend": ("frontend", "front-end", "front end"),
    "backend": ("backend", "back-end", "back end"),
    "fullstack": ("fullstack", "full-stack", "full stack"),
}
DEFAULT_SEARCH_SKILLS = ("react", "javascript", "developer")

JOB_SEARCH_LIMIT = 10
JOB_SEARCH_PREVIEW = 3

GREETING = (
    f"Hey! 👋 I'm your {BRAND_ASSISTANT_NAME}. I can help you find jobs, give career advice, "
    "or connect you with employers. What brings you here today?"
)
FRESH_START_GREETING = (
    f"Hey! 👋 Fresh start! I'm your {BRAND_ASSISTANT_NAME}. What can I help you with today?"
)
CHAT_CLEARED_MESSAGE = "Chat cleared successfully"

UPSELL_TEMPLATE = """🚀 **You've used your {free_messages} free messages!**

To keep chatting with me, you'll need to upgrade:

💎 **Premium Benefits:**
✅ Unlimited AI conversations
✅ Priority job matching
✅ Advanced career insights
✅ Direct employer connections

**Get Started:**
🔗 [Upgrade to Premium](/premium)
💰 [Buy AI Credits](/buy-credits)

I'll be here when you're ready! 😊"""

USER_NOT_FOUND_REPLY = (
    f"I couldn't find a {BRAND_NAME} account for this email. "
    "Sign up or log in to start chatting with me."
)

NO_JOBS_REPLY = """I searched our database for {search_label} positions! 🔍

Right now we have limited openings matching your exact criteria, but here's what you can do:

🔔 **[Set Job Alerts](/profile/alerts)** - Get instant notifications
🌐 **[Browse All Jobs](/jobs)** - Explore current opportunities
💼 **[Expand Search](/jobs?search=javascript)** - Similar roles

Would you like me to help you set up job alerts?"""

FALLBACK_REPLY = (
    "I'm here to help! You can ask me to find jobs, give career advice, or help with your profile."
)
EMPTY_COMPLETION_REPLY = "I'm here to help! What would you like to know?"

FREE_MESSAGES_FOOTER = "\n\n💡 Free messages: {remaining} remaining"

CHAT_SYSTEM_PROMPT = f"""You are a friendly {BRAND_ASSISTANT_NAME} assistant helping with job search and career advice.

IMPORTANT RULES:
1. Keep responses SHORT (2-3 sentences max) and natural like a real human
2. Be enthusiastic but professional
3. If asked about jobs, acknowledge that you're searching
4. Don't repeat yourself - vary your responses
5. Ask follow-up questions to keep conversation going

USER STATUS: {{tier}} tier | {{remaining}} free messages left

CONVERSATION HISTORY:
{{history}}

Respond naturally and helpfully."""
