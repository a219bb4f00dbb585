"""Prompt templates for LLM calls."""

SPAM_CHECK_SYSTEM_PROMPT = """You are a content moderator for a job board.
Submissions include job posts, company profiles and candidate messages.
Treat unsolicited advertising, scams, phishing, link farms and repetitive
promotional text as spam. Genuine job offers and job searches are not spam.
Answer only through the requested JSON schema."""

SPAM_CHECK_PROMPT = 'Analyze if the following content is spam. Content: "{content}"'
