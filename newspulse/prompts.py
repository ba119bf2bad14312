"""Prompt templates for the story summariser."""

SHORT_SYSTEM_PROMPT = (
    "You are a tech news summarizer. Generate a concise 1-2 sentence summary explaining "
    "why this story matters to tech professionals. Be specific and insightful, not generic."
)

DETAILED_SYSTEM_PROMPT = (
    "You are a tech news analyst. Provide a detailed 3-4 sentence analysis of this story, "
    "explaining the context, technical details if relevant, and why it matters to the industry."
)

SHORT_USER_TEMPLATE = (
    "Summarize this tech news story:\n\n"
    "Title: {title}\n"
    "Source: {source}\n"
    "Engagement: {points} points, {comments} comments"
)

DETAILED_USER_TEMPLATE = (
    "Analyze this tech news story in detail:\n\n"
    "Title: {title}\n"
    "Source: {source}\n"
    "Engagement: {points} points, {comments} comments"
)

BATCH_SYSTEM_PROMPT = (
    "You are a tech news analyst. For each story, provide a brief 1-sentence summary "
    "explaining its significance. Format: Return a JSON array of objects with \"index\" "
    "(1-based) and \"summary\" fields. Be insightful and specific. Do not include any "
    "text outside the JSON array."
)

BATCH_USER_TEMPLATE = "Summarize these top tech stories:\n\n{story_list}"
