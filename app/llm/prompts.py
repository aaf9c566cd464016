# app/llm/prompts.py
"""
Prompts for content classification.
"""

CLASSIFICATION_SYSTEM_PROMPT = """You are a content librarian. You tag articles, videos and posts with topics and write short summaries.

Respond with valid JSON only. No markdown, no explanation."""

CLASSIFICATION_USER_TEMPLATE = """Please analyze the following content and provide:
1. A list of 3-5 relevant categories or topics (as a JSON array of strings)
2. A brief summary in 1-2 sentences (as a string)

Content Title: {title}
Content: {content}

Respond in the following JSON format only:
{{
  "categories": ["category1", "category2", ...],
  "summary": "Brief summary here"
}}"""
