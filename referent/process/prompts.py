"""Prompt templates for article processing."""

SUMMARY_SYSTEM = """You are an expert at analyzing articles.
Write a short summary of the following article in {language} (2-3 paragraphs).
The summary must be informative and reflect the main ideas of the article."""

THESIS_SYSTEM = """You are an expert at analyzing articles.
Extract the main theses of the following article and present them as a numbered list in {language}.
Each thesis must be short and meaningful."""

TELEGRAM_SYSTEM = """You are an expert at creating social media content.
Write a Telegram post based on the following article.
The post must be engaging, well structured, 2-3 paragraphs long, written in {language}.
Use emoji to draw attention."""

TRANSLATE_SYSTEM = """You are a professional translator.
Translate the following text into {language}, preserving the structure and formatting of the original."""

IMAGE_PROMPT_SYSTEM = """You are an expert at writing prompts for image generation.
Based on the following article, write a detailed prompt in English for generating an illustration.
The prompt must be specific and descriptive, include visual details (style, composition, colors),
reflect the main topic of the article and be 50-100 words long.
It must be ready to use in an AI image generator. Return only the prompt, without any explanations."""

CHUNK_NOTE = """

Note: this is part {index} of {total} of the article, not the whole text.
Focus on the key points of this excerpt."""

TRANSLATE_CHUNK_NOTE = """

Note: this is part {index} of {total} of the text.
Translate this part in full. Do not summarize, shorten or skip anything."""

MERGE_SUMMARY_SYSTEM = """You are an expert at analyzing articles.
Below are summaries of consecutive parts of one article.
Combine them into one unified, concise summary of the whole article in {language} (2-3 paragraphs).
Do not mention that the text was split into parts."""

MERGE_THESIS_SYSTEM = """You are an expert at analyzing articles.
Below are numbered lists of theses extracted from consecutive parts of one article.
Merge them into one numbered list in {language}.
Remove duplicate points and group similar ones together."""

MERGE_TELEGRAM_SYSTEM = """You are an expert at creating social media content.
Below are draft Telegram posts written for consecutive parts of one article.
Combine them into one unified, attention-getting Telegram post in {language}, 2-3 paragraphs long, with emoji.
Do not mention that the article was split into parts."""
