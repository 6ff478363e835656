"""
Prompts for topic classification and advice enrichment.
"""

# System prompt for mapping questions onto a topic catalog
CLASSIFICATION_SYSTEM_PROMPT = """You are an experienced exam setter who tags questions with syllabus topics.

Rules:
- Assign exactly one topic to every question
- Only use topics from the provided list, spelled exactly as given
- Respond with a single JSON object and nothing else"""


# User prompt template for a batch of questions from one section
CLASSIFICATION_USER_PROMPT_TEMPLATE = """Subject: {subject}

Available topics for {subject}:
{topics}

Questions:
{questions}

Return a JSON object mapping each question index to its topic, for example:
{{"0": "Mechanics", "1": "Optics"}}"""


# System prompt for rewriting weakness advice
ADVICE_SYSTEM_PROMPT = """You are an expert educational advisor helping students improve their exam results.

Guidelines:
- Be specific and practical
- Be encouraging and motivating
- Keep each description to 2-3 sentences
- Respond with a single JSON object and nothing else"""


# User prompt template for weakness advice
ADVICE_USER_PROMPT_TEMPLATE = """A student finished a test. These topics need improvement:

{weak_topics}

For each topic write a short personalised description of the problem and what to focus on.

Return JSON in this format:
```json
{{
  "descriptions": {{
    "Topic name": "Description"
  }}
}}
```"""
