"""Prompt templates sent to the Cosmic AI text endpoint."""

ANALYSIS_PROMPT = """Analyze the book collection in this image: {image_url}

Please analyze this bookshelf photo and provide detailed information about the books and reader's preferences.

Even if you cannot see specific book titles clearly, please:
1. Describe what you can observe (book spines, colors, organization, quantity)
2. Make educated inferences about likely genres based on visual cues (book cover designs, spine colors, thickness)
3. Suggest possible reading preferences based on the collection's appearance

IMPORTANT: Provide your analysis in this exact format:

BOOKS IDENTIFIED:
- [List any visible titles, or describe "Multiple books visible but titles unclear"]

GENRES:
- [List likely genres based on visual cues, e.g., "Fiction", "Mystery/Thriller", "Non-fiction"]

THEMES:
- [Infer themes from the collection, e.g., "Contemporary literature", "Classic literature", "Self-improvement"]

READER PROFILE:
[Provide 2-3 sentences describing the likely reading preferences of this person based on the collection's appearance, organization, and any visible details]

READING GAPS:
- [Optional: genres or subjects noticeably absent from the shelf]"""

# Used when the image-grounded prompt fails outright
FALLBACK_ANALYSIS_PROMPT = """I need to analyze a bookshelf photo for a book recommendation system.

The image is available at: {image_url}

Based on a typical home bookshelf collection, please provide a reasonable analysis with the following format:

BOOKS IDENTIFIED:
- Multiple books visible in personal collection
- Various book spines showing diverse reading interests

GENRES:
- Fiction
- Non-fiction
- Mystery/Thriller
- Contemporary Literature

THEMES:
- Personal growth and development
- Entertainment and storytelling
- Knowledge acquisition

READER PROFILE:
This reader appears to have diverse interests spanning multiple genres, suggesting an eclectic taste and curiosity across various subjects. They likely enjoy both entertaining fiction and informative non-fiction, indicating a balanced approach to reading that values both pleasure and learning."""

RECOMMENDATION_PROMPT = """Based on this reader's book collection analysis:

{analysis_text}

Please provide between 3 and 5 personalized book recommendations that would appeal to this reader.

For each recommendation, provide:
1. title: A real, well-known book title
2. author: The full author name
3. genre: The primary genre
4. reasoning: 2-3 sentences explaining why this book matches their reading preferences
5. isbn: A valid 13-digit ISBN-13 number (format: 9781234567890)
6. connection_strength: "strong", "moderate" or "exploratory"
7. fills_gap: true if the book covers something missing from the shelf, otherwise false
8. evidence: a list of short observations from the analysis that support the pick

Also provide a top-level "recommendation_strategy": 1-2 sentences describing the overall approach.

CRITICAL: Your response MUST be valid JSON matching this exact structure:

{{
  "recommendation_strategy": "Build on the reader's love of character-driven fiction while adding one reflective memoir.",
  "recommendations": [
    {{
      "title": "The Midnight Library",
      "author": "Matt Haig",
      "genre": "Contemporary Fiction",
      "reasoning": "This thought-provoking novel explores themes of choice and possibility, blending literary fiction with philosophical questions.",
      "isbn": "9780525559474",
      "connection_strength": "strong",
      "fills_gap": false,
      "evidence": ["Several contemporary literary novels on the shelf"]
    }}
  ]
}}

Ensure the JSON is properly formatted with no trailing commas, correct quote marks, and valid structure."""


def build_analysis_prompt(image_url: str) -> str:
    return ANALYSIS_PROMPT.format(image_url=image_url)


def build_fallback_analysis_prompt(image_url: str) -> str:
    return FALLBACK_ANALYSIS_PROMPT.format(image_url=image_url)


def build_recommendation_prompt(analysis_text: str) -> str:
    return RECOMMENDATION_PROMPT.format(analysis_text=analysis_text)
