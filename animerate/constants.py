"""Application constants that never change across environments.

These are fixed business rules of the rating model, not deployment knobs.
"""

# ===== Rating Scales =====
CATEGORY_SCALE_MAX = 10.0  # each category is scored 0-10
OVERALL_SCALE_MAX = 5.0  # overall rating shown as 0-5 stars
RATING_STEP = 0.5  # half-star quantization for both scales

# ===== Recommendations =====
RECOMMENDATION_SEED_THRESHOLD = 3.5  # overall rating counted as "liked"
RECOMMENDATION_MAX_SEED_IDS = 5

# ===== File Storage =====
RATINGS_DOCUMENT_KEY = "ratings"
CATEGORIES_DOCUMENT_KEY = "categories"

# ===== Database Constraints =====
MAX_VARCHAR_LENGTH_SHORT = 255
MAX_VARCHAR_LENGTH_LONG = 1024

# ===== Default Rating Categories =====
# Used when the categories file is missing or unreadable.
DEFAULT_RATING_CATEGORIES = [
    {
        "id": "story",
        "name": "Story",
        "description": "Plot, storytelling and narrative structure",
    },
    {
        "id": "animation",
        "name": "Animation",
        "description": "Quality of the animation, art and visual effects",
    },
    {
        "id": "characters",
        "name": "Characters",
        "description": "Depth and development of the characters",
    },
    {
        "id": "sound",
        "name": "Sound",
        "description": "Music, sound effects and voice acting",
    },
    {
        "id": "enjoyment",
        "name": "Enjoyment",
        "description": "How entertaining and gripping the anime was overall",
    },
]
