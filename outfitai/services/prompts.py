"""Prompt templates for the three model calls of the suggestion pipeline.

Templates are rendered with ``str.format``; literal braces are doubled.
"""


class PromptTemplates:
    """Prompt templates for each model call."""

    ANALYZE_SYSTEM = """
    You are an AI fashion expert. Analyze the clothing item in the provided
    image and identify its key attributes.
    """

    ANALYZE_USER = """
    Specifically, identify the following:
    - Item Type: What type of clothing item is it? (e.g., dress, shirt, pants)
    - Color: What is the dominant color of the item?
    - Fabric: What is the fabric of the item? (e.g., cotton, silk, denim)
    - Style: What is the style of the item? (e.g., casual, formal, vintage)
    """

    STYLIST_SYSTEM = "You are an AI fashion stylist."

    SUGGEST_STYLES = """
    The user has uploaded an image of a clothing item with the following attributes:
    - Type: {item_type}
    - Color: {color}
    - Fabric: {fabric}
    - Style: {style}

    Your task is to suggest {count} different outfit styles (e.g., Casual,
    Formal/Smart, Trendy/Party) that incorporate this item. Each style must have
    a distinct name. The outfits are for {audience}, so provide diverse and
    inclusive recommendations.

    For each outfit style, you must:
    1. Recommend Complementary Items: suggest specific items like shirts,
       t-shirts, dresses, pants, shoes and accessories that pair well with the
       user's item. Set each item's type to one of: top, bottom, footwear,
       accessory.
    2. Provide Shopping Links: for each recommended item, provide a valid,
       clickable shopping link (a full https URL) from a reputable online
       fashion retailer (e.g., Amazon Fashion, Myntra, Zara, H&M, ASOS).
    3. Describe the Style: a short, user-friendly description of the outfit.
    4. Explain the Style: why the recommended items create a cohesive and
       stylish outfit. Mention color theory, occasion suitability and current
       fashion trends.
    """

    RECOMMEND_ITEMS = """
    Given a clothing item with the following characteristics:

    Item Type: {item_type}
    Item Color: {color}
    Item Fabric: {fabric}
    Item Style: {style}

    Suggest {count} distinct outfit styles (Casual, Formal/Smart, Trendy/Party).
    For each outfit style, provide:
    - A list of recommended items (tops, bottoms, footwear, accessories).
    - An explanation of why the combination works, focusing on color
      coordination, occasion appropriateness and current fashion trends.
    - A short, user-friendly description of the outfit style.
    - Valid, clickable shopping links (full https URLs) for similar items on
      reputable fashion e-commerce sites (e.g., Amazon Fashion, Myntra, Zara, H&M).

    Ensure all suggestions are practical, stylish and modern.
    """

    STYLED_IMAGE = """
    Generate a high-quality, realistic, full-body photograph of {audience}
    wearing a complete, stylish {style_name} outfit.

    Style Description: {description}

    The outfit must include:
    - Tops: {tops}
    - Bottoms: {bottoms}
    - Footwear: {footwear}
    - Accessories: {accessories}

    The provided clothing item must be naturally integrated into the look.
    """


def render(template: str, **values) -> str:
    """Format a template and strip the indentation left by the class body."""
    lines = template.format(**values).strip().splitlines()
    return "\n".join(line.strip() for line in lines)
