"""OutfitAI: outfit suggestions and styled previews for a clothing photo."""
