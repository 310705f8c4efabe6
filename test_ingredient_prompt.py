"""Ingredient prompt builder checks."""

from apps.ingredients.prompt_builder import build_ingredient_prompt


def test_prompt_embeds_ingredients_and_schema():
    prompt = build_ingredient_prompt("water, glycerin")
    assert prompt.endswith("Here are the ingredients to analyze: water, glycerin\n")
    assert '"overall_rating": 7' in prompt
    assert '"classification": "Good"' in prompt
    assert "no code fences" in prompt
    assert "more than 150 ingredients" in prompt
    assert build_ingredient_prompt("water, glycerin") == prompt
