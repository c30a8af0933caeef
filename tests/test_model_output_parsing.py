# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from nutripal.flows.models import AnalyzeMealOutput, PersonalizedDietPlansOutput
from nutripal.genai.parsing import parse_model_json, split_data_url


class TestModelOutputParsing(unittest.TestCase):
    def test_fenced_json_with_prose(self) -> None:
        content = 'Here you go:\n```json\n{"recipe": "Step 1, chop."}\n```'
        self.assertEqual(parse_model_json(content), {"recipe": "Step 1, chop."})

    def test_bare_object_from_json_mode(self) -> None:
        parsed = parse_model_json('{"name": "Salad", "ingredients": ["kale", "feta"], "note": null}')
        self.assertEqual(parsed, {"name": "Salad", "ingredients": ["kale", "feta"], "note": None})

    def test_failure_message_has_no_decoder_position(self) -> None:
        reply = '"' + "a" * 426 + '" sorry, cannot help'
        with self.assertRaises(ValueError) as ctx:
            parse_model_json(reply)
        self.assertEqual(str(ctx.exception), "Failed to parse model JSON")
        self.assertIn("char 429", str(ctx.exception.__cause__))

    def test_broken_object_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            parse_model_json('{"recipe": "Toast bread",}')

    def test_first_object_wins(self) -> None:
        parsed = parse_model_json('{"a": 1} and then {"b": 2}')
        self.assertEqual(parsed, {"a": 1})

    def test_no_object(self) -> None:
        with self.assertRaises(ValueError):
            parse_model_json("no json here")
        with self.assertRaises(ValueError):
            parse_model_json("[1, 2, 3]")

    def test_analysis_aliases_and_limits(self) -> None:
        parsed = {
            "name": "Nasi Goreng",
            "calories": 650,
            "macros": {"protein": 20, "carbs": 80, "fat": 25},
            "healthScore": 130,
            "description": "Fried rice.",
            "ingredients": "rice",
            "expertInsight": "x" * 300,
            "allergenWarning": "",
        }
        result = AnalyzeMealOutput.model_validate(parsed)
        self.assertEqual(result.health_score, 100.0)
        self.assertEqual(result.ingredients, ["rice"])
        self.assertLessEqual(len(result.expert_insight), 200)
        self.assertTrue(result.expert_insight.endswith("…"))
        self.assertIsNone(result.allergen_warning)

    def test_diet_plan_lists_from_strings(self) -> None:
        result = PersonalizedDietPlansOutput.model_validate(
            {"mealRecommendations": "Lentil soup", "recipes": ["Simmer lentils", None], "healthierAlternatives": []}
        )
        self.assertEqual(result.meal_recommendations, ["Lentil soup"])
        self.assertEqual(result.recipes, ["Simmer lentils"])
        self.assertEqual(result.healthier_alternatives, [])

    def test_split_data_url(self) -> None:
        mime, data = split_data_url("data:image/jpeg;base64,/9j/4AAQSkZJRg==")
        self.assertEqual(mime, "image/jpeg")
        self.assertEqual(data, "/9j/4AAQSkZJRg==")

    def test_split_data_url_rejects_bad_input(self) -> None:
        with self.assertRaises(ValueError):
            split_data_url("https://example.com/meal.jpg")
        with self.assertRaises(ValueError):
            split_data_url("data:image/png;base64,@@@")


if __name__ == "__main__":
    unittest.main()
