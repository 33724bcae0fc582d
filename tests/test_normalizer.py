"""
tests/test_normalizer.py
=========================
Analysis Normalizer Tests

Test categories:
    1. Code-fence stripping (```json, other tags, plain ```, none)
    2. Reply parsing: valid JSON, invalid JSON → fallback payload
    3. Normalization pass: defaults, present fields untouched,
       idempotence, no input mutation, non-dict input

All tests are offline; no Gemini or database calls.
"""

import copy
import os
import sys
import unittest

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from src.analysis.normalizer import (
    DEFAULT_TRANSCRIPTION,
    FALLBACK_ANALYSIS,
    normalize_analysis,
    parse_model_reply,
    strip_code_fences,
)


# ===================================================================
# Test fixtures
# ===================================================================

def _complete_reply() -> dict:
    """A reply matching the full schema."""
    return {
        "transcription": "Hi, I'm Asha and I love the beach.",
        "analysis": {
            "overallScore": 72,
            "confidenceLevel": "Medium",
            "travelPersonality": [
                {"trait": "Relaxer", "percentage": 70, "reason": "Prefers quiet beaches"},
            ],
            "preferences": [
                {"preference": "Beach vs Mountains", "choice": "Beach",
                 "percentage": 90, "reason": "Grew up by the sea"},
            ],
            "spendingHabits": {"cafeBudget": "Low", "percentage": 30, "reason": "Budget trips"},
            "goaExperience": {"score": 40, "level": "Beginner", "reason": "First visit"},
        },
        "insights": {
            "whyUseful": "Because.",
            "benefits": ["a"],
            "opportunities": ["b"],
            "recommendations": [{"category": "Now", "items": ["c"]}],
        },
    }


# ===================================================================
# 1. CODE-FENCE STRIPPING
# ===================================================================


class TestStripCodeFences(unittest.TestCase):

    def test_json_fence_removed(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_plain_fence_removed(self):
        self.assertEqual(strip_code_fences('```\n{"a": 1}\n```'), '{"a": 1}')

    def test_surrounding_whitespace_trimmed(self):
        self.assertEqual(strip_code_fences('  \n```json {"a": 1} ```\n '), '{"a": 1}')

    def test_unfenced_text_unchanged(self):
        self.assertEqual(strip_code_fences('{"a": 1}'), '{"a": 1}')

    def test_any_language_tag_removed(self):
        for tag in ("JSON", "javascript", "json5", "ld-json"):
            with self.subTest(tag=tag):
                self.assertEqual(strip_code_fences(f"```{tag}\n{{\"a\": 1}}\n```"), '{"a": 1}')


# ===================================================================
# 2. REPLY PARSING
# ===================================================================


class TestParseModelReply(unittest.TestCase):

    def test_valid_json(self):
        self.assertEqual(parse_model_reply('{"transcription": "hi"}'), {"transcription": "hi"})

    def test_fenced_json(self):
        self.assertEqual(
            parse_model_reply('```json\n{"transcription": "hi"}\n```'),
            {"transcription": "hi"},
        )

    def test_uppercase_and_other_tags_parse(self):
        self.assertEqual(
            parse_model_reply('```JSON\n{"transcription": "hi"}\n```'),
            {"transcription": "hi"},
        )
        self.assertEqual(
            parse_model_reply('```javascript\n{"transcription": "hi"}\n```'),
            {"transcription": "hi"},
        )

    def test_invalid_json_returns_fallback(self):
        self.assertEqual(parse_model_reply("Sorry, I could not hear the audio."), FALLBACK_ANALYSIS)

    def test_invalid_json_inside_fences_returns_fallback(self):
        self.assertEqual(parse_model_reply("```json\n{not json}\n```"), FALLBACK_ANALYSIS)
        self.assertEqual(parse_model_reply("```\nnope\n```"), FALLBACK_ANALYSIS)

    def test_empty_and_none_reply_return_fallback(self):
        self.assertEqual(parse_model_reply(""), FALLBACK_ANALYSIS)
        self.assertEqual(parse_model_reply(None), FALLBACK_ANALYSIS)

    def test_fallback_is_a_copy(self):
        result = parse_model_reply("garbage")
        result["analysis"]["overallScore"] = -1
        self.assertEqual(FALLBACK_ANALYSIS["analysis"]["overallScore"], 85)


# ===================================================================
# 3. NORMALIZATION PASS
# ===================================================================


class TestNormalizeAnalysis(unittest.TestCase):

    def test_complete_reply_untouched(self):
        reply = _complete_reply()
        self.assertEqual(normalize_analysis(reply), reply)

    def test_empty_object_gets_all_defaults(self):
        result = normalize_analysis({})
        self.assertEqual(result["transcription"], DEFAULT_TRANSCRIPTION)
        self.assertEqual(result["analysis"], {
            "overallScore": 0,
            "confidenceLevel": "Unknown",
            "travelPersonality": [],
            "preferences": [],
            "spendingHabits": {"cafeBudget": "Unknown", "percentage": 0, "reason": "No data available"},
            "goaExperience": {"score": 0, "level": "Unknown", "reason": "No data available"},
        })
        self.assertEqual(result["insights"], {
            "whyUseful": "Analysis completed",
            "benefits": [],
            "opportunities": [],
            "recommendations": [],
        })

    def test_partial_analysis_filled_per_key(self):
        result = normalize_analysis({"transcription": "hi", "analysis": {"overallScore": 55}})
        self.assertEqual(result["transcription"], "hi")
        self.assertEqual(result["analysis"]["overallScore"], 55)
        self.assertEqual(result["analysis"]["confidenceLevel"], "Unknown")
        self.assertEqual(result["analysis"]["goaExperience"]["level"], "Unknown")

    def test_falsy_values_replaced(self):
        result = normalize_analysis({
            "transcription": "",
            "analysis": {"overallScore": 0, "confidenceLevel": "", "spendingHabits": None},
            "insights": None,
        })
        self.assertEqual(result["transcription"], DEFAULT_TRANSCRIPTION)
        self.assertEqual(result["analysis"]["confidenceLevel"], "Unknown")
        self.assertEqual(result["analysis"]["spendingHabits"]["cafeBudget"], "Unknown")
        self.assertEqual(result["insights"]["whyUseful"], "Analysis completed")

    def test_nested_objects_taken_as_whole(self):
        partial = {"analysis": {"goaExperience": {"score": 10}}}
        result = normalize_analysis(partial)
        self.assertEqual(result["analysis"]["goaExperience"], {"score": 10})

    def test_unknown_keys_dropped(self):
        result = normalize_analysis({"transcription": "hi", "debug": True})
        self.assertEqual(set(result), {"transcription", "analysis", "insights"})

    def test_non_dict_input_treated_as_empty(self):
        for value in (None, [], [1, 2], 5, "text"):
            with self.subTest(value=value):
                self.assertEqual(normalize_analysis(value), normalize_analysis({}))

    def test_non_dict_analysis_treated_as_empty(self):
        result = normalize_analysis({"analysis": "great"})
        self.assertEqual(result["analysis"]["overallScore"], 0)

    def test_fallback_is_fixed_point(self):
        self.assertEqual(normalize_analysis(FALLBACK_ANALYSIS), FALLBACK_ANALYSIS)

    def test_idempotent(self):
        for value in ({}, _complete_reply(), {"analysis": {"overallScore": 3}}, None):
            with self.subTest(value=value):
                once = normalize_analysis(value)
                self.assertEqual(normalize_analysis(once), once)

    def test_input_not_mutated(self):
        reply = {"analysis": {"overallScore": 5}}
        snapshot = copy.deepcopy(reply)
        normalize_analysis(reply)
        self.assertEqual(reply, snapshot)

    def test_result_does_not_share_defaults(self):
        first = normalize_analysis({})
        first["insights"]["benefits"].append("leak")
        second = normalize_analysis({})
        self.assertEqual(second["insights"]["benefits"], [])


if __name__ == "__main__":
    unittest.main()
