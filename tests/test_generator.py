import json

import httpx
import pytest

from admin_panel.modules.tips.generator import (
    TipGenerator,
    TipGenerationError,
    build_prompt,
    clamp_count,
    parse_tips,
    strip_code_fences,
)
from admin_panel.modules.tips.service import TipService

pytestmark = pytest.mark.unit

ENDPOINT = "https://ai.test/v1beta/models/test:generateContent"

THREE_TIPS = [
    {"title": "Hydrate", "content": "Drink water through the day.", "category": "health", "priority": 7},
    {"title": "Eat greens", "content": "Add vegetables to each meal.", "category": "nutrition", "priority": 5},
    {"title": "Take the stairs", "content": "Skip the lift when you can.", "category": "fitness", "priority": 3},
]


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_generator(handler):
    return TipGenerator(httpx.Client(transport=httpx.MockTransport(handler)), endpoint=ENDPOINT)


class TestParsing:

    def test_strips_json_fence(self):
        assert strip_code_fences('```json\n[{"a": 1}]\n```') == '[{"a": 1}]'

    def test_strips_bare_fence(self):
        assert strip_code_fences("```\n[]\n```") == "[]"

    def test_parse_fenced_array(self):
        tips = parse_tips("```json\n" + json.dumps(THREE_TIPS) + "\n```")
        assert [t.title for t in tips] == ["Hydrate", "Eat greens", "Take the stairs"]
        assert all(t.is_active for t in tips)

    def test_unknown_category_falls_back_to_health(self):
        [tip] = parse_tips('[{"title": "T", "content": "C", "category": "sleep", "priority": 99}]')
        assert tip.category == "health"
        assert tip.priority == 10

    @pytest.mark.parametrize("text", [
        "not json at all",
        '{"title": "T", "content": "C"}',
        "[]",
        '["just a string"]',
        '[{"title": "", "content": "C"}]',
    ])
    def test_rejects_bad_payloads(self, text):
        with pytest.raises(TipGenerationError):
            parse_tips(text)

    @pytest.mark.parametrize("value,expected", [
        ("3", 3), (0, 1), (50, 20), ("abc", 5), (None, 5),
    ])
    def test_clamp_count(self, value, expected):
        assert clamp_count(value) == expected

    def test_prompt_names_count_and_categories(self):
        prompt = build_prompt(4)
        assert "Generate 4 unique health tips" in prompt
        assert "nutrition" in prompt


class TestTipGenerator:

    def test_request_shape(self):
        seen = {}

        def handler(request):
            seen["key"] = request.url.params.get("key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_body(json.dumps(THREE_TIPS)))

        tips = make_generator(handler).generate(3, "secret-key")
        assert len(tips) == 3
        assert seen["key"] == "secret-key"
        assert "Generate 3 unique health tips" in seen["body"]["contents"][0]["parts"][0]["text"]

    def test_missing_api_key(self):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(TipGenerationError, match="No Gemini API key"):
            make_generator(handler).generate(5, None)

    def test_empty_candidates(self):
        generator = make_generator(lambda request: httpx.Response(200, json={"candidates": []}))
        with pytest.raises(TipGenerationError):
            generator.generate(5, "k")

    def test_http_error(self):
        generator = make_generator(lambda request: httpx.Response(403, json={"error": "denied"}))
        with pytest.raises(TipGenerationError, match="HTTP 403"):
            generator.generate(5, "k")

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        with pytest.raises(TipGenerationError, match="request failed"):
            make_generator(handler).generate(5, "k")


class TestGenerateAndInsert:

    def test_inserts_all_active_with_icon(self, fake_supabase):
        generator = make_generator(
            lambda request: httpx.Response(200, json=gemini_body("```json\n" + json.dumps(THREE_TIPS) + "\n```"))
        )
        created = TipService(fake_supabase).generate_and_insert(generator, 3, "k")
        assert len(created) == 3
        rows = fake_supabase.tables["health_tips"]
        assert len(rows) == 3
        assert all(row["is_active"] is True and row["icon"] == "favorite" for row in rows)

    def test_malformed_output_inserts_nothing(self, fake_supabase):
        generator = make_generator(lambda request: httpx.Response(200, json=gemini_body("Sorry, I cannot.")))
        with pytest.raises(TipGenerationError):
            TipService(fake_supabase).generate_and_insert(generator, 3, "k")
        assert fake_supabase.tables.get("health_tips", []) == []
