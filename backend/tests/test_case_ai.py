from lexiassist.errors import AIConfigurationError, AIRequestError, AITimeoutError

FENCED_REPLY = '```json\n[{"caseTitle":"A","citation":"C","verdict":"V"}]\n```'


class TestSummary:

    async def test_stores_and_returns_reply_verbatim(self, client, headers_a, ai, created_case):
        ai.reply = "S"

        resp = await client.post(f"/api/cases/{created_case['id']}/summary", headers=headers_a)

        assert resp.status_code == 200
        assert resp.json() == {"summary": "S"}
        stored = (await client.get(f"/api/cases/{created_case['id']}", headers=headers_a)).json()
        assert stored["summary"] == "S"

    async def test_prompt_embeds_case_fields_without_tools(self, client, headers_a, ai, created_case):
        ai.reply = "S"

        await client.post(f"/api/cases/{created_case['id']}/summary", headers=headers_a)

        [(prompt, web_search)] = ai.calls
        assert web_search is False
        assert created_case["title"] in prompt
        assert created_case["caseType"] in prompt
        assert created_case["court"] in prompt
        assert created_case["description"] in prompt
        assert "2-3 sentence" in prompt

    async def test_upstream_failure_leaves_summary_untouched(
        self, client, headers_a, ai, created_case,
    ):
        ai.error = AIRequestError("quota exceeded")

        resp = await client.post(f"/api/cases/{created_case['id']}/summary", headers=headers_a)

        assert resp.status_code == 502
        assert resp.json() == {
            "message": "Failed to generate summary.",
            "error": "quota exceeded",
            "code": "ai_request_failed",
        }
        stored = (await client.get(f"/api/cases/{created_case['id']}", headers=headers_a)).json()
        assert stored["summary"] == ""

    async def test_missing_credential_is_a_configuration_error(
        self, client, headers_a, ai, created_case,
    ):
        ai.error = AIConfigurationError()

        resp = await client.post(f"/api/cases/{created_case['id']}/summary", headers=headers_a)

        assert resp.status_code == 500
        assert resp.json()["code"] == "ai_configuration"
        assert resp.json()["error"] == "Server configuration error: Missing API key."

    async def test_timeout_has_its_own_status(self, client, headers_a, ai, created_case):
        ai.error = AITimeoutError("AI request timed out after 30 seconds")

        resp = await client.post(f"/api/cases/{created_case['id']}/summary", headers=headers_a)

        assert resp.status_code == 504
        assert resp.json()["code"] == "ai_timeout"

    async def test_other_lawyers_case_is_not_found_and_ai_is_not_called(
        self, client, headers_b, ai, created_case,
    ):
        resp = await client.post(f"/api/cases/{created_case['id']}/summary", headers=headers_b)

        assert resp.status_code == 404
        assert ai.calls == []


class TestSimilarCases:

    async def test_fenced_json_is_stripped_parsed_and_stored(
        self, client, headers_a, ai, created_case,
    ):
        ai.reply = FENCED_REPLY

        resp = await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)

        assert resp.status_code == 200
        expected = [{"caseTitle": "A", "citation": "C", "verdict": "V", "relevance": None}]
        assert resp.json() == expected
        stored = (await client.get(f"/api/cases/{created_case['id']}", headers=headers_a)).json()
        assert stored["similarCases"] == expected

    async def test_web_search_is_requested(self, client, headers_a, ai, created_case):
        ai.reply = "[]"

        await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)

        [(prompt, web_search)] = ai.calls
        assert web_search is True
        assert "JSON array" in prompt
        assert created_case["title"] in prompt

    async def test_prose_reply_is_a_format_error_and_keeps_old_list(
        self, client, headers_a, ai, created_case,
    ):
        ai.reply = FENCED_REPLY
        await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)
        ai.reply = "Sorry, I cannot help"

        resp = await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)

        assert resp.status_code == 502
        assert resp.json() == {
            "message": "Failed to find similar cases.",
            "error": "AI assistant returned an invalid format. Please try again.",
            "code": "ai_response_format",
        }
        stored = (await client.get(f"/api/cases/{created_case['id']}", headers=headers_a)).json()
        assert [c["caseTitle"] for c in stored["similarCases"]] == ["A"]

    async def test_new_results_replace_the_old_list(self, client, headers_a, ai, created_case):
        ai.reply = FENCED_REPLY
        await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)
        ai.reply = '[{"caseTitle":"B"},{"caseTitle":"D"}]'

        await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)

        stored = (await client.get(f"/api/cases/{created_case['id']}", headers=headers_a)).json()
        assert [c["caseTitle"] for c in stored["similarCases"]] == ["B", "D"]

    async def test_transport_failure_is_distinct_from_format_failure(
        self, client, headers_a, ai, created_case,
    ):
        ai.error = AIRequestError("AI service unreachable: connection refused")

        resp = await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)

        assert resp.status_code == 502
        assert resp.json()["code"] == "ai_request_failed"
        assert resp.json()["error"] == "AI service unreachable: connection refused"

    async def test_non_finite_relevance_is_stored_as_null(self, client, headers_a, ai, created_case):
        ai.reply = '[{"caseTitle": "A", "citation": "C", "verdict": "V", "relevance": NaN}]'

        resp = await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)

        assert resp.status_code == 200
        assert resp.json()[0]["relevance"] is None

    async def test_deeply_nested_reply_is_a_format_error(self, client, headers_a, ai, created_case):
        ai.reply = "[" * 100000 + "]" * 100000

        resp = await client.post(f"/api/cases/{created_case['id']}/similar", headers=headers_a)

        assert resp.status_code == 502
        assert resp.json()["code"] == "ai_response_format"
