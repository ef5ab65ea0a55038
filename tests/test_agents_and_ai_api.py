"""API tests for agent templates and the chat-completion proxy."""


class TestAgentRoutes:
    def test_list_agents(self, client, alice):
        response = client.get("/api/agents", headers=alice)

        assert response.status_code == 200
        agents = response.json()["agents"]
        assert sorted(a["id"] for a in agents) == [
            "research",
            "web_crawler",
            "webapp_developer",
        ]
        assert all("systemPrompt" not in a for a in agents)

    def test_get_agent_includes_question_flow(self, client, alice):
        response = client.get("/api/agents/research", headers=alice)

        assert response.status_code == 200
        agent = response.json()["agent"]
        assert agent["name"] == "Research Agent"
        assert agent["systemPrompt"]
        assert agent["initialMessage"]
        assert agent["questions"][0]["id"] == "research_goal"

    def test_general_has_no_template(self, client, alice):
        response = client.get("/api/agents/general", headers=alice)

        assert response.status_code == 404
        assert response.json()["detail"] == "Agent not found"

    def test_agents_require_identity(self, client):
        assert client.get("/api/agents").status_code == 401


class TestChatProxy:
    def test_models_are_listed(self, client, alice):
        response = client.get("/api/ai/models", headers=alice)

        assert response.status_code == 200
        ids = [m["id"] for m in response.json()["models"]]
        assert "google/gemini-flash-1.5:free" in ids

    def test_chat_returns_assistant_reply(self, client, alice, llm):
        llm.reply("Hello there")

        response = client.post(
            "/api/ai/chat",
            json={
                "messages": [{"role": "user", "content": "hi"}],
                "model": "google/gemma-2-9b-it:free",
            },
            headers=alice,
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": {"role": "assistant", "content": "Hello there"},
            "model": "google/gemma-2-9b-it:free",
        }
        assert llm.requests[0]["messages"] == [{"role": "user", "content": "hi"}]

    def test_chat_with_session_uses_agent_prompt_and_logs_reply(
        self, client, alice, llm
    ):
        session_id = client.post(
            "/api/sessions", json={"agentType": "web_crawler"}, headers=alice
        ).json()["sessionId"]
        llm.reply("Which site should I crawl?")

        response = client.post(
            "/api/ai/chat",
            json={
                "messages": [{"role": "user", "content": "I need a crawler"}],
                "sessionId": session_id,
            },
            headers=alice,
        )

        assert response.status_code == 200
        sent = llm.requests[0]["messages"]
        assert sent[0]["role"] == "system"
        assert "crawl" in sent[0]["content"].lower()
        assert sent[1] == {"role": "user", "content": "I need a crawler"}

        messages = client.get(
            f"/api/sessions/{session_id}/messages", headers=alice
        ).json()["messages"]
        assert messages[-1]["role"] == "assistant"
        assert messages[-1]["content"] == "Which site should I crawl?"

    def test_empty_reply_is_logged_as_returned(self, client, alice, llm):
        session_id = client.post(
            "/api/sessions", json={"agentType": "research"}, headers=alice
        ).json()["sessionId"]
        llm.reply("")

        response = client.post(
            "/api/ai/chat",
            json={
                "messages": [{"role": "user", "content": "hi"}],
                "sessionId": session_id,
            },
            headers=alice,
        )

        assert response.status_code == 200
        assert response.json()["message"]["content"] == ""
        messages = client.get(
            f"/api/sessions/{session_id}/messages", headers=alice
        ).json()["messages"]
        assert messages[-1]["role"] == "assistant"
        assert messages[-1]["content"] == ""

    def test_chat_keeps_client_system_prompt(self, client, alice, llm):
        session_id = client.post(
            "/api/sessions", json={"agentType": "research"}, headers=alice
        ).json()["sessionId"]
        llm.reply("ok")

        client.post(
            "/api/ai/chat",
            json={
                "messages": [
                    {"role": "system", "content": "Be brief."},
                    {"role": "user", "content": "hi"},
                ],
                "sessionId": session_id,
            },
            headers=alice,
        )

        sent = llm.requests[0]["messages"]
        assert [m["content"] for m in sent] == ["Be brief.", "hi"]

    def test_chat_against_foreign_session_is_not_found(
        self, client, alice, bob, llm
    ):
        session_id = client.post(
            "/api/sessions", json={"agentType": "research"}, headers=alice
        ).json()["sessionId"]

        response = client.post(
            "/api/ai/chat",
            json={
                "messages": [{"role": "user", "content": "hi"}],
                "sessionId": session_id,
            },
            headers=bob,
        )

        assert response.status_code == 404
        assert llm.requests == []

    def test_upstream_failure_is_bad_gateway(self, client, alice, llm):
        llm.fail(429)

        response = client.post(
            "/api/ai/chat",
            json={"messages": [{"role": "user", "content": "hi"}]},
            headers=alice,
        )

        assert response.status_code == 502

    def test_missing_credential(self, client, alice, llm):
        llm.api_key = None

        response = client.post(
            "/api/ai/chat",
            json={"messages": [{"role": "user", "content": "hi"}]},
            headers=alice,
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "OpenRouter not configured"

    def test_empty_conversation_is_rejected(self, client, alice, llm):
        response = client.post("/api/ai/chat", json={"messages": []}, headers=alice)
        assert response.status_code == 422
