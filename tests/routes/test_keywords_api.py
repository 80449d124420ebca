"""
관찰 키워드 라우트 테스트
"""


class TestKeywordCatalogApi:
    """카탈로그 조회 테스트"""

    def test_list_keywords(self, client):
        response = client.get("/api/keywords")

        assert response.status_code == 200
        data = response.json()
        assert [c["id"] for c in data["categories"]][:2] == ["learning_attitude", "social_skills"]
        assert sum(len(c["keywords"]) for c in data["categories"]) == 36
        assert set(data["intensityModifiers"]) == {"1", "2", "3"}
        assert "group_work" in data["contextConnectors"]
        assert data["combinations"][0]["primary_keyword_id"] == "active_participation"

    def test_get_keyword(self, client):
        response = client.get("/api/keywords/caring")

        assert response.status_code == 200
        data = response.json()
        assert data["keyword"]["text"] == "배려심 많음"
        assert data["category"] == {"id": "social_skills", "name": "대인관계"}

    def test_get_keyword_not_found(self, client):
        response = client.get("/api/keywords/no_such_keyword")

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["code"] == "KEYWORD_NOT_FOUND"


class TestHealthAndTracing:
    """헬스 체크 / 요청 ID 헤더"""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"message": "OK", "env": "test"}

    def test_request_id_generated(self, client):
        response = client.get("/api/health")
        assert response.headers["X-Request-Id"]

    def test_request_id_echoed(self, client):
        response = client.get("/api/health", headers={"x-request-id": "abc-123"})
        assert response.headers["X-Request-Id"] == "abc-123"
        assert "X-Request-Id" in response.headers["Access-Control-Expose-Headers"]
