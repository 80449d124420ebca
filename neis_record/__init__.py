"""
NEIS 생활기록부 생성/검증 서비스
관찰 키워드 · 평가계획 · 자기평가 → 프롬프트 → Gemini 생성 → NEIS 규정 검증
"""
__version__ = "1.0.0"
