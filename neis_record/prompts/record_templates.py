# neis_record/prompts/record_templates.py
"""
생기부 프롬프트 템플릿 텍스트
섹션 단위 문자열만 보관하고 조립은 PromptComposer 가 담당한다.
"""
from neis_record.core.constants import AchievementLevels as L

SUBJECT_OPENING = (
    "당신은 초등학교 교사입니다. 학생의 자기평가 응답과 교사의 관찰 내용을 바탕으로 "
    "NEIS 생활기록부 {record_type}을 작성해주세요."
)

BEHAVIOR_OPENING = (
    "당신은 초등학교 교사입니다. 학생의 행동발달 자기평가 응답을 바탕으로 "
    "NEIS 생활기록부 \"행동특성 및 종합의견\"을 작성해주세요."
)

SUBJECT_RULES = [
    "학생 이름을 절대 포함하지 마세요",
    "모든 문장은 명사형으로 종결하세요 (예: ~함, ~임, ~됨)",
    "최대 {max_length}자 이내로 작성하세요",
    "구체적이고 객관적인 사실 위주로 서술하세요",
    "긍정적인 표현을 사용하되 과장하지 마세요",
]

BEHAVIOR_RULES = [
    "학생 이름을 절대 포함하지 마세요",
    "모든 문장은 명사형으로 종결하세요 (예: ~함, ~임, ~됨)",
    "최대 {max_length}자 이내로 작성하세요",
    "핵심 인성 요소를 괄호 안에 명시하세요 (예: (배려), (협력), (타인존중))",
    "구체적이고 객관적인 행동 사례 위주로 서술하세요",
    "추상적 표현(\"착한 학생\", \"성실한 학생\") 사용 금지",
    "모든 학생의 긍정적 측면과 성장 가능성을 포함하세요",
]

ENDING_RULE = "문장 끝은 다음 중 하나로 마치세요: {endings}"
PROHIBITED_RULE = "'{words}' 등의 과도한 표현을 피하세요"

# 평가기준 라벨 (표시 순서)
CRITERIA_LABELS = [
    ("excellent", L.EXCELLENT),
    ("good", L.GOOD),
    ("satisfactory", L.SATISFACTORY),
    ("needs_improvement", L.NEEDS_IMPROVEMENT),
]

# 평가 결과 → 영역 제목 / 기준 미입력 시 기본 설명
RESULT_GROUPS = [
    (L.EXCELLENT, "우수 성취 영역", "탁월한 성취"),
    (L.GOOD, "목표 달성 영역", "우수한 성취"),
    (L.SATISFACTORY, "발전 중인 영역", "꾸준한 성장"),
    (L.NEEDS_IMPROVEMENT, "성장 잠재 영역", "지속적 노력 필요"),
]

# 성취수준별 서술 전략
ACHIEVEMENT_STRATEGIES = {
    L.EXCELLENT: {
        "focus": "구체적 성취사례와 창의적 접근",
        "tone": "적극적, 우수한, 탁월한",
        "structure": "활동 → 과정 → 성취 → 발전방향",
        "ratio": "사실:성취:발전 = 3:4:3",
    },
    L.GOOD: {
        "focus": "꾸준한 노력과 목표달성 과정",
        "tone": "성실한, 지속적인, 향상되는",
        "structure": "노력 → 과정 → 성취 → 잠재력",
        "ratio": "노력:성취:잠재력 = 4:3:3",
    },
    L.SATISFACTORY: {
        "focus": "성장가능성과 긍정적 변화",
        "tone": "점차, 꾸준히, 발전하는",
        "structure": "현재상태 → 변화과정 → 성장징조 → 기대",
        "ratio": "현재:변화:기대 = 2:4:4",
    },
    L.NEEDS_IMPROVEMENT: {
        "focus": "긍정적 변화와 잠재력 발굴",
        "tone": "향후, 지속적으로, 기대되는",
        "structure": "관찰사실 → 긍정요소 → 지원방향 → 성장기대",
        "ratio": "사실:긍정:기대 = 2:3:5",
    },
}

# 교과별 특화 요소
SUBJECT_SPECIFIC_ELEMENTS = {
    "국어": {
        "competencies": ["언어사용능력", "의사소통역량", "비판적사고력"],
        "observation_points": ["읽기 이해력", "표현력", "어휘 활용", "창작 능력"],
        "connectives": ["~를 통해 언어 감각을", "~에서 표현력을", "~과정에서 이해력을"],
    },
    "수학": {
        "competencies": ["수학적사고력", "문제해결능력", "논리적추론"],
        "observation_points": ["계산 정확성", "문제해결 과정", "수학적 의사소통", "추상적 사고"],
        "connectives": ["~를 해결하며", "~과정에서 논리적으로", "~를 통해 수학적으로"],
    },
    "과학": {
        "competencies": ["과학적탐구능력", "창의적사고력", "과학적의사소통"],
        "observation_points": ["탐구 과정", "가설 설정", "실험 태도", "결과 해석"],
        "connectives": ["~을 탐구하며", "~실험에서", "~과정을 통해 과학적으로"],
    },
}

SUBJECT_GUIDANCE = """[작성 지침 - 긍정적 성장 중심]
1. 평가 결과에 따른 서술:
   - 매우잘함/잘함: 구체적인 평가기준을 인용하여 학생의 우수한 성취를 기술
   - 보통: 현재 수준과 발전 가능성을 균형있게 표현
   - 노력요함: "~하려는 노력을 보임", "점차 향상되고 있음" 등 발전적 표현 사용

2. 부정적 표현 금지:
   - "못함", "미흡함" → "노력 중", "관심을 가지기 시작함"
   - "부족함" → "추가적인 연습으로 향상 가능함"
   - 모든 수준의 학생에게 성장 가능성과 긍정적 측면 포함

3. 구체적 근거 제시:
   - 학생의 자기평가 응답에서 긍정적 태도나 노력의 흔적 찾기
   - 작은 진전이나 개선도 의미있게 포함"""

CREATIVE_GUIDANCE = """[작성 지침 - 활동 중심 누가 기록]
1. 활동명과 학생의 역할, 구체적인 참여 과정을 함께 서술
2. 활동을 통해 드러난 태도 변화와 성장을 사실 위주로 기록
3. 자율·동아리·봉사·진로 영역의 성격에 맞는 표현 사용
4. 부정적 표현 대신 "~하려는 노력을 보임", "점차 적극적으로 참여함" 등 발전적 표현 사용"""

BEHAVIOR_GUIDANCE = """[작성 가이드 - 긍정적 성장 중심]
1. 학생의 응답에서 구체적인 행동 사례를 추출하세요
2. 해당하는 핵심 인성 요소를 괄호로 명시하세요
3. 학생의 잠재력, 인성, 자기주도적 능력이 드러나도록 작성하세요
4. 변화와 성장 가능성을 함께 언급하세요

5. 긍정적 표현 원칙:
   - 문제 행동 → "~하려는 노력을 보임", "점차 개선되고 있음"
   - 소극적 태도 → "점차 적극적으로 변화하고 있음", "자신감을 키워가고 있음"
   - 미흡한 부분 → "~에 대한 관심이 생기기 시작함", "지속적인 노력을 보임"
   - 모든 학생에게서 최소 2개 이상의 긍정적 특성 발견

6. 성장 가능성 표현:
   - "앞으로 ~할 것으로 기대됨"
   - "~하는 모습이 점차 늘어나고 있음"
   - "~에 대한 잠재력을 보이고 있음"
   - "지속적인 성장이 관찰됨\""""

SUBJECT_CLOSING = (
    "위 정보를 종합하여 {record_type} 기록을 작성해주세요.\n"
    "학생의 강점을 부각하고 성장 가능성을 제시하며, 모든 학생이 자신감을 가질 수 있는 내용으로 작성하세요."
)

BEHAVIOR_CLOSING = (
    "위 정보를 종합하여 학생의 행동특성 및 종합의견을 작성해주세요.\n"
    "모든 학생이 자신의 가치를 인정받고 성장 가능성을 확인받을 수 있도록,\n"
    "구체적이면서도 따뜻한 시선으로 작성하되, 학생 이름은 절대 포함하지 마세요."
)

NO_ANSWER = "응답 없음"
