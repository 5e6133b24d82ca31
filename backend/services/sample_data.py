"""
Sample gallery data: six demo users and one public blueprint each.

Nodes are written as (label, node_type, progress, description, priority, x, y)
rows; ids are assigned in order starting at "1" and a node counts as
completed at 100% progress.
"""

from models.domain import NodeType

SAMPLE_USERS = [
    {"id": "550e8400-e29b-41d4-a716-446655440001", "username": "senior_dev", "email": "senior@example.com", "role": "user"},
    {"id": "550e8400-e29b-41d4-a716-446655440002", "username": "side_hustle", "email": "side@example.com", "role": "user"},
    {"id": "550e8400-e29b-41d4-a716-446655440003", "username": "career_change", "email": "career@example.com", "role": "user"},
    {"id": "550e8400-e29b-41d4-a716-446655440004", "username": "ai_researcher", "email": "researcher@example.com", "role": "user"},
    {"id": "550e8400-e29b-41d4-a716-446655440005", "username": "health_master", "email": "health@example.com", "role": "user"},
    {"id": "550e8400-e29b-41d4-a716-446655440006", "username": "insta_entrepreneur", "email": "insta@example.com", "role": "user"},
]

V, L, S, P = NodeType.VALUE, NodeType.LONG_GOAL, NodeType.SHORT_GOAL, NodeType.PLAN

# Edge layout shared by every six-node sample
_TREE_EDGES = [("1", "2"), ("2", "3"), ("2", "4"), ("3", "5"), ("4", "6")]


def _nodes(rows):
    nodes = []
    for index, (label, node_type, progress, description, priority, x, y) in enumerate(rows, start=1):
        nodes.append(
            {
                "id": str(index),
                "type": "input" if index == 1 else "default",
                "data": {
                    "label": label,
                    "nodeType": node_type.value,
                    "progress": progress,
                    "completed": progress == 100,
                    "description": description,
                    "priority": priority,
                },
                "position": {"x": x, "y": y},
            }
        )
    return nodes


def _edges(pairs):
    return [{"id": f"e{source}-{target}", "source": source, "target": target} for source, target in pairs]


def _blueprint(title, description, category, author_index, rows, edges=_TREE_EDGES):
    return {
        "title": title,
        "description": description,
        "category": category,
        "privacy": "public",
        "author_id": SAMPLE_USERS[author_index]["id"],
        "nodes": _nodes(rows),
        "edges": _edges(edges),
    }


SAMPLE_BLUEPRINTS = [
    _blueprint(
        "주니어에서 시니어 개발자로 3년 성장기",
        "체계적인 기술 성장과 리더십 개발을 통한 시니어 개발자 성장기",
        "커리어",
        0,
        [
            ("기술로 가치 창출하기", V, 100, "깊은 기술 이해와 비즈니스 임팩트를 통해 조직과 사회에 기여", "high", 300, 20),
            ("시니어 개발자 & 테크리드", L, 73, "3년 내 연봉 1억 달성, 10명 이상 팀 리딩", "high", 300, 90),
            ("미들 개발자 승진", S, 100, "1년차에 미들 승진, 연봉 6천만원 달성", "high", 150, 160),
            ("오픈소스 컨트리뷰터", S, 65, "메이저 오픈소스 프로젝트 기여, 기술 블로그 운영", "high", 300, 160),
            ("아키텍처 설계 전문성", S, 60, "대규모 시스템 설계, MSA/DDD 적용 경험", "high", 450, 160),
            ("AWS 자격증 취득 전략", P, 80, "SAA, Developer, DevOps 자격증 단계별 취득", "medium", 80, 230),
            ("기술 세미나 & 멘토링", P, 100, "분기별 1회 발표, 주니어 개발자 3명 멘토링", "high", 220, 230),
            ("오픈소스 기여 로드맵", P, 65, "React/Next.js 프로젝트 월 2회 PR, 이슈 해결", "high", 360, 230),
        ],
        [("1", "2"), ("2", "3"), ("2", "4"), ("2", "5"), ("3", "6"), ("3", "7"), ("4", "8"), ("5", "8")],
    ),
    _blueprint(
        "퇴사 없이 부업으로 월 500만원",
        "직장 생활과 병행하며 온라인 비즈니스로 안정적인 부수입 창출",
        "창업",
        1,
        [
            ("경제적 자유와 안정성", V, 100, "경제적 불안감 해소, 다양한 수입원 확보", "high", 300, 20),
            ("월 500만원 부업 수입", L, 88, "2년 내 안정적인 부수입 500만원 달성", "high", 300, 90),
            ("온라인 강의 플랫폼 런칭", S, 100, "첫 강의 출시 및 100명 수강생 확보", "high", 150, 160),
            ("1000명 수강생 달성", S, 90, "6개월 내 수강생 1000명, 월 300만원 수익", "high", 450, 160),
            ("커리큘럼 개발 & 콘텐츠 제작", P, 100, "체계적인 강의 구성, 주 3회 콘텐츠 업로드", "high", 150, 230),
            ("SNS 마케팅 전략", P, 85, "유튜브, 인스타그램 활용한 자연스러운 홍보", "high", 450, 230),
        ],
    ),
    _blueprint(
        "비전공자 개발자 취업 성공기",
        "영업직에서 프론트엔드 개발자로의 성공적인 커리어 전환",
        "커리어",
        2,
        [
            ("진정한 커리어 만족감", V, 100, "좋아하는 일을 하며 성장하는 삶", "high", 300, 20),
            ("프론트엔드 개발자 취업", L, 95, "1년 내 개발자 이직, 연봉 4천만원 이상", "high", 300, 90),
            ("포트폴리오 3개 완성", S, 100, "개인 프로젝트, 팀 프로젝트, 클론 코딩", "high", 150, 160),
            ("기술 면접 완벽 준비", S, 90, "JS 심화, 알고리즘, CS 기초 완벽 대비", "high", 450, 160),
            ("부트캠프 수료 & 네트워킹", P, 100, "6개월 집중 과정, 동기들과 스터디", "high", 150, 230),
            ("개발자 커뮤니티 활동", P, 85, "기술 블로그, 컨퍼런스 참여, GitHub 관리", "medium", 450, 230),
        ],
    ),
    _blueprint(
        "대학원 진학부터 논문 게재까지",
        "학부 연구생부터 국제학회 논문 발표까지의 학술 연구 여정",
        "학습",
        3,
        [
            ("학문적 호기심과 사회 기여", V, 100, "깊이 있는 연구를 통한 지식 창조와 사회 발전 기여", "high", 300, 20),
            ("국제학회 논문 게재", L, 70, "2년 내 ICML, NeurIPS 등 탑 컨퍼런스 논문 게재", "high", 300, 90),
            ("석사 과정 수료", S, 85, "우수한 성적으로 석사 학위 취득", "high", 180, 160),
            ("연구 프로젝트 성공", S, 75, "AI 모델 성능 개선, 새로운 알고리즘 개발", "high", 420, 160),
            ("논문 작성 & 리뷰 과정", P, 60, "체계적인 논문 작성, 동료 검토, 수정 과정", "high", 180, 230),
            ("학술 네트워킹", P, 80, "컨퍼런스 참여, 연구자 네트워크 구축", "medium", 420, 230),
        ],
    ),
    _blueprint(
        "운동 초보자의 -20kg 다이어트",
        "체계적인 운동과 식단 관리로 건강한 몸 만들기",
        "건강",
        4,
        [
            ("건강하고 활기찬 삶", V, 100, "신체적, 정신적 건강을 통한 삶의 질 향상", "high", 300, 20),
            ("20kg 감량 & 체력 증진", L, 75, "1년 내 목표 체중 달성, 마라톤 완주", "high", 300, 90),
            ("첫 10kg 감량", S, 100, "3개월 내 10kg 감량, 운동 습관 형성", "high", 180, 160),
            ("근력 운동 마스터", S, 70, "웨이트 트레이닝 정확한 폼 습득", "high", 420, 160),
            ("식단 관리 시스템", P, 90, "칼로리 계산, 균형잡힌 영양소 섭취", "high", 180, 230),
            ("운동 루틴 정착", P, 85, "주 5회 운동, 유산소 + 근력 운동 병행", "high", 420, 230),
        ],
    ),
    _blueprint(
        "인스타 1만 팔로워 쇼핑몰 창업",
        "SNS 인플루언서에서 온라인 쇼핑몰 사업가로의 전환",
        "창업",
        5,
        [
            ("창의적 사업가 정신", V, 100, "개성과 창의력을 비즈니스로 연결하는 삶", "high", 300, 20),
            ("월 매출 5천만원 쇼핑몰", L, 60, "2년 내 안정적인 온라인 쇼핑몰 사업 구축", "high", 300, 90),
            ("인스타 팔로워 1만명", S, 100, "패션/라이프스타일 인플루언서로 자리매김", "high", 180, 160),
            ("브랜드 런칭", S, 70, "독자적인 패션 브랜드 기획 및 제품 개발", "high", 420, 160),
            ("SNS 마케팅 전략", P, 95, "인스타그램, 틱톡 활용한 자연스러운 제품 홍보", "high", 180, 230),
            ("공급망 & 물류 구축", P, 50, "제품 소싱, 재고 관리, 배송 시스템 구축", "high", 420, 230),
        ],
    ),
]
