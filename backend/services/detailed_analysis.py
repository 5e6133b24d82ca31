"""
Detailed Analysis — rule-based statistics over a user's blueprints.

Accepts blueprints as loose JSON (the canvas format where node fields live
under ``data``, or the flat BlueprintNode format) and produces the
``basicAnalysis`` block of the detailed-analysis endpoint.
"""

from collections import Counter, defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional

WEEKDAYS = ["일", "월", "화", "수", "목", "금", "토"]


def _node_data(node: Any) -> Optional[dict]:
    """Return the field dict of a node, or None if it is not a goal node."""
    if not isinstance(node, dict):
        return None
    if isinstance(node.get("data"), dict):
        return node["data"]
    if "title" in node or "type" in node:
        return node
    return None


def _label(data: dict) -> Optional[str]:
    return data.get("label") or data.get("title")


def _node_type(data: dict) -> str:
    return data.get("nodeType") or data.get("type") or "기타"


def _is_completed(data: Optional[dict]) -> bool:
    return bool(data) and data.get("completed") is True


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _rate(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0


def extract_valid_blueprints(blueprints: List[Any]) -> List[dict]:
    return [
        bp for bp in blueprints
        if isinstance(bp, dict) and isinstance(bp.get("nodes"), list)
    ]


def extract_all_nodes(blueprints: List[dict]) -> List[dict]:
    """Flatten goal nodes, tagging each with its blueprint's title/category."""
    nodes = []
    for bp in blueprints:
        for node in bp["nodes"]:
            data = _node_data(node)
            if data is None:
                continue
            nodes.append({
                "id": node.get("id"),
                "data": data,
                "blueprintTitle": bp.get("title"),
                "blueprintCategory": bp.get("category"),
            })
    return nodes


def calculate_summary_stats(blueprints: List[dict], nodes: List[dict]) -> dict:
    completed = sum(1 for n in nodes if _is_completed(n["data"]))
    return {
        "totalBlueprints": len(blueprints),
        "totalNodes": len(nodes),
        "completedGoals": completed,
        "completionRate": _rate(completed, len(nodes)),
        "averageNodesPerBlueprint": len(nodes) / len(blueprints) if blueprints else 0,
    }


def analyze_goal_types(nodes: List[dict]) -> List[dict]:
    stats: Dict[str, dict] = {}
    for node in nodes:
        data = node["data"]
        entry = stats.setdefault(_node_type(data), {"total": 0, "completed": 0, "progress": []})
        entry["total"] += 1
        if _is_completed(data):
            entry["completed"] += 1
        progress = data.get("progress")
        entry["progress"].append(progress if isinstance(progress, (int, float)) else 0)

    result = [
        {
            "type": node_type,
            "count": entry["total"],
            "completionRate": _rate(entry["completed"], entry["total"]),
            "averageProgress": (
                sum(entry["progress"]) / len(entry["progress"]) if entry["progress"] else 0
            ),
        }
        for node_type, entry in stats.items()
    ]
    return sorted(result, key=lambda r: r["count"], reverse=True)


def determine_priority(node_count: int, completion_rate: float) -> str:
    if node_count >= 10 and completion_rate < 50:
        return "high"
    if node_count >= 5 and completion_rate < 70:
        return "medium"
    return "low"


def analyze_categories(blueprints: List[dict]) -> List[dict]:
    stats: Dict[str, dict] = defaultdict(lambda: {"nodes": 0, "completed": 0})
    for bp in blueprints:
        entry = stats[bp.get("category") or "미분류"]
        entry["nodes"] += len(bp["nodes"])
        entry["completed"] += sum(1 for n in bp["nodes"] if _is_completed(_node_data(n)))

    result = []
    for category, entry in stats.items():
        rate = _rate(entry["completed"], entry["nodes"])
        result.append({
            "category": category,
            "nodeCount": entry["nodes"],
            "completedCount": entry["completed"],
            "completionRate": rate,
            "priority": determine_priority(entry["nodes"], rate),
        })
    return sorted(result, key=lambda r: r["nodeCount"], reverse=True)


def analyze_time_patterns(nodes: List[dict], now: Optional[datetime] = None) -> dict:
    """
    Hour-of-day and weekday histograms. Nodes without a creation timestamp
    are counted at ``now``.
    """
    now = now or datetime.now()
    creation: Counter = Counter()
    completion: Counter = Counter()
    weekly: Counter = Counter()

    for node in nodes:
        data = node["data"]
        created = _parse_timestamp(data.get("createdAt") or data.get("createdDate")) or now
        creation[str(created.hour)] += 1
        # isoweekday: Monday=1 .. Sunday=7; WEEKDAYS starts on Sunday
        weekly[WEEKDAYS[created.isoweekday() % 7]] += 1
        if data.get("completed"):
            completed_at = _parse_timestamp(data.get("updatedAt")) or created
            completion[str(completed_at.hour)] += 1

    return {
        "creationPattern": dict(creation),
        "completionPattern": dict(completion),
        "weeklyActivity": dict(weekly),
    }


def analyze_connectivity(blueprints: List[dict]) -> dict:
    total_nodes = 0
    total_connections = 0
    isolated = 0
    most_connected = None
    max_connections = 0

    for bp in blueprints:
        nodes = bp["nodes"]
        edges = bp.get("edges") or []
        total_nodes += len(nodes)
        total_connections += len(edges)

        degree: Counter = Counter()
        for edge in edges:
            if not isinstance(edge, dict):
                continue
            if edge.get("source"):
                degree[edge["source"]] += 1
            if edge.get("target"):
                degree[edge["target"]] += 1

        for node in nodes:
            if not isinstance(node, dict):
                continue
            connections = degree.get(node.get("id"), 0)
            if connections == 0:
                isolated += 1
            if connections > max_connections:
                max_connections = connections
                data = _node_data(node) or {}
                most_connected = {
                    "id": node.get("id"),
                    "label": _label(data) or "Unknown",
                    "connections": connections,
                }

    return {
        "isolatedNodes": isolated,
        "averageConnections": total_connections / total_nodes if total_nodes > 0 else 0,
        "mostConnectedNode": most_connected,
        "connectionDensity": (
            total_connections / (total_nodes * (total_nodes - 1)) * 100
            if total_nodes > 1 else 0
        ),
    }


def _completion_rate(nodes: List[dict]) -> float:
    return _rate(sum(1 for n in nodes if n["data"].get("completed")), len(nodes))


def _category_count(blueprints: List[dict]) -> int:
    return len({bp.get("category") for bp in blueprints})


def calculate_growth_metrics(blueprints: List[dict], nodes: List[dict]) -> dict:
    rate = _completion_rate(nodes)

    if rate > 70:
        momentum = "increasing"
    elif rate > 40:
        momentum = "steady"
    else:
        momentum = "decreasing"

    if len(nodes) > 50:
        challenge = "ambitious"
    elif len(nodes) > 20:
        challenge = "balanced"
    else:
        challenge = "conservative"

    return {
        "momentum": momentum,
        "consistencyScore": min(100, rate + 20),
        "challengeLevel": challenge,
        "focusScore": max(0, 100 - _category_count(blueprints) * 10),
    }


def generate_recommendations(blueprints: List[dict], nodes: List[dict]) -> List[dict]:
    recommendations = []

    if _completion_rate(nodes) < 30:
        recommendations.append({
            "type": "completion",
            "priority": "high",
            "title": "목표 달성률 개선",
            "description": "현재 목표 달성률이 낮습니다. 실행 가능한 단계로 목표를 세분화해보세요.",
            "actionItems": [
                "큰 목표를 작은 단위로 나누기",
                "일일 체크리스트 만들기",
                "완료 가능한 목표부터 시작하기",
            ],
        })

    if _category_count(blueprints) > 5:
        recommendations.append({
            "type": "focus",
            "priority": "medium",
            "title": "목표 집중도 향상",
            "description": "너무 많은 분야에 분산되어 있습니다. 핵심 영역에 집중해보세요.",
            "actionItems": [
                "가장 중요한 3개 분야 선택",
                "우선순위가 낮은 목표 일시 정지",
                "집중 분야별 시간 배분 계획 수립",
            ],
        })

    return recommendations


def extract_insights(blueprints: List[dict], nodes: List[dict]) -> dict:
    rate = _completion_rate(nodes)
    strengths, improvements, patterns, risk_factors = [], [], [], []

    if len(blueprints) > 3:
        strengths.append("체계적인 목표 설정 능력")
    if rate > 60:
        strengths.append("높은 목표 달성 능력")
    else:
        improvements.append("목표 달성률 향상 필요")
    if len(nodes) > 50:
        patterns.append("상세한 계획 수립 선호")
    if rate < 20:
        risk_factors.append("목표 과부하 위험")

    return {
        "strengths": strengths,
        "improvements": improvements,
        "patterns": patterns,
        "riskFactors": risk_factors,
    }


def perform_detailed_analysis(blueprints: List[Any]) -> dict:
    valid = extract_valid_blueprints(blueprints)
    nodes = extract_all_nodes(valid)

    return {
        "summary": calculate_summary_stats(valid, nodes),
        "goalTypeAnalysis": analyze_goal_types(nodes),
        "categoryAnalysis": analyze_categories(valid),
        "timePatterns": analyze_time_patterns(nodes),
        "connectivityAnalysis": analyze_connectivity(valid),
        "growthMetrics": calculate_growth_metrics(valid, nodes),
        "recommendations": generate_recommendations(valid, nodes),
        "insights": extract_insights(valid, nodes),
    }
