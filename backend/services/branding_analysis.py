"""
Branding Analysis — keyword extraction of personal-branding material
(identities, achievements, current activities, distinctive traits) from
blueprint node labels.
"""

import re
from typing import Any, Iterable, List

from pydantic import Field

from models.domain import CamelModel

# Node types appear either as Korean labels or as NodeType values
_TYPE_LABELS = {
    "long_goal": "장기목표",
    "short_goal": "단기목표",
    "plan": "계획",
    "task": "할일",
    "value": "가치관",
}

_STUDY_KEYWORDS = ["전공", "학과", "대학"]
_JOB_KEYWORDS = ["pm", "개발자", "디자이너", "마케터", "기획자", "연구원"]
_JOB_TITLES = ["PM", "개발자", "디자이너", "마케터", "기획자", "연구원", "엔지니어", "매니저"]
_ACHIEVEMENT_KEYWORDS = ["취득", "합격", "달성", "완료", "성공"]
_ACTIVITY_KEYWORDS = ["진행", "ing", "중", "개발", "운영", "관리"]
_TRAIT_KEYWORDS = ["창업", "부업", "프리랜서", "유학", "이직", "전환"]
_TRAITS = ["창업", "부업", "프리랜서", "유학", "이직", "전환", "스타트업"]


class BrandingData(CamelModel):
    identities: List[str] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)
    current_activities: List[str] = Field(default_factory=list)
    unique_traits: List[str] = Field(default_factory=list)


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def extract_key_phrase(text: str, keywords: List[str]) -> str:
    for keyword in keywords:
        index = text.find(keyword)
        if index != -1:
            before = text[:index].strip().split(" ")[-1]
            return before + keyword
    return " ".join(text.split(" ")[:3])


def extract_job_title(text: str) -> str:
    lowered = text.lower()
    for title in _JOB_TITLES:
        if title.lower() in lowered:
            words = text.split(" ")
            index = next(i for i, w in enumerate(words) if title.lower() in w.lower())
            if index > 0:
                return f"{words[index - 1]} {title}"
            return title
    return text


def clean_achievement(text: str) -> str:
    cleaned = re.sub(r"\s+", " ", re.sub(r"완료|달성|성공|취득", "", text)).strip()
    if "자격증" in cleaned:
        match = re.search(r"(\S+)\s*자격증", cleaned)
        return f"{match.group(1)} 자격증" if match else cleaned
    return " ".join(cleaned.split(" ")[:4])


def clean_activity(text: str) -> str:
    cleaned = re.sub(r"\s+", " ", re.sub(r"진행|ing|중", "", text)).strip()
    return " ".join(cleaned.split(" ")[:4])


def extract_special_trait(text: str) -> str:
    for trait in _TRAITS:
        if trait in text:
            return trait
    return text.split(" ")[0]


def _add(bucket: List[str], value: str) -> None:
    if value not in bucket:
        bucket.append(value)


def extract_branding_data(blueprints: List[Any]) -> BrandingData:
    identities: List[str] = []
    achievements: List[str] = []
    activities: List[str] = []
    traits: List[str] = []

    for bp in blueprints:
        if not isinstance(bp, dict) or not isinstance(bp.get("nodes"), list):
            continue
        for node in bp["nodes"]:
            if not isinstance(node, dict) or not isinstance(node.get("data"), dict):
                continue
            data = node["data"]
            raw_label = data.get("label")
            if not raw_label:
                continue

            label = raw_label.lower()
            raw_type = data.get("type") or data.get("nodeType") or ""
            node_type = _TYPE_LABELS.get(raw_type, raw_type)
            completed = bool(data.get("completed"))

            if _contains_any(label, _STUDY_KEYWORDS):
                _add(identities, extract_key_phrase(raw_label, _STUDY_KEYWORDS))
            if _contains_any(label, _JOB_KEYWORDS):
                _add(identities, extract_job_title(raw_label))

            if completed and node_type in ("장기목표", "단기목표"):
                if _contains_any(label, _ACHIEVEMENT_KEYWORDS):
                    _add(achievements, clean_achievement(raw_label))

            if not completed and node_type in ("단기목표", "계획"):
                if _contains_any(label, _ACTIVITY_KEYWORDS):
                    _add(activities, clean_activity(raw_label))

            if _contains_any(label, _TRAIT_KEYWORDS):
                _add(traits, extract_special_trait(raw_label))

    return BrandingData(
        identities=identities[:3],
        achievements=achievements[:3],
        current_activities=activities[:2],
        unique_traits=traits[:2],
    )
