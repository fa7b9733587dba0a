"""Network-free interviewer used when no remote model answers.

Replies are picked from small template pools keyed by job category and
interview phase. The output only has to be plausible, not contextual.
"""
from __future__ import annotations

import asyncio
import random
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .phase_clock import phase_for
from .types import Phase

GENERIC_REPLY = "感谢你的回答。让我们继续下一个问题。"


class JobCategory(str, Enum):
    ENGINEERING = "engineering"
    DESIGN = "design"
    PRODUCT = "product"
    OPERATIONS = "operations"
    SALES = "sales"
    MANAGEMENT = "management"
    HR = "hr"
    FINANCE = "finance"
    DATA = "data"
    GENERAL = "general"


# Checked in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: Tuple[Tuple[JobCategory, Tuple[str, ...]], ...] = (
    (
        JobCategory.ENGINEERING,
        (
            "工程师", "engineer", "开发", "developer", "程序员", "programmer", "ai", "算法",
            "前端", "frontend", "后端", "backend", "全栈", "fullstack", "移动端", "mobile",
            "ios", "android", "测试", "qa", "devops", "运维", "架构师", "architect",
        ),
    ),
    (
        JobCategory.DESIGN,
        (
            "设计师", "designer", "ui", "ux", "视觉", "visual", "交互", "interaction",
            "用户体验", "平面", "graphic", "产品设计", "界面设计",
        ),
    ),
    (JobCategory.PRODUCT, ("产品", "product", "pm", "产品经理", "产品运营", "需求", "策划")),
    (
        JobCategory.OPERATIONS,
        (
            "运营", "operation", "营销", "marketing", "推广", "promotion", "增长", "growth",
            "用户运营", "内容运营", "活动运营", "社群", "新媒体",
        ),
    ),
    (JobCategory.SALES, ("销售", "sales", "商务", "business", "bd", "客户", "account", "渠道", "市场", "业务")),
    (
        JobCategory.MANAGEMENT,
        ("经理", "manager", "总监", "director", "主管", "supervisor", "领导", "lead", "负责人", "团队长"),
    ),
    (JobCategory.HR, ("人力", "hr", "招聘", "recruit", "培训", "training", "薪酬", "绩效", "hrbp", "人事")),
    (JobCategory.FINANCE, ("财务", "finance", "会计", "accounting", "审计", "audit", "税务", "成本", "预算", "投资")),
    (JobCategory.DATA, ("数据", "data", "分析师", "analyst", "bi", "数据科学", "数据挖掘", "统计")),
)

# Per-category wording for the introduction pool plus the four technical-phase questions.
_CATEGORY_FLAVOR: Dict[JobCategory, Dict[str, object]] = {
    JobCategory.ENGINEERING: {
        "field": "技术",
        "item": "技术项目",
        "detail": "你使用的技术栈和遇到的挑战",
        "probe": "在你的项目经验中，有没有遇到过棘手的技术难题？你是如何定位并解决的？",
        "technical": [
            "那么在{job}的工作中，你是如何保证代码质量和系统稳定性的？",
            "如果让你设计一个与{job}相关的系统，你会优先考虑哪些关键因素？",
            "技术更新很快，你是如何保持技术敏感度的？最近学习了哪些新技术？",
            "在团队协作方面，你通常如何与其他技术同事配合，比如代码评审和联调？",
        ],
    },
    JobCategory.DESIGN: {
        "field": "设计",
        "item": "设计项目",
        "detail": "你的设计思路和创作过程",
        "probe": "你是如何在美观性和实用性之间取得平衡的？",
        "technical": [
            "在{job}的工作中，你是如何与产品和开发团队协作推进设计落地的？",
            "如果用户或业务方对你的设计方案有不同意见，你会如何处理？",
            "你熟悉哪些设计工具？它们在你的设计流程中分别承担什么角色？",
            "你是如何保持设计灵感并跟上设计趋势的？",
        ],
    },
    JobCategory.PRODUCT: {
        "field": "产品",
        "item": "产品项目",
        "detail": "你的产品思路和规划过程",
        "probe": "你通常是如何进行用户需求分析和需求优先级判断的？",
        "technical": [
            "在{job}的工作中，你是如何与技术和设计团队协作的？",
            "如果产品数据表现不佳，你会如何分析原因并制定改进方案？",
            "你是如何关注竞品动态和行业趋势的？能举一个影响过你决策的例子吗？",
            "你是如何制定产品路线图并排定优先级的？",
        ],
    },
    JobCategory.OPERATIONS: {
        "field": "运营",
        "item": "运营项目",
        "detail": "你的运营策略和执行过程",
        "probe": "你是如何制定运营目标并衡量运营效果的？",
        "technical": [
            "在{job}的工作中，你是如何做用户增长和留存的？",
            "如果运营数据出现下滑，你会如何分析原因并制定应对策略？",
            "你是如何通过数据来指导运营决策的？",
            "你是如何与产品、市场等其他部门协作的？",
        ],
    },
    JobCategory.SALES: {
        "field": "销售",
        "item": "销售项目",
        "detail": "你的销售策略和客户沟通过程",
        "probe": "你是如何建立并维护长期客户关系的？",
        "technical": [
            "在{job}的工作中，你是如何处理客户异议和拒绝的？",
            "如果销售业绩出现下滑，你会如何分析原因并制定改进计划？",
            "你是如何平衡维护老客户和开发新客户的？",
            "你是如何与市场、产品等部门协作推动成单的？",
        ],
    },
    JobCategory.MANAGEMENT: {
        "field": "管理",
        "item": "团队项目",
        "detail": "你的管理理念和团队建设过程",
        "probe": "你是如何激励团队并提升团队效率的？",
        "technical": [
            "在{job}的工作中，你是如何处理团队冲突和绩效问题的？",
            "如果团队目标没有达成，你会如何复盘并制定改进措施？",
            "你是如何在信息不完整或压力较大的情况下做出重要决策的？",
            "你是如何培养和发展团队成员的？",
        ],
    },
    JobCategory.HR: {
        "field": "人力资源",
        "item": "人力资源项目",
        "detail": "你的工作方法和解决方案",
        "probe": "你是如何平衡员工诉求和公司利益的？",
        "technical": [
            "在{job}的工作中，你是如何进行人才招聘和选拔的？",
            "如果遇到员工关系问题，你会如何处理和调解？",
            "你是如何设计和落地员工培训计划的？",
            "你是如何与各业务部门协作，支持业务发展的？",
        ],
    },
    JobCategory.FINANCE: {
        "field": "财务",
        "item": "财务项目",
        "detail": "你的分析方法和解决方案",
        "probe": "你是如何进行财务风险控制的？",
        "technical": [
            "在{job}的工作中，你是如何进行成本控制和预算管理的？",
            "如果发现财务数据异常，你会如何调查和处理？",
            "你是如何通过财务报表分析为业务决策提供支持的？",
            "你是如何与业务部门协作，支持公司发展的？",
        ],
    },
    JobCategory.DATA: {
        "field": "数据",
        "item": "数据分析项目",
        "detail": "你的分析思路和方法",
        "probe": "你是如何从数据中发现业务洞察的？",
        "technical": [
            "在{job}的工作中，你是如何保证数据质量和准确性的？",
            "如果分析结果与预期不符，你会如何验证并调整分析方法？",
            "你熟悉哪些数据分析工具？在项目中是如何运用的？",
            "你是如何把分析结论转化为可执行的业务建议的？",
        ],
    },
    JobCategory.GENERAL: {
        "field": "专业",
        "item": "相关项目",
        "detail": "你在其中承担的角色和遇到的挑战",
        "probe": "在你的工作经历中，有没有遇到过特别有挑战性的问题？你是如何解决的？",
        "technical": [
            "在{job}的工作中，你通常是如何与同事配合完成项目的？",
            "如果让你负责一个重要的{job}相关项目，你会如何规划和执行？",
            "这个行业变化很快，你是如何保持技能更新的？",
            "在工作中，你是如何同时保证工作质量和效率的？",
        ],
    },
}

_TECHNICAL_LEADS = (
    "这个思路很有意思。",
    "你的回答很清晰。",
    "很好的回答。",
    "从你的描述来看，基础很扎实。",
)

BEHAVIORAL_POOL = (
    "你处理这个问题的方式很专业。在你的工作经历中，有没有遇到过特别紧张的deadline？你是如何应对的？",
    "团队协作对这个职位很重要。你在团队中通常扮演什么角色？遇到过团队冲突吗，是怎么解决的？",
    "很好的例子。对于{job}这个职位，你有什么期望？你认为自己能为团队带来什么价值？",
)

CLOSING_POOL = (
    "感谢你详细的回答，你展现了很强的专业能力和学习态度。现在轮到你了，你有什么想问我的吗？",
    "通过这次交流，我对你的能力有了比较清楚的了解。在结束之前，你还有什么想补充的吗？",
    "这是一次很愉快的交流。最后，你对这个职位或者我们团队的工作方式还有什么疑问吗？",
)


def classify_job_title(job_title: str) -> JobCategory:
    """Map a free-text job title onto a fixed category by keyword match."""

    title = (job_title or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in title for keyword in keywords):
            return category
    return JobCategory.GENERAL


def _introduction_pool(category: JobCategory) -> List[str]:
    flavor = _CATEGORY_FLAVOR[category]
    return [
        f"很好的自我介绍！我注意到你应聘的是{{job}}职位。能详细说说你最近完成的一个{flavor['item']}吗？特别是{flavor['detail']}？",
        f"感谢你的介绍。从你的背景来看，你在{flavor['field']}领域有不错的积累。{flavor['probe']}",
        "听起来你的经验很丰富。你认为自己在{job}这个方向上的核心优势是什么？",
    ]


def _technical_pool(category: JobCategory) -> List[str]:
    questions = _CATEGORY_FLAVOR[category]["technical"]
    return [lead + question for lead, question in zip(_TECHNICAL_LEADS, questions)]  # type: ignore[arg-type]


def response_pool(category: JobCategory, phase: Phase) -> List[str]:
    """Unformatted templates for a (category, phase) pair."""

    if phase == "introduction":
        return _introduction_pool(category)
    if phase == "technical":
        return _technical_pool(category)
    if phase == "behavioral":
        return list(BEHAVIORAL_POOL)
    return list(CLOSING_POOL)


class ResponseSimulator:
    """Pick plausible interviewer turns from the template pools."""

    def __init__(self, rng: Optional[random.Random] = None, *, delay_s: float = 0.0) -> None:
        self._rng = rng or random.Random()
        self._delay_s = delay_s

    def reply(self, job_title: str, turns_answered: int, phase: Optional[Phase] = None) -> str:
        if not (job_title or "").strip():
            return GENERIC_REPLY
        pool = response_pool(classify_job_title(job_title), phase or phase_for(turns_answered))
        template = self._rng.choice(pool)
        return template.replace("{job}", job_title.strip())

    async def areply(self, job_title: str, turns_answered: int, phase: Optional[Phase] = None) -> str:
        if self._delay_s > 0:
            await asyncio.sleep(self._delay_s * (1 + self._rng.random()))
        return self.reply(job_title, turns_answered, phase)


__all__ = [
    "JobCategory",
    "CATEGORY_KEYWORDS",
    "GENERIC_REPLY",
    "classify_job_title",
    "response_pool",
    "ResponseSimulator",
]
