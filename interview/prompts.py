"""Prompt builders for the interviewer persona and the scoring request."""
from __future__ import annotations

import json
from textwrap import dedent
from typing import Dict, List, Sequence

from pydantic import BaseModel, Field

from .types import InterviewType, SessionContext, Tone, Turn

SKILL_KEYWORDS = (
    "javascript", "typescript", "python", "java", "go", "rust", "c++", "c#", "php", "swift", "kotlin",
    "react", "vue", "node", "express", "django", "flask", "spring", "laravel", "flutter", "react native",
    "html", "css", "sass", "webpack", "tailwind", "android", "ios", "unity",
    "mysql", "postgresql", "mongodb", "redis", "elasticsearch", "kafka", "rabbitmq",
    "docker", "kubernetes", "aws", "linux", "nginx", "jenkins", "git", "ci/cd", "devops", "microservice",
    "tensorflow", "pytorch", "opencv", "pandas", "numpy", "scikit-learn", "agile", "scrum",
)
PROJECT_INDICATORS = ("项目", "project", "开发", "设计", "实现", "负责", "参与", "主导", "搭建", "优化")

_STYLE_TEXT: Dict[Tone, str] = {
    "strict": """
        风格：严格专业型
        - 追问细节，要求精确回答
        - 适度施压，测试抗压能力
        - 注重逻辑性和准确性，直接指出问题和不足
    """,
    "friendly": """
        风格：友好鼓励型
        - 营造轻松的氛围，鼓励候选人充分表达
        - 关注潜力和成长性
        - 给予积极正面的反馈
    """,
    "open": """
        风格：开放探索型
        - 鼓励创新思维，重视思考过程而非标准答案
        - 以探索式对话深入讨论
        - 关注适应性和发展潜力
    """,
}

_TYPE_ROLE: Dict[InterviewType, str] = {
    "technical": "你是一位资深技术面试官，负责评估{job}候选人的技术能力。",
    "behavioral": "你是一位经验丰富的HR面试官，负责评估{job}候选人的软技能和文化匹配度。",
    "comprehensive": "你是一位全能面试官，需要全面评估{job}候选人的技术能力和综合素质。",
}

_TYPE_FOCUS: Dict[InterviewType, Sequence[str]] = {
    "technical": (
        "核心技术栈：深入考察与{job}相关的技术能力",
        "项目经验：验证简历中项目的技术深度和个人贡献",
        "问题解决：通过场景题考察解决技术问题的思路",
        "代码质量：编码规范、测试和性能优化意识",
        "技术视野：学习新技术的能力和行业理解",
    ),
    "behavioral": (
        "团队协作：在团队中的角色和协作方式",
        "沟通能力：表达能力和倾听技巧",
        "问题解决：用STAR法则了解解决问题的方法",
        "学习成长：学习能力和自我提升意识",
        "文化匹配：价值观和工作态度",
        "抗压能力：压力下的表现和应对策略",
    ),
    "comprehensive": (
        "技术能力：核心技术栈的掌握程度和应用经验",
        "项目经验：技术选型、架构设计和问题解决",
        "团队协作：沟通能力、协作方式和领导潜力",
        "学习能力：新技术学习和知识更新",
        "职业规划：发展方向和职业成熟度",
        "文化匹配：价值观和团队融入度",
    ),
}

_TYPE_OPENING: Dict[InterviewType, str] = {
    "technical": "现在开始技术面试。先进行简短的开场白，然后基于候选人简历中的技术栈提出第一个具体的技术问题。",
    "behavioral": "现在开始行为面试。先进行温和的开场白，然后基于候选人的工作经历提出第一个行为问题。",
    "comprehensive": "现在开始综合面试。先进行专业的开场白，然后从技术能力开始，逐步深入到综合素质的考察。",
}

OUTPUT_RULES = """
    输出要求：
    - 直接输出面试官的话，不要添加“面试官：”之类的前缀
    - 不要使用任何Markdown格式标记
    - 不要替候选人作答，也不要输出候选人的占位文本
    - 每次只提出一个问题
"""

FEEDBACK_SYSTEM = "你是一位经验丰富的HR专家和技术面试官，擅长客观评估候选人的面试表现并给出专业建议。"


class ResumeSummary(BaseModel):
    skills: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)


def analyze_resume(resume_text: str) -> ResumeSummary:
    """Keyword scan of the resume: known skills and project-like lines."""

    lowered = (resume_text or "").lower()
    skills = [skill for skill in SKILL_KEYWORDS if skill in lowered]
    projects = [
        line.strip()
        for line in (resume_text or "").splitlines()
        if len(line) > 10 and any(indicator in line for indicator in PROJECT_INDICATORS)
    ]
    return ResumeSummary(skills=skills, projects=projects)


def interviewer_style(tone: Tone) -> str:
    return dedent(_STYLE_TEXT[tone]).strip()


def time_strategy(duration_minutes: int) -> str:
    if duration_minutes <= 15:
        body = f"""
            时间策略：快速验证模式（{duration_minutes}分钟）
            - 开场1分钟，核心考察3-4个关键问题，留出候选人提问时间
            - 重点：快速验证核心能力，避免复杂深入的讨论
        """
    elif duration_minutes <= 30:
        body = f"""
            时间策略：标准面试模式（{duration_minutes}分钟）
            - 开场破冰和简历概述，主要考察5-7个问题，最后简短总结
            - 重点：平衡深度和广度，适度追问
        """
    else:
        body = f"""
            时间策略：深度面试模式（{duration_minutes}分钟）
            - 详细了解背景，深度考察8-12个问题，留出充足的提问和总结时间
            - 重点：深入探讨，全面评估，可包含复杂场景题
        """
    return dedent(body).strip()


def build_system_prompt(context: SessionContext) -> str:
    """Compose the interviewer persona prompt for a session."""

    job = context.job_title
    resume = analyze_resume(context.resume_text)
    focus = "\n".join(
        f"{idx}. {item.format(job=job)}" for idx, item in enumerate(_TYPE_FOCUS[context.interview_type], start=1)
    )
    company = f"招聘公司：{context.company_name}\n" if context.company_name else ""
    sections = [
        _TYPE_ROLE[context.interview_type].format(job=job),
        company + interviewer_style(context.interviewer_tone),
        "候选人信息：\n"
        f"简历：{context.resume_text or '（未提供）'}\n"
        f"技能：{', '.join(resume.skills) or '待了解'}\n"
        f"相关项目：{len(resume.projects)}个",
        f"职位要求：\n{context.job_description or '（未提供）'}",
        time_strategy(context.duration_minutes),
        f"考察重点：\n{focus}",
        _TYPE_OPENING[context.interview_type],
        dedent(OUTPUT_RULES).strip(),
    ]
    return "\n\n".join(section.strip() for section in sections if section.strip())


def render_transcript(turns: Sequence[Turn]) -> str:
    """Non-system turns as role-labelled lines."""

    lines = []
    for turn in turns:
        if turn.role == "system":
            continue
        label = "候选人" if turn.role == "user" else "面试官"
        lines.append(f"{label}: {turn.content}")
    return "\n\n".join(lines)


def feedback_instruction(transcript: str, dimensions: Sequence[str]) -> str:
    example = {
        "overallScore": 8.0,
        "dimensionScores": {name: 8.0 for name in dimensions},
        "strengths": ["具体的优势1", "具体的优势2", "具体的优势3"],
        "improvements": ["具体的改进建议1", "具体的改进建议2", "具体的改进建议3"],
        "summary": "总结评价",
    }
    return "\n\n".join(
        [
            "请作为专业的HR和技术专家，基于以下面试对话内容，生成面试反馈报告。",
            f"面试对话:\n{transcript or '（暂无对话）'}",
            "请严格按照以下JSON格式返回评估结果，所有分数范围为1-10分：\n"
            + json.dumps(example, ensure_ascii=False, indent=2),
            "只返回JSON，评分要客观公正，建议要具体可行。",
        ]
    )


def build_feedback_messages(turns: Sequence[Turn], dimensions: Sequence[str]) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": FEEDBACK_SYSTEM},
        {"role": "user", "content": feedback_instruction(render_transcript(turns), dimensions)},
    ]


__all__ = [
    "ResumeSummary",
    "analyze_resume",
    "interviewer_style",
    "time_strategy",
    "build_system_prompt",
    "render_transcript",
    "feedback_instruction",
    "build_feedback_messages",
]
