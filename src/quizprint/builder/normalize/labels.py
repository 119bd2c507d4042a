"""
Module: builder.normalize.labels

Purpose:
    Printed labels for the known work types: option glyphs, work-type
    names and instruction texts.

Key Constants:
    - OPTION_LABELS: Circled numerals used for 4-9 way choices
    - WORK_TYPE_LABELS: Human label per work type id
    - INSTRUCTIONS: Instruction text per work type id
    - DEFAULT_MAX_BLANK_WIDTH: Cap on blank underscore runs

Used By:
    - builder.normalize.normalizer: Section construction
"""

from __future__ import annotations

OPTION_LABELS: tuple[str, ...] = ("①", "②", "③", "④", "⑤", "⑥", "⑦", "⑧", "⑨")

DEFAULT_MAX_BLANK_WIDTH = 20

WORK_TYPE_LABELS: dict[str, str] = {
    "01": "문단 순서 맞추기",
    "02": "유사단어 독해",
    "03": "빈칸(단어) 문제",
    "04": "빈칸(구) 문제",
    "05": "빈칸(문장) 문제",
    "06": "문장 위치 찾기",
    "07": "주제 추론",
    "08": "제목 추론",
    "09": "어법 오류 찾기",
    "10": "다중 어법 오류 찾기",
    "11": "본문 문장별 해석",
    "12": "단어 학습",
    "13": "빈칸 채우기 (단어-주관식)",
    "14": "빈칸 채우기 (문장-주관식)",
}

INSTRUCTIONS: dict[str, str] = {
    "01": "다음 단락들을 원래 순서대로 배열한 것을 고르세요",
    "02": "다음 본문을 읽고 해석하세요",
    "03": "다음 빈칸에 들어갈 가장 적절한 단어를 고르세요",
    "04": "다음 빈칸에 들어갈 구(phrase)로 가장 적절한 것을 고르세요",
    "05": "다음 빈칸에 들어갈 가장 적절한 문장을 고르세요",
    "06": "다음 영어본문에서 주요문장이 들어가야 할 가장 적합한 위치를 찾으세요.",
    "07": "다음 본문의 주제를 가장 잘 나타내는 문장을 고르세요",
    "08": "다음 본문에 가장 적합한 제목을 고르세요",
    "09": "다음 영어 본문에 표시된 단어들 중에서 어법상 틀린 것을 고르시오.",
    "10": "다음 영어 본문에 표시된 단어들 중에서 어법상 틀린 단어의 개수를 고르시오.",
    "11": "다음 본문을 문장별로 해석하세요",
    "12": "다음 단어들의 의미를 학습하세요",
    "13": "다음 빈칸에 들어갈 적절한 정답을 쓰시오.",
    "14": "다음 빈칸에 들어갈 적절한 문장을 쓰시오.",
}


def work_type_title(work_type_id: str) -> str:
    """
    Printed title of a work type.

    Example:
        >>> work_type_title("03")
        '#03. 빈칸(단어) 문제'
        >>> work_type_title("99")
        '#99. 유형#99'
    """
    label = WORK_TYPE_LABELS.get(work_type_id, f"유형#{work_type_id}")
    return f"#{work_type_id}. {label}"

