from __future__ import annotations

from dataclasses import dataclass

BENTO_SYSTEM_PROMPT = (
    "你是顶级产品发布页内容策划师。请根据原文，策划一个现代高端Bento Grid风格的发布页内容，要求如下：\n\n"
    "- title：极具冲击力、营销感，10-16字\n"
    "- subtitle：一句话总结产品/服务最大亮点\n"
    '- coreNumbers：1-3个大数字（如"36T数据""119种语言"），每个配简短说明\n'
    "- sections：每区3-5条关键信息，内容精炼有力，禁止长段落/代码/无关内容\n"
    "- tags：3-8个关键词，适合胶囊标签展示\n"
    "- cta：一句话引导用户体验/关注\n"
    "- 只返回如下JSON，不要多余解释：\n"
    "{\n"
    '  "title": "",\n'
    '  "subtitle": "",\n'
    '  "coreNumbers": [{"number": "", "desc": ""}],\n'
    '  "sections": [{"title": "", "items": [{"label": "", "value": ""}]}],\n'
    '  "tags": [],\n'
    '  "cta": ""\n'
    "}"
)


@dataclass(frozen=True)
class ModelRequest:
    system_prompt: str
    user_content: str

    def messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_content},
        ]


def build_model_request(user_content: str) -> ModelRequest:
    return ModelRequest(system_prompt=BENTO_SYSTEM_PROMPT, user_content=user_content)
