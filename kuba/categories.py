"""Fixed content category definitions and their curated hot terms."""

from __future__ import annotations

from dataclasses import dataclass


_PLACEHOLDER_TERMS: tuple[str, ...] = (
    "啥也没有",
    "阿巴阿巴",
    "再等等",
    "马上更新",
    "嗯嗯嗯",
)


def _unique(terms: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(terms))


@dataclass(frozen=True)
class CategoryDefinition:
    """Describes one content bucket backed by a workbook sheet."""

    key: str
    title: str
    theme: str
    curated_terms: tuple[str, ...] = ()


CATEGORIES: tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        key="movies",
        title="🎬 影视大片库",
        theme="movie-theme",
        curated_terms=_PLACEHOLDER_TERMS,
    ),
    CategoryDefinition(
        key="anime",
        title="📺 二次元动漫库",
        theme="anime-theme",
        curated_terms=_unique(
            (
                "克金玩家", "紫川", "师兄啊师兄", "灵笼", "云深不知梦", "神国之上",
                "斗罗大陆", "完美世界", "沧元图", "斗罗大陆4终极斗罗 动态动漫",
                "仙逆", "遮天", "诡秘之主", "凡人修仙传", "斗破苍穹",
                "画江湖之不良人", "君有云", "练气十万年", "龙蛇演绎", "牧神记",
                "神墓", "神印王座", "星辰变", "仙武转", "妖神记", "诛仙", "吞噬星空",
            )
        ),
    ),
    CategoryDefinition(
        key="games",
        title="🎮 热门游戏库",
        theme="game-theme",
        curated_terms=_unique(
            (
                "植物大战僵尸全系列", "遨游中国", "饥荒", "迷你世界", "米塔手机版",
                "侠盗猎车", "小黄人快跑", "异形：隔离", "黑悟空神话像素版",
                "合战忍者村", "石器大战", "成长城堡", "僵尸尖叫", "登山赛车",
                "要塞围城", "饥荒", "无尽之战", "打工生活模拟器", "奇幻射击",
                "星露谷物语", "英雄大作战", "荒野大镖客", "生化危机", "滑雪大冒险",
                "极限摩托", "小小梦魇", "暴打老板", "主驾驶", "后室", "愤怒的小鸟",
                "水果忍者", "疯狂喷气机", "僵尸榨汁机", "老爸曾是小偷",
                "亡灵杀手：夏侯惇满级", "愤怒的火柴人", "方舟生存", "西游斗神",
                "超音速飞行", "模拟城市：我是市长", "激战王", "REPO", "空洞骑士",
                "泰瑞利亚", "猴子传奇", "崩溃大陆", "死亡之门", "猛兽派对",
                "死亡空间", "死亡细胞", "激流快艇", "滑板少年",
            )
        ),
    ),
    CategoryDefinition(
        key="study",
        title="📚 学习资料库",
        theme="study-theme",
        curated_terms=_PLACEHOLDER_TERMS,
    ),
    CategoryDefinition(
        key="shortDrama",
        title="🎭 精品短剧库",
        theme="short-drama-theme",
        curated_terms=_PLACEHOLDER_TERMS,
    ),
    CategoryDefinition(
        key="other",
        title="🔮 其他资源库",
        theme="other-theme",
        curated_terms=_PLACEHOLDER_TERMS,
    ),
)

# Pseudo-category used for ad hoc search results; it never owns items.
SEARCH_CATEGORY = CategoryDefinition(
    key="search",
    title="🔍 全局搜索结果",
    theme="search-theme",
)

CATEGORY_KEYS: tuple[str, ...] = tuple(definition.key for definition in CATEGORIES)


def get_category(key: str) -> CategoryDefinition | None:
    """Return the definition registered for ``key``, if any."""

    for definition in CATEGORIES:
        if definition.key == key:
            return definition
    return None
