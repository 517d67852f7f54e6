"""Capsule templates: match a wardrobe against curated capsules and price the gaps."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)

EXACT_MATCH_SCORE = 70
SIMILAR_MATCH_SCORE = 45
STRONG_SIMILAR_SCORE = 60
BEST_VALUE_BADGE = "Best Value"

# Checked in order; the first type whose keywords appear in the template
# description decides what a wardrobe item must mention.
ITEM_TYPE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "oxford": ("oxford", "dress shoe", "formal shoe"),
    "loafer": ("loafer", "slip-on", "penny loafer"),
    "sneaker": ("sneaker", "trainer", "running shoe", "athletic shoe"),
    "boot": ("boot", "chelsea", "ankle boot"),
    "sandal": ("sandal", "slide", "birkenstock"),
    "t-shirt": ("t-shirt", "tee", "crew neck"),
    "polo": ("polo", "polo shirt", "pique"),
    "oxford shirt": ("oxford", "button-down", "button down", "dress shirt"),
    "henley": ("henley",),
    "chino": ("chino", "khaki"),
    "jean": ("jean", "denim"),
    "trouser": ("trouser", "dress pant", "wool pant"),
    "blazer": ("blazer", "sport coat", "suit jacket"),
    "sweater": ("sweater", "jumper", "pullover", "knit"),
    "hoodie": ("hoodie", "hooded"),
    "jacket": ("jacket", "coat"),
}

STYLE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "formal": ("formal", "dress", "professional"),
    "casual": ("casual", "relaxed", "everyday"),
    "athletic": ("athletic", "sport", "gym", "running"),
    "smart-casual": ("smart casual", "business casual"),
}

# (wardrobe colour fragment, template colour fragment)
SIMILAR_COLOURS = (
    ("blue", "blue"),
    ("navy", "navy"),
    ("black", "black"),
    ("white", "white"),
    ("grey", "gray"),
    ("gray", "grey"),
    ("brown", "brown"),
    ("tan", "tan"),
    ("khaki", "tan"),
)
RELATED_COLOURS = (
    ("navy", "blue"),
    ("blue", "navy"),
    ("charcoal", "grey"),
    ("grey", "charcoal"),
)


@dataclass(frozen=True)
class ShoppingLink:
    retailer: str
    price: float
    url: str = ""
    badge: Optional[str] = None


@dataclass(frozen=True)
class TemplateItem:
    """One slot of a capsule template, described the way a shop would."""

    template_item_id: str
    category: str
    description: str
    color: str = ""
    essential: bool = True
    style_tags: Tuple[str, ...] = ()
    shopping_links: Tuple[ShoppingLink, ...] = ()


@dataclass(frozen=True)
class CapsuleTemplate:
    template_id: str
    name: str
    description: str
    items: Tuple[TemplateItem, ...]
    style: str = ""
    season: Optional[str] = None
    categories: Tuple[str, ...] = ()
    style_types: Tuple[str, ...] = ()
    occasions: Tuple[str, ...] = ()
    composition: str = "mixed"
    color_palette: Tuple[str, ...] = ()

    @property
    def total_items(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class TemplateMatch:
    template_item: TemplateItem
    wardrobe_item: WardrobeItem
    score: int
    reason: str = ""
    manual: bool = False


@dataclass(frozen=True)
class MatchResult:
    """Template items split into owned exactly, owned roughly and missing."""

    exact: Tuple[TemplateMatch, ...] = ()
    similar: Tuple[TemplateMatch, ...] = ()
    missing: Tuple[TemplateItem, ...] = ()

    @property
    def owned_count(self) -> int:
        return len(self.exact) + len(self.similar)


@dataclass(frozen=True)
class WardrobeStyle:
    categories: Tuple[str, ...]
    style_preferences: Tuple[str, ...]
    predominant_fit: str
    has_dresses: bool
    has_skirts: bool
    has_suits: bool


@dataclass(frozen=True)
class TemplateRecommendation:
    template: CapsuleTemplate
    score: float
    match_percentage: int


def _analysis_text(item: WardrobeItem) -> str:
    return (item.ai_analysis or "").lower()


def _wardrobe_text(item: WardrobeItem) -> Tuple[str, str]:
    description = str(item.extra.get("description") or "").lower()
    return _analysis_text(item), description


def analyze_wardrobe_style(items: Sequence[WardrobeItem]) -> WardrobeStyle:
    """Infer broad style preferences and fit from the wardrobe's descriptions."""

    categories = tuple(dict.fromkeys(item.category for item in items))
    texts = [_analysis_text(item) for item in items]
    has_dresses = any(item.category == "Dress" or "dress" in text for item, text in zip(items, texts))
    has_skirts = any(item.category == "Skirts" or "skirt" in text for item, text in zip(items, texts))
    has_suits = any("suit" in text or "blazer" in text for text in texts)

    combined = " ".join(texts)
    preferences: List[str] = []
    if "formal" in combined or "professional" in combined or has_suits:
        preferences.append("professional")
    if "casual" in combined or "relaxed" in combined:
        preferences.append("casual")
    if "athletic" in combined or "sport" in combined:
        preferences.append("athleisure")

    tailored = sum(combined.count(word) for word in ("tailored", "fitted", "structured"))
    relaxed = sum(combined.count(word) for word in ("relaxed", "loose", "oversized"))
    fit = "mixed"
    if tailored > relaxed * 1.5:
        fit = "tailored"
    elif relaxed > tailored * 1.5:
        fit = "relaxed"

    return WardrobeStyle(
        categories=categories,
        style_preferences=tuple(preferences) or ("casual",),
        predominant_fit=fit,
        has_dresses=has_dresses,
        has_skirts=has_skirts,
        has_suits=has_suits,
    )


def _template_type(template_item: TemplateItem) -> Optional[str]:
    description = template_item.description.lower()
    for item_type, keywords in ITEM_TYPE_KEYWORDS.items():
        if any(keyword in description for keyword in keywords):
            return item_type
    return None


def _colour_score(wardrobe_colour: str, template_colour: str) -> Tuple[int, str]:
    if not wardrobe_colour or not template_colour:
        return 0, ""
    if wardrobe_colour == template_colour:
        return 20, "exact color match"
    if any(ours in wardrobe_colour and theirs in template_colour for ours, theirs in SIMILAR_COLOURS):
        return 15, "similar color"
    if any(ours in wardrobe_colour and theirs in template_colour for ours, theirs in RELATED_COLOURS):
        return 10, "related color"
    return 0, ""


def score_pair(item: WardrobeItem, template_item: TemplateItem) -> Tuple[int, List[str]]:
    """Score how well a wardrobe item fills a template slot (0-100).

    Category is worth 40, item type 30, colour up to 20 and style 10.
    """

    score = 0
    reasons: List[str] = []
    analysis, description = _wardrobe_text(item)

    if item.category == template_item.category:
        score += 40
        reasons.append("same category")

    item_type = _template_type(template_item)
    if item_type is not None:
        keywords = ITEM_TYPE_KEYWORDS[item_type]
        if any(keyword in analysis or keyword in description for keyword in keywords):
            score += 30
            reasons.append(f"matching {item_type}")

    colour_points, colour_reason = _colour_score(
        str(item.extra.get("color") or "").lower(), template_item.color.lower()
    )
    if colour_points:
        score += colour_points
        reasons.append(colour_reason)

    if any(
        keyword in analysis
        for tag in template_item.style_tags
        for keyword in STYLE_KEYWORDS.get(tag, (tag,))
    ):
        score += 10
        reasons.append("matching style")

    return score, reasons


def match_template(
    items: Sequence[WardrobeItem],
    template: CapsuleTemplate,
    manual_matches: Mapping[str, WardrobeItem] | None = None,
) -> MatchResult:
    """Assign wardrobe items to template slots, each item to at most one slot.

    ``manual_matches`` maps template item ids to items the user picked by hand;
    those count as exact and are never reassigned. Remaining slots take the
    highest scoring unused item, first in wardrobe order on ties.
    """

    manual_matches = manual_matches or {}
    exact: List[TemplateMatch] = []
    similar: List[TemplateMatch] = []
    missing: List[TemplateItem] = []
    used_ids = set()

    for template_item in template.items:
        chosen = manual_matches.get(template_item.template_item_id)
        if chosen is not None:
            exact.append(TemplateMatch(template_item, chosen, score=100, reason="chosen by hand", manual=True))
            used_ids.add(chosen.item_id)

    for template_item in template.items:
        if template_item.template_item_id in manual_matches:
            continue

        best: Optional[WardrobeItem] = None
        best_score = 0
        best_reasons: List[str] = []
        for item in items:
            if item.item_id in used_ids:
                continue
            score, reasons = score_pair(item, template_item)
            if score > best_score:
                best, best_score, best_reasons = item, score, reasons

        reason = ", ".join(best_reasons)
        if best is not None and best_score >= EXACT_MATCH_SCORE:
            exact.append(TemplateMatch(template_item, best, best_score, reason))
            used_ids.add(best.item_id)
        elif best is not None and best_score >= SIMILAR_MATCH_SCORE:
            if best_score >= STRONG_SIMILAR_SCORE:
                reason = f"Similar {template_item.category.lower()}, {reason}"
            else:
                reason = f"Similar item, but {reason or 'different details'}"
            similar.append(TemplateMatch(template_item, best, best_score, reason))
            used_ids.add(best.item_id)
        else:
            missing.append(template_item)

    logger.info(
        "Matched template %s: %s exact, %s similar, %s missing",
        template.template_id,
        len(exact),
        len(similar),
        len(missing),
    )
    return MatchResult(exact=tuple(exact), similar=tuple(similar), missing=tuple(missing))


def completion_percentage(match: MatchResult, template: CapsuleTemplate) -> int:
    """Share of the template already owned, rounded half up to a whole percent."""

    if template.total_items == 0:
        return 0
    return math.floor(match.owned_count * 100 / template.total_items + 0.5)


def _purchase_price(template_item: TemplateItem) -> float:
    for link in template_item.shopping_links:
        if link.badge == BEST_VALUE_BADGE:
            return link.price
    return min(link.price for link in template_item.shopping_links)


def missing_budget(missing: Iterable[TemplateItem]) -> float:
    """Cost of buying every missing item at its best-value (else cheapest) link."""

    total = sum(_purchase_price(item) for item in missing if item.shopping_links)
    return round(total, 2)


def recommend_templates(
    items: Sequence[WardrobeItem], templates: Sequence[CapsuleTemplate]
) -> List[TemplateRecommendation]:
    """Rank templates by how well they suit the wardrobe, best first.

    An empty wardrobe scores every template zero and keeps catalogue order.
    """

    if not items:
        return [TemplateRecommendation(template, 0.0, 0) for template in templates]

    style = analyze_wardrobe_style(items)
    recommendations = []
    for template in templates:
        score = 0.0
        if template.categories:
            overlap = sum(1 for category in style.categories if category in template.categories)
            score += overlap / len(template.categories) * 40

        template_styles = {style_type.lower() for style_type in template.style_types}
        style_overlap = sum(1 for preference in style.style_preferences if preference in template_styles)
        score += style_overlap / max(len(template.style_types), 1) * 30

        if style.has_dresses and template.composition == "dresses-skirts":
            score += 20
        if not style.has_dresses and template.composition == "pants-shirts":
            score += 20
        if style.has_dresses and style.has_skirts and template.composition == "mixed":
            score += 15

        percentage = completion_percentage(match_template(items, template), template)
        score += percentage * 0.1
        recommendations.append(TemplateRecommendation(template, round(score, 2), percentage))

    recommendations.sort(key=lambda recommendation: recommendation.score, reverse=True)
    return recommendations


def _item(
    template_item_id: str,
    category: str,
    description: str,
    color: str,
    style_tags: Tuple[str, ...],
    links: Tuple[Tuple[str, float, Optional[str]], ...],
) -> TemplateItem:
    return TemplateItem(
        template_item_id=template_item_id,
        category=category,
        description=description,
        color=color,
        style_tags=style_tags,
        shopping_links=tuple(ShoppingLink(retailer, price, badge=badge) for retailer, price, badge in links),
    )


BUILTIN_TEMPLATES: Tuple[CapsuleTemplate, ...] = (
    CapsuleTemplate(
        template_id="neutral-basics",
        name="Neutral Basics",
        description="Ten neutral pieces built around shirts and trousers.",
        style="Minimalist",
        season="All Season",
        categories=("Top", "Bottom", "Shoes", "Outerwear"),
        style_types=("Casual", "Professional"),
        occasions=("Everyday", "Work"),
        composition="pants-shirts",
        color_palette=("White", "Black", "Grey", "Navy", "Khaki"),
        items=(
            _item("white-tee", "Top", "White crew neck t-shirt", "white", ("basic", "casual"),
                  (("Uniqlo", 15.0, BEST_VALUE_BADGE), ("Everlane", 25.0, "Best Quality"))),
            _item("black-tee", "Top", "Black crew neck t-shirt", "black", ("basic", "casual"),
                  (("Uniqlo", 15.0, BEST_VALUE_BADGE), ("Amazon Essentials", 12.0, None))),
            _item("navy-oxford", "Top", "Navy button-down oxford shirt", "navy", ("professional", "casual"),
                  (("J.Crew", 79.0, "Best Quality"), ("Uniqlo", 29.0, BEST_VALUE_BADGE))),
            _item("grey-sweater", "Top", "Charcoal grey crew sweater", "grey", ("casual", "layering"),
                  (("Everlane", 85.0, "Best Quality"), ("Uniqlo", 39.0, BEST_VALUE_BADGE))),
            _item("khaki-chinos", "Bottom", "Khaki chinos", "khaki", ("casual", "professional"),
                  (("Bonobos", 98.0, "Best Quality"), ("Uniqlo", 39.0, BEST_VALUE_BADGE))),
            _item("black-jeans", "Bottom", "Black slim jeans", "black", ("casual",),
                  (("Levi's", 98.0, "Best Quality"), ("Uniqlo", 49.0, BEST_VALUE_BADGE))),
            _item("white-sneakers", "Shoes", "White leather sneakers", "white", ("casual",),
                  (("Veja", 150.0, "Best Quality"), ("Amazon", 45.0, BEST_VALUE_BADGE))),
            _item("brown-loafers", "Shoes", "Brown leather loafers", "brown", ("professional", "casual"),
                  (("Cole Haan", 180.0, "Best Quality"), ("Clarks", 100.0, BEST_VALUE_BADGE))),
            _item("navy-blazer", "Outerwear", "Navy blazer", "navy", ("professional", "formal"),
                  (("Suitsupply", 299.0, "Best Quality"), ("Uniqlo", 99.0, BEST_VALUE_BADGE))),
            _item("trench-coat", "Outerwear", "Beige trench coat", "beige", ("classic",),
                  (("Uniqlo", 129.0, None), ("Mango", 119.0, None))),
        ),
    ),
    CapsuleTemplate(
        template_id="dress-weekender",
        name="Dress Weekender",
        description="A dress-led travel capsule that packs into a carry-on.",
        style="Relaxed",
        season="Spring/Summer",
        categories=("Dress", "Top", "Bottom", "Shoes", "Accessory"),
        style_types=("Casual", "Travel"),
        occasions=("Travel", "Everyday"),
        composition="dresses-skirts",
        color_palette=("Navy", "White", "Tan"),
        items=(
            _item("navy-wrap-dress", "Dress", "Navy wrap dress", "navy", ("casual", "versatile"),
                  (("Everlane", 98.0, None), ("Uniqlo", 49.0, BEST_VALUE_BADGE))),
            _item("white-shirt-dress", "Dress", "White shirt dress", "white", ("casual",),
                  (("J.Crew", 118.0, None), ("Mango", 59.0, BEST_VALUE_BADGE))),
            _item("striped-tee", "Top", "Striped t-shirt", "navy/white", ("casual", "basic"),
                  (("Saint James", 95.0, "Best Quality"), ("Uniqlo", 20.0, BEST_VALUE_BADGE))),
            _item("denim-skirt", "Bottom", "Denim midi skirt", "blue", ("casual",),
                  (("Levi's", 69.0, None), ("Gap", 45.0, None))),
            _item("tan-sandals", "Shoes", "Tan leather sandals", "tan", ("casual",),
                  (("Birkenstock", 110.0, "Best Quality"), ("Amazon", 35.0, BEST_VALUE_BADGE))),
            _item("white-sneakers", "Shoes", "White canvas sneakers", "white", ("casual",),
                  (("Converse", 65.0, None), ("Vans", 60.0, None))),
            _item("straw-tote", "Accessory", "Straw tote bag", "tan", ("casual",),
                  (("Madewell", 88.0, None), ("Amazon", 28.0, BEST_VALUE_BADGE))),
        ),
    ),
)


def find_template(template_id: str, templates: Sequence[CapsuleTemplate] = BUILTIN_TEMPLATES) -> Optional[CapsuleTemplate]:
    return next((template for template in templates if template.template_id == template_id), None)


__all__ = [
    "BUILTIN_TEMPLATES",
    "CapsuleTemplate",
    "MatchResult",
    "ShoppingLink",
    "TemplateItem",
    "TemplateMatch",
    "TemplateRecommendation",
    "WardrobeStyle",
    "analyze_wardrobe_style",
    "completion_percentage",
    "find_template",
    "match_template",
    "missing_budget",
    "recommend_templates",
    "score_pair",
]
